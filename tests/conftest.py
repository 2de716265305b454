import asyncio
import json
import logging

import pytest

from voice_bridge.bot.provider import StreamEvent


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


class ScriptedProvider:
    """Chat provider double that replays a fixed list of stream events."""

    def __init__(self, events=None, error=None, block=False):
        self.events = list(events or [])
        self.error = error
        self.block = block
        self.calls = []
        self.blocked = asyncio.Event()

    async def stream(self, messages, tools=None, **params):
        self.calls.append({"messages": messages, "tools": tools, **params})
        for event in self.events:
            yield event
        if self.error is not None:
            raise self.error
        if self.block:
            self.blocked.set()
            await asyncio.Event().wait()


def content_event(text, finish_reason=None):
    return StreamEvent(delta={"content": text}, finish_reason=finish_reason)


def stop_event():
    return StreamEvent(delta={}, finish_reason="stop")


def tool_call_events(name, argument_fragments):
    """Events for a streamed tool call whose arguments arrive in fragments."""
    events = [
        StreamEvent(
            delta={
                "role": "assistant",
                "tool_calls": {
                    "0": {"id": "call_1", "type": "function", "function": {"name": name, "arguments": ""}}
                },
            }
        )
    ]
    for fragment in argument_fragments:
        events.append(StreamEvent(delta={"tool_calls": {"0": {"function": {"arguments": fragment}}}}))
    events.append(StreamEvent(delta={}, finish_reason="tool_calls"))
    return events


def sent_frames(websocket):
    """Decode every frame sent through a mocked websocket.send_text."""
    return [json.loads(call.args[0]) for call in websocket.send_text.call_args_list]


@pytest.fixture
def scripted_provider():
    return ScriptedProvider

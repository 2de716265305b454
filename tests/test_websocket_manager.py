import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import WebSocket, WebSocketDisconnect

from tests.conftest import ScriptedProvider, content_event, sent_frames, stop_event
from voice_bridge.bot.llm_client import LlmClient
from voice_bridge.config.constants import (
    BEGIN_SENTENCE,
    WS_CLOSE_PROTOCOL_ERROR,
    WS_CLOSE_REASON_BINARY,
    WS_CLOSE_REASON_PARSE,
)
from voice_bridge.models.session import SessionState
from voice_bridge.websocket_manager import WebSocketManager

DISCONNECT = {"type": "websocket.disconnect", "code": 1000}


def text_message(response_id, content="Hello", interaction_type="normal"):
    payload = {
        "response_id": response_id,
        "transcript": [{"role": "user", "content": content}],
        "interaction_type": interaction_type,
    }
    return {"type": "websocket.receive", "text": json.dumps(payload)}


def make_websocket(messages, expected_terminal_frames=0):
    """
    Mock WebSocket replaying ``messages``.

    Once the messages run out, the mock waits for the expected number of
    terminal frames before reporting a disconnect.
    """
    websocket = AsyncMock(spec=WebSocket)
    pending = list(messages)
    drafted = asyncio.Event()
    terminal_frames = []

    async def send_text(data):
        frame = json.loads(data)
        if frame["response_id"] != 0 and frame["content_complete"]:
            terminal_frames.append(frame)
            if len(terminal_frames) >= expected_terminal_frames:
                drafted.set()

    async def receive():
        if pending:
            return pending.pop(0)
        if expected_terminal_frames:
            await asyncio.wait_for(drafted.wait(), timeout=5)
        return DISCONNECT

    websocket.send_text.side_effect = send_text
    websocket.receive.side_effect = receive
    return websocket


def manager_with(provider):
    def factory(call_id):
        return LlmClient(provider, session=SessionState(call_id))

    return WebSocketManager(factory)


@pytest.mark.asyncio
class TestHandleWebsocket:
    async def test_greeting_then_disconnect(self):
        manager = manager_with(ScriptedProvider())
        websocket = make_websocket([])

        await manager.handle_websocket(websocket, "call-1")

        websocket.accept.assert_awaited_once()
        assert sent_frames(websocket) == [
            {"response_id": 0, "content": BEGIN_SENTENCE, "content_complete": True, "end_call": False}
        ]
        # Peer already disconnected, nothing to close
        websocket.close.assert_not_awaited()
        assert manager.session_manager.get_session("call-1") is None

    async def test_request_is_drafted(self):
        provider = ScriptedProvider([content_event("Hi"), content_event(" there"), stop_event()])
        manager = manager_with(provider)
        websocket = make_websocket([text_message(1)], expected_terminal_frames=1)

        await manager.handle_websocket(websocket, "call-1")

        frames = sent_frames(websocket)
        assert [f["content"] for f in frames[1:]] == ["Hi", " there", ""]
        assert all(f["response_id"] == 1 for f in frames[1:])
        assert frames[-1]["content_complete"] is True

    async def test_requests_are_drafted_in_order(self):
        provider = ScriptedProvider([content_event("Ok"), stop_event()])
        manager = manager_with(provider)
        websocket = make_websocket(
            [text_message(1, "First"), text_message(2, "Second")], expected_terminal_frames=2
        )

        await manager.handle_websocket(websocket, "call-1")

        response_ids = [f["response_id"] for f in sent_frames(websocket)[1:]]
        assert response_ids == [1, 1, 2, 2]

    async def test_update_only_sends_nothing(self):
        provider = ScriptedProvider([content_event("Ignored"), stop_event()])
        manager = manager_with(provider)
        websocket = make_websocket([text_message(1, interaction_type="update_only")])

        await manager.handle_websocket(websocket, "call-1")
        await asyncio.sleep(0)

        assert len(sent_frames(websocket)) == 1

    async def test_binary_message_closes_with_protocol_error(self):
        manager = manager_with(ScriptedProvider())
        websocket = make_websocket([{"type": "websocket.receive", "bytes": b"\x00\x01"}])

        await manager.handle_websocket(websocket, "call-1")

        websocket.close.assert_awaited_once_with(
            code=WS_CLOSE_PROTOCOL_ERROR, reason=WS_CLOSE_REASON_BINARY
        )

    async def test_malformed_message_closes_with_protocol_error(self):
        manager = manager_with(ScriptedProvider())
        websocket = make_websocket([{"type": "websocket.receive", "text": '{"response_id": 1}'}])

        await manager.handle_websocket(websocket, "call-1")

        websocket.close.assert_awaited_once_with(
            code=WS_CLOSE_PROTOCOL_ERROR, reason=WS_CLOSE_REASON_PARSE
        )
        assert len(sent_frames(websocket)) == 1

    async def test_disconnect_cancels_inflight_drafting(self):
        provider = ScriptedProvider([content_event("Partial")], block=True)
        manager = manager_with(provider)
        websocket = AsyncMock(spec=WebSocket)
        messages = [text_message(1)]

        async def receive():
            if messages:
                return messages.pop(0)
            await provider.blocked.wait()
            raise WebSocketDisconnect(code=1001)

        websocket.receive.side_effect = receive

        await manager.handle_websocket(websocket, "call-1")

        frames = sent_frames(websocket)
        assert [f["content"] for f in frames[1:]] == ["Partial"]
        assert not any(f["content_complete"] for f in frames[1:])
        assert manager.session_manager.get_all_sessions() == {}

    async def test_unexpected_error_closes_socket(self):
        manager = manager_with(ScriptedProvider())
        websocket = AsyncMock(spec=WebSocket)
        websocket.receive.side_effect = RuntimeError("receive failed")

        await manager.handle_websocket(websocket, "call-1")

        websocket.close.assert_awaited_once_with()

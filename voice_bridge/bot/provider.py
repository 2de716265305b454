"""
Chat completion provider boundary.

The drafting engine only depends on the ChatProvider protocol: something that
opens a streaming completion and yields StreamEvent objects. OpenAIChatProvider
implements it on top of the OpenAI SDK.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol

from openai import AsyncOpenAI, OpenAIError

from voice_bridge.config.constants import (
    DEFAULT_CHAT_MODEL,
    FREQUENCY_PENALTY,
    LOGGER_NAME,
    MAX_TOKENS,
    TEMPERATURE,
)
from voice_bridge.errors import StreamTransportError
from voice_bridge.models.openai_schemas import ChatMessage

logger = logging.getLogger(LOGGER_NAME)


@dataclass
class StreamEvent:
    """One streamed completion chunk, reduced to its first choice."""

    delta: Dict[str, Any] = field(default_factory=dict)
    finish_reason: Optional[str] = None

    @property
    def content(self) -> Optional[str]:
        content = self.delta.get("content")
        return content if isinstance(content, str) else None


class ChatProvider(Protocol):
    def stream(
        self,
        messages: List[ChatMessage],
        tools: Optional[List[Dict[str, Any]]] = None,
        max_tokens: int = MAX_TOKENS,
        temperature: float = TEMPERATURE,
        frequency_penalty: float = FREQUENCY_PENALTY,
    ) -> AsyncIterator[StreamEvent]:
        ...


def normalize_delta(delta: Dict[str, Any]) -> Dict[str, Any]:
    """
    Key list-valued tool call fragments by their index.

    Tool calls arrive as lists of fragments, e.g.
    ``[{"index": 0, "function": {"arguments": "{\\"ge"}}]``. Re-keying them as
    ``{"0": {...}}`` lets successive fragments merge into the same call.
    """
    tool_calls = delta.get("tool_calls")
    if isinstance(tool_calls, list):
        delta = dict(delta)
        delta["tool_calls"] = {
            str(fragment.get("index", position)): {
                key: value for key, value in fragment.items() if key != "index"
            }
            for position, fragment in enumerate(tool_calls)
        }
    return delta


def chunk_to_event(chunk: Any) -> StreamEvent:
    """Convert an OpenAI ChatCompletionChunk into a StreamEvent."""
    if not chunk.choices:
        return StreamEvent()
    choice = chunk.choices[0]
    delta = choice.delta.model_dump(exclude_none=True) if choice.delta is not None else {}
    return StreamEvent(delta=normalize_delta(delta), finish_reason=choice.finish_reason)


class OpenAIChatProvider:
    """Streams chat completions from the OpenAI API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        organization: Optional[str] = None,
        model: str = DEFAULT_CHAT_MODEL,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        self.client = client or AsyncOpenAI(api_key=api_key, organization=organization)
        logger.info(f"OpenAIChatProvider initialized with model: {model}")

    async def stream(
        self,
        messages: List[ChatMessage],
        tools: Optional[List[Dict[str, Any]]] = None,
        max_tokens: int = MAX_TOKENS,
        temperature: float = TEMPERATURE,
        frequency_penalty: float = FREQUENCY_PENALTY,
    ) -> AsyncIterator[StreamEvent]:
        """
        Open a streaming completion and yield its events in arrival order.

        Raises:
            StreamTransportError: If the request fails or the stream breaks
        """
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": [message.to_openai() for message in messages],
            "stream": True,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "frequency_penalty": frequency_penalty,
        }
        if tools:
            request["tools"] = tools
            request["tool_choice"] = "auto"

        try:
            events = await self.client.chat.completions.create(**request)
            async for chunk in events:
                yield chunk_to_event(chunk)
        except OpenAIError as e:
            raise StreamTransportError(f"Chat completion stream failed: {e}") from e

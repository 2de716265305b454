"""
Response drafting engine for the custom LLM WebSocket.

LlmClient turns each inbound request into a streamed answer:

    Idle -> Streaming -> (ContentDrafting | ToolDetected) -> Finalizing -> Idle

Content fragments are forwarded as they arrive. A cycle without a tool call
always ends with one empty frame marked ``content_complete``. A cycle in which
the model selects a tool ends with one frame carrying the tool's result and
leaves the turn open.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol

from voice_bridge.bot.accumulator import AccumulatedMessage
from voice_bridge.bot.prompt import prepare_prompt
from voice_bridge.bot.provider import ChatProvider
from voice_bridge.bot.tools import ToolRegistry, render_tool_result
from voice_bridge.config.constants import (
    AGENT_PROMPT,
    BEGIN_SENTENCE,
    FREQUENCY_PENALTY,
    LOGGER_NAME,
    MAX_TOKENS,
    TEMPERATURE,
    TOOL_CALL_FINISH_REASONS,
)
from voice_bridge.models.message_schemas import InteractionType, LlmRequest, LlmResponse
from voice_bridge.models.session import SessionState

logger = logging.getLogger(LOGGER_NAME)


class FrameSink(Protocol):
    async def send_text(self, data: str) -> None:
        ...


class DraftState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    TOOL_DETECTED = "tool_detected"
    CONTENT_DRAFTING = "content_drafting"
    FINALIZING = "finalizing"


@dataclass
class ToolInvocation:
    """A tool call selected by the model during one drafting cycle."""

    name: str
    raw_arguments: str
    result: Optional[Any] = None


class LlmClient:
    """
    Drafts responses for one call.

    Args:
        provider: Streaming chat completion provider
        tool_registry: Tools offered to the model; None disables tool calling
        agent_prompt: Role/persona appended to the style policy
        begin_sentence: Greeting sent when the call connects
        session: State of the call this client serves
    """

    def __init__(
        self,
        provider: ChatProvider,
        tool_registry: Optional[ToolRegistry] = None,
        agent_prompt: str = AGENT_PROMPT,
        begin_sentence: str = BEGIN_SENTENCE,
        session: Optional[SessionState] = None,
    ):
        self.provider = provider
        self.tool_registry = tool_registry
        self.agent_prompt = agent_prompt
        self.begin_sentence = begin_sentence
        self.session = session or SessionState()
        self.state = DraftState.IDLE

    async def _send(self, websocket: FrameSink, frame: LlmResponse) -> None:
        await websocket.send_text(frame.model_dump_json())

    async def begin_message(self, websocket: FrameSink) -> None:
        """Send the greeting that opens the conversation (response_id 0)."""
        frame = LlmResponse(
            response_id=0,
            content=self.begin_sentence,
            content_complete=True,
            end_call=False,
        )
        await self._send(websocket, frame)

    async def draft_response(self, request: LlmRequest, websocket: FrameSink) -> None:
        """
        Run one drafting cycle for ``request`` and send its frames to ``websocket``.

        Stream failures are logged and never raised; the cycle still finalizes
        with whatever was received. Cancelling the task stops the cycle without
        sending anything further.
        """
        self.session.observe(request.transcript)

        if request.interaction_type == InteractionType.UPDATE_ONLY:
            return

        messages = prepare_prompt(request, self.agent_prompt)
        tools = self.tool_registry.openai_tools() if self.tool_registry else None

        message = AccumulatedMessage()
        complete_message = ""
        invocation: Optional[ToolInvocation] = None
        tool_detected = False
        cancelled = False

        self.state = DraftState.STREAMING
        try:
            async for event in self.provider.stream(
                messages,
                tools=tools,
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
                frequency_penalty=FREQUENCY_PENALTY,
            ):
                message.merge(event.delta)

                if tool_detected:
                    continue

                if self.tool_registry is not None and event.finish_reason in TOOL_CALL_FINISH_REASONS:
                    self.state = DraftState.TOOL_DETECTED
                    tool_detected = True
                    invocation = self._capture_tool_call(message)
                    continue

                fragment = event.content
                if not fragment:
                    continue

                self.state = DraftState.CONTENT_DRAFTING
                complete_message += fragment
                await self._send(
                    websocket,
                    LlmResponse(
                        response_id=request.response_id,
                        content=fragment,
                        content_complete=False,
                        end_call=False,
                    ),
                )
        except asyncio.CancelledError:
            cancelled = True
            logger.info(f"Drafting cancelled for response {request.response_id}")
            raise
        except Exception as e:
            logger.error(f"Error in gpt stream: {e}", exc_info=True)
        finally:
            logger.info(f"LLM said: {complete_message}")
            try:
                if not cancelled:
                    self.state = DraftState.FINALIZING
                    await self._finalize(request, websocket, tool_detected, invocation)
            finally:
                self.state = DraftState.IDLE

    def _capture_tool_call(self, message: AccumulatedMessage) -> Optional[ToolInvocation]:
        name = message.get("tool_calls", "0", "function", "name")
        arguments = message.get("tool_calls", "0", "function", "arguments", default="")
        if name is None:
            # Legacy single function_call field
            name = message.get("function_call", "name")
            arguments = message.get("function_call", "arguments", default="")
        if not isinstance(name, str) or not name:
            logger.error(f"Tool call finish without a tool name: {message!r}")
            return None
        return ToolInvocation(name=name, raw_arguments=arguments if isinstance(arguments, str) else "")

    async def _finalize(
        self,
        request: LlmRequest,
        websocket: FrameSink,
        tool_detected: bool,
        invocation: Optional[ToolInvocation],
    ) -> None:
        if tool_detected:
            if invocation is None:
                return
            try:
                invocation.result = await self.tool_registry.execute(
                    invocation.name, invocation.raw_arguments
                )
            except Exception as e:
                logger.error(f"Error executing tool {invocation.name}: {e}", exc_info=True)
                return

            logger.info(f"Tool {invocation.name} returned: {invocation.result!r}")
            await self._send(
                websocket,
                LlmResponse(
                    response_id=request.response_id,
                    content=render_tool_result(invocation.result),
                    content_complete=False,
                    end_call=False,
                ),
            )
            return

        await self._send(
            websocket,
            LlmResponse(
                response_id=request.response_id,
                content="",
                content_complete=True,
                end_call=False,
            ),
        )

"""
WebSocket connection manager for the custom LLM endpoint.

The orchestration service opens one WebSocket per call and sends a JSON request
every time the live transcript changes. This module implements the server side
of that protocol:
- Accept the connection and send the agent's greeting
- Parse each text message into an LlmRequest, rejecting binary or malformed payloads
- Queue requests so a call drafts at most one response at a time
- Cancel any in-flight drafting and clean up when the call's socket closes
"""

import asyncio
import logging
from typing import Callable, Optional

from fastapi import WebSocket, WebSocketDisconnect

from voice_bridge.bot.llm_client import LlmClient
from voice_bridge.config.constants import (
    LOGGER_NAME,
    WS_CLOSE_PROTOCOL_ERROR,
    WS_CLOSE_REASON_BINARY,
    WS_CLOSE_REASON_PARSE,
)
from voice_bridge.errors import ShapeViolationError
from voice_bridge.models.message_schemas import LlmRequest, parse_llm_request
from voice_bridge.models.session import CallSessionManager

logger = logging.getLogger(LOGGER_NAME)

# Builds the drafting engine for a call ID
LlmClientFactory = Callable[[str], LlmClient]


class WebSocketManager:
    """Manages LLM WebSocket connections, one drafting engine per call.

    Requests are handed to a per-call worker task through a queue, so frames of
    one drafting cycle are never interleaved with the next cycle's frames.
    """

    def __init__(self, llm_client_factory: LlmClientFactory):
        self.session_manager = CallSessionManager()
        self.llm_client_factory = llm_client_factory

    async def _drafting_worker(
        self,
        call_id: str,
        llm_client: LlmClient,
        requests: "asyncio.Queue[LlmRequest]",
        websocket: WebSocket,
    ) -> None:
        while True:
            request = await requests.get()
            try:
                await llm_client.draft_response(request, websocket)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(
                    f"Error drafting response {request.response_id} for call {call_id}: {e}",
                    exc_info=True,
                )
            finally:
                requests.task_done()

    async def handle_websocket(self, websocket: WebSocket, call_id: str):
        """Handle an LLM WebSocket connection throughout its lifecycle.

        Args:
            websocket (WebSocket): The FastAPI WebSocket connection object
            call_id (str): Call identifier taken from the endpoint path

        The connection stays open for the whole call, until the orchestration
        service disconnects or sends a payload that violates the protocol.
        """
        await websocket.accept()
        logger.info(f"Handle llm ws for: {call_id}")

        closed = False
        worker: Optional[asyncio.Task] = None

        try:
            llm_client = self.llm_client_factory(call_id)
            self.session_manager.add_session(call_id, websocket, llm_client.session)

            requests: "asyncio.Queue[LlmRequest]" = asyncio.Queue()
            worker = asyncio.create_task(
                self._drafting_worker(call_id, llm_client, requests, websocket)
            )

            await llm_client.begin_message(websocket)

            while True:
                message = await websocket.receive()

                if message["type"] == "websocket.disconnect":
                    closed = True
                    break

                if message.get("bytes") is not None:
                    logger.error("Got binary message instead of text in websocket.")
                    await websocket.close(code=WS_CLOSE_PROTOCOL_ERROR, reason=WS_CLOSE_REASON_BINARY)
                    closed = True
                    break

                try:
                    request = parse_llm_request(message.get("text") or "")
                except ShapeViolationError as e:
                    logger.error(f"Error in parsing LLM websocket message: {e}")
                    await websocket.close(code=WS_CLOSE_PROTOCOL_ERROR, reason=WS_CLOSE_REASON_PARSE)
                    closed = True
                    break

                await requests.put(request)

        except WebSocketDisconnect:
            closed = True
        except Exception as e:
            logger.error(f"Error in LLM websocket for call {call_id}: {e}", exc_info=True)
        finally:
            if worker is not None:
                worker.cancel()
                try:
                    await worker
                except asyncio.CancelledError:
                    pass

            self.session_manager.remove_session(call_id)
            if not closed:
                try:
                    await websocket.close()
                except RuntimeError as e:
                    logger.debug(f"WebSocket already closed: {e}")
            logger.info(f"Closing llm ws for: {call_id}")

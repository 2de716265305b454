"""
Client for the voice-AI orchestration service.

The orchestration service owns the audio side of a call (speech recognition,
synthesis, turn taking). Registering a call with it returns the descriptor of
a live audio session which then connects back to this server's LLM WebSocket.
"""

import logging
from typing import Optional

import httpx

from voice_bridge.config.constants import DEFAULT_RETELL_BASE_URL, LOGGER_NAME
from voice_bridge.errors import CallRegistrationError
from voice_bridge.models.message_schemas import CallDetail

logger = logging.getLogger(LOGGER_NAME)

REQUEST_TIMEOUT = 10.0  # seconds


class RetellClient:
    """
    Registers calls with the orchestration service over its REST API.

    Args:
        api_key: API key of the orchestration service
        base_url: Base URL of the REST API
        transport: Optional httpx transport, used to stub the API in tests
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_RETELL_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=REQUEST_TIMEOUT,
            transport=self._transport,
        )

    async def register_call(
        self,
        agent_id: str,
        audio_websocket_protocol: str,
        audio_encoding: str,
        sample_rate: int,
    ) -> CallDetail:
        """
        Register a call for an agent and return its audio session descriptor.

        Args:
            agent_id: Agent that will handle the call
            audio_websocket_protocol: Audio transport ("web" or "twilio")
            audio_encoding: Audio encoding ("s16le" or "mulaw")
            sample_rate: Audio sample rate in Hz

        Returns:
            CallDetail: Descriptor of the registered call

        Raises:
            CallRegistrationError: If the API key is missing or the request fails
        """
        if not self.api_key:
            raise CallRegistrationError("RETELL_API_KEY environment variable not set")

        payload = {
            "agent_id": agent_id,
            "audio_websocket_protocol": audio_websocket_protocol,
            "audio_encoding": audio_encoding,
            "sample_rate": sample_rate,
        }
        logger.info(f"Registering {audio_websocket_protocol} call for agent: {agent_id}")

        try:
            async with self._client() as client:
                response = await client.post("/register-call", json=payload)
                response.raise_for_status()
                call_detail = CallDetail.model_validate(response.json())
        except httpx.HTTPError as e:
            raise CallRegistrationError(f"Failed to register call: {e}") from e
        except ValueError as e:
            raise CallRegistrationError(f"Unexpected register-call response: {e}") from e

        logger.info(f"Registered call {call_detail.call_id} for agent: {agent_id}")
        return call_detail

"""
Twilio integration for phone calls.

Routes Twilio phone numbers to this server's voice webhook, places outbound
calls, and ends or transfers calls in progress. Twilio's SDK is blocking, so
every API call runs in a worker thread.
"""

import asyncio
import logging
from typing import Any, Optional

from twilio.base.exceptions import TwilioException
from twilio.rest import Client
from twilio.twiml.voice_response import Connect, VoiceResponse

from voice_bridge.config.constants import LOGGER_NAME, RETELL_AUDIO_WEBSOCKET_URL
from voice_bridge.errors import TelephonyError

logger = logging.getLogger(LOGGER_NAME)


def audio_stream_twiml(call_id: str) -> str:
    """TwiML connecting the call's audio to the orchestration service's audio socket."""
    response = VoiceResponse()
    connect = Connect()
    connect.stream(url=f"{RETELL_AUDIO_WEBSOCKET_URL}/{call_id}")
    response.append(connect)
    return str(response)


def hangup_twiml() -> str:
    response = VoiceResponse()
    response.hangup()
    return str(response)


def dial_twiml(transfer_to: str) -> str:
    response = VoiceResponse()
    response.dial(transfer_to)
    return str(response)


class TwilioClient:
    """
    Thin async wrapper over the Twilio REST client.

    Args:
        account_id: Twilio account SID
        auth_token: Twilio auth token
        public_base_url: Public URL of this server, used to build webhook URLs
        client: Optional preconfigured twilio.rest.Client
    """

    def __init__(
        self,
        account_id: Optional[str],
        auth_token: Optional[str],
        public_base_url: Optional[str],
        client: Optional[Client] = None,
    ):
        if client is None and not (account_id and auth_token):
            raise TelephonyError("Twilio credentials not configured")
        self.twilio = client or Client(account_id, auth_token)
        self.public_base_url = (public_base_url or "").rstrip("/")

    def voice_webhook_url(self, agent_id: str) -> str:
        return f"{self.public_base_url}/twilio-voice-webhook/{agent_id}"

    async def create_phone_number(self, area_code: int, agent_id: str) -> Optional[Any]:
        """Buy a local US number in ``area_code`` and route it to the agent."""
        try:
            local_numbers = await asyncio.to_thread(
                self.twilio.available_phone_numbers("US").local.list,
                area_code=area_code,
                limit=1,
            )
            if not local_numbers:
                raise TelephonyError(f"No phone numbers of area code {area_code}")

            phone_number = await asyncio.to_thread(
                self.twilio.incoming_phone_numbers.create,
                phone_number=local_numbers[0].phone_number,
                voice_url=self.voice_webhook_url(agent_id),
            )
            logger.info(f"Created phone number: {phone_number.phone_number}")
            return phone_number
        except (TwilioException, TelephonyError) as e:
            logger.error(f"Create phone number API: {e}")
            return None

    async def register_phone_agent(self, number: str, agent_id: str) -> bool:
        """
        Point an existing number's voice webhook at the agent.

        Returns:
            True if the number was found and updated, False otherwise
        """
        webhook_url = self.voice_webhook_url(agent_id)
        try:
            phone_numbers = await asyncio.to_thread(self.twilio.incoming_phone_numbers.list)
            number_sid = None
            for phone_number in phone_numbers:
                if phone_number.phone_number == number:
                    number_sid = phone_number.sid

            if number_sid is None:
                logger.error(
                    "Unable to locate this number in your Twilio account, "
                    f"is the number {number} in E.164 format?"
                )
                return False

            await asyncio.to_thread(
                self.twilio.incoming_phone_numbers(number_sid).update,
                voice_url=webhook_url,
                voice_method="POST",
            )
            logger.info(
                f"Updated phone number {number} (SID: {number_sid}) to use agent ID: "
                f"{agent_id}. The voice URL is now: {webhook_url}"
            )
            return True
        except TwilioException as e:
            logger.error(f"Failed to register phone agent: {e}")
            return False

    async def delete_phone_number(self, phone_number_sid: str) -> None:
        """Release a phone number. Errors are raised as TelephonyError."""
        try:
            await asyncio.to_thread(self.twilio.incoming_phone_numbers(phone_number_sid).delete)
        except TwilioException as e:
            raise TelephonyError(f"Failed to delete phone number {phone_number_sid}: {e}") from e
        logger.info(f"Deleted phone number: {phone_number_sid}")

    async def create_phone_call(self, from_number: str, to_number: str, agent_id: str) -> bool:
        """Place an outbound call that will be answered by the agent."""
        webhook_url = self.voice_webhook_url(agent_id)
        try:
            await asyncio.to_thread(
                self.twilio.calls.create,
                machine_detection="Enable",
                machine_detection_timeout=8,
                async_amd="true",
                async_amd_status_callback=webhook_url,
                url=webhook_url,
                to=to_number,
                from_=from_number,
            )
            logger.info(f"Call from: {from_number} to: {to_number}")
            return True
        except TwilioException as e:
            logger.error(f"Failed to create phone call: {e}")
            return False

    async def end_call(self, call_sid: str) -> bool:
        try:
            await asyncio.to_thread(self.twilio.calls(call_sid).update, twiml=hangup_twiml())
            logger.info(f"End phone call: {call_sid}")
            return True
        except TwilioException as e:
            logger.error(f"Twilio end error: {e}")
            return False

    async def transfer_call(self, call_sid: str, transfer_to: str) -> bool:
        try:
            await asyncio.to_thread(
                self.twilio.calls(call_sid).update, twiml=dial_twiml(transfer_to)
            )
            logger.info(f"Transfer phone call {call_sid} to {transfer_to}")
            return True
        except TwilioException as e:
            logger.error(f"Twilio transfer error: {e}")
            return False

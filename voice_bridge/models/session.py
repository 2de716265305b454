"""
Per-call session state and the registry of active call sessions.

SessionState holds the few mutable fields a call needs between drafting cycles.
CallSessionManager tracks every live LLM WebSocket so the server can report
and clean up active calls.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from fastapi import WebSocket

from voice_bridge.config.constants import LOGGER_NAME
from voice_bridge.models.message_schemas import Utterance

logger = logging.getLogger(LOGGER_NAME)


class SessionState:
    """
    Mutable state owned by a single call.

    Only used to suppress repeated logging of the same user utterance, since
    the orchestration service resends the full transcript on every update.
    """

    def __init__(self, call_id: Optional[str] = None):
        self.call_id = call_id
        self.last_logged_user_utterance: Optional[str] = None

    def observe(self, transcript: Sequence[Utterance]) -> bool:
        """
        Log the latest user utterance if it has not been logged yet.

        Args:
            transcript: Chronological transcript of the call

        Returns:
            True if a new utterance was logged, False otherwise
        """
        last_user = None
        for utterance in reversed(transcript):
            if utterance.role == "user":
                last_user = utterance
                break

        if last_user is None or last_user.content == self.last_logged_user_utterance:
            return False

        logger.info(f"User said: {last_user.content}")
        self.last_logged_user_utterance = last_user.content
        return True


class CallSessionManager:
    """
    Manages active call sessions for the LLM WebSocket endpoint.

    Each call ID maps to its WebSocket connection and SessionState for as
    long as the orchestration service keeps the socket open.
    """

    def __init__(self):
        """Initialize an empty dictionary of active sessions."""
        self.active_sessions = {}

    def add_session(self, call_id: str, websocket: WebSocket, state: SessionState):
        """
        Add a new call to the active sessions registry.

        Args:
            call_id: Identifier of the call from the orchestration service
            websocket: The active WebSocket connection for the call
            state: The call's SessionState
        """
        self.active_sessions[call_id] = {
            "websocket": websocket,
            "state": state,
        }

    def get_session(self, call_id: str) -> Optional[Dict[str, Any]]:
        """
        Get an active session by its call ID.

        Returns:
            Dictionary containing the websocket and state, or None if the call is unknown
        """
        return self.active_sessions.get(call_id)

    def remove_session(self, call_id: str):
        """Remove a call from the active sessions registry."""
        if call_id in self.active_sessions:
            del self.active_sessions[call_id]

    def get_all_sessions(self) -> Dict[str, Dict[str, Any]]:
        """Get all active sessions keyed by call ID."""
        return self.active_sessions

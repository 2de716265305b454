"""
Pydantic models for the custom LLM WebSocket protocol and call registration.

This module defines structured data models for the messages exchanged with the
voice-AI orchestration service, providing type validation and documentation.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from voice_bridge.errors import ShapeViolationError


class InteractionType(str, Enum):
    """What the orchestration service expects back for a request."""

    NORMAL = "normal"
    RESPONSE_REQUIRED = "response_required"
    REMINDER_REQUIRED = "reminder_required"
    UPDATE_ONLY = "update_only"


class Utterance(BaseModel):
    """One turn of the live transcript."""

    model_config = ConfigDict(frozen=True)

    role: Literal["agent", "user"] = Field(..., description="Speaker of the turn")
    content: str = Field(..., description="Transcribed text of the turn")

    @field_validator("content")
    def validate_content(cls, v):
        """Validate that the utterance carries text."""
        if not v:
            raise ValueError("Utterance content cannot be empty")
        return v


class LlmRequest(BaseModel):
    """Inbound request asking for a response (or just updating the transcript)."""

    response_id: int = Field(..., ge=0, description="Correlation id echoed in responses")
    transcript: List[Utterance] = Field(
        default_factory=list, description="Chronological transcript of the call"
    )
    interaction_type: InteractionType = Field(
        ..., description="Whether a response, a reminder, or nothing is expected"
    )

    @property
    def last_user_utterance(self) -> Optional[Utterance]:
        """The most recent turn spoken by the user, if any."""
        for utterance in reversed(self.transcript):
            if utterance.role == "user":
                return utterance
        return None


class LlmResponse(BaseModel):
    """Outbound frame carrying a chunk of the drafted response."""

    response_id: int = Field(..., description="Id of the request being answered")
    content: str = Field("", description="Speakable text fragment")
    content_complete: bool = Field(
        False, description="True only on the final frame of a drafting cycle"
    )
    end_call: bool = Field(False, description="Whether the call should be ended")


class RegisterCallRequest(BaseModel):
    """Body of the register-call endpoint used by web frontends."""

    agentId: str = Field(..., min_length=1, description="Agent to attach to the call")


class CallDetail(BaseModel):
    """Audio session descriptor returned by the orchestration service."""

    model_config = ConfigDict(extra="allow")

    call_id: str = Field(..., description="Identifier of the registered call")
    agent_id: str = Field(..., description="Agent handling the call")
    audio_websocket_protocol: Optional[str] = None
    audio_encoding: Optional[str] = None
    sample_rate: Optional[int] = None
    call_status: Optional[str] = None


def parse_llm_request(data: Union[str, bytes, Dict[str, Any]]) -> LlmRequest:
    """
    Parse an inbound WebSocket payload into an LlmRequest.

    Args:
        data: Raw JSON text, or an already decoded mapping

    Returns:
        LlmRequest: The validated request

    Raises:
        ShapeViolationError: If the payload is not JSON or does not match the schema
    """
    try:
        if isinstance(data, (str, bytes)):
            data = json.loads(data)
        return LlmRequest.model_validate(data)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        raise ShapeViolationError(f"Invalid LLM request: {e}") from e

"""
Unit tests for the message schemas.

These tests validate that the Pydantic models correctly validate protocol
messages and that malformed payloads are rejected as shape violations.
"""

import json

import pytest
from pydantic import ValidationError

from voice_bridge.errors import ShapeViolationError
from voice_bridge.models.message_schemas import (
    CallDetail,
    InteractionType,
    LlmRequest,
    LlmResponse,
    RegisterCallRequest,
    Utterance,
    parse_llm_request,
)

VALID_REQUEST = {
    "response_id": 4,
    "transcript": [
        {"role": "agent", "content": "Hi, how can I help?"},
        {"role": "user", "content": "Tell me about books."},
    ],
    "interaction_type": "normal",
}


class TestUtterance:
    def test_valid_utterance(self):
        utterance = Utterance(role="user", content="Hello")
        assert utterance.role == "user"
        assert utterance.content == "Hello"

    def test_invalid_role(self):
        with pytest.raises(ValidationError):
            Utterance(role="system", content="Hello")

    def test_empty_content(self):
        with pytest.raises(ValidationError):
            Utterance(role="user", content="")

    def test_utterance_is_immutable(self):
        utterance = Utterance(role="user", content="Hello")
        with pytest.raises(ValidationError):
            utterance.content = "Changed"


class TestLlmRequest:
    def test_parse_valid_request_text(self):
        request = parse_llm_request(json.dumps(VALID_REQUEST))

        assert request.response_id == 4
        assert request.interaction_type == InteractionType.NORMAL
        assert len(request.transcript) == 2
        assert request.last_user_utterance.content == "Tell me about books."

    def test_parse_mapping(self):
        request = parse_llm_request({**VALID_REQUEST, "interaction_type": "reminder_required"})
        assert request.interaction_type == InteractionType.REMINDER_REQUIRED

    def test_response_required_is_accepted(self):
        request = parse_llm_request({**VALID_REQUEST, "interaction_type": "response_required"})
        assert request.interaction_type == InteractionType.RESPONSE_REQUIRED

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[]",
            json.dumps({**VALID_REQUEST, "interaction_type": "shout"}),
            json.dumps({**VALID_REQUEST, "response_id": -1}),
            json.dumps({k: v for k, v in VALID_REQUEST.items() if k != "interaction_type"}),
            json.dumps({**VALID_REQUEST, "transcript": [{"role": "user"}]}),
        ],
    )
    def test_shape_violations(self, payload):
        with pytest.raises(ShapeViolationError):
            parse_llm_request(payload)

    def test_no_user_utterance(self):
        request = LlmRequest(response_id=0, transcript=[], interaction_type="update_only")
        assert request.last_user_utterance is None


class TestLlmResponse:
    def test_defaults(self):
        frame = LlmResponse(response_id=3)
        assert json.loads(frame.model_dump_json()) == {
            "response_id": 3,
            "content": "",
            "content_complete": False,
            "end_call": False,
        }


class TestCallRegistration:
    def test_register_call_request_requires_agent_id(self):
        with pytest.raises(ValidationError):
            RegisterCallRequest(agentId="")

    def test_call_detail_keeps_extra_fields(self):
        detail = CallDetail(call_id="c1", agent_id="a1", start_timestamp=123)
        assert detail.model_dump()["start_timestamp"] == 123

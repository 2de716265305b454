import pytest

from voice_bridge.bot.prompt import conversation_to_messages, prepare_prompt
from voice_bridge.config.constants import AGENT_PROMPT, REMINDER_PROMPT, SYSTEM_STYLE_PROMPT
from voice_bridge.models.message_schemas import InteractionType, LlmRequest, Utterance
from voice_bridge.models.openai_schemas import MessageRole

TRANSCRIPT = [
    Utterance(role="agent", content="Hey there, how can I help?"),
    Utterance(role="user", content="I can't sleep."),
    Utterance(role="agent", content="How long has that been going on?"),
    Utterance(role="user", content="About a week."),
]


def test_conversation_roles_are_mapped_in_order():
    messages = conversation_to_messages(TRANSCRIPT)

    assert [m.role for m in messages] == [
        MessageRole.ASSISTANT,
        MessageRole.USER,
        MessageRole.ASSISTANT,
        MessageRole.USER,
    ]
    assert [m.content for m in messages] == [u.content for u in TRANSCRIPT]


@pytest.mark.parametrize(
    "interaction_type", [InteractionType.NORMAL, InteractionType.RESPONSE_REQUIRED]
)
def test_prepare_prompt_prepends_system_message(interaction_type):
    request = LlmRequest(response_id=1, transcript=TRANSCRIPT, interaction_type=interaction_type)

    messages = prepare_prompt(request)

    assert len(messages) == len(TRANSCRIPT) + 1
    assert messages[0].role == MessageRole.SYSTEM
    assert messages[0].content == SYSTEM_STYLE_PROMPT + AGENT_PROMPT
    assert [m.content for m in messages[1:]] == [u.content for u in TRANSCRIPT]


def test_prepare_prompt_uses_custom_agent_prompt():
    request = LlmRequest(response_id=1, transcript=[], interaction_type=InteractionType.NORMAL)

    messages = prepare_prompt(request, agent_prompt="You are a librarian.")

    assert messages[0].content.endswith("## Role\nYou are a librarian.")


def test_reminder_adds_trailing_user_message():
    request = LlmRequest(
        response_id=2, transcript=TRANSCRIPT, interaction_type=InteractionType.REMINDER_REQUIRED
    )

    messages = prepare_prompt(request)

    assert len(messages) == len(TRANSCRIPT) + 2
    assert messages[-1].role == MessageRole.USER
    assert messages[-1].content == REMINDER_PROMPT


def test_empty_transcript_yields_only_system_message():
    request = LlmRequest(response_id=0, transcript=[], interaction_type=InteractionType.NORMAL)
    assert len(prepare_prompt(request)) == 1

"""
Prompt construction for the chat completion API.

Turns the live transcript into role-tagged chat messages and prepends the
voice-agent style policy together with the agent's role.
"""

from typing import List, Sequence

from voice_bridge.config.constants import AGENT_PROMPT, REMINDER_PROMPT, SYSTEM_STYLE_PROMPT
from voice_bridge.models.message_schemas import InteractionType, LlmRequest, Utterance
from voice_bridge.models.openai_schemas import ChatMessage, MessageRole


def conversation_to_messages(transcript: Sequence[Utterance]) -> List[ChatMessage]:
    """
    Map transcript turns to chat messages, preserving order.

    Agent turns become assistant messages and user turns stay user messages.
    """
    return [
        ChatMessage(
            role=MessageRole.ASSISTANT if turn.role == "agent" else MessageRole.USER,
            content=turn.content,
        )
        for turn in transcript
    ]


def prepare_prompt(request: LlmRequest, agent_prompt: str = AGENT_PROMPT) -> List[ChatMessage]:
    """
    Build the full message list for a drafting cycle.

    Args:
        request: The inbound request carrying the transcript
        agent_prompt: Role/persona description appended to the style policy

    Returns:
        List[ChatMessage]: System message, the mapped transcript, and a reminder
        instruction when the caller has gone quiet
    """
    messages = [ChatMessage(role=MessageRole.SYSTEM, content=SYSTEM_STYLE_PROMPT + agent_prompt)]
    messages.extend(conversation_to_messages(request.transcript))

    if request.interaction_type == InteractionType.REMINDER_REQUIRED:
        messages.append(ChatMessage(role=MessageRole.USER, content=REMINDER_PROMPT))

    return messages

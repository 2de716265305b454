"""
Pydantic models for OpenAI chat completion request structures.

This module provides type-safe models for the messages and tool declarations
sent to the chat completion API.
"""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """Role of a participant in a conversation."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single chat message sent to the completion API."""
    role: MessageRole
    content: str

    def to_openai(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class FunctionDefinition(BaseModel):
    """Declaration of a callable tool."""
    name: str
    description: str
    parameters: Dict[str, Any] = Field(default_factory=dict)


class ToolDefinition(BaseModel):
    """Tool wrapper in the shape expected by the `tools` request parameter."""
    type: str = "function"
    function: FunctionDefinition

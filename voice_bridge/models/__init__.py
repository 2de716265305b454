"""
Models module for data structures and state management in the voice bridge.

Key components:
- message_schemas: Pydantic models for the custom LLM WebSocket protocol
  (requests carrying the live transcript, response frames) and for call
  registration with the orchestration service.
- openai_schemas: Models for chat messages and tool declarations sent to the
  completion API.
- session: Per-call SessionState and the CallSessionManager registry.

Usage examples:
```python
from voice_bridge.models.message_schemas import LlmResponse, parse_llm_request

request = parse_llm_request(
    '{"response_id": 1, "interaction_type": "normal",'
    ' "transcript": [{"role": "user", "content": "Hello"}]}'
)
frame = LlmResponse(response_id=request.response_id, content="Hi!")
await websocket.send_text(frame.model_dump_json())
```
"""

from voice_bridge.models.message_schemas import (
    CallDetail,
    InteractionType,
    LlmRequest,
    LlmResponse,
    RegisterCallRequest,
    Utterance,
    parse_llm_request,
)
from voice_bridge.models.openai_schemas import (
    ChatMessage,
    FunctionDefinition,
    MessageRole,
    ToolDefinition,
)
from voice_bridge.models.session import CallSessionManager, SessionState

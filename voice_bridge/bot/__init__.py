"""
Bot module drafting spoken responses with an OpenAI chat model.

Key components:
- prompt: Formats the live transcript into chat messages behind a fixed
  voice-agent style policy.
- accumulator: Merges streamed completion deltas into the full message.
- tools / books: Tool registry and the demo book catalogue tools.
- provider: Streaming chat completion provider (OpenAI).
- llm_client: LlmClient, the per-call drafting engine that streams response
  frames back over the LLM WebSocket.

Usage examples:
```python
from voice_bridge.bot import LlmClient, OpenAIChatProvider, build_book_registry

client = LlmClient(
    OpenAIChatProvider(api_key=os.getenv("OPENAI_API_KEY")),
    tool_registry=build_book_registry(),
)
await client.begin_message(websocket)
await client.draft_response(request, websocket)
```
"""

from voice_bridge.bot.books import build_book_registry
from voice_bridge.bot.llm_client import LlmClient
from voice_bridge.bot.provider import OpenAIChatProvider
from voice_bridge.bot.tools import Tool, ToolRegistry

__all__ = ["LlmClient", "OpenAIChatProvider", "Tool", "ToolRegistry", "build_book_registry"]

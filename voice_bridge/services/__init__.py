"""
Services module with clients for the voice bridge's external collaborators.

Key components:
- orchestration: RetellClient, which registers calls with the voice-AI
  orchestration service and returns the audio session descriptor.
- telephony: TwilioClient, which routes phone numbers to the voice webhook,
  places outbound calls and ends or transfers calls in progress.

Usage examples:
```python
from voice_bridge.services.orchestration import RetellClient

retell = RetellClient(api_key=os.getenv("RETELL_API_KEY"))
call_detail = await retell.register_call(
    agent_id, audio_websocket_protocol="web", audio_encoding="s16le", sample_rate=24000
)
```
"""

"""
Voice LLM Bridge - custom LLM backend for real-time voice agents

This application drafts the spoken side of phone and web voice calls. A voice-AI
orchestration service handles the audio (speech recognition, synthesis, turn
taking) and opens a WebSocket to this server for every call. Each time the live
transcript changes it sends the transcript over; the server streams an OpenAI
chat completion back as small speakable chunks, optionally calling tools along
the way.

Architecture Overview:
- FastAPI server exposing the per-call LLM WebSocket and HTTP endpoints
- Streaming drafting engine with tool calling on top of the OpenAI chat API
- Twilio integration routing phone numbers and calls to the orchestration service

Key Components:
- bot: Prompt formatting, delta accumulation, tools and the drafting engine
- config: Application-wide constants, settings and logging setup
- models: Protocol schemas and per-call session state
- services: Clients for the orchestration service and Twilio
- websocket_manager: Lifecycle of the LLM WebSocket for each call

Getting Started:
1. Set up environment variables:
   - OPENAI_API_KEY: Your OpenAI API key
   - RETELL_API_KEY: API key of the orchestration service
   - TWILIO_ACCOUNT_ID / TWILIO_AUTH_TOKEN / TWILIO_PHONE_NUMBER: optional phone setup
   - NGROK_IP_ADDRESS: public URL of this server, used for Twilio webhooks
   - PORT / HOST / LOG_LEVEL

2. Start the server:
   ```bash
   python run.py
   ```

3. Point the agent's custom LLM WebSocket URL at ws://your-server:8000/llm-websocket
"""

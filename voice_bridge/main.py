"""
FastAPI server for the voice LLM bridge.

This module initializes and configures the FastAPI application that serves as
the custom LLM backend of the voice-AI orchestration service and as the voice
webhook for Twilio phone numbers.

Endpoints:
- /llm-websocket/{call_id}: streams drafted responses for a live call
- /register-call-on-your-server: registers web calls without exposing API keys to the frontend
- /twilio-voice-webhook/{agent_id}: answers Twilio calls and connects them to the orchestration service
- /health and /: status and API information
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from voice_bridge.bot.books import build_book_registry
from voice_bridge.bot.llm_client import LlmClient
from voice_bridge.bot.provider import OpenAIChatProvider
from voice_bridge.config.constants import (
    AUDIO_ENCODING_MULAW,
    AUDIO_ENCODING_S16LE,
    AUDIO_PROTOCOL_TWILIO,
    AUDIO_PROTOCOL_WEB,
    PHONE_SAMPLE_RATE,
    WEB_SAMPLE_RATE,
)
from voice_bridge.config.logging_config import configure_logging
from voice_bridge.config.settings import Settings, load_settings
from voice_bridge.errors import CallRegistrationError
from voice_bridge.models.message_schemas import RegisterCallRequest
from voice_bridge.models.session import SessionState
from voice_bridge.services.orchestration import RetellClient
from voice_bridge.services.telephony import TwilioClient, audio_stream_twiml
from voice_bridge.websocket_manager import WebSocketManager

settings: Settings = load_settings()
logger = configure_logging(settings.log_level)

retell_client = RetellClient(settings.retell_api_key, settings.retell_base_url)
twilio_client: Optional[TwilioClient] = None
if settings.twilio_configured:
    twilio_client = TwilioClient(
        settings.twilio_account_id, settings.twilio_auth_token, settings.public_base_url
    )


def build_llm_client(call_id: str) -> LlmClient:
    """Create the drafting engine for a new call."""
    provider = OpenAIChatProvider(
        api_key=settings.openai_api_key,
        organization=settings.openai_organization_id,
        model=settings.openai_model,
    )
    tool_registry = build_book_registry() if settings.enable_function_calling else None
    return LlmClient(
        provider,
        tool_registry=tool_registry,
        agent_prompt=settings.agent_prompt,
        begin_sentence=settings.begin_sentence,
        session=SessionState(call_id),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if twilio_client and settings.twilio_phone_number and settings.retell_agent_id:
        await twilio_client.register_phone_agent(
            settings.twilio_phone_number, settings.retell_agent_id
        )
    yield


app = FastAPI(
    title="Voice LLM Bridge",
    description="Custom LLM backend streaming OpenAI responses to voice-AI calls over WebSocket",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

websocket_manager = WebSocketManager(build_llm_client)


@app.websocket("/llm-websocket/{call_id}")
async def llm_websocket_endpoint(websocket: WebSocket, call_id: str):
    """WebSocket endpoint streaming drafted responses for one call.

    The greeting is sent as soon as the connection opens; afterwards every
    transcript update is answered with content frames and a completion frame.
    """
    await websocket_manager.handle_websocket(websocket, call_id)


@app.post("/register-call-on-your-server")
async def register_call(body: RegisterCallRequest):
    """Register a web call for an agent and return its call detail.

    Keeps the orchestration API key on the server instead of in the frontend.
    """
    try:
        call_detail = await retell_client.register_call(
            agent_id=body.agentId,
            audio_websocket_protocol=AUDIO_PROTOCOL_WEB,
            audio_encoding=AUDIO_ENCODING_S16LE,
            sample_rate=WEB_SAMPLE_RATE,
        )
    except CallRegistrationError as e:
        logger.error(f"Error registering call: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to register call"})
    return call_detail.model_dump()


@app.post("/twilio-voice-webhook/{agent_id}")
async def twilio_voice_webhook(agent_id: str, request: Request):
    """Twilio voice webhook for inbound and outbound calls.

    Machine-answered outbound calls are hung up. Otherwise the call is
    registered with the orchestration service and its audio is connected to
    the returned audio session.
    """
    form = await request.form()
    answered_by = form.get("AnsweredBy")
    logger.info(f"Twilio voice webhook for agent {agent_id}: {dict(form)}")

    if answered_by:
        # Asynchronous answering machine detection callback
        if answered_by == "machine_start" and twilio_client:
            await twilio_client.end_call(form.get("CallSid"))
        return Response(status_code=200)

    try:
        call_detail = await retell_client.register_call(
            agent_id=agent_id,
            audio_websocket_protocol=AUDIO_PROTOCOL_TWILIO,
            audio_encoding=AUDIO_ENCODING_MULAW,
            sample_rate=PHONE_SAMPLE_RATE,
        )
    except CallRegistrationError as e:
        logger.error(f"Error in twilio voice webhook: {e}")
        return Response(status_code=500)

    return Response(content=audio_stream_twiml(call_detail.call_id), media_type="text/xml")


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring system status.

    Returns:
        dict: Status information, configured collaborators and active call count.
    """
    return {
        "status": "healthy",
        "openai_api_key_configured": bool(settings.openai_api_key),
        "retell_api_key_configured": bool(settings.retell_api_key),
        "twilio_configured": twilio_client is not None,
        "active_calls": len(websocket_manager.session_manager.get_all_sessions()),
    }


@app.get("/")
async def root():
    """Root endpoint to display basic information about the API."""
    return {
        "name": "Voice LLM Bridge",
        "description": app.description,
        "version": "1.0.0",
        "endpoints": {
            "/llm-websocket/{call_id}": "WebSocket endpoint for the orchestration service's custom LLM",
            "/register-call-on-your-server": "Register a web call for an agent",
            "/twilio-voice-webhook/{agent_id}": "Twilio voice webhook",
            "/health": "Health check endpoint",
        },
    }


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, http="h11")

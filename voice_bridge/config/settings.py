"""
Environment-based settings for the voice bridge.

Values are read from the process environment, after loading a local ``.env``
file when one exists.
"""

import os
from pathlib import Path
from typing import Optional

import dotenv
from pydantic import BaseModel, Field

from voice_bridge.config.constants import (
    AGENT_PROMPT,
    BEGIN_SENTENCE,
    DEFAULT_CHAT_MODEL,
    DEFAULT_RETELL_BASE_URL,
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime configuration for the server and its external collaborators."""

    openai_api_key: Optional[str] = None
    openai_organization_id: Optional[str] = None
    openai_model: str = DEFAULT_CHAT_MODEL
    enable_function_calling: bool = True
    agent_prompt: str = AGENT_PROMPT
    begin_sentence: str = BEGIN_SENTENCE

    retell_api_key: Optional[str] = None
    retell_agent_id: Optional[str] = None
    retell_base_url: str = DEFAULT_RETELL_BASE_URL

    twilio_account_id: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    twilio_phone_number: Optional[str] = None
    public_base_url: Optional[str] = Field(
        None, description="Publicly reachable base URL used for Twilio webhooks"
    )

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    env: str = "production"

    @property
    def twilio_configured(self) -> bool:
        return bool(self.twilio_account_id and self.twilio_auth_token)


def load_settings(env_file: Path = Path(".") / ".env") -> Settings:
    """
    Build Settings from environment variables.

    Args:
        env_file: Optional dotenv file loaded before reading the environment

    Returns:
        Settings: The populated settings object
    """
    if env_file.exists():
        dotenv.load_dotenv(env_file)

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_organization_id=os.getenv("OPENAI_ORGANIZATION_ID"),
        openai_model=os.getenv("OPENAI_MODEL", DEFAULT_CHAT_MODEL),
        enable_function_calling=os.getenv("ENABLE_FUNCTION_CALLING", "true").lower()
        in _TRUE_VALUES,
        agent_prompt=os.getenv("AGENT_PROMPT", AGENT_PROMPT),
        begin_sentence=os.getenv("BEGIN_SENTENCE", BEGIN_SENTENCE),
        retell_api_key=os.getenv("RETELL_API_KEY"),
        retell_agent_id=os.getenv("RETELL_AGENT_ID"),
        retell_base_url=os.getenv("RETELL_BASE_URL", DEFAULT_RETELL_BASE_URL),
        twilio_account_id=os.getenv("TWILIO_ACCOUNT_ID"),
        twilio_auth_token=os.getenv("TWILIO_AUTH_TOKEN"),
        twilio_phone_number=os.getenv("TWILIO_PHONE_NUMBER"),
        public_base_url=os.getenv("NGROK_IP_ADDRESS"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        env=os.getenv("ENV", "production").lower(),
    )

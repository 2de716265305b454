"""
Configuration module for the voice bridge application.

This module provides centralized configuration management for the entire application,
including constants, logging setup, and environment-based settings.

Key components:
- constants: Application-wide constants, including prompts, the greeting,
  protocol values and the generation policy used for every drafting cycle.
- settings: Environment-driven Settings object (API keys, model, Twilio numbers).
- logging_config: Console and rotating file logging.

Usage examples:
```python
from voice_bridge.config.constants import LOGGER_NAME, MAX_TOKENS
from voice_bridge.config.logging_config import configure_logging
from voice_bridge.config.settings import load_settings

logger = configure_logging()
settings = load_settings()
logger.info(f"Using model {settings.openai_model}")
```
"""

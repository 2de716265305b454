"""
Configure logging for the voice bridge.

All modules log through the single ``voice_bridge`` logger. Console output
always goes to stdout; a rotating log file is added when the log directory
can be created. The HTTP clients used for OpenAI, Retell and Twilio log every
request at INFO, so they are raised to WARNING to keep call logs readable.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from voice_bridge.config.constants import LOGGER_NAME

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_FILE = Path("logs") / "voice_bridge.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

NOISY_LOGGERS = ("httpx", "httpcore", "openai", "twilio.http_client")


def _file_handler(log_file: Path, formatter: logging.Formatter) -> RotatingFileHandler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT)
    handler.setFormatter(formatter)
    return handler


def configure_logging(level: str = LOG_LEVEL, log_file: Optional[Path] = LOG_FILE):
    """
    Configure the voice bridge logger.

    Calling it again replaces the handlers of the previous call, so the server
    and the run script can both configure logging without duplicating output.

    Args:
        level: Name of the log level, e.g. "DEBUG" (unknown names fall back to INFO)
        log_file: Rotating log file path, or None to log to stdout only

    Returns:
        logging.Logger: The configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        try:
            logger.addHandler(_file_handler(log_file, formatter))
        except OSError as e:
            logger.warning(f"Could not set up file logging at {log_file}: {e}")

    logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info(f"Logging configured at level {logging.getLevelName(logger.level)}")
    return logger

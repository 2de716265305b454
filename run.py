"""
Run script for starting the Voice LLM Bridge server.

This script configures and starts the FastAPI server with WebSocket settings
suited to streaming many small response frames per call.

Usage:
    python run.py [--port PORT] [--host HOST] [--log-level LEVEL]
"""

import argparse
import os
import sys

import uvicorn

from voice_bridge.config.logging_config import configure_logging
from voice_bridge.config.settings import load_settings


def parse_args(settings):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Start the Voice LLM Bridge server"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help="Port to run the server on (default: 8000 or PORT env var)",
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help="Host to bind the server to (default: 0.0.0.0 or HOST env var)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )
    return parser.parse_args()


def main():
    """Main entry point for starting the server."""
    settings = load_settings()
    args = parse_args(settings)
    logger = configure_logging(args.log_level)

    if not settings.openai_api_key:
        logger.error("OPENAI_API_KEY environment variable not set")
        print("Error: OPENAI_API_KEY environment variable is required")
        sys.exit(1)

    if not settings.retell_api_key:
        logger.warning("RETELL_API_KEY not set, call registration endpoints will fail")

    logger.info(f"Starting server on http://{args.host}:{args.port}")
    logger.info(f"Log level: {args.log_level}")
    logger.info(f"Chat model: {settings.openai_model}")
    logger.info(f"Function calling enabled: {settings.enable_function_calling}")

    uvicorn.run(
        "voice_bridge.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        # Use HTTP/1.1 for lower overhead than HTTP/2
        http="h11",
        # Disable access logs, we have our own logging
        access_log=False,
        websocket_ping_interval=5,
        websocket_ping_timeout=20,
        reload=os.getenv("ENV", "production").lower() == "development",
    )


if __name__ == "__main__":
    main()

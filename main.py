#!/usr/bin/env python3
"""Main entry point for the chat relay server.

Bootstraps a Uvicorn ASGI server for chatrelay.api.server:app.
Loads a .env file (current directory by default) to populate environment
variables before settings are read.
"""

import os
import sys
from argparse import ArgumentParser
from pathlib import Path

if __name__ == "__main__":
    # Parse arguments FIRST so --help works without touching config or logging
    parser = ArgumentParser(description="Start the chat relay server")
    parser.add_argument("--host", help="Bind address. Overrides SERVER_HOST env var.")
    parser.add_argument(
        "--port", type=int, help="Listening port. Overrides PORT env var."
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path of a .env file to load if present (default: ./.env)",
    )
    parser.add_argument(
        "--log-format",
        choices=["pretty", "json"],
        help="Log format (pretty or json). Overrides LOG_FORMAT env var.",
    )
    parser.add_argument(
        "--log-colors",
        type=lambda x: x.lower() in ("true", "1", "yes", "on"),
        help="Enable colored logs (true/false). Overrides LOG_COLORS env var.",
    )
    args, _ = parser.parse_known_args()

    # Load .env before anything reads the environment; real env vars win
    from dotenv import load_dotenv

    env_file = Path(args.env_file).expanduser()
    env_loaded = env_file.exists() and load_dotenv(dotenv_path=env_file, override=False)

    # CLI flags take precedence over env and .env; pinned before logging starts
    from chatrelay.config import settings

    settings.override(
        server_host=args.host,
        server_port=args.port,
        log_format=args.log_format,
        log_colors=args.log_colors,
    )

    from chatrelay.utils.logger import get_logger

    startup_logger = get_logger("server.startup")
    if env_loaded:
        startup_logger.debug("Loaded .env file", path=str(env_file))

    try:
        import uvicorn

        from chatrelay.config.logging_config import get_logging_config

        startup_logger.info(
            "Starting chat relay",
            server_url=f"http://{settings.server_host}:{settings.server_port}",
            upstream=settings.ollama_url,
            model=settings.ollama_model,
            cors_origin=settings.cors_origin,
        )

        reload_enabled_env = os.getenv("SERVER_RELOAD", "false").lower()
        reload_enabled = reload_enabled_env in {"1", "true", "yes", "on"}

        uvicorn.run(
            "chatrelay.api.server:app",
            host=settings.server_host,
            port=settings.server_port,
            reload=reload_enabled,
            log_config=get_logging_config(),
            lifespan="on",
            timeout_graceful_shutdown=5,
        )
    except ImportError as e:
        startup_logger.error(
            "Error importing required modules",
            error=str(e),
            hint="Run: pip install -e .",
        )
        sys.exit(1)
    except Exception as e:
        startup_logger.error("Error starting server", error=str(e))
        sys.exit(1)

"""Default configuration values for the chat relay."""

from typing import Any


def get_default_config() -> dict[str, Any]:
    """Return the default configuration dictionary."""
    return {
        # Server Configuration
        "server_host": "localhost",
        "server_port": 8080,
        # Browser clients are served by the Vite dev server by default
        "cors_origin": "http://localhost:5173",
        # Upstream model service
        "ollama_url": "http://localhost:11434",
        "ollama_model": "llama3.2:3b",
        "upstream_connect_timeout": 10.0,
        # Client Configuration
        "relay_url": "http://localhost:8080",
        # Logging Configuration
        "log_level": "INFO",
        "uvicorn_log_level": "INFO",
        "log_format": "pretty",
        "log_colors": True,
    }

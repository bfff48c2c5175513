"""Configuration settings for the chat relay.

This module provides a Settings class with property-based access to
configuration values. Values are resolved from explicit overrides first, then
from the environment, then from the defaults in `chatrelay.config.defaults`.
Environment lookups happen on every access so a `.env` file loaded after
import is still honoured.
"""

from __future__ import annotations

import os
from typing import Any

from chatrelay.config.defaults import get_default_config


class Settings:
    """Application settings with environment overrides.

    Args:
        overrides: Values that take precedence over the environment, keyed by
            the names used in `get_default_config()`.
    """

    def __init__(self, overrides: dict[str, Any] | None = None):
        self._overrides: dict[str, Any] = dict(overrides or {})
        self._defaults = get_default_config()

    def override(self, **values: Any) -> None:
        """Pin configuration values (e.g. from command line flags)."""
        self._overrides.update({k: v for k, v in values.items() if v is not None})

    def _get(
        self,
        key: str,
        env_key: str | None = None,
    ) -> Any:
        """Get config value from overrides, fallback to env, then default."""
        default = self._defaults.get(key)
        if key in self._overrides:
            return self._overrides[key]
        # Fallback to environment variable
        if env_key and (env_val := os.getenv(env_key)):
            # Type conversion based on default type
            if isinstance(default, bool):
                return env_val.lower() in ("true", "1", "yes", "on")
            elif isinstance(default, int):
                return int(env_val)
            elif isinstance(default, float):
                return float(env_val)
            return env_val
        return default

    # Server Configuration
    @property
    def server_host(self) -> str:
        return self._get("server_host", "SERVER_HOST")

    @property
    def server_port(self) -> int:
        return self._get("server_port", "PORT")

    @property
    def cors_origin(self) -> str:
        return self._get("cors_origin", "CORS_ORIGIN")

    # Upstream Configuration
    @property
    def ollama_url(self) -> str:
        return str(self._get("ollama_url", "OLLAMA_URL")).rstrip("/")

    @property
    def ollama_model(self) -> str:
        return self._get("ollama_model", "OLLAMA_MODEL")

    @property
    def upstream_connect_timeout(self) -> float:
        return self._get("upstream_connect_timeout", "OLLAMA_CONNECT_TIMEOUT")

    # Client Configuration
    @property
    def relay_url(self) -> str:
        return str(self._get("relay_url", "CHATRELAY_URL")).rstrip("/")

    # Logging Configuration
    @property
    def log_level(self) -> str:
        return str(self._get("log_level", "LOG_LEVEL")).upper()

    @property
    def uvicorn_log_level(self) -> str:
        return str(self._get("uvicorn_log_level", "UVICORN_LOG_LEVEL")).upper()

    @property
    def log_format(self) -> str:
        return str(self._get("log_format", "LOG_FORMAT")).lower()

    @property
    def log_colors(self) -> bool:
        return self._get("log_colors", "LOG_COLORS")


# Global settings instance (main.py pins CLI overrides on it)
settings = Settings()

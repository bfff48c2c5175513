from __future__ import annotations

import httpx

from chatrelay.config import settings
from chatrelay.llm.ollama import OllamaClient
from chatrelay.services.relay_service import RelayService

# Shared upstream connection pool
_http_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Singleton AsyncClient for upstream requests.

    Created on first access and reused. Reads never time out: a model may
    pause for a long time between tokens.
    """
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(None, connect=settings.upstream_connect_timeout)
        )
    return _http_client


async def dispose_http_client() -> None:
    """Close the shared AsyncClient if it exists (called on app shutdown)."""
    global _http_client
    try:
        if _http_client is not None:
            await _http_client.aclose()
    finally:
        _http_client = None


def get_ollama_client() -> OllamaClient:
    return OllamaClient(
        get_http_client(),
        base_url=settings.ollama_url,
        model=settings.ollama_model,
    )


def get_relay_service() -> RelayService:
    return RelayService(get_ollama_client())

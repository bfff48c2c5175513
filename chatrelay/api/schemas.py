"""API response schemas."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    ok: bool = True
    service: str = "chatrelay"
    message: str = "Server running (Ollama mode)"
    model: str | None = None
    upstream: str | None = None

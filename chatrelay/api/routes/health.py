from __future__ import annotations

from fastapi import APIRouter

from chatrelay.api.schemas import HealthResponse
from chatrelay.config import settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health():
    """Liveness probe; does not contact the upstream model service."""
    return HealthResponse(model=settings.ollama_model, upstream=settings.ollama_url)

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatrelay import __version__
from chatrelay.api.routes.chat import router as chat_router
from chatrelay.api.routes.health import router as health_router
from chatrelay.config import settings
from chatrelay.utils.logger import api_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    api_logger.info(
        "Relay ready",
        upstream=settings.ollama_url,
        model=settings.ollama_model,
        cors_origin=settings.cors_origin,
    )

    yield

    # Shutdown: release the upstream connection pool
    try:
        from chatrelay.api.deps import dispose_http_client

        await dispose_http_client()
        api_logger.info("Shutdown completed")
    except asyncio.CancelledError:
        api_logger.debug("HTTP client disposal cancelled during shutdown")
    except Exception as e:
        api_logger.error("Shutdown cleanup failed", exc_info=True, error=str(e))


def create_app() -> FastAPI:
    app = FastAPI(
        title="Chat Relay Server",
        description=(
            "Streams local Ollama chat completions to clients as Server-Sent Events"
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(chat_router)
    app.include_router(health_router)

    return app

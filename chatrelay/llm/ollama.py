"""Streaming client for Ollama's native chat API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from chatrelay.errors import UpstreamUnavailableError
from chatrelay.utils.logger import llm_logger


class OllamaClient:
    """Opens streaming ``/api/chat`` requests against an Ollama server.

    The underlying ``httpx.AsyncClient`` is owned by the caller so one
    connection pool can be shared by every request the app serves.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str, model: str):
        self._http = http
        self.base_url = base_url.rstrip("/")
        self.model = model

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}/api/chat"

    def build_payload(self, messages: list[dict[str, str]]) -> dict[str, Any]:
        return {"model": self.model, "messages": messages, "stream": True}

    @asynccontextmanager
    async def open_chat_stream(
        self, messages: list[dict[str, str]]
    ) -> AsyncIterator[httpx.Response]:
        """Open a streaming chat request and yield the live response.

        The response is closed when the context exits, on every path.

        Raises:
            UpstreamUnavailableError: connection failed or status is not 2xx.
        """
        llm_logger.info(
            "Opening upstream chat stream",
            url=self.chat_url,
            model=self.model,
            message_count=len(messages),
        )
        try:
            async with self._http.stream(
                "POST", self.chat_url, json=self.build_payload(messages)
            ) as response:
                if not response.is_success:
                    llm_logger.warning(
                        "Upstream returned failure status",
                        status_code=response.status_code,
                    )
                    raise UpstreamUnavailableError(status_code=response.status_code)
                yield response
        except (httpx.ConnectError, httpx.ConnectTimeout) as e:
            llm_logger.warning("Upstream connection failed", error=str(e))
            raise UpstreamUnavailableError() from e

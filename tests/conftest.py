"""Shared pytest fixtures for all tests."""

import json
from collections.abc import AsyncIterator, Callable

import httpx
import pytest

from chatrelay.llm.ollama import OllamaClient
from chatrelay.services.relay_service import RelayService

OLLAMA_TEST_URL = "http://ollama.test"
RELAY_TEST_URL = "http://relay.test"


async def byte_chunks(*chunks: bytes | str) -> AsyncIterator[bytes]:
    """Async byte source yielding the given chunks unchanged."""
    for chunk in chunks:
        yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk


def split_every(data: bytes, size: int) -> list[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


def ndjson(*records: dict) -> bytes:
    return "".join(json.dumps(r) + "\n" for r in records).encode("utf-8")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment variables out of settings-dependent tests."""
    for key in (
        "SERVER_HOST",
        "PORT",
        "CORS_ORIGIN",
        "OLLAMA_URL",
        "OLLAMA_MODEL",
        "OLLAMA_CONNECT_TIMEOUT",
        "CHATRELAY_URL",
        "LOG_FORMAT",
        "LOG_COLORS",
        "LOG_LEVEL",
        "UVICORN_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)


class UpstreamRecorder:
    """Fake Ollama server backed by httpx.MockTransport.

    Each request is recorded; the response body is produced by ``respond``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.respond: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, content=byte_chunks())
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    def stream(self, *chunks: bytes | str, status_code: int = 200) -> None:
        self.respond = lambda request: httpx.Response(
            status_code, content=byte_chunks(*chunks)
        )

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def upstream() -> UpstreamRecorder:
    return UpstreamRecorder()


@pytest.fixture
def relay_service(upstream) -> RelayService:
    http = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    ollama = OllamaClient(http, base_url=OLLAMA_TEST_URL, model="test-model")
    return RelayService(ollama)

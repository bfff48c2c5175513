"""Relay service: composes the upstream prompt and yields domain events.

This service keeps the streaming logic out of the router so it can be driven
directly in tests. Failures raised here are converted to a single ``error``
frame by `chatrelay.api.sse.stream_response`.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from chatrelay.domain.events import BaseEvent
from chatrelay.domain.events import EventFactory as SSEEventFactory
from chatrelay.llm.ndjson import iter_upstream_records
from chatrelay.llm.ollama import OllamaClient
from chatrelay.prompts.system import system_record
from chatrelay.utils.logger import api_logger, stream_log

ALLOWED_ROLES = ("user", "assistant")
INVALID_FORMAT_MESSAGE = "Invalid format: 'messages' must be an array"


def filter_history(messages: list[Any]) -> list[dict[str, str]]:
    """Keep only user/assistant entries whose content is text.

    Malformed entries are dropped rather than rejected.
    """
    safe: list[dict[str, str]] = []
    for m in messages:
        if not isinstance(m, dict):
            continue
        role = m.get("role")
        content = m.get("content")
        if role in ALLOWED_ROLES and isinstance(content, str):
            safe.append({"role": role, "content": content})
    return safe


def extract_messages(body: Any) -> list[Any] | None:
    """Return the candidate history from a request body, or None if invalid."""
    if not isinstance(body, dict):
        return None
    messages = body.get("messages")
    if not isinstance(messages, list):
        return None
    return messages


class RelayService:
    def __init__(self, ollama: OllamaClient) -> None:
        self._ollama = ollama

    def compose_messages(self, history: list[Any]) -> list[dict[str, str]]:
        return [system_record(), *filter_history(history)]

    async def stream_chat(self, body: Any) -> AsyncIterator[BaseEvent]:
        """Relay one chat request and yield delta/done/error events.

        A request without a ``messages`` array yields a single error event and
        never reaches the upstream service. Reading stops after the upstream
        completion record; the upstream response is released on every path.
        """
        history = extract_messages(body)
        if history is None:
            api_logger.warning("Rejected chat request with invalid body")
            yield SSEEventFactory.error(INVALID_FORMAT_MESSAGE)
            return

        outgoing = self.compose_messages(history)
        api_logger.info(
            "Relaying chat request",
            received=len(history),
            forwarded=len(outgoing) - 1,
        )

        fragments = 0
        async with self._ollama.open_chat_stream(outgoing) as response:
            async for record in iter_upstream_records(response.aiter_bytes()):
                if record.fragment:
                    fragments += 1
                    stream_log(api_logger, "delta", record.fragment)
                    yield SSEEventFactory.delta(record.fragment)
                if record.is_final:
                    stream_log(api_logger, "done", fragments=fragments)
                    yield SSEEventFactory.done()
                    return

        api_logger.info(
            "Upstream closed without completion record", fragments=fragments
        )

from __future__ import annotations

import json
import time
from typing import Any

from fastapi import APIRouter, Depends, Request

from chatrelay.api.deps import get_relay_service
from chatrelay.api.sse import stream_response
from chatrelay.services.relay_service import RelayService
from chatrelay.utils.logger import api_logger, request_log

router = APIRouter()


async def read_json_body(raw_request: Request) -> Any:
    """Return the decoded JSON body, or None when it is missing or not JSON.

    Shape validation is left to the relay service so a bad body is reported
    as an ``error`` frame instead of an HTTP error response.
    """
    raw = await raw_request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        api_logger.warning("Chat request body is not valid JSON", size=len(raw))
        return None


@router.post("/api/chat/stream")
async def chat_stream(
    raw_request: Request,
    relay_service: RelayService = Depends(get_relay_service),  # noqa: B008
):
    start_time = time.time()
    client_host = raw_request.client.host if raw_request.client else "unknown"

    body = await read_json_body(raw_request)
    messages = body.get("messages") if isinstance(body, dict) else None
    api_logger.info(
        "Chat request received",
        client=client_host,
        message_count=len(messages) if isinstance(messages, list) else None,
    )

    response = stream_response(relay_service.stream_chat(body))

    duration_ms = (time.time() - start_time) * 1000
    request_log(
        api_logger, "POST", "/api/chat/stream", 200, duration_ms, streaming=True
    )
    return response

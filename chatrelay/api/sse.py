"""SSE adapter utilities.

Provides `stream_response` to wrap async generators of domain events into an
EventSourceResponse that always terminates with a frame the client can read.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from sse_starlette.sse import EventSourceResponse

from chatrelay.domain.events import BaseEvent, EventType
from chatrelay.domain.events import EventFactory as SSEEventFactory
from chatrelay.errors import ChatRelayError
from chatrelay.utils.logger import api_logger

# Frames are separated by a blank line made of bare "\n" characters
SSE_LINE_SEPARATOR = "\n"


async def guarded_stream(
    event_stream: AsyncIterator[BaseEvent],
) -> AsyncIterator[dict[str, str]]:
    """Encode events as SSE dicts and convert failures into one error frame.

    Nothing is emitted after an error frame, whether the error came from the
    event stream itself or from an exception raised while producing it.
    """
    try:
        async for event in event_stream:
            yield event.to_sse()
            if event.type == EventType.ERROR:
                return
    except asyncio.CancelledError:
        api_logger.info("SSE stream cancelled (client disconnected)")
        raise
    except ChatRelayError as e:
        api_logger.error("Upstream failure", error_type=type(e).__name__, error=str(e))
        yield SSEEventFactory.error(str(e)).to_sse()
    except Exception as e:
        api_logger.error("SSE pipeline crashed", exc_info=True, error=str(e))
        yield SSEEventFactory.error(str(e) or type(e).__name__).to_sse()
    finally:
        aclose = getattr(event_stream, "aclose", None)
        if aclose is not None:
            await aclose()


def stream_response(event_stream: AsyncIterator[BaseEvent]) -> EventSourceResponse:
    return EventSourceResponse(
        guarded_stream(event_stream),
        headers={
            "Cache-Control": "no-cache, no-transform",
            "X-Accel-Buffering": "no",
        },
        sep=SSE_LINE_SEPARATOR,
    )

"""Incremental parser for the relay's Server-Sent Events stream.

Bytes arrive in arbitrary chunks; a frame is complete only once its
terminating blank line has been received, so incomplete tails are buffered
until the next chunk.
"""

from __future__ import annotations

import codecs
import json
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass, field
from typing import Any

from chatrelay.domain.events import BaseEvent, EventFactory

EVENT_MARKER = "event:"
DATA_MARKER = "data:"
FRAME_DELIMITER = "\n\n"


@dataclass(frozen=True)
class Frame:
    event: str
    payload: dict[str, Any] = field(default_factory=dict)

    def decode(self) -> BaseEvent | None:
        """Return the typed event for this frame, or None for unknown names."""
        return EventFactory.from_frame(self.event, self.payload)


def _parse_payload(raw: str) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def parse_frame(segment: str) -> Frame | None:
    """Parse one blank-line-delimited segment.

    Returns None for segments with neither an event nor a data line, such as
    keep-alive comments.
    """
    lines = segment.split("\n")
    event_line = next((line for line in lines if line.startswith(EVENT_MARKER)), None)
    data_line = next((line for line in lines if line.startswith(DATA_MARKER)), None)
    if event_line is None and data_line is None:
        return None

    event = event_line[len(EVENT_MARKER) :].strip() if event_line else ""
    raw = data_line[len(DATA_MARKER) :].strip() if data_line else "{}"
    return Frame(event=event, payload=_parse_payload(raw))


async def parse_event_stream(chunks: AsyncIterable[bytes]) -> AsyncIterator[Frame]:
    """Yield frames from an arbitrarily chunked SSE byte stream.

    A trailing segment without its blank-line terminator is dropped when the
    stream ends.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = ""

    async for chunk in chunks:
        buffer = (buffer + decoder.decode(chunk)).replace("\r\n", "\n")
        segments = buffer.split(FRAME_DELIMITER)
        buffer = segments.pop()

        for segment in segments:
            frame = parse_frame(segment)
            if frame is not None:
                yield frame

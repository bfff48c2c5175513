"""Line-delimited JSON reader for Ollama's streaming chat responses.

Ollama answers ``/api/chat`` with one JSON object per line. Transport chunks
do not respect line (or UTF-8 character) boundaries, so bytes are decoded
incrementally and only complete lines are parsed.
"""

from __future__ import annotations

import codecs
import json
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass
from typing import Any

from chatrelay.utils.logger import llm_logger


@dataclass(frozen=True)
class UpstreamRecord:
    """One decoded line of the upstream stream."""

    fragment: str
    is_final: bool = False


def decode_record(line: str) -> UpstreamRecord | None:
    """Decode a single complete line, or return None when it carries nothing.

    Blank lines and lines that are not JSON objects are skipped rather than
    treated as errors: upstream may emit partial or corrupted lines under load.
    """
    if not line.strip():
        return None
    try:
        obj: Any = json.loads(line)
    except ValueError:
        llm_logger.debug("Skipping malformed upstream line", line=line[:200])
        return None
    if not isinstance(obj, dict):
        llm_logger.debug("Skipping non-object upstream line", line=line[:200])
        return None

    message = obj.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    fragment = content if isinstance(content, str) else ""
    is_final = bool(obj.get("done"))

    if not fragment and not is_final:
        return None
    return UpstreamRecord(fragment=fragment, is_final=is_final)


async def iter_upstream_records(
    chunks: AsyncIterable[bytes],
) -> AsyncIterator[UpstreamRecord]:
    """Yield records from an arbitrarily chunked NDJSON byte stream.

    Bytes left in the buffer when the source is exhausted form an unterminated
    line and are discarded.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = ""

    async for chunk in chunks:
        buffer += decoder.decode(chunk)
        lines = buffer.split("\n")
        buffer = lines.pop()

        for line in lines:
            record = decode_record(line)
            if record is not None:
                yield record

    if buffer.strip():
        llm_logger.debug("Discarding unterminated upstream line", size=len(buffer))

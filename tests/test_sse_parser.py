"""Tests for the client-side event stream parser."""

import pytest
from conftest import byte_chunks, split_every

from chatrelay.client.sse_parser import Frame, parse_event_stream, parse_frame
from chatrelay.domain.events import DeltaEvent, DoneEvent, ErrorEvent


async def collect(chunks) -> list[Frame]:
    return [frame async for frame in parse_event_stream(chunks)]


STREAM = (
    'event: delta\ndata: {"delta": "¿Qué "}\n\n'
    'event: delta\ndata: {"delta": "tal? 👋"}\n\n'
    ": ping - 2024-01-01 00:00:00\n\n"
    'event: done\ndata: {"ok": true}\n\n'
).encode()


@pytest.mark.asyncio
async def test_frame_split_inside_payload():
    frames = await collect(
        byte_chunks('event: delta\ndata: {"del', 'ta":"Hi"}\n\n')
    )

    assert frames == [Frame(event="delta", payload={"delta": "Hi"})]


@pytest.mark.asyncio
@pytest.mark.parametrize("size", [1, 3, 8, 21])
async def test_arbitrary_chunking_matches_single_chunk(size):
    whole = await collect(byte_chunks(STREAM))
    chunked = await collect(byte_chunks(*split_every(STREAM, size)))

    assert chunked == whole
    assert [f.event for f in whole] == ["delta", "delta", "done"]
    assert "".join(f.payload.get("delta", "") for f in whole) == "¿Qué tal? 👋"


@pytest.mark.asyncio
async def test_malformed_payload_becomes_empty_object():
    frames = await collect(
        byte_chunks(
            "event: delta\ndata: {broken\n\n",
            'event: delta\ndata: {"delta": "ok"}\n\n',
        )
    )

    assert frames == [
        Frame(event="delta", payload={}),
        Frame(event="delta", payload={"delta": "ok"}),
    ]
    assert frames[0].decode() == DeltaEvent(delta="")


@pytest.mark.asyncio
async def test_crlf_separated_frames():
    frames = await collect(
        byte_chunks('event: error\r\ndata: {"error": "boom"}\r', "\n\r\n")
    )

    assert frames == [Frame(event="error", payload={"error": "boom"})]


@pytest.mark.asyncio
async def test_incomplete_trailing_frame_is_dropped():
    frames = await collect(
        byte_chunks('event: delta\ndata: {"delta": "a"}\n\nevent: delta\ndata: {')
    )

    assert frames == [Frame(event="delta", payload={"delta": "a"})]


def test_parse_frame_field_order_and_defaults():
    assert parse_frame('data: {"delta": "x"}\nevent: delta') == Frame(
        event="delta", payload={"delta": "x"}
    )
    assert parse_frame("event: done") == Frame(event="done", payload={})
    assert parse_frame('data: {"a": 1}') == Frame(event="", payload={"a": 1})
    assert parse_frame("data: [1, 2]") == Frame(event="", payload={})
    assert parse_frame(": keep-alive") is None


def test_decode_maps_known_events_and_ignores_unknown():
    assert Frame("delta", {"delta": "x"}).decode() == DeltaEvent(delta="x")
    assert Frame("delta", {"delta": 5}).decode() == DeltaEvent(delta="")
    assert Frame("error", {"error": "boom"}).decode() == ErrorEvent(error="boom")
    assert Frame("error", {}).decode() == ErrorEvent(error="")
    assert Frame("done", {"ok": True}).decode() == DoneEvent()
    assert Frame("heartbeat", {}).decode() is None
    assert Frame("", {"delta": "x"}).decode() is None

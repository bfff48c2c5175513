"""Tests for the upstream NDJSON line reader."""

import pytest
from conftest import byte_chunks, ndjson, split_every

from chatrelay.llm.ndjson import UpstreamRecord, decode_record, iter_upstream_records


async def collect(chunks) -> list[UpstreamRecord]:
    return [record async for record in iter_upstream_records(chunks)]


STREAM = ndjson(
    {"message": {"role": "assistant", "content": "Hola "}},
    {"message": {"role": "assistant", "content": "señor 👋"}},
    {"message": {"role": "assistant", "content": ", ¿qué tal?"}},
    {"message": {"role": "assistant", "content": ""}, "done": True},
)


@pytest.mark.asyncio
async def test_two_chunks_split_mid_line():
    """A record split across chunks is emitted once, after its newline arrives."""
    data = (
        '{"message":{"content":"A"}}\n'
        '{"message":{"content":"B"},"done":true}\n'
    )
    records = await collect(byte_chunks(data[:20], data[20:]))

    assert records == [
        UpstreamRecord(fragment="A", is_final=False),
        UpstreamRecord(fragment="B", is_final=True),
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("size", [1, 2, 5, 13])
async def test_arbitrary_chunking_matches_single_chunk(size):
    """Chunk boundaries (including inside multi-byte characters) don't matter."""
    whole = await collect(byte_chunks(STREAM))
    chunked = await collect(byte_chunks(*split_every(STREAM, size)))

    assert chunked == whole
    assert "".join(r.fragment for r in chunked) == "Hola señor 👋, ¿qué tal?"
    assert chunked[-1] == UpstreamRecord(fragment="", is_final=True)


@pytest.mark.asyncio
async def test_malformed_line_between_valid_lines_is_skipped():
    data = b'{"message":{"content":"A"}}\nnot-json\n{"message":{"content":"B"}}\n'

    records = await collect(byte_chunks(data))

    assert [r.fragment for r in records] == ["A", "B"]


@pytest.mark.asyncio
async def test_blank_and_empty_records_are_skipped():
    data = (
        b"\n   \n"
        b'{"message":{"content":""}}\n'
        b'{"model":"llama3.2:3b"}\n'
        b'{"message":{"content":"x"}}\n'
    )

    records = await collect(byte_chunks(data))

    assert records == [UpstreamRecord(fragment="x")]


@pytest.mark.asyncio
async def test_unterminated_final_line_is_discarded():
    data = b'{"message":{"content":"A"}}\n{"message":{"content":"lost"},"done":true}'

    records = await collect(byte_chunks(data))

    assert [r.fragment for r in records] == ["A"]


@pytest.mark.asyncio
async def test_empty_source_yields_nothing():
    assert await collect(byte_chunks()) == []


def test_decode_record_tolerates_odd_shapes():
    assert decode_record("[1, 2]") is None
    assert decode_record('{"message": "text"}') is None
    assert decode_record('{"message": {"content": 42}}') is None
    assert decode_record('{"done": true}') == UpstreamRecord(fragment="", is_final=True)

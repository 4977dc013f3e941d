import os

import pytest

from mcp_random.engine.entropy import EntropySource, SeededEntropySource, SystemEntropySource
from mcp_random.engine.errors import EntropyUnavailableError, InvalidCountError


def test_system_source_draws_requested_length():
    source = SystemEntropySource()
    assert source.name == "system"
    for n in (1, 8, 16, 1000):
        assert len(source.draw_bytes(n)) == n


def test_system_source_never_repeats_blocks():
    source = SystemEntropySource()
    blocks = {source.draw_bytes(16) for _ in range(200)}
    assert len(blocks) == 200


@pytest.mark.parametrize("n", [0, -1])
def test_non_positive_byte_count_rejected(n):
    with pytest.raises(InvalidCountError):
        SystemEntropySource().draw_bytes(n)


def test_system_failure_is_entropy_unavailable(monkeypatch):
    def broken(n):
        raise NotImplementedError("no randomness source")

    monkeypatch.setattr(os, "urandom", broken)
    with pytest.raises(EntropyUnavailableError, match="no randomness source"):
        SystemEntropySource().draw_bytes(4)


def test_short_read_is_entropy_unavailable():
    class Truncating(EntropySource):
        name = "truncating"

        def _read(self, n):
            return b"\x00" * (n - 1)

    with pytest.raises(EntropyUnavailableError, match="3 of 4"):
        Truncating().draw_bytes(4)


def test_seeded_source_is_reproducible():
    a = SeededEntropySource(42)
    b = SeededEntropySource(42)
    assert a.draw_bytes(100) == b.draw_bytes(100)
    assert SeededEntropySource(42).draw_bytes(32) != SeededEntropySource(43).draw_bytes(32)


def test_seeded_source_stream_independent_of_chunking():
    whole = SeededEntropySource("seed").draw_bytes(50)
    chunked = SeededEntropySource("seed")
    assert chunked.draw_bytes(10) + chunked.draw_bytes(40) == whole


def test_seed_types_are_equivalent():
    assert SeededEntropySource(7).draw_bytes(8) == SeededEntropySource("7").draw_bytes(8)
    assert SeededEntropySource(b"7").draw_bytes(8) == SeededEntropySource("7").draw_bytes(8)

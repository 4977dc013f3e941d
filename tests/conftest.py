import pytest

from mcp_random.engine.core import FloatStrategy, RandomnessEngine
from mcp_random.engine.entropy import EntropySource, SeededEntropySource


class ScriptedEntropySource(EntropySource):
    """Hands out a fixed byte script and fails loudly when it runs dry"""

    name = "scripted"

    def __init__(self, *blocks: bytes):
        self._data = bytearray(b"".join(blocks))

    @property
    def remaining(self) -> int:
        return len(self._data)

    def _read(self, n: int) -> bytes:
        if n > len(self._data):
            raise AssertionError(f"script exhausted: wanted {n} bytes, {len(self._data)} left")
        out = bytes(self._data[:n])
        del self._data[:n]
        return out


@pytest.fixture
def scripted():
    """Factory: scripted(*blocks, float_strategy=...) -> (engine, source)"""

    def make(*blocks, float_strategy=FloatStrategy.UNIFORM53):
        source = ScriptedEntropySource(*blocks)
        return RandomnessEngine(source, float_strategy), source

    return make


@pytest.fixture
def seeded_engine():
    return RandomnessEngine(SeededEntropySource("mcp-random-tests"))


@pytest.fixture
def engine():
    return RandomnessEngine()

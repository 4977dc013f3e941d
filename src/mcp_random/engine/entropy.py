"""Entropy sources for the randomness engine

Every source implements ``draw_bytes(n)``. Production wires
``SystemEntropySource`` (the OS CSPRNG); tests inject ``SeededEntropySource``
to get reproducible streams.
"""

import hashlib
import os
from abc import ABC, abstractmethod

from mcp_random.engine.errors import EntropyUnavailableError, InvalidCountError


class EntropySource(ABC):
    """Abstract supplier of random bytes"""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier, e.g. ``'system'``"""

    @abstractmethod
    def _read(self, n: int) -> bytes:
        """Return exactly *n* bytes. Called with n > 0 only."""

    def draw_bytes(self, n: int) -> bytes:
        """Return a fresh block of *n* random bytes.

        Args:
            n: Number of bytes, must be positive

        Returns:
            Exactly *n* bytes

        Raises:
            InvalidCountError: If n is not positive
            EntropyUnavailableError: If the source cannot supply bytes
        """
        if n <= 0:
            raise InvalidCountError("byte count must be positive")
        block = self._read(n)
        if len(block) != n:
            raise EntropyUnavailableError(
                f"{self.name} source returned {len(block)} of {n} requested bytes"
            )
        return block


class SystemEntropySource(EntropySource):
    """``os.urandom()`` wrapper, thread-safe and never downgraded"""

    @property
    def name(self) -> str:
        return "system"

    def _read(self, n: int) -> bytes:
        try:
            return os.urandom(n)
        except (NotImplementedError, OSError) as e:
            raise EntropyUnavailableError(f"secure randomness unavailable: {e}") from e


class SeededEntropySource(EntropySource):
    """Deterministic SHA-256 counter stream for tests.

    The same seed always yields the same byte sequence. Not for production use.
    """

    def __init__(self, seed: int | str | bytes = 0):
        if isinstance(seed, int):
            seed = str(seed)
        if isinstance(seed, str):
            seed = seed.encode("utf-8")
        self._seed = seed
        self._counter = 0
        self._buffer = b""

    @property
    def name(self) -> str:
        return "seeded"

    def _read(self, n: int) -> bytes:
        while len(self._buffer) < n:
            block = hashlib.sha256(self._seed + self._counter.to_bytes(8, "big")).digest()
            self._buffer += block
            self._counter += 1
        out, self._buffer = self._buffer[:n], self._buffer[n:]
        return out

"""Randomness engine: unbiased values of arbitrary shape from an entropy source

All integer-shaped draws (indices, dice faces, charset positions) go through
``uniform_int``, which uses rejection sampling so that no value is favoured by
modulo reduction.
"""

import base64
import logging
import math
import struct
import sys
import uuid
from enum import Enum
from typing import Any, Iterable, Sequence

from mcp_random.engine.alphabet import DEFAULT_CLASSES, build_charset
from mcp_random.engine.entropy import EntropySource, SystemEntropySource
from mcp_random.engine.errors import (
    InvalidBoundError,
    InvalidCountError,
    InvalidShapeError,
    InvalidWeightError,
)

logger = logging.getLogger(__name__)

BYTE_ENCODINGS = ("hex", "base64", "base64url")

_UNIT_BITS = 53
_UNIT_SCALE = 1 << _UNIT_BITS


class FloatStrategy(str, Enum):
    """How a unit float is derived from entropy"""

    # 53-bit integer divided by 2**53; uniform over [0, 1)
    UNIFORM53 = "uniform53"
    # raw double bit pattern / float_info.max; skewed toward 0
    BIT_PATTERN = "bit-pattern"


class RandomnessEngine:
    """Pure randomness algorithms over an injected entropy source.

    The engine keeps no state between calls other than the reference to
    its source, so one instance may be shared by concurrent callers.
    """

    def __init__(
        self,
        source: EntropySource | None = None,
        float_strategy: FloatStrategy = FloatStrategy.UNIFORM53,
    ):
        self.source = source or SystemEntropySource()
        self.float_strategy = FloatStrategy(float_strategy)

    # -- integers -------------------------------------------------------

    def uniform_int(self, min_val: int, max_val: int) -> int:
        """Return an integer in [min_val, max_val], every value equally likely

        Raises:
            InvalidBoundError: If min_val > max_val
        """
        if min_val > max_val:
            raise InvalidBoundError("min must be less than or equal to max")

        span = max_val - min_val + 1
        if span == 1:
            return min_val

        bytes_needed = ((span - 1).bit_length() + 7) // 8
        space = 1 << (8 * bytes_needed)
        threshold = space - (space % span)

        while True:
            value = int.from_bytes(self.source.draw_bytes(bytes_needed), "big")
            if value < threshold:
                return min_val + (value % span)

    # -- floats ---------------------------------------------------------

    def _unit(self) -> float:
        """Return a float in [0, 1] using the configured strategy"""
        if self.float_strategy is FloatStrategy.BIT_PATTERN:
            while True:
                (raw,) = struct.unpack("<d", self.source.draw_bytes(8))
                if math.isfinite(raw):
                    return abs(raw) / sys.float_info.max
        return self.uniform_int(0, _UNIT_SCALE - 1) / _UNIT_SCALE

    def _open_unit(self) -> float:
        """Return a float in the open interval (0, 1)"""
        if self.float_strategy is FloatStrategy.BIT_PATTERN:
            while True:
                u = self._unit()
                if 0.0 < u < 1.0:
                    return u
        return (self.uniform_int(0, _UNIT_SCALE - 1) + 0.5) / _UNIT_SCALE

    def uniform_float(self, min_val: float, max_val: float, precision: int = 10) -> float:
        """Return a float in [min_val, max_val] rounded to *precision* digits

        Raises:
            InvalidBoundError: If min_val > max_val or precision is negative
        """
        if min_val > max_val:
            raise InvalidBoundError("min must be less than or equal to max")
        if precision < 0:
            raise InvalidBoundError("precision must be non-negative")

        u = self._unit()
        # interpolate without forming max_val - min_val, which may overflow
        result = min_val * (1.0 - u) + max_val * u
        # rounding may step past a bound that has fewer digits than precision
        return min(max(round(result, precision), min_val), max_val)

    def normal(self, mean: float = 0.0, stddev: float = 1.0) -> float:
        """Box-Muller normal deviate; the companion value is discarded

        Raises:
            InvalidBoundError: If stddev is negative
        """
        if stddev < 0:
            raise InvalidBoundError("stddev must be non-negative")
        u1 = self._open_unit()
        u2 = self._open_unit()
        z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
        return mean + z0 * stddev

    # -- sequences ------------------------------------------------------

    def choice(self, options: Sequence[Any]) -> Any:
        if not options:
            raise InvalidShapeError("options must be a non-empty array")
        return options[self.uniform_int(0, len(options) - 1)]

    def shuffle(self, items: Sequence[Any]) -> list[Any]:
        """Return a Fisher-Yates shuffled copy of *items*"""
        shuffled = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self.uniform_int(0, i)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

    def sample(self, items: Sequence[Any], count: int) -> list[Any]:
        """Return *count* items drawn without replacement, in shuffle order

        Raises:
            InvalidCountError: If count is negative or exceeds len(items)
        """
        if count > len(items):
            raise InvalidCountError("count cannot be greater than array length")
        if count < 0:
            raise InvalidCountError("count must be non-negative")
        return self.shuffle(items)[:count]

    def weighted_choice(self, options: Sequence[Any], weights: Sequence[float]) -> Any:
        """Pick options[i] with probability weights[i] / sum(weights)

        Raises:
            InvalidShapeError: If lengths differ or options is empty
            InvalidWeightError: If a weight is negative or all are zero
        """
        if len(options) != len(weights):
            raise InvalidShapeError("options and weights must have the same length")
        if not options:
            raise InvalidShapeError("options cannot be empty")
        if any(w < 0 for w in weights):
            raise InvalidWeightError("weights must be non-negative")

        largest = max(weights)
        if largest <= 0:
            raise InvalidWeightError("total weight must be positive")
        # scale into [0, 1] so the running sum stays finite for huge weights
        scaled = [w / largest for w in weights]
        total = math.fsum(scaled)

        r = self._unit() * total
        cumulative = 0.0
        last_positive = None
        for option, weight in zip(options, scaled):
            if weight <= 0:
                continue
            cumulative += weight
            last_positive = option
            if r < cumulative:
                return option

        # r landed on the accumulated rounding error at the top of the range
        return last_positive

    # -- identifiers and strings ----------------------------------------

    def random_bytes(self, count: int, encoding: str = "hex") -> str:
        """Draw *count* bytes and encode them as hex, base64 or base64url

        Unknown encodings fall back to hex.

        Raises:
            InvalidCountError: If count < 1
        """
        if count < 1:
            raise InvalidCountError("count must be at least 1")
        block = self.source.draw_bytes(count)

        if encoding == "base64":
            return base64.b64encode(block).decode("ascii")
        if encoding == "base64url":
            return base64.urlsafe_b64encode(block).decode("ascii").rstrip("=")
        if encoding != "hex":
            logger.warning("Unknown byte encoding %r, falling back to hex", encoding)
        return block.hex()

    def random_uuid(self) -> str:
        """Version-4 UUID in canonical 8-4-4-4-12 form"""
        return str(uuid.UUID(bytes=self.source.draw_bytes(16), version=4))

    def generate_password(
        self,
        length: int = 16,
        classes: Iterable[str] = DEFAULT_CLASSES,
        exclude_similar: bool = False,
    ) -> str:
        """Draw *length* characters uniformly from the selected classes

        Raises:
            InvalidCountError: If length < 1
            EmptyAlphabetError: If no class is selected
        """
        if length < 1:
            raise InvalidCountError("length must be at least 1")
        charset = build_charset(classes, exclude_similar)
        last = len(charset) - 1
        return "".join(charset[self.uniform_int(0, last)] for _ in range(length))

    # -- games ----------------------------------------------------------

    def flip_coin(self, count: int = 1) -> list[str]:
        if count < 1:
            raise InvalidCountError("count must be at least 1")
        return ["heads" if self.uniform_int(0, 1) == 0 else "tails" for _ in range(count)]

    def roll_dice(self, sides: int, count: int = 1) -> list[int]:
        if sides < 2:
            raise InvalidCountError("dice must have at least 2 sides")
        if count < 1:
            raise InvalidCountError("count must be at least 1")
        return [self.uniform_int(1, sides) for _ in range(count)]

"""Bit-packed encoding of values that lie in a known range."""

from __future__ import annotations

import enum
from typing import Any, Callable, Optional, Union

from .adapter_common import ReaderError

__all__ = ["ValueRange", "required_bits"]

_MAX_BITS = 64

Number = Union[int, float, enum.Enum]


def required_bits(minimum: int, maximum: int) -> int:
    """Number of bits needed to store any integer in ``[minimum, maximum]``."""
    span = maximum - minimum
    return span.bit_length() if span > 0 else 0


class _Kind(enum.Enum):
    INTEGER = "integer"
    FLOAT = "float"
    ENUM = "enum"


class ValueRange:
    """Stores a value as its offset from ``minimum`` using only as many
    bits as the range needs.

    Integers and enum members are stored exactly. Floats are quantised:
    give either ``precision`` (the bit count is derived from it) or
    ``bits`` (the bit count itself).
    """

    def __init__(
        self,
        minimum: Number,
        maximum: Number,
        precision: Optional[float] = None,
        *,
        bits: Optional[int] = None,
    ) -> None:
        if isinstance(minimum, enum.Enum):
            if type(maximum) is not type(minimum):
                raise TypeError("enum range limits must be members of the same enum")
            if precision is not None or bits is not None:
                raise TypeError("precision and bits apply only to float ranges")
            self._kind = _Kind.ENUM
            low, high = minimum.value, maximum.value
            if low > high:
                raise ValueError("minimum must not exceed maximum")
            self._bits = required_bits(low, high)
        elif isinstance(minimum, float) or isinstance(maximum, float):
            if (precision is None) == (bits is None):
                raise TypeError("a float range needs exactly one of precision or bits")
            if minimum > maximum:
                raise ValueError("minimum must not exceed maximum")
            self._kind = _Kind.FLOAT
            minimum, maximum = float(minimum), float(maximum)
            if bits is not None:
                if bits < 0:
                    raise ValueError("bits must not be negative")
                self._bits = bits
            else:
                if precision <= 0:
                    raise ValueError("precision must be positive")
                self._bits = int((maximum - minimum) / precision).bit_length()
        else:
            if precision is not None or bits is not None:
                raise TypeError("precision and bits apply only to float ranges")
            if minimum > maximum:
                raise ValueError("minimum must not exceed maximum")
            self._kind = _Kind.INTEGER
            self._bits = required_bits(minimum, maximum)
        if self._bits > _MAX_BITS:
            raise ValueError(f"a range may need at most {_MAX_BITS} bits")
        self._min = minimum
        self._max = maximum

    @property
    def minimum(self) -> Number:
        return self._min

    @property
    def maximum(self) -> Number:
        return self._max

    @property
    def bits_required(self) -> int:
        """Number of bits each value takes."""
        return self._bits

    @property
    def _max_uint(self) -> int:
        return (1 << self._bits) - 1

    def is_valid(self, value: Any) -> bool:
        """True when ``value`` lies within the range."""
        if self._kind is _Kind.ENUM:
            if not isinstance(value, type(self._min)):
                return False
            return self._min.value <= value.value <= self._max.value
        return not (self._min > value or value > self._max)

    def encode(self, value: Number) -> int:
        """Unsigned offset of ``value`` that is written to the stream."""
        if self._kind is _Kind.ENUM:
            return value.value - self._min.value
        if self._kind is _Kind.FLOAT:
            if self._bits == 0:
                return 0
            ratio = (value - self._min) / (self._max - self._min)
            return int(ratio * self._max_uint)
        return value - self._min

    def decode(self, raw: int) -> Number:
        """Value that the stored offset ``raw`` stands for.

        Raises :class:`ValueError` when ``raw`` names no member of an enum.
        """
        if self._kind is _Kind.ENUM:
            return type(self._min)(raw + self._min.value)
        if self._kind is _Kind.FLOAT:
            if self._bits == 0:
                return self._min
            return self._min + (raw / self._max_uint) * (self._max - self._min)
        return raw + self._min

    def serialize(self, ser: Any, value: Number, fnc: Optional[Callable] = None) -> None:
        """Write ``value`` through the bit-packing adapter of ``ser``."""
        if not self.is_valid(value):
            raise ValueError(f"value {value!r} is outside [{self._min!r}, {self._max!r}]")
        ser.adapter.write_bits(self.encode(value), self._bits)

    def deserialize(self, des: Any, value: Any = None, fnc: Optional[Callable] = None) -> Any:
        """Read and return a value through the bit-packing adapter of ``des``.

        An out-of-range value sets :attr:`ReaderError.INVALID_DATA` on the
        reader and yields ``minimum`` when data checks are enabled.
        """
        reader = des.adapter
        raw = reader.read_bits(self._bits)
        try:
            result = self.decode(raw)
            valid = self.is_valid(result)
        except ValueError:
            result = raw + self._min.value
            valid = False
        if not valid and reader.config.check_data_errors:
            reader.set_error(ReaderError.INVALID_DATA)
            return self._min
        return result

    def __repr__(self) -> str:
        return f"ValueRange({self._min!r}, {self._max!r}, bits={self._bits})"
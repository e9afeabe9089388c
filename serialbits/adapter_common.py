"""Shared pieces of input and output adapters: errors, configuration,
size prefixes, byte swapping and the endianness-aware adapter bases."""

from __future__ import annotations

import abc
import enum
import sys
from dataclasses import dataclass
from typing import Iterable, List, Optional

__all__ = [
    "ReaderError",
    "Endianness",
    "Config",
    "OutputAdapterBase",
    "InputAdapterBase",
    "system_endianness",
    "swap",
    "size_field_width",
    "write_size",
    "read_size",
]

_VALID_SIZES = (1, 2, 4, 8)
_SIZE_T_MAX = (1 << 64) - 1


class ReaderError(enum.Enum):
    """Error state of an input adapter; only the first error is kept."""

    NO_ERROR = 0
    READING_ERROR = 1
    DATA_OVERFLOW = 2
    INVALID_DATA = 3
    INVALID_POINTER = 4


class Endianness(enum.Enum):
    """Byte order of serialized data."""

    LITTLE = "little"
    BIG = "big"


@dataclass(frozen=True)
class Config:
    """Adapter configuration.

    ``check_adapter_errors`` enables overflow checks in adapters,
    ``check_data_errors`` enables validation of decoded data.
    """

    endianness: Endianness = Endianness.LITTLE
    check_adapter_errors: bool = True
    check_data_errors: bool = True


DEFAULT_CONFIG = Config()


def system_endianness() -> Endianness:
    """Return the byte order of the running machine."""
    return Endianness.LITTLE if sys.byteorder == "little" else Endianness.BIG


def _check_size(size: int) -> None:
    if size not in _VALID_SIZES:
        raise ValueError(f"value size must be one of {_VALID_SIZES}, got {size}")


def swap(value: int, size: int) -> int:
    """Reverse the byte order of an unsigned ``size``-byte integer."""
    _check_size(size)
    mask = (1 << (8 * size)) - 1
    return int.from_bytes((value & mask).to_bytes(size, "little"), "big")


def size_field_width(max_size: int) -> int:
    """Number of bytes used to store a length whose upper bound is ``max_size``."""
    if max_size < 0:
        raise ValueError("max_size must not be negative")
    if max_size <= 0xFF:
        return 1
    if max_size <= 0xFFFF:
        return 2
    if max_size <= 0xFFFFFFFF:
        return 4
    if max_size <= _SIZE_T_MAX:
        return 8
    raise ValueError("max_size does not fit in 64 bits")


def write_size(writer: "OutputAdapterBase", size: int, max_size: int = _SIZE_T_MAX) -> None:
    """Write a container length using the field width that ``max_size`` selects."""
    if size < 0:
        raise ValueError("size must not be negative")
    if size > max_size:
        raise ValueError(f"size {size} exceeds maximum {max_size}")
    writer.write_bytes(size_field_width(max_size), size)


def read_size(reader: "InputAdapterBase", max_size: int, check_max_size: bool = True) -> int:
    """Read a container length written by :func:`write_size`.

    When ``check_max_size`` is set and the length exceeds ``max_size``,
    the reader gets :attr:`ReaderError.INVALID_DATA` and 0 is returned.
    """
    size = reader.read_bytes(size_field_width(max_size))
    if check_max_size and size > max_size:
        reader.set_error(ReaderError.INVALID_DATA)
        return 0
    return size


def _to_bytes(value: int, size: int, byteorder: str) -> bytes:
    _check_size(size)
    bits = 8 * size
    if not -(1 << (bits - 1)) <= value < (1 << bits):
        raise ValueError(f"value {value} does not fit in {size} bytes")
    return (value & ((1 << bits) - 1)).to_bytes(size, byteorder)


class OutputAdapterBase(abc.ABC):
    """Base of output adapters; encodes integers in the configured byte order.

    Subclasses implement ``_write_value`` (a single encoded value) and
    ``_write_buffer`` (a run of encoded bytes).
    """

    bit_packing_enabled = False
    # Byte adapters never hold a partially written byte.
    _bit_position = 0

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config if config is not None else DEFAULT_CONFIG

    @property
    def _should_swap(self) -> bool:
        return self.config.endianness != system_endianness()

    def write_bytes(self, size: int, value: int) -> None:
        """Write ``value`` as an integer of ``size`` bytes."""
        self._write_value(_to_bytes(value, size, self.config.endianness.value))

    def write_buffer(self, size: int, values: Iterable[int]) -> None:
        """Write every value of ``values`` as an integer of ``size`` bytes."""
        order = self.config.endianness.value
        encoded = [_to_bytes(v, size, order) for v in values]
        if self._should_swap:
            for item in encoded:
                self._write_value(item)
        else:
            self._write_buffer(b"".join(encoded))

    def align(self) -> int:
        """Pad to a byte boundary and return the number of padding bits.

        Byte adapters are always on a byte boundary, so this is 0.
        """
        return -self._bit_position % 8

    @abc.abstractmethod
    def _write_value(self, data: bytes) -> None:
        """Write one encoded value."""

    @abc.abstractmethod
    def _write_buffer(self, data: bytes) -> None:
        """Write a run of encoded bytes."""


class InputAdapterBase(abc.ABC):
    """Base of input adapters; decodes integers in the configured byte order.

    Subclasses implement ``_read_value`` and ``_read_buffer``, each
    returning exactly the requested number of bytes, and ``set_error``.
    """

    bit_packing_enabled = False
    # Byte adapters never hold a partially read byte.
    _bit_position = 0

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config if config is not None else DEFAULT_CONFIG

    def read_bytes(self, size: int, signed: bool = False) -> int:
        """Read one integer of ``size`` bytes."""
        _check_size(size)
        data = self._read_value(size)
        return int.from_bytes(data, self.config.endianness.value, signed=signed)

    def read_buffer(self, size: int, count: int, signed: bool = False) -> List[int]:
        """Read ``count`` integers of ``size`` bytes each."""
        _check_size(size)
        if count < 0:
            raise ValueError("count must not be negative")
        data = self._read_buffer(size * count)
        order = self.config.endianness.value
        return [
            int.from_bytes(data[pos:pos + size], order, signed=signed)
            for pos in range(0, size * count, size)
        ]

    def align(self) -> int:
        """Skip to a byte boundary and return the number of bits skipped.

        Byte adapters are always on a byte boundary, so this is 0.
        """
        return -self._bit_position % 8

    @abc.abstractmethod
    def set_error(self, error: ReaderError) -> None:
        """Record an error; only the first one is kept."""

    @abc.abstractmethod
    def _read_value(self, nbytes: int) -> bytes:
        """Read the bytes of one value."""

    @abc.abstractmethod
    def _read_buffer(self, nbytes: int) -> bytes:
        """Read a run of bytes."""
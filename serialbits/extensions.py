"""Extensions that change how a value is written: growable sections,
optional values, stacks and run-time type identification."""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence

from .adapter_common import ReaderError, read_size, write_size

__all__ = ["Growable", "StdOptional", "StdStack", "StandardRTTI"]

_PLAIN_VALUE_TYPES = frozenset(
    {bool, int, float, complex, str, bytes, bytearray, type(None)}
)


def _write_bool(ser: Any, flag: bool) -> None:
    adapter = ser.adapter
    if adapter.bit_packing_enabled:
        adapter.write_bits(int(flag), 1)
    else:
        adapter.write_bytes(1, int(flag))


def _read_bool(des: Any) -> bool:
    adapter = des.adapter
    if adapter.bit_packing_enabled:
        return bool(adapter.read_bits(1))
    raw = adapter.read_bytes(1)
    if raw > 1 and adapter.config.check_data_errors:
        adapter.set_error(ReaderError.INVALID_DATA)
        return False
    return bool(raw)


class Growable:
    """Prefixes a section with its 4-byte length, so that readers of an
    older layout skip data appended later, and readers of a newer layout
    get zeros for fields that an older writer did not write.

    The adapter must support ``current_write_pos`` when writing and
    ``current_read_pos`` and ``current_read_end_pos`` when reading.
    """

    def serialize(self, ser: Any, obj: Any, fnc: Callable[[Any, Any], None]) -> None:
        writer = ser.adapter
        start = writer.current_write_pos
        writer.write_bytes(4, 0)
        fnc(ser, obj)
        end = writer.current_write_pos
        writer.current_write_pos = start
        writer.write_bytes(4, end - start)
        writer.current_write_pos = end

    def deserialize(self, des: Any, obj: Any, fnc: Callable[[Any, Any], Any]) -> Any:
        """Read the section with ``fnc`` and return what it returns."""
        reader = des.adapter
        outer_end = reader.current_read_end_pos
        start = reader.current_read_pos
        size = reader.read_bytes(4)
        reader.current_read_end_pos = start + size
        result = fnc(des, obj)
        reader.current_read_pos = start + size
        reader.current_read_end_pos = outer_end
        return result


class StdOptional:
    """Writes a presence flag followed by the value when there is one.

    ``None`` means no value. With ``align_before_data`` the adapter is
    aligned after the flag, which matters only when bit packing is on.
    """

    def __init__(self, align_before_data: bool = True) -> None:
        self.align_before_data = align_before_data

    def serialize(self, ser: Any, obj: Optional[Any], fnc: Callable[[Any, Any], None]) -> None:
        _write_bool(ser, obj is not None)
        if self.align_before_data:
            ser.adapter.align()
        if obj is not None:
            fnc(ser, obj)

    def deserialize(self, des: Any, obj: Optional[Any], fnc: Callable[[Any, Any], Any]) -> Optional[Any]:
        """Return the value read by ``fnc``, or ``None`` when absent.

        ``fnc`` receives the current value ``obj`` (possibly ``None``) to
        update or replace.
        """
        exists = _read_bool(des)
        if self.align_before_data:
            des.adapter.align()
        if not exists:
            return None
        return fnc(des, obj)


class StdStack:
    """Writes a stack (a sequence whose last item is the top) as a
    length-prefixed container of at most ``max_size`` items."""

    def __init__(self, max_size: int) -> None:
        self.max_size = max_size

    def serialize(self, ser: Any, obj: Sequence[Any], fnc: Callable[[Any, Any], None]) -> None:
        items = list(obj)
        write_size(ser.adapter, len(items), self.max_size)
        for item in items:
            fnc(ser, item)

    def deserialize(self, des: Any, obj: Sequence[Any], fnc: Callable[[Any, Any], Any]) -> List[Any]:
        """Return the stack as a list; ``fnc`` gets each existing item, or
        ``None`` past the end of ``obj``, to update or replace."""
        reader = des.adapter
        size = read_size(reader, self.max_size, reader.config.check_data_errors)
        existing = iter(obj if obj is not None else ())
        return [fnc(des, next(existing, None)) for _ in range(size)]


class StandardRTTI:
    """Run-time type identification based on Python's own type objects."""

    @staticmethod
    def get(obj: Any) -> int:
        """Identifier of the dynamic type of ``obj``."""
        return hash(type(obj))

    @staticmethod
    def get_type(cls: type) -> int:
        """Identifier of the class ``cls``; equals :meth:`get` of its instances."""
        return hash(cls)

    @staticmethod
    def cast(obj: Any, cls: type) -> Optional[Any]:
        """Return ``obj`` if it is an instance of ``cls``, otherwise ``None``."""
        return obj if isinstance(obj, cls) else None

    @staticmethod
    def is_polymorphic(cls: type) -> bool:
        """True for classes whose instances may be of a derived type; plain
        built-in value types such as ``int`` or ``str`` are not."""
        return isinstance(cls, type) and cls not in _PLAIN_VALUE_TYPES
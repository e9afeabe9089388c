"""Adapters that read from and write to binary streams."""

from __future__ import annotations

from typing import BinaryIO, Optional

from .adapter_common import Config, InputAdapterBase, OutputAdapterBase, ReaderError

__all__ = [
    "InputStreamAdapter",
    "OutputStreamAdapter",
    "BufferedOutputStreamAdapter",
    "IOStreamAdapter",
]

_MIN_BUFFER_SIZE = 16


class InputStreamAdapter(InputAdapterBase):
    """Reads serialized data from a binary stream.

    With adapter error checks enabled, a short read sets
    :attr:`ReaderError.DATA_OVERFLOW` (or :attr:`ReaderError.READING_ERROR`
    when the stream itself fails), and every read after an error returns
    zeros.
    """

    def __init__(self, stream: BinaryIO, config: Optional[Config] = None) -> None:
        InputAdapterBase.__init__(self, config)
        self._stream = stream
        self._error = ReaderError.NO_ERROR

    @property
    def error(self) -> ReaderError:
        """The first error recorded, or :attr:`ReaderError.NO_ERROR`."""
        return self._error

    def set_error(self, error: ReaderError) -> None:
        """Record ``error`` unless an error is already recorded."""
        if self._error is ReaderError.NO_ERROR:
            self._error = error

    def is_completed_successfully(self) -> bool:
        """True when there were no errors and the stream is exhausted."""
        return self._error is ReaderError.NO_ERROR and self._at_end()

    def _at_end(self) -> bool:
        peek = getattr(self._stream, "peek", None)
        if peek is not None:
            return not peek(1)
        pos = self._stream.tell()
        data = self._stream.read(1)
        self._stream.seek(pos)
        return not data

    def _raw_read(self, nbytes: int) -> bytes:
        chunks = []
        remaining = nbytes
        while remaining > 0:
            chunk = self._stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def _read_checked(self, nbytes: int) -> bytes:
        if not self.config.check_adapter_errors:
            return self._raw_read(nbytes).ljust(nbytes, b"\0")
        try:
            data = self._raw_read(nbytes)
        except OSError:
            self.set_error(ReaderError.READING_ERROR)
            return bytes(nbytes)
        if self._error is not ReaderError.NO_ERROR:
            return bytes(nbytes)
        if len(data) < nbytes:
            self.set_error(ReaderError.DATA_OVERFLOW)
            return bytes(nbytes)
        return data

    def _read_value(self, nbytes: int) -> bytes:
        return self._read_checked(nbytes)

    def _read_buffer(self, nbytes: int) -> bytes:
        return self._read_checked(nbytes)


class OutputStreamAdapter(OutputAdapterBase):
    """Writes serialized data straight to a binary stream."""

    def __init__(self, stream: BinaryIO, config: Optional[Config] = None) -> None:
        OutputAdapterBase.__init__(self, config)
        self._stream = stream

    def flush(self) -> None:
        """Flush the underlying stream."""
        self._stream.flush()

    def _emit(self, data: bytes) -> None:
        self._stream.write(data)

    def _write_value(self, data: bytes) -> None:
        self._emit(data)

    def _write_buffer(self, data: bytes) -> None:
        self._emit(data)


class BufferedOutputStreamAdapter(OutputAdapterBase):
    """Collects written data in an internal buffer and writes it to the
    stream when the buffer is full or on :meth:`flush`.

    Runs of bytes that do not fit in the remaining space are written to
    the stream directly after the pending buffer.
    """

    def __init__(
        self,
        stream: BinaryIO,
        buffer_size: int = 256,
        config: Optional[Config] = None,
    ) -> None:
        if buffer_size < _MIN_BUFFER_SIZE:
            raise ValueError(f"buffer_size must be at least {_MIN_BUFFER_SIZE}")
        OutputAdapterBase.__init__(self, config)
        self._stream = stream
        self._buffer_size = buffer_size
        self._buffer = bytearray()

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    def flush(self) -> None:
        """Write pending data and flush the underlying stream."""
        self._drain()
        self._stream.flush()

    def __enter__(self) -> "BufferedOutputStreamAdapter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.flush()

    def _drain(self) -> None:
        if self._buffer:
            self._stream.write(bytes(self._buffer))
            self._buffer.clear()

    def _write_value(self, data: bytes) -> None:
        if len(self._buffer) + len(data) > self._buffer_size:
            self._drain()
        self._buffer += data

    def _write_buffer(self, data: bytes) -> None:
        if len(self._buffer) + len(data) <= self._buffer_size:
            self._buffer += data
        else:
            self._drain()
            self._stream.write(data)


class IOStreamAdapter(InputStreamAdapter, OutputStreamAdapter):
    """Reads and writes the same seekable stream, keeping separate read
    and write positions."""

    def __init__(self, stream: BinaryIO, config: Optional[Config] = None) -> None:
        InputStreamAdapter.__init__(self, stream, config)
        OutputStreamAdapter.__init__(self, stream, config)
        start = stream.tell()
        self._read_pos = start
        self._write_pos = start

    def _at_end(self) -> bool:
        self._stream.seek(self._read_pos)
        return super()._at_end()

    def _raw_read(self, nbytes: int) -> bytes:
        self._stream.seek(self._read_pos)
        data = super()._raw_read(nbytes)
        self._read_pos = self._stream.tell()
        return data

    def _emit(self, data: bytes) -> None:
        self._stream.seek(self._write_pos)
        super()._emit(data)
        self._write_pos = self._stream.tell()
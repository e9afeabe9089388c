import io

import pytest

from serialbits.adapter_common import Config, Endianness, ReaderError
from serialbits.stream import (
    BufferedOutputStreamAdapter,
    InputStreamAdapter,
    IOStreamAdapter,
    OutputStreamAdapter,
)


class _FailingStream(io.RawIOBase):
    def readable(self):
        return True

    def read(self, size=-1):
        raise OSError("device failure")


def _written(values):
    stream = io.BytesIO()
    writer = OutputStreamAdapter(stream)
    for size, value in values:
        writer.write_bytes(size, value)
    writer.flush()
    return stream.getvalue()


def test_setting_multiple_errors_always_returns_first_error():
    r = InputStreamAdapter(io.BytesIO(bytes(4)))
    assert r.error is ReaderError.NO_ERROR
    r.set_error(ReaderError.INVALID_POINTER)
    assert r.error is ReaderError.INVALID_POINTER
    r.set_error(ReaderError.DATA_OVERFLOW)
    assert r.error is ReaderError.INVALID_POINTER
    r.set_error(ReaderError.NO_ERROR)
    assert r.error is ReaderError.INVALID_POINTER


def test_reads_values_in_order():
    r = InputStreamAdapter(io.BytesIO(bytes([1, 2, 3])))
    assert [r.read_bytes(1) for _ in range(3)] == [1, 2, 3]
    assert r.is_completed_successfully()


def test_when_all_bytes_are_read_without_errors_then_is_completed_successfully():
    data = _written([(4, 94545646), (2, -8778), (1, 200)])
    r = InputStreamAdapter(io.BytesIO(data))
    assert r.read_bytes(4) == 94545646
    assert r.error is ReaderError.NO_ERROR
    assert r.read_bytes(2, signed=True) == -8778
    assert r.error is ReaderError.NO_ERROR
    assert r.is_completed_successfully() is False
    assert r.read_bytes(1) == 200
    assert r.error is ReaderError.NO_ERROR
    assert r.is_completed_successfully() is True


def test_when_reading_more_than_available_then_data_overflow():
    r = InputStreamAdapter(io.BytesIO(_written([(1, 111)])))
    assert r.is_completed_successfully() is False
    assert r.error is ReaderError.NO_ERROR
    assert r.read_bytes(1) == 111
    assert r.is_completed_successfully() is True
    assert r.error is ReaderError.NO_ERROR
    r.read_bytes(1)
    assert r.read_bytes(1) == 0
    assert r.is_completed_successfully() is False
    assert r.error is ReaderError.DATA_OVERFLOW


def test_when_reader_has_errors_then_all_reads_return_zero():
    r = InputStreamAdapter(io.BytesIO(_written([(1, 111), (1, 111)])))
    assert r.read_bytes(1) == 111
    r.set_error(ReaderError.INVALID_POINTER)
    assert r.read_bytes(1) == 0


def test_stream_failure_sets_reading_error():
    r = InputStreamAdapter(_FailingStream())
    assert r.read_bytes(4) == 0
    assert r.error is ReaderError.READING_ERROR


def test_read_buffer_past_end_returns_zeros_and_overflows():
    r = InputStreamAdapter(io.BytesIO(bytes([1, 2, 3])))
    assert r.read_buffer(2, 2) == [0, 0]
    assert r.error is ReaderError.DATA_OVERFLOW


def test_when_adapter_errors_disabled_then_reading_past_end_sets_no_error():
    data = _written([(4, 0x12345678)])
    config = Config(check_adapter_errors=False)
    r = InputStreamAdapter(io.BytesIO(data), config)
    assert r.read_bytes(4) == 0x12345678
    r.read_bytes(4)
    assert r.error is ReaderError.NO_ERROR
    assert r.is_completed_successfully() is True


def test_big_endian_config_round_trip():
    config = Config(endianness=Endianness.BIG)
    stream = io.BytesIO()
    OutputStreamAdapter(stream, config).write_bytes(2, 0x1234)
    assert stream.getvalue() == b"\x12\x34"
    r = InputStreamAdapter(io.BytesIO(stream.getvalue()), config)
    assert r.read_bytes(2) == 0x1234


@pytest.mark.parametrize(
    "make_writer",
    [
        OutputStreamAdapter,
        BufferedOutputStreamAdapter,
    ],
)
def test_output_adapters_write_readable_data(make_writer):
    stream = io.BytesIO()
    w = make_writer(stream)
    for value in (1, 2, 3):
        w.write_bytes(1, value)
    w.flush()
    r = InputStreamAdapter(io.BytesIO(stream.getvalue()))
    assert [r.read_bytes(1) for _ in range(3)] == [1, 2, 3]


def test_output_stream_write_buffer():
    stream = io.BytesIO()
    w = OutputStreamAdapter(stream)
    w.write_buffer(2, [1, 0x0203])
    assert stream.getvalue() == b"\x01\x00\x03\x02"


def test_buffered_when_internal_buffer_is_full_then_write_to_stream():
    stream = io.BytesIO()
    w = BufferedOutputStreamAdapter(stream, 128)
    for _ in range(128):
        w.write_bytes(1, 0)
    assert stream.getvalue() == b""
    w.write_bytes(1, 0)
    assert len(stream.getvalue()) == 128


def test_buffered_when_flush_then_write_immediately():
    stream = io.BytesIO()
    w = BufferedOutputStreamAdapter(stream, 128)
    w.write_bytes(1, 0)
    assert len(stream.getvalue()) == 0
    w.flush()
    assert len(stream.getvalue()) == 1
    w.flush()
    assert len(stream.getvalue()) == 1


def test_buffered_smaller_buffer_writes_sooner():
    stream = io.BytesIO()
    w = BufferedOutputStreamAdapter(stream, 64)
    for _ in range(128):
        w.write_bytes(1, 0)
    assert len(stream.getvalue()) == 64


def test_buffered_large_buffer_write_goes_directly_after_pending():
    stream = io.BytesIO()
    w = BufferedOutputStreamAdapter(stream, 16)
    w.write_bytes(1, 9)
    w.write_buffer(1, range(20))
    assert stream.getvalue() == bytes([9]) + bytes(range(20))


def test_buffered_context_manager_flushes():
    stream = io.BytesIO()
    with BufferedOutputStreamAdapter(stream) as w:
        w.write_bytes(4, 7)
    assert stream.getvalue() == b"\x07\x00\x00\x00"


def test_buffered_rejects_too_small_buffer():
    with pytest.raises(ValueError):
        BufferedOutputStreamAdapter(io.BytesIO(), 15)


def test_iostream_reads_what_it_wrote():
    stream = io.BytesIO()
    adapter = IOStreamAdapter(stream)
    adapter.write_bytes(2, 7549)
    adapter.write_bytes(1, 5)
    adapter.flush()
    assert adapter.read_bytes(2) == 7549
    assert adapter.is_completed_successfully() is False
    assert adapter.read_bytes(1) == 5
    assert adapter.is_completed_successfully() is True
    adapter.write_bytes(1, 42)
    assert adapter.read_bytes(1) == 42
    assert adapter.error is ReaderError.NO_ERROR
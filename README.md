# serialbits

Building blocks for compact binary serialization. The package provides:

- byte-order aware adapters over binary streams
- length prefixes whose width follows from a declared maximum
- bit-packed encoding of values in a known range
- a few extensions for optional values, stacks and growable sections

## Modules

### `serialbits.adapter_common`

- `ReaderError` lists the error states of a reader:
  - `NO_ERROR`
  - `READING_ERROR`
  - `DATA_OVERFLOW`
  - `INVALID_DATA`
  - `INVALID_POINTER`
- `Endianness` has the members `LITTLE` and `BIG`.
- `Config` is a frozen dataclass with three fields:
  - `endianness`, default little endian
  - `check_adapter_errors`, default `True`
  - `check_data_errors`, default `True`
- `DEFAULT_CONFIG` is a `Config` with the default values.
- `system_endianness()` returns the byte order of the running machine.
- `swap(value, size)` reverses the byte order of an unsigned integer of `size` bytes. `size` is 1, 2, 4 or 8.
- `size_field_width(max_size)` returns the width of a length field:
  - 1 byte up to 255
  - 2 bytes up to 65535
  - 4 bytes up to 2³²−1
  - 8 bytes above that, up to 2⁶⁴−1
- `write_size(writer, size, max_size)` writes a length in that width. It raises `ValueError` if `size` exceeds `max_size`.
- `read_size(reader, max_size, check_max_size)` reads a length back. When the check is on and the length is too large, it sets `ReaderError.INVALID_DATA` on the reader and returns 0.
- `OutputAdapterBase` and `InputAdapterBase` are abstract bases. They encode and decode integers in the configured byte order.
  - The output base has `write_bytes(size, value)`, `write_buffer(size, values)` and `align()`.
  - The input base has `read_bytes(size, signed)`, `read_buffer(size, count, signed)` and `align()`.

### `serialbits.stream`

These adapters work over binary file-like objects.

- `InputStreamAdapter(stream, config=None)` reads from a stream.
  - When adapter errors are checked, a short read records `DATA_OVERFLOW`, and an `OSError` from the stream records `READING_ERROR`.
  - Only the first error is kept, in `error`. Every read after an error returns zeros.
  - `set_error(error)` records an error unless one is already recorded.
  - `is_completed_successfully()` is true when there was no error and the stream is exhausted.
  - When adapter errors are not checked, a short read is padded with zero bytes and no error is recorded.
- `OutputStreamAdapter(stream, config=None)` writes straight to the stream. `flush()` flushes the stream.
- `BufferedOutputStreamAdapter(stream, buffer_size=256, config=None)` collects writes in an internal buffer.
  - `buffer_size` must be at least 16.
  - The buffer is written to the stream when the next value would not fit, and on `flush()`.
  - A run of bytes that does not fit is written straight to the stream, after the pending buffer.
  - Used as a context manager, it flushes on exit.
- `IOStreamAdapter(stream, config=None)` reads and writes one seekable stream. It keeps separate read and write positions, both starting at the stream's current position.

### `serialbits.value_range`

- `required_bits(minimum, maximum)` gives the number of bits needed for any integer in the range.
- `ValueRange(minimum, maximum, precision=None, *, bits=None)` stores a value as its offset from `minimum`, using `bits_required` bits.
  - Integers and members of one enum are stored exactly.
  - Floats are quantised, and need exactly one of `precision` or `bits`.
  - `encode(value)` and `decode(raw)` convert between a value and its stored offset.
  - `is_valid(value)` checks that a value lies in the range.
  - `serialize(ser, value, fnc)` writes through `ser.adapter.write_bits`. It raises `ValueError` for an out-of-range value.
  - `deserialize(des, value, fnc)` reads through `des.adapter.read_bits` and returns the value. When data checks are on, an out-of-range result sets `INVALID_DATA` and yields `minimum`.

### `serialbits.extensions`

- `Growable` prefixes a section with its 4-byte length.
  - Readers of an older layout skip data that was appended later.
  - Readers of a newer layout read zeros past the end of the section.
  - It needs an adapter with `current_write_pos`, or with `current_read_pos` and `current_read_end_pos`.
  - `deserialize` returns what the section function returns.
- `StdOptional(align_before_data=True)` writes a presence flag and then the value. `None` means absent. `deserialize` returns the value or `None`.
- `StdStack(max_size)` writes a sequence, last item on top, as a length-prefixed container. `deserialize` returns a list.
- `StandardRTTI` identifies types at run time. It has the static methods `get(obj)`, `get_type(cls)`, `cast(obj, cls)` and `is_polymorphic(cls)`.

## Example

```python
import io

from serialbits.adapter_common import ReaderError
from serialbits.stream import InputStreamAdapter, OutputStreamAdapter

stream = io.BytesIO()
writer = OutputStreamAdapter(stream)
writer.write_bytes(4, 0x12345678)
writer.write_bytes(2, -8778)
writer.flush()

stream.seek(0)
reader = InputStreamAdapter(stream)
assert reader.read_bytes(4) == 0x12345678
assert reader.read_bytes(2, signed=True) == -8778
assert reader.error is ReaderError.NO_ERROR
assert reader.is_completed_successfully()
```

## What it does not do

The package has no serializer or deserializer objects, and no in-memory buffer adapter. It also has no bit-packing adapter.

`ValueRange`, `Growable`, `StdOptional` and `StdStack` take an object whose `adapter` attribute provides what they use. That object comes from you:

- `ValueRange` uses `write_bits` and `read_bits`.
- `Growable` uses settable read and write positions, which the stream adapters do not have.
- `StdOptional` and `StdStack` work with the byte adapters in this package when they are reached through such an object.

## Running the tests

```
pip install -e .[test]
pytest
```
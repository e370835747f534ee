# lsmkit

Storage primitives for a log-structured merge-tree key-value engine.
Values live in an append-only value log, and a table records only offsets into
that log. The package has no dependencies outside the standard library. All
operations are synchronous.

## Modules

### `lsmkit.vlog`

- `ValueLogEntry` is a dataclass with the fields `ksize`, `vsize`, `key`,
  `value`, `created_at` and `is_tombstone`. A `str` key or value is encoded to
  bytes. `serialize()` returns the on-disk form of the entry. That form is the
  key length and the value length (u32 each), the creation time in
  milliseconds since the Unix epoch (i64), a tombstone byte, then the key bytes
  and the value bytes. All integers are little-endian.
- `ValueLog(directory)` creates the directory if it is missing and opens or
  creates `val_log.bin` inside it. `size` starts at the current length of that
  file. `head_offset` and `tail_offset` start at 0.
  - `append(key, value, created_at, is_tombstone)` writes an entry and returns
    the offset at which the entry starts.
  - `get(offset)` returns `(value, is_tombstone)`. It returns `None` when no
    complete entry starts at that offset.
  - `recover(offset)` returns every complete entry from `offset` to the end of
    the log.
  - `read_chunk_to_garbage_collect(n)` reads entries from `tail_offset` until
    they cover at least `n` bytes. It returns the entries and the number of
    bytes they occupy.
  - `sync_to_disk()` fsyncs the log file.
  - `clear_all()` deletes the log file and resets `size`, `head_offset` and
    `tail_offset` to 0.
  - `set_head(offset)` sets `head_offset`, and `set_tail(offset)` sets
    `tail_offset`.

### `lsmkit.summary`

`Summary(directory)` holds the smallest and biggest key of a table. It stores
them in `summary.db` inside the table's directory.

- `write_to_file()` writes the file.
- `recover()` reads the file back. It raises `FileNotFoundError` if the file is
  missing and `ValueError` if the file is truncated.
- `serialize()` returns the on-disk form: the two key lengths (u32 each,
  little-endian), then the smallest key and the biggest key.

### `lsmkit.util`

- `milliseconds_to_datetime(ms)` returns an aware UTC `datetime`.
- `default_datetime()` returns the Unix epoch in UTC.
- `float_to_le_bytes(x)` and `float_from_le_bytes(data)` convert between a
  float and 8 little-endian IEEE 754 bytes. `float_from_le_bytes` returns
  `None` when `data` is not 8 bytes long.
- `generate_random_id(length)` returns a random alphanumeric string of the
  given length.

## Installation

```
pip install .
```

## Example

```python
from datetime import datetime, timezone
from lsmkit.vlog import ValueLog

vlog = ValueLog("data/vlog")
offset = vlog.append(b"key1", b"val1", datetime.now(timezone.utc), False)
value, is_tombstone = vlog.get(offset)
assert value == b"val1" and not is_tombstone

vlog.sync_to_disk()
entries = vlog.recover(0)                       # every entry from offset 0
chunk, read = vlog.read_chunk_to_garbage_collect(64)
```

```python
from lsmkit.summary import Summary

summary = Summary("data/sstable_1")
summary.smallest_key = b"apple"
summary.biggest_key = b"pear"
summary.write_to_file()

restored = Summary("data/sstable_1")
restored.recover()
assert restored.biggest_key == b"pear"
```

## What this package does not do

This package is a set of parts, not a complete database. It has no store that
offers put, get or delete. It also has none of the following:

- a memtable
- table data or index files
- bloom filters
- compaction
- garbage collection beyond reading a chunk from the value log
- a command-line tool or a server

## Running the tests

```
pip install .[test]
pytest
```
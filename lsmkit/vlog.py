"""Append-only value log that persists key/value entries on disk.

Each entry is laid out as: key length (u32), value length (u32),
creation time in milliseconds (i64), tombstone flag (u8), key bytes,
value bytes. All integers are little-endian.
"""

from __future__ import annotations

import logging
import os
import struct
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import BinaryIO, Iterator, Union

logger = logging.getLogger(__name__)

VLOG_FILE_NAME = "val_log.bin"

Key = bytes
Value = bytes
ValOffset = int
BytesLike = Union[bytes, bytearray, memoryview, str]

_HEADER = struct.Struct("<IIqB")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)


def _as_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode()
    return bytes(data)


def _to_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // _MILLISECOND


@dataclass
class ValueLogEntry:
    """A single record of the value log."""

    ksize: int
    vsize: int
    key: bytes
    value: bytes
    created_at: datetime
    is_tombstone: bool

    def __post_init__(self) -> None:
        self.key = _as_bytes(self.key)
        self.value = _as_bytes(self.value)

    def serialize(self) -> bytes:
        """Encode the entry in its on-disk form."""
        header = _HEADER.pack(
            len(self.key),
            len(self.value),
            _to_millis(self.created_at),
            int(self.is_tombstone),
        )
        return header + self.key + self.value


def _read_entry(handle: BinaryIO) -> tuple[ValueLogEntry, int] | None:
    """Read one entry at the handle's position; None at the end of the log."""
    header = handle.read(_HEADER.size)
    if len(header) < _HEADER.size:
        return None
    ksize, vsize, millis, tombstone = _HEADER.unpack(header)
    body = handle.read(ksize + vsize)
    if len(body) < ksize + vsize:
        return None
    entry = ValueLogEntry(
        ksize=ksize,
        vsize=vsize,
        key=body[:ksize],
        value=body[ksize:],
        created_at=_EPOCH + timedelta(milliseconds=millis),
        is_tombstone=bool(tombstone),
    )
    return entry, _HEADER.size + ksize + vsize


class ValueLog:
    """Append-only log holding the values; tables store only their offsets."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self.path = self.directory / VLOG_FILE_NAME
        self.path.touch(exist_ok=True)
        # Offset reads start from during crash recovery.
        self.head_offset = 0
        # Start of live data; moved forward by garbage collection.
        self.tail_offset = 0
        self.size = self.path.stat().st_size

    def append(
        self,
        key: BytesLike,
        value: BytesLike,
        created_at: datetime,
        is_tombstone: bool,
    ) -> ValOffset:
        """Append an entry and return the offset it starts at."""
        key_bytes = _as_bytes(key)
        value_bytes = _as_bytes(value)
        entry = ValueLogEntry(
            len(key_bytes), len(value_bytes), key_bytes, value_bytes, created_at, is_tombstone
        )
        data = entry.serialize()
        offset = self.size
        with self.path.open("ab") as handle:
            handle.write(data)
        self.size += len(data)
        return offset

    def get(self, start_offset: int) -> tuple[Value, bool] | None:
        """Return ``(value, is_tombstone)`` for the entry at ``start_offset``."""
        with self.path.open("rb") as handle:
            handle.seek(start_offset)
            found = _read_entry(handle)
        if found is None:
            return None
        entry, _ = found
        return entry.value, entry.is_tombstone

    def _scan(self, start_offset: int) -> Iterator[tuple[ValueLogEntry, int]]:
        with self.path.open("rb") as handle:
            handle.seek(start_offset)
            while (found := _read_entry(handle)) is not None:
                yield found

    def sync_to_disk(self) -> None:
        """Flush the log file to stable storage."""
        with self.path.open("ab") as handle:
            handle.flush()
            os.fsync(handle.fileno())

    def recover(self, start_offset: int) -> list[ValueLogEntry]:
        """Return every entry from ``start_offset`` to the end of the log."""
        return [entry for entry, _ in self._scan(start_offset)]

    def read_chunk_to_garbage_collect(
        self, bytes_to_collect: int
    ) -> tuple[list[ValueLogEntry], int]:
        """Read entries from the tail until at least ``bytes_to_collect`` bytes are covered.

        Returns the entries and the number of bytes they occupy.
        """
        entries: list[ValueLogEntry] = []
        total = 0
        if bytes_to_collect <= 0:
            return entries, total
        for entry, size in self._scan(self.tail_offset):
            entries.append(entry)
            total += size
            if total >= bytes_to_collect:
                break
        return entries, total

    def clear_all(self) -> None:
        """Delete the log file and reset all offsets."""
        if self.path.exists():
            try:
                self.path.unlink()
            except OSError as err:
                logger.info("%s", err)
        self.size = 0
        self.tail_offset = 0
        self.head_offset = 0

    def set_head(self, head: int) -> None:
        self.head_offset = head

    def set_tail(self, tail: int) -> None:
        self.tail_offset = tail
"""Summary file of a sorted table: its smallest and biggest keys.

On disk the summary is laid out as: smallest key length (u32),
biggest key length (u32), smallest key bytes, biggest key bytes.
All integers are little-endian.
"""

from __future__ import annotations

import os
import struct
from pathlib import Path

SUMMARY_FILE_NAME = "summary"

_HEADER = struct.Struct("<II")


class Summary:
    """Smallest and biggest key of a table, stored next to its data file."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.path = Path(directory) / f"{SUMMARY_FILE_NAME}.db"
        self.smallest_key = b""
        self.biggest_key = b""

    def __repr__(self) -> str:
        return (
            f"Summary(path={str(self.path)!r}, smallest_key={self.smallest_key!r}, "
            f"biggest_key={self.biggest_key!r})"
        )

    def write_to_file(self) -> None:
        """Write the summary to its file, replacing any earlier content."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(self.serialize())

    def recover(self) -> None:
        """Load the smallest and biggest keys from the summary file.

        Raises ``FileNotFoundError`` if the file is missing and
        ``ValueError`` if its content is truncated.
        """
        data = self.path.read_bytes()
        if len(data) < _HEADER.size:
            raise ValueError(f"summary file {self.path} is truncated")
        smallest_len, biggest_len = _HEADER.unpack_from(data)
        body = data[_HEADER.size:]
        if len(body) < smallest_len + biggest_len:
            raise ValueError(f"summary file {self.path} is truncated")
        self.smallest_key = body[:smallest_len]
        self.biggest_key = body[smallest_len:smallest_len + biggest_len]

    def serialize(self) -> bytes:
        """Encode the summary in its on-disk form."""
        smallest = bytes(self.smallest_key)
        biggest = bytes(self.biggest_key)
        return _HEADER.pack(len(smallest), len(biggest)) + smallest + biggest
"""Small helpers for ids, timestamps and float encoding."""

from __future__ import annotations

import secrets
import string
import struct
from datetime import datetime, timedelta, timezone

_ALPHANUMERIC = string.ascii_letters + string.digits
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_F64_LE = struct.Struct("<d")


def generate_random_id(length: int) -> str:
    """Return a random alphanumeric string of ``length`` characters."""
    if length < 0:
        raise ValueError("length must not be negative")
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(length))


def milliseconds_to_datetime(milliseconds: int) -> datetime:
    """Convert milliseconds since the Unix epoch to an aware UTC datetime."""
    if milliseconds < 0:
        raise ValueError("milliseconds must not be negative")
    return _EPOCH + timedelta(milliseconds=milliseconds)


def default_datetime() -> datetime:
    """Return the lowest timestamp used by the store: the Unix epoch in UTC."""
    return _EPOCH


def float_to_le_bytes(value: float) -> bytes:
    """Encode a float as 8 little-endian IEEE 754 bytes."""
    return _F64_LE.pack(value)


def float_from_le_bytes(data: bytes) -> float | None:
    """Decode 8 little-endian bytes into a float, or return None on a size mismatch."""
    if len(data) != _F64_LE.size:
        return None
    return _F64_LE.unpack(bytes(data))[0]
from __future__ import annotations

from io import BytesIO

from .config import get_buffer


def to_basestring(value: str | bytes) -> bytes:
    """Converts a string argument to a byte string.

    If the argument is already a byte string, it is returned unchanged.
    Otherwise it must be a unicode string and is encoded as utf8.
    """
    return value.encode() if isinstance(value, str) else value


def to_stream(stream_or_string):
    """
    Wrap str and bytes input in an in-memory stream, pass streams through.
    """
    if isinstance(stream_or_string, bytes):
        return BytesIO(stream_or_string)
    return get_buffer(stream_or_string)

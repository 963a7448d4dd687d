from __future__ import annotations

import codecs
from typing import Generator, Iterator

from .constants import Character as Char


def split_by_size(text: str, byte_size: int) -> Generator:
    """
    Yield pieces of text, each at most byte_size octets once encoded.

    Every piece but the last is followed by a line break and the single space
    that marks a continuation line, and that space counts against the next
    piece's size. A split never falls inside a multi-byte UTF-8 sequence.
    """
    start = space_count = 0
    encoded = text.encode()
    total_size = len(encoded)
    while total_size - start > byte_size - space_count:
        k = byte_size - space_count + start
        while (encoded[k] & 0xC0) == 0x80:
            k -= 1
        yield f"{encoded[start:k].decode()}{Char.CRLF} "
        space_count = 1
        start = k
    yield encoded[start:].decode()


def iter_chunks(fp, chunk_size: int = 4096, encoding: str = "utf-8") -> Iterator[str]:
    """
    Read fp until exhausted, yielding text chunks.

    Byte streams are decoded incrementally, so a multi-byte character split
    across two reads comes out whole. UnicodeDecodeError propagates.
    """
    decoder = None
    while True:
        chunk = fp.read(chunk_size)
        if not chunk:
            break
        if isinstance(chunk, bytes):
            if decoder is None:
                decoder = codecs.getincrementaldecoder(encoding)()
            chunk = decoder.decode(chunk)
            if not chunk:
                continue
        yield chunk
    if decoder is not None:
        tail = decoder.decode(b"", final=True)
        if tail:
            yield tail

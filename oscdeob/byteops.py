"""Helpers for packing seed words and reading NUL-terminated buffers."""

from __future__ import annotations

from typing import Iterable, Literal


Endian = Literal["little", "big"]

WORD_SIZE = 8


def pack_words(words: Iterable[int], *, size: int = WORD_SIZE, endian: Endian = "little") -> bytes:
    """Return ``words`` laid out back to back as unsigned ``size``-byte integers.

    Raises :class:`ValueError` when a word is negative or does not fit in
    ``size`` bytes.
    """

    out = bytearray()
    for word in words:
        if word < 0 or word >> (size * 8):
            raise ValueError(f"word {word:#x} does not fit in {size} bytes")
        out.extend(word.to_bytes(size, endian, signed=False))
    return bytes(out)


def c_strlen(data) -> int:
    """Return the offset of the first NUL in ``data`` or ``len(data)``."""

    for offset, value in enumerate(data):
        if value == 0:
            return offset
    return len(data)


def c_string(data) -> bytes:
    """Return ``data`` up to (excluding) its first NUL byte."""

    return bytes(data[: c_strlen(data)])


__all__ = ["Endian", "WORD_SIZE", "pack_words", "c_strlen", "c_string"]

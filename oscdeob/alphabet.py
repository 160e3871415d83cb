"""The fixed 16-symbol substitution alphabet.

The table is shipped as two 64-bit seed words which, read back as raw
little-endian bytes, spell out the sixteen symbols ``Ql2EAS6tB9abcdef``.
Index ``k`` of the table is the symbol that stands for nibble value ``k``.
The inverse lookup is a linear scan, so when a symbol repeats the lowest
index wins.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .byteops import Endian, pack_words

ALPHABET_SIZE = 16

SEED_WORDS: tuple[int, int] = (8373972096940928081, 7378413942531504450)


def alphabet_from_words(words: Iterable[int], *, endian: Endian = "little") -> bytes:
    """Return the alphabet encoded by ``words``."""

    table = pack_words(words, endian=endian)
    if len(table) != ALPHABET_SIZE:
        raise ValueError(f"alphabet must be {ALPHABET_SIZE} bytes, got {len(table)}")
    return table


ALPHABET: bytes = alphabet_from_words(SEED_WORDS)


def validate_alphabet(alphabet) -> bytes:
    """Return ``alphabet`` as :class:`bytes` after checking its length."""

    if isinstance(alphabet, str):
        alphabet = alphabet.encode("latin-1")
    table = bytes(alphabet)
    if len(table) != ALPHABET_SIZE:
        raise ValueError(f"alphabet must be {ALPHABET_SIZE} bytes, got {len(table)}")
    return table


def nibble_for(symbol: int, alphabet: bytes = ALPHABET) -> Optional[int]:
    """Return the first table index holding ``symbol`` or ``None``."""

    for index in range(ALPHABET_SIZE):
        if alphabet[index] == symbol:
            return index
    return None


def symbol_for(nibble: int, alphabet: bytes = ALPHABET) -> int:
    """Return the symbol that stands for ``nibble``."""

    if not 0 <= nibble < ALPHABET_SIZE:
        raise ValueError(f"nibble out of range: {nibble}")
    return alphabet[nibble]


__all__ = [
    "ALPHABET",
    "ALPHABET_SIZE",
    "SEED_WORDS",
    "alphabet_from_words",
    "nibble_for",
    "symbol_for",
    "validate_alphabet",
]

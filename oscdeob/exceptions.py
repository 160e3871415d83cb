"""Custom exception hierarchy for the decoder and its archive helpers."""

from __future__ import annotations


class DecodeError(Exception):
    """Base class for all decoding related errors."""


class UnknownSymbolError(DecodeError):
    """Raised in strict mode when a symbol is missing from the alphabet."""

    def __init__(self, position: int, symbol: int) -> None:
        super().__init__(f"unknown symbol {symbol:#04x} at offset {position}")
        self.position = position
        self.symbol = symbol


class InvalidBufferError(DecodeError):
    """Raised when the buffer cannot be decoded in place."""


class KeyResolutionError(Exception):
    """Raised when no archive password is available."""


class OsbArchiveError(RuntimeError):
    """Raised when an OSB archive cannot be opened or read."""


__all__ = [
    "DecodeError",
    "InvalidBufferError",
    "KeyResolutionError",
    "OsbArchiveError",
    "UnknownSymbolError",
]

"""Decode configuration secrets hidden with a fixed 16-symbol alphabet."""

from .alphabet import ALPHABET, SEED_WORDS, alphabet_from_words
from .decoders import decode_bytes, decode_in_place, deobfuscate, trace_decode
from .exceptions import DecodeError, InvalidBufferError, UnknownSymbolError

__version__ = "0.3.0"

__all__ = [
    "ALPHABET",
    "SEED_WORDS",
    "DecodeError",
    "InvalidBufferError",
    "UnknownSymbolError",
    "alphabet_from_words",
    "decode_bytes",
    "decode_in_place",
    "deobfuscate",
    "trace_decode",
]

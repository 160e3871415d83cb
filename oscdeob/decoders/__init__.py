"""Decoders for values hidden with the substitution alphabet."""

from .nibble import (
    PairTraceEntry,
    content_length,
    decode_bytes,
    decode_in_place,
    deobfuscate,
    trace_decode,
)

__all__ = [
    "PairTraceEntry",
    "content_length",
    "decode_bytes",
    "decode_in_place",
    "deobfuscate",
    "trace_decode",
]

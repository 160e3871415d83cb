"""In-place decoder for strings hidden with the 16-symbol alphabet.

Every pair of obfuscated symbols stands for one plaintext byte.  The first
symbol of a pair carries the low nibble and the second symbol the high
nibble.  Decoded bytes are written back over the start of the same buffer,
which is safe because byte ``i`` only depends on the symbols at ``2*i`` and
``2*i + 1``.  A NUL terminator is written after the last decoded byte.

Symbols missing from the alphabet do not raise by default: the affected
half keeps the nibble it had for the previous pair (zero before the first
pair).  Passing ``strict=True`` rejects such input before the buffer is
touched.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Tuple

from ..alphabet import ALPHABET, nibble_for, validate_alphabet
from ..byteops import c_strlen, c_string
from ..exceptions import InvalidBufferError, UnknownSymbolError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PairTraceEntry:
    """Describe how a single pair was decoded."""

    index: int
    offset: int
    symbols: bytes
    low: int
    high: int
    value: int
    found: Tuple[bool, bool]

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serialisable representation of the entry."""

        return {
            "index": self.index,
            "offset": self.offset,
            "symbols": self.symbols.decode("latin-1"),
            "low": self.low,
            "high": self.high,
            "value": self.value,
            "found": list(self.found),
        }


def _byte_view(buffer) -> memoryview:
    try:
        view = memoryview(buffer)
    except TypeError as exc:
        raise InvalidBufferError(
            f"expected a byte buffer, got {type(buffer).__name__}"
        ) from exc
    if view.ndim != 1 or view.itemsize != 1 or not view.c_contiguous:
        raise InvalidBufferError("buffer must be a contiguous sequence of bytes")
    if view.format != "B":
        view = view.cast("B")
    return view


def _writable_view(buffer) -> memoryview:
    view = _byte_view(buffer)
    if view.readonly:
        raise InvalidBufferError("buffer is read-only")
    if len(view) == 0:
        raise InvalidBufferError("buffer has no room for the terminator")
    return view


def content_length(buffer) -> int:
    """Return the number of bytes before the terminator of ``buffer``."""

    return c_strlen(_byte_view(buffer))


def _first_unknown(view: memoryview, length: int, alphabet: bytes) -> Optional[int]:
    for offset in range(length):
        if nibble_for(view[offset], alphabet) is None:
            return offset
    return None


def _decode_pairs(
    view: memoryview,
    pair_count: int,
    alphabet: bytes,
    trace: Optional[List[PairTraceEntry]] = None,
) -> None:
    low = high = 0
    for index in range(pair_count):
        offset = index * 2
        first = view[offset]
        second = view[offset + 1]
        found_low = nibble_for(first, alphabet)
        found_high = nibble_for(second, alphabet)
        if found_low is not None:
            low = found_low
        if found_high is not None:
            high = found_high
        value = (high << 4) | low
        # offset >= index, so the pair was read before this write can reach it
        view[index] = value
        if trace is not None:
            trace.append(
                PairTraceEntry(
                    index=index,
                    offset=offset,
                    symbols=bytes((first, second)),
                    low=low,
                    high=high,
                    value=value,
                    found=(found_low is not None, found_high is not None),
                )
            )
    view[pair_count] = 0


def decode_in_place(buffer, *, strict: bool = False, alphabet: bytes = ALPHABET) -> None:
    """Decode the NUL-terminated obfuscated string held in ``buffer``.

    ``buffer`` must be writable (``bytearray``, a writable ``memoryview``,
    ``array('B')`` ...).  The content ends at the first NUL byte or at the
    end of the buffer.  An odd trailing symbol is ignored.  After the call
    ``buffer[:n]`` holds the ``n`` decoded bytes and ``buffer[n]`` is ``0``;
    anything past the terminator is left as it was.
    """

    table = validate_alphabet(alphabet)
    view = _writable_view(buffer)
    length = c_strlen(view)
    pair_count = length // 2
    if length % 2:
        logger.debug("ignoring trailing symbol at offset %d", length - 1)

    if strict:
        position = _first_unknown(view, pair_count * 2, table)
        if position is not None:
            raise UnknownSymbolError(position, view[position])

    _decode_pairs(view, pair_count, table)
    logger.debug("decoded %d pair(s) in place", pair_count)


def _as_bytes(data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    # bytes(n) would silently build n NUL bytes
    if data is None or isinstance(data, int):
        raise TypeError(f"expected text or bytes, got {type(data).__name__}")
    return bytes(data)


def decode_bytes(data, *, strict: bool = False, alphabet: bytes = ALPHABET) -> bytes:
    """Return the decoded bytes of ``data`` without touching the input."""

    buffer = bytearray(_as_bytes(data))
    buffer.append(0)
    pair_count = c_strlen(buffer) // 2
    decode_in_place(buffer, strict=strict, alphabet=alphabet)
    return bytes(buffer[:pair_count])


def deobfuscate(text: str, *, strict: bool = False) -> str:
    """Decode ``text`` and return the result as a string.

    The decoded bytes are read up to the first NUL and converted with lossy
    UTF-8.  Text that itself contains a NUL character decodes as ``""``.
    """

    if text is None:
        raise TypeError("text must be a string")

    raw = b"" if "\x00" in text else text.encode("utf-8")
    buffer = bytearray(raw)
    buffer.append(0)
    decode_in_place(buffer, strict=strict)
    return c_string(buffer).decode("utf-8", errors="replace")


def trace_decode(data, *, alphabet: bytes = ALPHABET) -> Tuple[PairTraceEntry, ...]:
    """Return a per-pair record of how ``data`` decodes."""

    table = validate_alphabet(alphabet)
    buffer = bytearray(_as_bytes(data))
    buffer.append(0)
    trace: List[PairTraceEntry] = []
    _decode_pairs(memoryview(buffer), c_strlen(buffer) // 2, table, trace)
    return tuple(trace)


__all__ = [
    "PairTraceEntry",
    "content_length",
    "decode_bytes",
    "decode_in_place",
    "deobfuscate",
    "trace_decode",
]

"""Test configuration ensuring the project source tree is importable."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parent.parent

root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)
else:
    idx = sys.path.index(root_str)
    if idx != 0:
        sys.path.insert(0, sys.path.pop(idx))

from oscdeob.alphabet import ALPHABET  # noqa: E402


def _obfuscate(plain: bytes, alphabet: bytes = ALPHABET) -> bytes:
    """Forward transform: low nibble symbol first, then high nibble symbol."""

    out = bytearray()
    for value in plain:
        out.append(alphabet[value & 0x0F])
        out.append(alphabet[value >> 4])
    return bytes(out)


@pytest.fixture
def obfuscate() -> Callable[..., bytes]:
    return _obfuscate


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OSB_KEY", "OSCDEOB_STRICT", "OSCDEOB_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)

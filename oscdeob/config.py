"""Runtime settings sourced from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .decoders import deobfuscate
from .exceptions import KeyResolutionError

OSB_KEY_ENV = "OSB_KEY"
STRICT_ENV = "OSCDEOB_STRICT"
LOG_FILE_ENV = "OSCDEOB_LOG_FILE"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    osb_key: Optional[str] = None
    strict: bool = False
    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to :data:`os.environ`)."""

        env = os.environ if environ is None else environ
        key = (env.get(OSB_KEY_ENV) or "").strip()
        log_file = (env.get(LOG_FILE_ENV) or "").strip()
        return cls(
            osb_key=key or None,
            strict=(env.get(STRICT_ENV) or "").strip().lower() in _TRUTHY,
            log_file=Path(log_file) if log_file else None,
        )


def resolve_osb_password(password: Optional[str], settings: Settings) -> str:
    """Return the archive password to use.

    An explicit ``password`` wins; otherwise the obfuscated ``OSB_KEY`` is
    decoded.
    """

    if password is not None:
        return password
    if settings.osb_key is None:
        raise KeyResolutionError(
            f"no password given and {OSB_KEY_ENV} is not set"
        )
    return deobfuscate(settings.osb_key, strict=settings.strict)


__all__ = [
    "LOG_FILE_ENV",
    "OSB_KEY_ENV",
    "STRICT_ENV",
    "Settings",
    "resolve_osb_password",
]

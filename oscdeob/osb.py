"""List and extract password protected OSB archives.

OSB files are ordinary ZIP archives whose members are encrypted with the
traditional PKWARE scheme.  The password normally comes from the obfuscated
``OSB_KEY`` setting (see :mod:`oscdeob.config`), so this module is the main
consumer of the decoder.  Members whose names would escape the target
directory are not extracted; unlike a silent skip they are recorded in
:attr:`OsbExtractSummary.failed`, so the CLI exits with status 1 for such
archives.  A wrong password or a corrupt member header aborts the run, while
a member that cannot be written is recorded and the remaining members are
still extracted.
"""

from __future__ import annotations

import logging
import shutil
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .exceptions import OsbArchiveError

LOGGER = logging.getLogger(__name__)

__all__ = [
    "OsbEntry",
    "OsbExtractSummary",
    "list_osb",
    "unzip_osb",
]


@dataclass(slots=True)
class OsbEntry:
    """A single member of an OSB archive."""

    name: str
    size: int
    is_dir: bool
    encrypted: bool


@dataclass(slots=True)
class OsbExtractSummary:
    """Summary of an extraction run."""

    target_dir: Path
    extracted: List[Path] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)


def _open_archive(path: Path) -> zipfile.ZipFile:
    if not path.is_file():
        raise OsbArchiveError(f"cannot extract archive: {path} does not exist")
    try:
        return zipfile.ZipFile(path)
    except zipfile.BadZipFile as exc:
        raise OsbArchiveError(f"cannot extract archive: {exc}") from exc


def list_osb(path: Path) -> List[OsbEntry]:
    """Return the members of the archive at ``path``."""

    with _open_archive(path) as archive:
        return [
            OsbEntry(
                name=info.filename,
                size=info.file_size,
                is_dir=info.is_dir(),
                encrypted=bool(info.flag_bits & 0x1),
            )
            for info in archive.infolist()
        ]


def _enclosed_path(target_dir: Path, name: str) -> Optional[Path]:
    root = target_dir.resolve()
    candidate = (root / name).resolve()
    if candidate != root and root not in candidate.parents:
        return None
    return candidate


def unzip_osb(path: Path, password: str, *, target_dir: Optional[Path] = None) -> OsbExtractSummary:
    """Extract the archive at ``path`` into ``target_dir`` using ``password``."""

    target = target_dir if target_dir is not None else Path(".")
    summary = OsbExtractSummary(target_dir=target)
    pwd = password.encode("utf-8")

    LOGGER.info("Extracting OSB archive %s", path)
    with _open_archive(path) as archive:
        for info in archive.infolist():
            outpath = _enclosed_path(target, info.filename)
            if outpath is None:
                LOGGER.warning("Skipping member outside target directory: %s", info.filename)
                summary.failed.append((info.filename, "outside target directory"))
                continue

            if info.is_dir():
                try:
                    outpath.mkdir(parents=True, exist_ok=True)
                except OSError as exc:
                    LOGGER.error("%s - Error: %s", outpath, exc)
                    summary.failed.append((info.filename, str(exc)))
                    continue
                summary.extracted.append(outpath)
                continue

            try:
                source = archive.open(info, pwd=pwd)
            except (RuntimeError, zipfile.BadZipFile) as exc:
                raise OsbArchiveError(f"cannot extract archive: {exc}") from exc

            with source:
                try:
                    outpath.parent.mkdir(parents=True, exist_ok=True)
                    with outpath.open("wb") as handle:
                        shutil.copyfileobj(source, handle)
                except (OSError, zipfile.BadZipFile) as exc:
                    LOGGER.error("%s - Error: %s", outpath, exc)
                    summary.failed.append((info.filename, str(exc)))
                    continue
            LOGGER.debug("Extracted %s", outpath)
            summary.extracted.append(outpath)

    LOGGER.info("Extracted %d member(s), %d failed", len(summary.extracted), len(summary.failed))
    return summary

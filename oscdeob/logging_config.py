"""Logging helpers for the command line entry point."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

__all__ = [
    "colorize_text",
    "configure_logging",
]

_COLOR_CODES = {
    "red": "31",
    "green": "32",
    "yellow": "33",
    "blue": "34",
    "magenta": "35",
}


def colorize_text(text: str, color: str) -> str:
    """Return *text* wrapped in ANSI color codes."""
    code = _COLOR_CODES.get(color, "0")
    return f"\033[{code}m{text}\033[0m"


class _ColourFormatter(logging.Formatter):
    COLOURS = {
        logging.DEBUG: "blue",
        logging.INFO: "green",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "magenta",
    }

    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - trivial wrapper
        message = super().format(record)
        colour = self.COLOURS.get(record.levelno, "green")
        return colorize_text(message, colour)


def configure_logging(verbose: bool, log_file: Optional[Path] = None) -> None:
    """Configure root logging handlers.

    Existing root handlers are removed so repeated invocations (tests call
    ``main`` many times in one process) do not stack handlers.  Warnings and
    errors always reach stderr; ``verbose`` lowers the console threshold to
    debug and colours the output.
    """

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    level = logging.DEBUG if verbose else logging.INFO
    root.setLevel(level)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(file_handler)

    stream = logging.StreamHandler()
    if verbose:
        stream.setFormatter(_ColourFormatter("%(levelname)s: %(message)s"))
    else:
        stream.setLevel(logging.WARNING)
        stream.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(stream)

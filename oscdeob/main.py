"""Command line entry point for the decoder and the OSB helpers."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from . import __version__
from .alphabet import ALPHABET_SIZE, symbol_for
from .config import Settings, resolve_osb_password
from .decoders import decode_bytes, deobfuscate, trace_decode
from .exceptions import DecodeError, KeyResolutionError, OsbArchiveError
from .logging_config import configure_logging
from .osb import list_osb, unzip_osb

LOGGER = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oscdeob",
        description="Decode values hidden with the 16-symbol substitution alphabet",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="enable verbose colourised logging")
    sub = parser.add_subparsers(dest="command", required=True)

    decode = sub.add_parser("decode", help="Decode obfuscated values")
    decode.add_argument("values", nargs="*", help="obfuscated values to decode")
    decode.add_argument("--stdin", action="store_true", help="read one value per line from stdin")
    decode.add_argument(
        "--strict",
        action="store_true",
        help="fail on symbols missing from the alphabet instead of reusing the previous nibble",
    )
    output = decode.add_mutually_exclusive_group()
    output.add_argument("--hex", action="store_true", help="print the decoded bytes as hex")
    output.add_argument("--trace", action="store_true", help="print a per-pair trace as JSON")

    sub.add_parser("alphabet", help="Show the substitution alphabet")

    list_cmd = sub.add_parser("list-osb", help="List the members of an OSB archive")
    list_cmd.add_argument("file", type=Path)

    unzip = sub.add_parser("unzip-osb", help="Extract an OSB archive")
    unzip.add_argument("file", type=Path)
    unzip.add_argument("-p", "--password", help="archive password (defaults to the decoded OSB_KEY)")
    unzip.add_argument("-d", dest="directory", type=Path, default=None, help="target directory")
    return parser


def _collect_values(args: argparse.Namespace) -> List[str]:
    values = list(args.values)
    if args.stdin:
        values.extend(line.rstrip("\r\n") for line in sys.stdin)
    return values


def _run_decode(args: argparse.Namespace, settings: Settings) -> int:
    values = _collect_values(args)
    if not values:
        LOGGER.error("no values to decode")
        return 1
    strict = args.strict or settings.strict

    for value in values:
        if args.trace:
            entries = [entry.to_dict() for entry in trace_decode(value)]
            print(json.dumps({"input": value, "pairs": entries}))
        elif args.hex:
            print(decode_bytes(value, strict=strict).hex())
        else:
            print(deobfuscate(value, strict=strict))
    return 0


def _run_alphabet() -> int:
    for index in range(ALPHABET_SIZE):
        symbol = symbol_for(index)
        print(f"{index:2d}  {chr(symbol)}  0x{symbol:02x}")
    return 0


def _run_list(args: argparse.Namespace) -> int:
    for entry in list_osb(args.file):
        flags = "d" if entry.is_dir else "-"
        flags += "e" if entry.encrypted else "-"
        print(f"{flags} {entry.size:>10} {entry.name}")
    return 0


def _run_unzip(args: argparse.Namespace, settings: Settings) -> int:
    password = resolve_osb_password(args.password, settings)
    summary = unzip_osb(args.file, password, target_dir=args.directory)
    for path in summary.extracted:
        print(f"[OK]  {path}")
    for name, reason in summary.failed:
        print(f"[ERR] {name} - Error: {reason}")
    return 1 if summary.failed else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    settings = Settings.from_env()
    configure_logging(args.verbose, settings.log_file)

    try:
        if args.command == "decode":
            return _run_decode(args, settings)
        if args.command == "alphabet":
            return _run_alphabet()
        if args.command == "list-osb":
            return _run_list(args)
        return _run_unzip(args, settings)
    except DecodeError as exc:
        LOGGER.error("Decoding failed: %s", exc)
        return 1
    except (KeyResolutionError, OsbArchiveError) as exc:
        LOGGER.error("Archive error: %s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI wrapper
    raise SystemExit(main())

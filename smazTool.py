#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0
"""
smazTool.py: compress / decompress short strings with the smaz codebook.

Version: 1.0.0

CHANGELOG:
1.0.0
  - compress / decompress subcommands (raw, hex, base64 I/O; optional SZ framing)
  - stats: per-line gain/loss report over a text file or stdin
  - codebook: dump the active table in the escaped vocab format
  - --codebook FILE to swap in a custom table (max 254 entries)

Examples:
  smazTool.py compress --text "this is a small string" --format hex
  smazTool.py decompress --text fe41 --format hex
  smazTool.py stats --input messages.txt
"""

__version__ = "1.0.0"

import argparse
import base64
import sys
from typing import Any, List, Optional

from meshsmaz.codebook import DEFAULT_CODEBOOK, SmazError, format_codebook_lines, load_codebook
from meshsmaz.codec import SmazCodec, default_codec
from message_text_compression import (
    CompressionError,
    compress_best,
    decompress_bytes,
    mode_name,
)

FORMATS = ("raw", "hex", "base64")
STATS_MIN_LEN = 2
STATS_MAX_LEN = 50


def eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


def _read_input(args: argparse.Namespace) -> bytes:
    text = getattr(args, "text", None)
    if text is not None:
        return text.encode("utf-8")
    if args.input and args.input != "-":
        with open(args.input, "rb") as f:
            return f.read()
    return sys.stdin.buffer.read()


def _write_output(args: argparse.Namespace, data: bytes) -> None:
    if args.output and args.output != "-":
        with open(args.output, "wb") as f:
            f.write(data)
        if args.verbose:
            eprint(f"wrote {len(data)} bytes to {args.output}")
        return
    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()


def _to_format(data: bytes, fmt: str) -> bytes:
    if fmt == "hex":
        return data.hex().encode("ascii") + b"\n"
    if fmt == "base64":
        return base64.b64encode(data) + b"\n"
    return data


def _from_format(data: bytes, fmt: str) -> bytes:
    if fmt == "raw":
        return data
    text = data.decode("ascii", errors="strict").strip()
    if fmt == "hex":
        return bytes.fromhex(text)
    return base64.b64decode(text, validate=True)


def _codec_for(args: argparse.Namespace) -> SmazCodec:
    if args.codebook:
        return SmazCodec(load_codebook(args.codebook))
    return default_codec()


def ratio_line(line: bytes, compressed: bytes) -> str:
    level = 100 - (100 * len(compressed)) // len(line)
    shown = line.decode("utf-8", errors="replace")
    if level < 0:
        return f"'{shown}' enlarged by {-level}%"
    return f"'{shown}' compressed by {level}%"


def cmd_compress(args: argparse.Namespace) -> int:
    raw = _read_input(args)
    if args.framed:
        if args.codebook:
            eprint("ERROR: --framed always uses the built-in codebook")
            return 2
        out, mode = compress_best(raw)
        if args.verbose:
            eprint(f"framed mode: {mode_name(mode)}")
    else:
        out = _codec_for(args).encode(raw)
    if args.verbose:
        eprint(f"{len(raw)} -> {len(out)} bytes")
    _write_output(args, _to_format(out, args.format))
    return 0


def cmd_decompress(args: argparse.Namespace) -> int:
    if args.framed and args.codebook:
        eprint("ERROR: --framed always uses the built-in codebook")
        return 2
    data = _from_format(_read_input(args), args.format)
    if args.framed:
        out = decompress_bytes(data)
    else:
        out = _codec_for(args).decode(data)
    if args.verbose:
        eprint(f"{len(data)} -> {len(out)} bytes")
    _write_output(args, out)
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    codec = _codec_for(args)
    lines = _read_input(args).splitlines()
    total_in = 0
    total_out = 0
    for line in lines:
        comp = codec.encode(line)
        total_in += len(line)
        total_out += len(comp)
        if STATS_MIN_LEN <= len(line) < STATS_MAX_LEN:
            print(ratio_line(line, comp))
    print("")
    print(f"lines: {len(lines)}")
    print(f"input bytes:  {total_in}")
    print(f"output bytes: {total_out}")
    if total_in:
        print(f"ratio: {total_out / total_in:.3f}")
    return 0


def cmd_codebook(args: argparse.Namespace) -> int:
    codebook = load_codebook(args.codebook) if args.codebook else DEFAULT_CODEBOOK
    for idx, line in enumerate(format_codebook_lines(codebook)):
        print(f"{idx:3d}  {line}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="smazTool.py: small-string compression with a fixed codebook.")
    ap.add_argument("--codebook", default="", help="Custom codebook file (escaped, one entry per line).")
    ap.add_argument("--verbose", action="store_true", help="Chatty output on stderr.")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = ap.add_subparsers(dest="command")
    sub.required = True

    for name, func, helptext in (
        ("compress", cmd_compress, "Compress bytes from --text, --input or stdin."),
        ("decompress", cmd_decompress, "Decompress smaz data from --text, --input or stdin."),
    ):
        p = sub.add_parser(name, help=helptext)
        src = p.add_mutually_exclusive_group()
        src.add_argument("--text", default=None, help="Inline input (UTF-8 for compress, encoded form for decompress).")
        src.add_argument("--input", "-i", default="", help="Input file ('-' or empty: stdin).")
        p.add_argument("--output", "-o", default="", help="Output file ('-' or empty: stdout).")
        p.add_argument("--format", choices=FORMATS, default="raw", help="Encoding of the compressed side (default: raw).")
        p.add_argument("--framed", action="store_true", help="Use SZ blocks (magic+mode+crc8, best codec wins).")
        p.set_defaults(func=func)

    p = sub.add_parser("stats", help="Per-line compression report.")
    p.add_argument("--input", "-i", default="", help="Text file ('-' or empty: stdin).")
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser("codebook", help="Print the active codebook.")
    p.set_defaults(func=cmd_codebook)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    try:
        return int(args.func(args))
    except (SmazError, CompressionError) as exc:
        eprint(f"ERROR: {exc}")
        return 2
    except ValueError as exc:
        eprint(f"ERROR: bad input: {exc}")
        return 2
    except OSError as exc:
        eprint(f"ERROR: {exc}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

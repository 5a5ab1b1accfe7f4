#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Benchmark smaz against zlib (raw deflate) and zstd on short lines.

Every line of the corpus is compressed on its own, which is the case
smaz is made for: general-purpose codecs pay their framing on each line.

Usage:
  tools/bench_smaz.py [corpus.txt] [--repeat N]

Without a corpus a small built-in sample of English sentences and URLs
is used.
"""

from __future__ import annotations

import argparse
import time
import zlib
from typing import Callable, Dict, List, Sequence, Tuple

import zstandard as zstd

from meshsmaz.codec import decode as smaz_decode, encode as smaz_encode

SAMPLE_LINES = [
    "This is a small string",
    "foobar",
    "the end",
    "not-a-g00d-Exampl333",
    "Smaz is a simple compression library",
    "Nothing is more difficult, and therefore more precious, than to be able to decide",
    "this is an example of what works very well with smaz",
    "1000 numbers 2000 will 10 20 30 compress very little",
    "and now a few italian sentences:",
    "Nel mezzo del cammin di nostra vita, mi ritrovai in una selva oscura",
    "Mi illumino di immenso",
    "L'autore di questa libreria vive in Sicilia",
    "try it against urls",
    "http://google.com",
    "http://programming.reddit.com",
    "http://github.com/antirez/smaz/tree/master",
    "/media/hdb1/music/Alben/The Bla",
]

Codec = Tuple[Callable[[bytes], bytes], Callable[[bytes], bytes]]


def _deflate(raw: bytes) -> bytes:
    cobj = zlib.compressobj(level=9, wbits=-15)
    return cobj.compress(raw) + cobj.flush()


def _inflate(data: bytes) -> bytes:
    return zlib.decompress(data, wbits=-15)


def build_codecs() -> Dict[str, Codec]:
    cctx = zstd.ZstdCompressor(level=10)
    dctx = zstd.ZstdDecompressor()
    return {
        "smaz": (smaz_encode, smaz_decode),
        "deflate": (_deflate, _inflate),
        "zstd": (cctx.compress, dctx.decompress),
    }


def load_corpus(path: str) -> List[bytes]:
    """Lines of a text file as bytes, line endings stripped, blank lines kept."""
    with open(path, "rb") as f:
        data = f.read()
    lines = data.split(b"\n")
    if lines and not lines[-1]:
        lines.pop()
    return [line[:-1] if line.endswith(b"\r") else line for line in lines]


def run_benchmark(lines: Sequence[bytes], repeat: int = 1) -> Dict[str, Dict[str, object]]:
    if repeat < 1:
        raise ValueError("repeat must be >= 1")
    results: Dict[str, Dict[str, object]] = {}
    total_in = sum(len(line) for line in lines)
    for name, (comp, decomp) in build_codecs().items():
        packed = [comp(line) for line in lines]
        t0 = time.perf_counter()
        for _ in range(repeat):
            for line in lines:
                comp(line)
        t_enc = time.perf_counter() - t0
        t0 = time.perf_counter()
        for _ in range(repeat):
            for blob in packed:
                decomp(blob)
        t_dec = time.perf_counter() - t0
        roundtrip_ok = all(decomp(blob) == line for blob, line in zip(packed, lines))
        results[name] = {
            "input_bytes": total_in,
            "output_bytes": sum(len(p) for p in packed),
            "encode_s": t_enc,
            "decode_s": t_dec,
            "roundtrip_ok": roundtrip_ok,
        }
    return results


def _fmt_rate(nbytes: int, seconds: float) -> str:
    if seconds <= 0:
        return "n/a"
    return f"{nbytes / seconds / (1024 * 1024):.2f} MB/s"


def main() -> int:
    ap = argparse.ArgumentParser(description="Per-line benchmark: smaz vs deflate vs zstd.")
    ap.add_argument("corpus", nargs="?", default="", help="Text file, one sample per line (default: built-in sample).")
    ap.add_argument("--repeat", type=int, default=10, help="Passes over the corpus per codec (default: 10).")
    args = ap.parse_args()

    if args.corpus:
        lines = load_corpus(args.corpus)
    else:
        lines = [s.encode("utf-8") for s in SAMPLE_LINES]
    total = sum(len(line) for line in lines)
    repeat = max(1, args.repeat)
    print(f"corpus: {args.corpus or '(built-in sample)'}")
    print(f"lines: {len(lines)}, bytes: {total}, repeat: {repeat}")
    print("")

    results = run_benchmark(lines, repeat=repeat)
    print(f"{'codec':<8} {'out bytes':>10} {'ratio':>7} {'encode':>12} {'decode':>12}  roundtrip")
    for name, r in results.items():
        out_bytes = int(r["output_bytes"])  # type: ignore[arg-type]
        ratio = (out_bytes / total) if total else 0.0
        moved = total * repeat
        print(
            f"{name:<8} {out_bytes:>10} {ratio:>7.3f} "
            f"{_fmt_rate(moved, float(r['encode_s'])):>12} "  # type: ignore[arg-type]
            f"{_fmt_rate(moved, float(r['decode_s'])):>12}  "  # type: ignore[arg-type]
            f"{'ok' if r['roundtrip_ok'] else 'FAIL'}"
        )
    return 0 if all(r["roundtrip_ok"] for r in results.values()) else 1


if __name__ == "__main__":
    raise SystemExit(main())

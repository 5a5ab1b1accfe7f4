#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
smaz wire codec.

Wire tokens (no header, no checksum):
- 0..253: reference to codebook entry with that index
- 254 b: one verbatim byte
- 255 n b1..bn: n verbatim bytes (n <= 255)

Encoding is greedy: at every position the longest codebook entry wins,
bytes without a match are collected and flushed as verbatim runs.
"""

from __future__ import annotations

import threading
from typing import Iterable, Optional, Union

from meshsmaz.codebook import (
    DEFAULT_CODEBOOK,
    SmazError,
    validate_codebook,
)
from meshsmaz.trie import BytesLike, Trie

VERBATIM_BYTE = 254
VERBATIM_RUN = 255
MAX_RUN = 255


class CorruptInputError(SmazError):
    pass


def _flush_verbatim(out: bytearray, verb: bytearray) -> None:
    # Run length is a single byte, so longer runs go out in 255-byte chunks.
    pos = 0
    n = len(verb)
    while pos < n:
        chunk = verb[pos:pos + MAX_RUN]
        if len(chunk) == 1:
            out.append(VERBATIM_BYTE)
        else:
            out.append(VERBATIM_RUN)
            out.append(len(chunk))
        out.extend(chunk)
        pos += len(chunk)
    del verb[:]


class SmazCodec:
    """Encoder/decoder pair over one fixed codebook.

    The trie is built in __init__ and never changed afterwards, so one
    instance can be shared between threads.
    """

    def __init__(self, codebook: Iterable[Union[str, bytes, bytearray]] = DEFAULT_CODEBOOK) -> None:
        self.codebook = validate_codebook(codebook)
        self.trie = Trie()
        for idx, code in enumerate(self.codebook):
            # Duplicate entries overwrite: the later index is used for encoding.
            self.trie.insert(code, idx)

    def __len__(self) -> int:
        return len(self.codebook)

    def encode(self, data: BytesLike) -> bytes:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"smaz input must be bytes-like, got {type(data).__name__}")
        raw = bytes(data)
        out = bytearray()
        verb = bytearray()
        trie = self.trie
        pos = 0
        n = len(raw)
        while pos < n:
            match_len, code = trie.longest_prefix(raw, pos)
            if match_len > 0:
                _flush_verbatim(out, verb)
                out.append(code)  # type: ignore[arg-type]
                pos += match_len
            else:
                verb.append(raw[pos])
                pos += 1
        _flush_verbatim(out, verb)
        return bytes(out)

    def decode(self, compressed: BytesLike) -> bytes:
        if not isinstance(compressed, (bytes, bytearray, memoryview)):
            raise CorruptInputError("compressed data must be bytes")
        data = bytes(compressed)
        codebook = self.codebook
        out = bytearray()
        pos = 0
        n = len(data)
        while pos < n:
            op = data[pos]
            if op == VERBATIM_BYTE:
                if n - pos < 2:
                    raise CorruptInputError(f"missing verbatim byte at offset {pos}")
                out.append(data[pos + 1])
                pos += 2
            elif op == VERBATIM_RUN:
                if n - pos < 2:
                    raise CorruptInputError(f"missing verbatim run length at offset {pos}")
                run = data[pos + 1]
                if n - pos < run + 2:
                    raise CorruptInputError(
                        f"verbatim run at offset {pos} wants {run} bytes, {n - pos - 2} left"
                    )
                out.extend(data[pos + 2:pos + 2 + run])
                pos += 2 + run
            else:
                if op >= len(codebook):
                    raise CorruptInputError(f"invalid codebook index: {op}")
                out.extend(codebook[op])
                pos += 1
        return bytes(out)


_DEFAULT_CODEC: Optional[SmazCodec] = None
_DEFAULT_CODEC_LOCK = threading.Lock()


def default_codec() -> SmazCodec:
    """Process-wide codec over DEFAULT_CODEBOOK, built on first use."""
    global _DEFAULT_CODEC
    codec = _DEFAULT_CODEC
    if codec is not None:
        return codec
    with _DEFAULT_CODEC_LOCK:
        if _DEFAULT_CODEC is None:
            _DEFAULT_CODEC = SmazCodec(DEFAULT_CODEBOOK)
        return _DEFAULT_CODEC


def encode(data: BytesLike) -> bytes:
    return default_codec().encode(data)


def decode(compressed: BytesLike) -> bytes:
    return default_codec().decode(compressed)

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Static dictionary tables for the smaz codec.

The default table is the classic 254-entry smaz codebook: common English
fragments, whitespace runs, punctuation and a few HTML/URL pieces. Entry i
is encoded on the wire as the single byte i, so a table can never hold more
than 254 entries (254 and 255 are the verbatim escapes).

Custom tables can be kept in a text file, one entry per line, using the
same escapes as the vocab files elsewhere in this repo:

- \\s => space
- \\t => tab
- \\n => newline
- \\r => carriage return
- \\\\ => backslash
- \\xHH => raw byte
"""

from __future__ import annotations

import os
from typing import Iterable, List, Sequence, Tuple, Union

MAX_CODEBOOK_SIZE = 254
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class SmazError(ValueError):
    pass


class CodebookError(SmazError):
    pass


_DEFAULT_CODE_STRINGS = (
    " ", "the", "e", "t", "a", "of", "o", "and", "i", "n", "s", "e ", "r", " th",
    " t", "in", "he", "th", "h", "he ", "to", "\r\n", "l", "s ", "d", " a", "an",
    "er", "c", " o", "d ", "on", " of", "re", "of ", "t ", ", ", "is", "u", "at",
    "   ", "n ", "or", "which", "f", "m", "as", "it", "that", "\n", "was", "en",
    "  ", " w", "es", " an", " i", "\r", "f ", "g", "p", "nd", " s", "nd ", "ed ",
    "w", "ed", "http://", "for", "te", "ing", "y ", "The", " c", "ti", "r ", "his",
    "st", " in", "ar", "nt", ",", " to", "y", "ng", " h", "with", "le", "al", "to ",
    "b", "ou", "be", "were", " b", "se", "o ", "ent", "ha", "ng ", "their", "\"",
    "hi", "from", " f", "in ", "de", "ion", "me", "v", ".", "ve", "all", "re ",
    "ri", "ro", "is ", "co", "f t", "are", "ea", ". ", "her", " m", "er ", " p",
    "es ", "by", "they", "di", "ra", "ic", "not", "s, ", "d t", "at ", "ce", "la",
    "h ", "ne", "as ", "tio", "on ", "n t", "io", "we", " a ", "om", ", a", "s o",
    "ur", "li", "ll", "ch", "had", "this", "e t", "g ", "e\r\n", " wh", "ere",
    " co", "e o", "a ", "us", " d", "ss", "\n\r\n", "\r\n\r", "=\"", " be", " e",
    "s a", "ma", "one", "t t", "or ", "but", "el", "so", "l ", "e s", "s,", "no",
    "ter", " wa", "iv", "ho", "e a", " r", "hat", "s t", "ns", "ch ", "wh", "tr",
    "ut", "/", "have", "ly ", "ta", " ha", " on", "tha", "-", " l", "ati", "en ",
    "pe", " re", "there", "ass", "si", " fo", "wa", "ec", "our", "who", "its", "z",
    "fo", "rs", ">", "ot", "un", "<", "im", "th ", "nc", "ate", "><", "ver", "ad",
    " we", "ly", "ee", " n", "id", " cl", "ac", "il", "</", "rt", " wi", "div",
    "e, ", " it", "whi", " ma", "ge", "x", "e c", "men", ".com",
)


def _entry_bytes(entry: Union[str, bytes, bytearray]) -> bytes:
    if isinstance(entry, (bytes, bytearray)):
        return bytes(entry)
    if isinstance(entry, str):
        try:
            return entry.encode("latin-1")
        except UnicodeEncodeError as exc:
            raise CodebookError(f"codebook entry is not a byte string: {entry!r}") from exc
    raise CodebookError(f"codebook entry must be bytes or str, got {type(entry).__name__}")


def validate_codebook(entries: Iterable[Union[str, bytes, bytearray]]) -> Tuple[bytes, ...]:
    out: List[bytes] = []
    for entry in entries:
        raw = _entry_bytes(entry)
        if not raw:
            raise CodebookError(f"empty codebook entry at index {len(out)}")
        out.append(raw)
        if len(out) > MAX_CODEBOOK_SIZE:
            raise CodebookError(f"codebook holds more than {MAX_CODEBOOK_SIZE} entries")
    return tuple(out)


DEFAULT_CODEBOOK: Tuple[bytes, ...] = validate_codebook(_DEFAULT_CODE_STRINGS)


def _unescape_entry(s: str) -> str:
    out: List[str] = []
    i = 0
    while i < len(s):
        ch = s[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        if i + 1 >= len(s):
            out.append("\\")
            break
        nxt = s[i + 1]
        if nxt == "s":
            out.append(" ")
            i += 2
        elif nxt == "t":
            out.append("\t")
            i += 2
        elif nxt == "n":
            out.append("\n")
            i += 2
        elif nxt == "r":
            out.append("\r")
            i += 2
        elif nxt == "\\":
            out.append("\\")
            i += 2
        elif nxt == "x" and i + 4 <= len(s):
            digits = s[i + 2:i + 4]
            if any(c not in _HEX_DIGITS for c in digits):
                raise CodebookError(f"bad \\x escape in codebook line: {s!r}")
            out.append(chr(int(digits, 16)))
            i += 4
        else:
            out.append("\\")
            out.append(nxt)
            i += 2
    return "".join(out)


def _escape_entry(raw: bytes) -> str:
    out: List[str] = []
    for b in raw:
        if b == 0x20:
            out.append("\\s")
        elif b == 0x09:
            out.append("\\t")
        elif b == 0x0A:
            out.append("\\n")
        elif b == 0x0D:
            out.append("\\r")
        elif b == 0x5C:
            out.append("\\\\")
        elif 0x21 <= b < 0x7F and not (b == 0x23 and not out):
            out.append(chr(b))
        else:
            # non-printables, and a leading '#' that would read as a comment
            out.append(f"\\x{b:02x}")
    return "".join(out)


def parse_codebook_lines(lines: Iterable[str]) -> Tuple[bytes, ...]:
    entries: List[str] = []
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line:
            continue
        if line.lstrip().startswith("#"):
            continue
        entries.append(_unescape_entry(line))
    return validate_codebook(entries)


def format_codebook_lines(entries: Sequence[bytes]) -> List[str]:
    return [_escape_entry(bytes(e)) for e in entries]


def load_codebook(path: str) -> Tuple[bytes, ...]:
    if not os.path.isfile(path):
        raise CodebookError(f"codebook file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return parse_codebook_lines(f)

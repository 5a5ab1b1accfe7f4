#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
meshsmaz package

Small-string compression with a fixed dictionary (smaz wire format).
Short English messages and URLs usually shrink, which matters on links
where every payload byte counts.
"""

from __future__ import annotations

from meshsmaz.codebook import (
    DEFAULT_CODEBOOK,
    MAX_CODEBOOK_SIZE,
    CodebookError,
    SmazError,
    load_codebook,
)
from meshsmaz.codec import (
    MAX_RUN,
    VERBATIM_BYTE,
    VERBATIM_RUN,
    CorruptInputError,
    SmazCodec,
    decode,
    default_codec,
    encode,
)
from meshsmaz.trie import Node, Trie

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_CODEBOOK",
    "MAX_CODEBOOK_SIZE",
    "MAX_RUN",
    "VERBATIM_BYTE",
    "VERBATIM_RUN",
    "CodebookError",
    "CorruptInputError",
    "Node",
    "SmazCodec",
    "SmazError",
    "Trie",
    "decode",
    "default_codec",
    "encode",
    "load_codebook",
]

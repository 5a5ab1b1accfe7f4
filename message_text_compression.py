#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import zlib
from typing import Dict, List, Tuple, Union

import zstandard as zstd

from meshsmaz.codec import CorruptInputError, decode as smaz_decode, encode as smaz_encode

MAGIC = b"SZ"
VERSION = 1

MODE_PLAIN = 0
MODE_SMAZ = 1
MODE_DEFLATE = 2
MODE_ZSTD = 3
SUPPORTED_MODES = (
    MODE_PLAIN,
    MODE_SMAZ,
    MODE_DEFLATE,
    MODE_ZSTD,
)
MODE_TO_NAME: Dict[int, str] = {
    MODE_PLAIN: "sz_plain",
    MODE_SMAZ: "sz_smaz",
    MODE_DEFLATE: "sz_deflate",
    MODE_ZSTD: "sz_zstd",
}

ZSTD_LEVEL = 10
HEADER_LEN = 4
MIN_BLOCK_LEN = HEADER_LEN + 1


class CompressionError(ValueError):
    pass


class CompressionFormatError(CompressionError):
    pass


class CompressionCRCError(CompressionError):
    pass


def _crc8(data: bytes, poly: int = 0x07, init: int = 0x00) -> int:
    crc = init & 0xFF
    for b in data:
        crc ^= b
        for _ in range(8):
            if crc & 0x80:
                crc = ((crc << 1) ^ poly) & 0xFF
            else:
                crc = (crc << 1) & 0xFF
    return crc & 0xFF


def mode_name(mode: int) -> str:
    return MODE_TO_NAME.get(int(mode), f"sz_unknown_{int(mode)}")


def _encode_payload(raw: bytes, mode: int) -> bytes:
    if mode == MODE_PLAIN:
        return raw
    if mode == MODE_SMAZ:
        return smaz_encode(raw)
    if mode == MODE_DEFLATE:
        cobj = zlib.compressobj(level=9, wbits=-15)
        return cobj.compress(raw) + cobj.flush()
    if mode == MODE_ZSTD:
        cctx = zstd.ZstdCompressor(level=ZSTD_LEVEL)
        return cctx.compress(raw)
    raise CompressionError(f"unsupported compression mode: {mode}")


def _decode_payload(data: bytes, mode: int) -> bytes:
    if mode == MODE_PLAIN:
        return data
    if mode == MODE_SMAZ:
        try:
            return smaz_decode(data)
        except CorruptInputError as exc:
            raise CompressionFormatError(f"corrupt smaz payload: {exc}") from exc
    if mode == MODE_DEFLATE:
        try:
            return zlib.decompress(data, wbits=-15)
        except zlib.error as exc:
            raise CompressionFormatError(f"corrupt deflate payload: {exc}") from exc
    if mode == MODE_ZSTD:
        try:
            return zstd.ZstdDecompressor().decompress(data)
        except zstd.ZstdError as exc:
            raise CompressionFormatError(f"corrupt zstd payload: {exc}") from exc
    raise CompressionFormatError(f"unsupported mode: {mode}")


def compress_bytes(data: Union[bytes, bytearray], mode: int = MODE_SMAZ) -> bytes:
    if not isinstance(data, (bytes, bytearray)):
        raise CompressionError("data must be bytes")
    payload = _encode_payload(bytes(data), mode)
    header = bytes([MAGIC[0], MAGIC[1], VERSION, mode & 0xFF])
    crc = _crc8(header + payload)
    return header + payload + bytes([crc])


def decompress_bytes(blob: Union[bytes, bytearray]) -> bytes:
    if not isinstance(blob, (bytes, bytearray)):
        raise CompressionFormatError("blob must be bytes")
    raw = bytes(blob)
    if len(raw) < MIN_BLOCK_LEN:
        raise CompressionFormatError("compressed block too short")
    if raw[:2] != MAGIC:
        raise CompressionFormatError("invalid MAGIC")
    ver = raw[2]
    if ver != VERSION:
        raise CompressionFormatError(f"unsupported version: {ver}")
    mode = raw[3]
    if _crc8(raw[:-1]) != raw[-1]:
        raise CompressionCRCError("CRC8 mismatch")
    return _decode_payload(raw[HEADER_LEN:-1], mode)


def compress_text(text: str, mode: int = MODE_SMAZ) -> bytes:
    if not isinstance(text, str):
        raise CompressionError("text must be str")
    return compress_bytes(text.encode("utf-8"), mode=mode)


def decompress_text(blob: Union[bytes, bytearray]) -> str:
    raw = decompress_bytes(blob)
    try:
        return raw.decode("utf-8", errors="strict")
    except UnicodeDecodeError as exc:
        raise CompressionFormatError("payload is not valid UTF-8") from exc


def compress_best(data: Union[bytes, bytearray]) -> Tuple[bytes, int]:
    """Frame data with whichever mode gives the shortest block.

    Ties keep the lower mode number, so plain wins over anything that
    does not actually save a byte.
    """
    if not data:
        return compress_bytes(b"", mode=MODE_PLAIN), MODE_PLAIN
    candidates: List[Tuple[bytes, int]] = []
    for mode in SUPPORTED_MODES:
        candidates.append((compress_bytes(data, mode=mode), mode))
    return min(candidates, key=lambda item: (len(item[0]), item[1]))


def looks_like_block(data: object) -> bool:
    if not isinstance(data, (bytes, bytearray)):
        return False
    raw = bytes(data)
    if len(raw) < MIN_BLOCK_LEN:
        return False
    if raw[:2] != MAGIC:
        return False
    if int(raw[2]) != VERSION:
        return False
    if int(raw[3]) not in SUPPORTED_MODES:
        return False
    return _crc8(raw[:-1]) == raw[-1]


def should_compress(
    text: str,
    mode: int = MODE_SMAZ,
    min_gain_bytes: int = 2,
) -> bool:
    plain = text.encode("utf-8")
    if not plain:
        return False
    try:
        comp = compress_text(text, mode=mode)
    except CompressionError:
        return False
    return len(comp) < (len(plain) - int(min_gain_bytes))

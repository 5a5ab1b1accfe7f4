#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import threading
import unittest
from concurrent.futures import ThreadPoolExecutor

from meshsmaz import (
    DEFAULT_CODEBOOK,
    CodebookError,
    CorruptInputError,
    SmazCodec,
    SmazError,
    decode,
    default_codec,
    encode,
)

SAMPLE_STRINGS = [
    "",
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


class SmazRoundtripTests(unittest.TestCase):
    def test_roundtrip_sample_strings(self) -> None:
        for s in SAMPLE_STRINGS:
            raw = s.encode("utf-8")
            self.assertEqual(decode(encode(raw)), raw, s)

    def test_roundtrip_every_byte_value(self) -> None:
        raw = bytes(range(256))
        self.assertEqual(decode(encode(raw)), raw)

    def test_roundtrip_long_zero_run(self) -> None:
        raw = b"\x00" * 300
        self.assertEqual(decode(encode(raw)), raw)

    def test_roundtrip_utf8_text(self) -> None:
        raw = "привет, the mesh is up 😊".encode("utf-8")
        self.assertEqual(decode(encode(raw)), raw)

    def test_english_text_shrinks(self) -> None:
        for s in ("This is a small string", "this is an example of what works very well with smaz"):
            raw = s.encode("ascii")
            self.assertLess(len(encode(raw)), len(raw), s)

    def test_empty(self) -> None:
        self.assertEqual(encode(b""), b"")
        self.assertEqual(decode(b""), b"")


class SmazEncoderTests(unittest.TestCase):
    def test_longest_match_wins(self) -> None:
        self.assertEqual(encode(b"the"), bytes([DEFAULT_CODEBOOK.index(b"the")]))
        codec = SmazCodec([b"t", b"the"])
        self.assertEqual(codec.encode(b"the"), b"\x01")
        self.assertEqual(codec.encode(b"tt"), b"\x00\x00")

    def test_full_dictionary_cover_has_no_literals(self) -> None:
        out = encode(b"the end")
        expected = bytes(
            [
                DEFAULT_CODEBOOK.index(b"the"),
                DEFAULT_CODEBOOK.index(b" e"),
                DEFAULT_CODEBOOK.index(b"nd"),
            ]
        )
        self.assertEqual(out, expected)
        self.assertTrue(all(b < 254 for b in out))

    def test_single_literal_uses_short_form(self) -> None:
        self.assertEqual(encode(b"\x00"), b"\xfe\x00")
        self.assertEqual(encode(b"A"), b"\xfeA")

    def test_literal_run_form(self) -> None:
        self.assertEqual(encode(b"\x00\x01"), b"\xff\x02\x00\x01")

    def test_literals_flushed_before_reference(self) -> None:
        self.assertEqual(
            encode(b"Q the"),
            bytes([254, ord("Q"), DEFAULT_CODEBOOK.index(b" th"), DEFAULT_CODEBOOK.index(b"e")]),
        )

    def test_long_run_split_into_chunks(self) -> None:
        out = encode(b"\x00" * 300)
        self.assertEqual(out, b"\xff\xff" + b"\x00" * 255 + b"\xff\x2d" + b"\x00" * 45)
        run_offsets = []
        pos = 0
        while pos < len(out):
            self.assertEqual(out[pos], 255)
            run_offsets.append(pos)
            pos += 2 + out[pos + 1]
        self.assertEqual(run_offsets, [0, 257])
        self.assertEqual(out[258], 45)

    def test_run_of_256_ends_with_single_literal(self) -> None:
        out = encode(b"\x00" * 256)
        self.assertEqual(out, b"\xff\xff" + b"\x00" * 255 + b"\xfe\x00")

    def test_accepts_bytearray_and_memoryview(self) -> None:
        self.assertEqual(encode(bytearray(b"the end")), encode(b"the end"))
        self.assertEqual(encode(memoryview(b"the end")), encode(b"the end"))

    def test_rejects_str(self) -> None:
        with self.assertRaises(TypeError):
            encode("the end")  # type: ignore[arg-type]

    def test_duplicate_entries_use_last_index(self) -> None:
        codec = SmazCodec(["a", "a"])
        self.assertEqual(codec.encode(b"a"), b"\x01")
        self.assertEqual(codec.decode(b"\x00\x01"), b"aa")


class SmazDecoderTests(unittest.TestCase):
    def test_truncated_run_marker(self) -> None:
        with self.assertRaises(CorruptInputError):
            decode(bytes([255]))

    def test_run_longer_than_data(self) -> None:
        with self.assertRaises(CorruptInputError):
            decode(bytes([255, 5, 0x41, 0x42]))

    def test_truncated_single_literal(self) -> None:
        with self.assertRaises(CorruptInputError):
            decode(bytes([254]))
        with self.assertRaises(CorruptInputError):
            decode(encode(b"the") + bytes([254]))

    def test_zero_length_run_is_accepted(self) -> None:
        self.assertEqual(decode(b"\xff\x00"), b"")
        self.assertEqual(decode(b"\xff\x01A"), b"A")

    def test_reference_outside_short_codebook(self) -> None:
        codec = SmazCodec([b"x", b"y"])
        self.assertEqual(codec.decode(b"\x01\x00"), b"yx")
        with self.assertRaises(CorruptInputError):
            codec.decode(b"\x02")

    def test_non_bytes_input(self) -> None:
        with self.assertRaises(CorruptInputError):
            decode("abc")  # type: ignore[arg-type]

    def test_error_hierarchy(self) -> None:
        self.assertTrue(issubclass(CorruptInputError, SmazError))
        self.assertTrue(issubclass(SmazError, ValueError))


class SmazCodecSetupTests(unittest.TestCase):
    def test_default_codebook_size(self) -> None:
        self.assertEqual(len(DEFAULT_CODEBOOK), 254)
        self.assertEqual(len(default_codec()), 254)
        self.assertEqual(len(set(DEFAULT_CODEBOOK)), 254)

    def test_oversized_codebook_rejected(self) -> None:
        with self.assertRaises(CodebookError):
            SmazCodec([bytes([i]) for i in range(255)])

    def test_empty_entry_rejected(self) -> None:
        with self.assertRaises(CodebookError):
            SmazCodec([b"a", b""])

    def test_default_codec_built_once_across_threads(self) -> None:
        barrier = threading.Barrier(8)

        def grab(_: int) -> int:
            barrier.wait()
            return id(default_codec())

        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = set(pool.map(grab, range(8)))
        self.assertEqual(len(ids), 1)

    def test_concurrent_roundtrips(self) -> None:
        samples = [s.encode("utf-8") for s in SAMPLE_STRINGS] * 20

        def roundtrip(raw: bytes) -> bool:
            return decode(encode(raw)) == raw

        with ThreadPoolExecutor(max_workers=8) as pool:
            self.assertTrue(all(pool.map(roundtrip, samples)))


if __name__ == "__main__":
    unittest.main()

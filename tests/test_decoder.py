"""Tests for rline.decoder -- incremental decoding and legacy encoding."""

from __future__ import annotations

import pytest

from rline.decoder import (
    UTF8_ACCEPT,
    UTF8_REJECT,
    Utf8Decoder,
    decode_bytes,
    encode_codepoint,
    encode_codepoints,
)


def feed_all(decoder: Utf8Decoder, data: bytes) -> list[int]:
    out: list[int] = []
    for byte in data:
        state = decoder.decode(byte)
        if state == UTF8_ACCEPT:
            out.append(decoder.codepoint)
        elif state == UTF8_REJECT:
            decoder.reset()
    return out


class TestEncodeLengths:
    """Each length threshold switches to the next encoding size."""

    @pytest.mark.parametrize(
        ("codepoint", "length"),
        [
            (0x00, 1),
            (0x7F, 1),
            (0x80, 2),
            (0x7FF, 2),
            (0x800, 3),
            (0xFFFF, 3),
            (0x10000, 4),
            (0x1FFFFF, 4),
            (0x200000, 5),
            (0x3FFFFFF, 5),
            (0x4000000, 6),
            (0x7FFFFFFF, 6),
        ],
    )
    def test_length(self, codepoint: int, length: int) -> None:
        assert len(encode_codepoint(codepoint)) == length

    def test_matches_standard_utf8_for_scalar_values(self) -> None:
        for cp in (0x41, 0xE9, 0x20AC, 0x3042, 0x1F600, 0x10FFFF):
            assert encode_codepoint(cp) == chr(cp).encode("utf-8")

    def test_encode_codepoints_concatenates(self) -> None:
        assert encode_codepoints([0x68, 0x69, 0x20AC]) == "hi€".encode("utf-8")


class TestDecodeStates:
    """State transitions while bytes of a sequence arrive."""

    def test_ascii_accepts_immediately(self) -> None:
        decoder = Utf8Decoder()
        assert decoder.decode(0x41) == UTF8_ACCEPT
        assert decoder.codepoint == 0x41

    def test_multibyte_continues_until_complete(self) -> None:
        decoder = Utf8Decoder()
        data = "€".encode("utf-8")
        assert decoder.decode(data[0]) not in (UTF8_ACCEPT, UTF8_REJECT)
        assert decoder.pending == 2
        assert decoder.decode(data[1]) not in (UTF8_ACCEPT, UTF8_REJECT)
        assert decoder.pending == 1
        assert decoder.decode(data[2]) == UTF8_ACCEPT
        assert decoder.codepoint == 0x20AC

    def test_state_survives_across_calls(self) -> None:
        decoder = Utf8Decoder()
        data = "😀".encode("utf-8")
        out = feed_all(decoder, data[:2])
        assert out == []
        out = feed_all(decoder, data[2:])
        assert out == [0x1F600]

    def test_stray_continuation_byte_rejects(self) -> None:
        decoder = Utf8Decoder()
        assert decoder.decode(0x80) == UTF8_REJECT

    def test_ff_rejects(self) -> None:
        decoder = Utf8Decoder()
        assert decoder.decode(0xFF) == UTF8_REJECT

    def test_non_continuation_inside_sequence_rejects(self) -> None:
        decoder = Utf8Decoder()
        decoder.decode(0xE2)
        assert decoder.decode(0x41) == UTF8_REJECT

    def test_reject_is_sticky_until_reset(self) -> None:
        decoder = Utf8Decoder()
        decoder.decode(0xFF)
        assert decoder.decode(0x41) == UTF8_REJECT
        decoder.reset()
        assert decoder.decode(0x41) == UTF8_ACCEPT


class TestRoundTrip:
    """Encoding then decoding byte by byte reproduces the input."""

    BOUNDARIES = [
        0x00,
        0x7F,
        0x80,
        0x7FF,
        0x800,
        0xFFFF,
        0x10000,
        0x10FFFF,
        0x1FFFFF,
        0x200000,
        0x3FFFFFF,
        0x4000000,
        0x7FFFFFFF,
    ]

    def test_boundaries(self) -> None:
        decoder = Utf8Decoder()
        assert feed_all(decoder, encode_codepoints(self.BOUNDARIES)) == self.BOUNDARIES

    def test_sampled_range(self) -> None:
        sample = list(range(0, 0x110000, 0x1F3)) + [0xD800, 0xDFFF]
        assert decode_bytes(encode_codepoints(sample)) == sample


class TestDecodeBytes:
    def test_malformed_bytes_are_dropped(self) -> None:
        assert decode_bytes(b"a\xffb") == [ord("a"), ord("b")]

    def test_truncated_tail_is_dropped(self) -> None:
        assert decode_bytes(b"ok\xe2\x82") == [ord("o"), ord("k")]

    def test_empty(self) -> None:
        assert decode_bytes(b"") == []

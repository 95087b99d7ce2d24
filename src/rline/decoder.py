"""Byte-at-a-time decoding and encoding of legacy UTF-8 streams.

The decoder is fed one byte per call and may be driven across any number
of reads; a code point becomes available on the byte that completes it.
Lead bytes for the obsolete 5- and 6-byte forms are classified as well,
so every value the encoder can produce decodes back to itself.
"""

from __future__ import annotations

from typing import Iterable

# ---------------------------------------------------------------------------
# Decoder states
# ---------------------------------------------------------------------------

UTF8_ACCEPT = 0
UTF8_REJECT = 1

# Any state above UTF8_REJECT means "continuation bytes still expected";
# the number remaining is ``state - 1``.


def _lead_byte(byte: int) -> tuple[int, int]:
    """Return ``(continuation_count, payload_mask)`` for a lead byte.

    A continuation count of ``-1`` marks a byte that cannot start a
    sequence.
    """
    if byte < 0x80:
        return 0, 0x7F
    if byte < 0xC0:
        return -1, 0
    if byte < 0xE0:
        return 1, 0x1F
    if byte < 0xF0:
        return 2, 0x0F
    if byte < 0xF8:
        return 3, 0x07
    if byte < 0xFC:
        return 4, 0x03
    if byte < 0xFE:
        return 5, 0x01
    return -1, 0


class Utf8Decoder:
    """Incremental decoder with ACCEPT / CONTINUE / REJECT states.

    ``decode`` returns the new state. After ``UTF8_ACCEPT`` the decoded
    value is in :attr:`codepoint`. After ``UTF8_REJECT`` the caller is
    expected to drop the sequence and call :meth:`reset`.
    """

    def __init__(self) -> None:
        self.state: int = UTF8_ACCEPT
        self.codepoint: int = 0

    def reset(self) -> None:
        self.state = UTF8_ACCEPT
        self.codepoint = 0

    @property
    def pending(self) -> int:
        """Number of continuation bytes still expected."""
        return self.state - 1 if self.state > UTF8_REJECT else 0

    def decode(self, byte: int) -> int:
        byte &= 0xFF

        if self.state == UTF8_REJECT:
            return self.state

        if self.state == UTF8_ACCEPT:
            count, mask = _lead_byte(byte)
            if count < 0:
                self.state = UTF8_REJECT
                return self.state
            self.codepoint = byte & mask
            self.state = UTF8_ACCEPT if count == 0 else count + 1
            return self.state

        if byte & 0xC0 != 0x80:
            self.state = UTF8_REJECT
            return self.state

        self.codepoint = (self.codepoint << 6) | (byte & 0x3F)
        self.state = UTF8_ACCEPT if self.state == 2 else self.state - 1
        return self.state


def decode_bytes(data: bytes) -> list[int]:
    """Decode a complete byte string, silently dropping malformed input."""
    decoder = Utf8Decoder()
    out: list[int] = []
    for byte in data:
        state = decoder.decode(byte)
        if state == UTF8_ACCEPT:
            out.append(decoder.codepoint)
        elif state == UTF8_REJECT:
            decoder.reset()
    return out


# ---------------------------------------------------------------------------
# Encoder
# ---------------------------------------------------------------------------


def encode_codepoint(codepoint: int) -> bytes:
    """Encode one code point using 1 to 6 bytes."""
    if codepoint < 0x80:
        return bytes((codepoint,))
    if codepoint < 0x800:
        return bytes((0xC0 | (codepoint >> 6), 0x80 | (codepoint & 0x3F)))
    if codepoint < 0x10000:
        return bytes(
            (
                0xE0 | (codepoint >> 12),
                0x80 | ((codepoint >> 6) & 0x3F),
                0x80 | (codepoint & 0x3F),
            )
        )
    if codepoint < 0x200000:
        lead, count = 0xF0, 3
    elif codepoint < 0x4000000:
        lead, count = 0xF8, 4
    else:
        lead, count = 0xFC, 5

    out = [lead | (codepoint >> (6 * count))]
    for shift in range(count - 1, -1, -1):
        out.append(0x80 | ((codepoint >> (6 * shift)) & 0x3F))
    return bytes(out)


def encode_codepoints(codepoints: Iterable[int]) -> bytes:
    return b"".join(encode_codepoint(cp) for cp in codepoints)

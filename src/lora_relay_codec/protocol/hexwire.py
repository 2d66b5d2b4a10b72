"""Hex transport wrapper for integrations that cannot carry raw bytes."""

from __future__ import annotations

import string

from ..exceptions import InvalidHexDigit, OddLengthHex

_HEX_DIGITS = frozenset(string.hexdigits)


def bytes_to_hex(data: bytes) -> str:
    """Uppercase hex, two digits per byte, no separators."""
    return bytes(data).hex().upper()


def hex_to_bytes(text: str) -> bytes:
    """Parse a hex string two digits at a time.

    Raises:
        OddLengthHex: If the string has an odd number of characters.
        InvalidHexDigit: If any pair is not two base-16 digits.
    """
    if len(text) % 2:
        raise OddLengthHex(len(text))
    out = bytearray()
    for i in range(0, len(text), 2):
        pair = text[i : i + 2]
        if not _HEX_DIGITS.issuperset(pair):
            raise InvalidHexDigit(i, pair)
        out.append(int(pair, 16))
    return bytes(out)


def text_to_hex(text: str) -> str:
    """Hex-encode a string, one byte per character."""
    return bytes_to_hex(text.encode("latin-1"))


def hex_to_text(text: str) -> str:
    return hex_to_bytes(text).decode("latin-1")

"""Error types raised by the relay codecs.

Every error is a ``ValueError`` so callers that only care about "bad input"
can catch that. The dispatcher turns them into tagged decode outcomes.
"""

from __future__ import annotations


class RelayCodecError(ValueError):
    """Base class for all codec errors."""


class FrameError(RelayCodecError):
    """Binary frame could not be decoded."""


class NotABinaryFrame(FrameError):
    """Buffer does not start with the binary magic tag.

    This is a routing signal rather than a failure: the buffer should be
    offered to the next codec.
    """


class InvalidFrameLength(FrameError):
    """Magic tag present but the length disagrees with the relay count."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid binary format: expected {expected} bytes, got {actual}"
        )


class TextError(RelayCodecError):
    """Structured-text payload could not be decoded."""


class MalformedText(TextError):
    """Payload is not JSON, or a relay shape carries invalid fields."""


class HexError(RelayCodecError):
    """Hex transport string could not be unwrapped."""


class OddLengthHex(HexError):
    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"Hex string must have an even length, got {length}")


class InvalidHexDigit(HexError):
    def __init__(self, position: int, pair: str) -> None:
        self.position = position
        self.pair = pair
        super().__init__(f"Invalid hex digit pair {pair!r} at offset {position}")


class CompactCommandError(RelayCodecError):
    """Compact (legacy single-relay) command could not be decoded."""


class StatusPacketError(RelayCodecError):
    """Relay status uplink could not be decoded."""


__all__ = [
    "RelayCodecError",
    "FrameError",
    "NotABinaryFrame",
    "InvalidFrameLength",
    "TextError",
    "MalformedText",
    "HexError",
    "OddLengthHex",
    "InvalidHexDigit",
    "CompactCommandError",
    "StatusPacketError",
]

"""Codec selection for uplink decoding and downlink encoding.

Decoding runs an ordered chain of attempts and stops at the first one
that claims the buffer:

1. binary frame, if the magic tag is present (a length mismatch is
   reported as an error, never retried as text)
2. JSON text
3. raw bytes passthrough

Encoding picks the binary frame for the multi-relay shape and JSON for
everything else.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from ..exceptions import InvalidFrameLength, MalformedText, NotABinaryFrame
from ..models.relay import RelayCommand, RelayCommandSet
from .framing import build_frame, parse_frame
from .hexwire import bytes_to_hex, hex_to_bytes
from .text import build_text, is_multi_command, load_text, relay_commands

logger = logging.getLogger(__name__)

DEFAULT_FPORT = 1
DEFAULT_CONFIRMED = False


@dataclass(frozen=True)
class BinaryPayload:
    """A decoded multi-relay binary frame."""

    commands: RelayCommandSet
    length: int
    kind: str = "multi_relay_binary"

    @property
    def relay_count(self) -> int:
        return len(self.commands)


@dataclass(frozen=True)
class JsonPayload:
    """A decoded JSON payload.

    ``commands`` is set when the JSON has a relay shape and ``None`` for
    passthrough values.
    """

    data: Any
    commands: Optional[RelayCommandSet]
    length: int
    kind: str = "json"


@dataclass(frozen=True)
class RawPayload:
    """A payload no codec recognized, surfaced unchanged."""

    data: bytes
    length: int
    kind: str = "raw_data"

    def __repr__(self) -> str:
        return f"RawPayload(data={self.data.hex(' ') or '(empty)'}, length={self.length})"


@dataclass(frozen=True)
class ErrorPayload:
    """A protocol violation under a declared binary tag."""

    error: str
    message: str
    length: int
    expected: Optional[int] = None
    actual: Optional[int] = None
    kind: str = "error"


DecodeOutcome = Union[BinaryPayload, JsonPayload, RawPayload, ErrorPayload]


@dataclass(frozen=True)
class EncodeResult:
    """Downlink bytes plus the transport hints supplied by the caller."""

    payload: bytes
    fport: int = DEFAULT_FPORT
    confirmed: bool = DEFAULT_CONFIRMED
    encoding: str = "binary"

    def to_dict(self) -> dict[str, Any]:
        return {
            "bytes": list(self.payload),
            "fPort": self.fport,
            "confirmed": self.confirmed,
        }

    @property
    def hex(self) -> str:
        return bytes_to_hex(self.payload)


def _try_binary(data: bytes) -> Optional[DecodeOutcome]:
    # once the magic tag matches, every result is final
    try:
        commands = parse_frame(data)
    except NotABinaryFrame:
        return None
    except InvalidFrameLength as exc:
        logger.warning("Rejected binary frame: %s", exc)
        return ErrorPayload(
            error="invalid_frame_length",
            message=str(exc),
            length=len(data),
            expected=exc.expected,
            actual=exc.actual,
        )
    return BinaryPayload(commands=commands, length=len(data))


def _try_text(data: bytes) -> Optional[DecodeOutcome]:
    try:
        value = load_text(data)
        commands = relay_commands(value)
    except MalformedText as exc:
        logger.debug("Payload is not relay JSON: %s", exc)
        return None
    return JsonPayload(data=value, commands=commands, length=len(data))


_DECODERS: tuple[Callable[[bytes], Optional[DecodeOutcome]], ...] = (
    _try_binary,
    _try_text,
)


def decode_payload(data: bytes) -> DecodeOutcome:
    """Decode an uplink or downlink buffer.

    Never raises for malformed input: the worst outcome is an
    ``ErrorPayload`` or a ``RawPayload``.
    """
    data = bytes(data)
    for decoder in _DECODERS:
        outcome = decoder(data)
        if outcome is not None:
            return outcome
    logger.debug("Passing through %d unrecognized byte(s)", len(data))
    return RawPayload(data=data, length=len(data))


def decode_hex_payload(text: str) -> DecodeOutcome:
    """Unwrap a hex transport string, then decode it.

    Raises:
        HexError: If ``text`` is not valid hex. The buffer is not decoded
            further in that case.
    """
    return decode_payload(hex_to_bytes(text))


def encode_command(
    value: Any,
    fport: int = DEFAULT_FPORT,
    confirmed: bool = DEFAULT_CONFIRMED,
) -> EncodeResult:
    """Encode a downlink value.

    ``RelayCommandSet`` values and dicts with a ``relays`` list become a
    binary frame. A multi-relay value that cannot be framed (more than
    255 relays, or entries of the wrong type) is sent as JSON instead, so
    no input is dropped. Everything else is sent as JSON.

    ``fport`` and ``confirmed`` are passed through unchanged.
    """
    if isinstance(value, RelayCommandSet):
        return EncodeResult(build_frame(value), fport, confirmed, "binary")

    if is_multi_command(value):
        try:
            commands = RelayCommandSet.from_dict(value, strict=False)
        except ValueError as exc:
            logger.warning("Cannot frame multi-relay command, sending JSON: %s", exc)
        else:
            return EncodeResult(build_frame(commands), fport, confirmed, "binary")

    if isinstance(value, RelayCommand):
        value = value.to_dict()
    return EncodeResult(build_text(value), fport, confirmed, "json")

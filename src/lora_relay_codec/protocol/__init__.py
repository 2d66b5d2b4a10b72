"""Protocol layer: binary frames, JSON text, hex wrapping and codec dispatch."""

from .framing import build_frame, parse_frame
from .text import build_text, parse_text
from .hexwire import bytes_to_hex, hex_to_bytes
from .dispatcher import (
    BinaryPayload,
    DecodeOutcome,
    EncodeResult,
    ErrorPayload,
    JsonPayload,
    RawPayload,
    decode_hex_payload,
    decode_payload,
    encode_command,
)

"""Payload extraction from network-server envelopes.

Integrations name the payload field differently. The aliases are tried
in order and the first non-empty value wins, so the codecs only ever see
plain bytes.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..protocol.hexwire import hex_to_bytes

PAYLOAD_ALIASES: tuple[str, ...] = ("payload_raw", "payload", "data")

_MISSING = object()


def resolve_payload(
    envelope: Mapping[str, Any],
    aliases: Sequence[str] = PAYLOAD_ALIASES,
    default: Any = None,
) -> Any:
    """Return the first present, non-empty aliased field of ``envelope``."""
    for alias in aliases:
        value = envelope.get(alias, _MISSING)
        if value is _MISSING or value is None:
            continue
        if isinstance(value, (str, bytes, list, dict)) and not value:
            continue
        return value
    return default


def payload_bytes(value: Any) -> bytes:
    """Normalize an extracted payload to bytes.

    Accepts raw bytes, a hex string, a list of byte values, or a mapping
    of index to byte value (as some consoles serialize byte arrays).

    Raises:
        HexError: If a string payload is not valid hex.
        ValueError: If a byte value is out of range or the type is not
            supported.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return hex_to_bytes(value)
    try:
        if isinstance(value, list):
            return bytes(value)
        if isinstance(value, Mapping):
            return bytes(value[key] for key in sorted(value, key=int))
    except TypeError as exc:
        raise ValueError(f"Payload byte values must be integers: {exc}") from exc
    raise ValueError(f"Unsupported payload type: {type(value).__name__}")

"""Tago payload parser.

Uplinks are turned into a flat list of Tago variables::

    {"variable": "relay_1_state", "value": 1, "unit": "bool"}

Downlinks arrive from Tago as hex-encoded JSON, e.g.
``7B2272656C617973223A5B...`` for ``{"relays":[...]}``, and are encoded
for the device with the shared dispatcher.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from ..exceptions import HexError, MalformedText
from ..protocol.dispatcher import (
    DEFAULT_FPORT,
    BinaryPayload,
    ErrorPayload,
    JsonPayload,
    decode_payload,
    encode_command,
)
from ..protocol.hexwire import bytes_to_hex, hex_to_text
from ..protocol.text import is_multi_command, load_text
from .envelope import payload_bytes, resolve_payload

logger = logging.getLogger(__name__)

DOWNLINK_MARKERS = ("downlink_url", "command")


def variable(name: str, value: Any, unit: str) -> dict[str, Any]:
    return {"variable": name, "value": value, "unit": unit}


def _relay_variables(relay_id: Any, state: bool, duration: Optional[int]) -> list[dict]:
    out = [variable(f"relay_{relay_id}_state", 1 if state else 0, "bool")]
    if duration is not None:
        out.append(variable(f"relay_{relay_id}_duration", duration, "ms"))
    return out


def _json_variables(outcome: JsonPayload) -> list[dict]:
    out = [variable("message_type", "json", "text")]
    if outcome.commands is None:
        return out

    data = outcome.data
    if is_multi_command(data):
        items = data["relays"]
        out.append(variable("relay_count", len(items), "count"))
    else:
        items = [data]
    for item, command in zip(items, outcome.commands):
        duration = command.duration_ms if "duration" in item else None
        out.extend(_relay_variables(command.relay_id, command.state, duration))
    return out


def decode_uplink(
    envelope: Mapping[str, Any], now: Optional[datetime] = None
) -> list[dict[str, Any]]:
    """Decode a device uplink into Tago variables.

    Args:
        envelope: The Tago payload object. The bytes are read from the
            first of ``payload_raw``, ``payload`` or ``data``.
        now: Timestamp to stamp on the variables, defaults to the current
            UTC time.
    """
    raw = resolve_payload(envelope)
    if raw is None:
        return [variable("error", "No payload data received", "text")]

    try:
        data = payload_bytes(raw)
    except ValueError as exc:
        logger.warning("Unusable uplink payload: %s", exc)
        return [variable("decode_error", str(exc), "text")]

    out = [variable("raw_hex", bytes_to_hex(data), "hex")]
    outcome = decode_payload(data)

    if isinstance(outcome, BinaryPayload):
        out.append(variable("message_type", "multi_relay_binary", "text"))
        out.append(variable("relay_count", outcome.relay_count, "count"))
        for command in outcome.commands:
            out.extend(
                _relay_variables(command.relay_id, command.state, command.duration_ms)
            )
    elif isinstance(outcome, ErrorPayload):
        out.append(variable("message_type", "multi_relay_binary", "text"))
        out.append(variable("relay_count", data[1], "count"))
        out.append(variable("error", outcome.message, "text"))
    elif isinstance(outcome, JsonPayload):
        out.extend(_json_variables(outcome))
    else:
        out.append(variable("message_type", "raw_data", "text"))
        out.extend(variable(f"byte_{i}", b, "int") for i, b in enumerate(data))

    stamp = (now or datetime.now(timezone.utc)).isoformat(timespec="milliseconds")
    out.append(variable("timestamp", stamp.replace("+00:00", "Z"), "datetime"))
    return out


def _error_response(message: str) -> dict[str, Any]:
    return {"error": message, "bytes": [], "fPort": DEFAULT_FPORT}


def encode_downlink(envelope: Mapping[str, Any]) -> dict[str, Any]:
    """Encode a Tago downlink for the device.

    The command is read from the aliased payload fields, falling back to
    the envelope itself. Strings are tried as hex-encoded JSON first, then
    as plain JSON.

    Returns:
        ``{"bytes": [...], "fPort": 1, "confirmed": False}``, or an
        ``error`` entry with empty bytes when the command is unreadable.
        Commands that are not JSON objects yield empty bytes.
    """
    command = resolve_payload(envelope, default=envelope)

    if isinstance(command, str) and command:
        try:
            value = load_text(hex_to_text(command))
        except (HexError, MalformedText) as hex_exc:
            try:
                value = load_text(command)
            except MalformedText as json_exc:
                return _error_response(
                    f"Failed to parse command data: {hex_exc} / {json_exc}"
                )
    elif isinstance(command, Mapping):
        value = dict(command)
    else:
        return _error_response("Invalid command data format")

    if not isinstance(value, dict):
        logger.warning("Ignoring non-object downlink command: %r", value)
        return {"bytes": [], "fPort": DEFAULT_FPORT, "confirmed": False}
    return encode_command(value, fport=DEFAULT_FPORT).to_dict()


def is_downlink(envelope: Mapping[str, Any]) -> bool:
    return (
        any(envelope.get(marker) for marker in DOWNLINK_MARKERS)
        or envelope.get("type") == "downlink"
    )


def parse(envelope: Mapping[str, Any]) -> list[dict[str, Any]] | dict[str, Any]:
    """Tago entry point: encode downlinks, decode everything else."""
    if is_downlink(envelope):
        return encode_downlink(envelope)
    return decode_uplink(envelope)

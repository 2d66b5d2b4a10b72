"""The Things Network payload formatter.

Mirrors the formatter functions TTN calls: ``encodeDownlink``,
``decodeDownlink`` and ``decodeUplink``. Inputs and outputs use TTN's
field names (``bytes``, ``fPort``, ``data``, ``errors``).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..exceptions import CompactCommandError, StatusPacketError
from ..protocol.compact import is_compact_command, parse_compact_command
from ..protocol.dispatcher import (
    BinaryPayload,
    ErrorPayload,
    JsonPayload,
    decode_payload,
    encode_command,
)
from ..protocol.hexwire import bytes_to_hex
from ..protocol.status import STATUS_FPORT, parse_status_packet
from .envelope import payload_bytes

logger = logging.getLogger(__name__)

TTN_DEFAULT_FPORT = 2


def _message_bytes(message: Mapping[str, Any]) -> bytes:
    return payload_bytes(message.get("bytes") or [])


def encode_downlink(message: Mapping[str, Any]) -> dict[str, Any]:
    """Encode ``message["data"]`` for the device.

    Objects go through the shared dispatcher (binary frame for the
    multi-relay shape, JSON otherwise). A list is taken as ready-made
    byte values.
    """
    data = message.get("data")
    fport = message.get("fPort") or TTN_DEFAULT_FPORT

    if isinstance(data, list):
        try:
            return {"bytes": list(bytes(data)), "fPort": fport}
        except (TypeError, ValueError) as exc:
            return {"bytes": [], "fPort": fport, "errors": [str(exc)]}
    if isinstance(data, Mapping):
        result = encode_command(dict(data), fport=fport)
        return {"bytes": list(result.payload), "fPort": result.fport}
    return {"bytes": [], "fPort": fport}


def decode_downlink(message: Mapping[str, Any]) -> dict[str, Any]:
    """Decode a downlink back into structured data for the console."""
    try:
        data = _message_bytes(message)
    except ValueError as exc:
        return {"errors": [str(exc)]}

    if is_compact_command(data):
        out: dict[str, Any] = {"bytes": list(data), "type": "command"}
        try:
            out["command"] = parse_compact_command(data).to_dict()
        except CompactCommandError as exc:
            logger.debug("Short downlink is not a relay command: %s", exc)
        return {"data": out}

    outcome = decode_payload(data)
    if isinstance(outcome, BinaryPayload):
        return {"data": outcome.commands.to_dict()}
    if isinstance(outcome, JsonPayload):
        return {"data": outcome.data}
    if isinstance(outcome, ErrorPayload):
        return {"errors": [outcome.message]}
    return {"data": {"bytes": list(data), "type": "binary"}}


def decode_uplink(message: Mapping[str, Any]) -> dict[str, Any]:
    """Expose the uplink as hex, plus relay states for status packets."""
    try:
        data = _message_bytes(message)
    except ValueError as exc:
        return {"errors": [str(exc)]}
    out: dict[str, Any] = {"hex": bytes_to_hex(data)}

    if message.get("fPort") == STATUS_FPORT:
        try:
            status = parse_status_packet(data)
        except StatusPacketError as exc:
            return {"data": out, "warnings": [str(exc)]}
        out["relays"] = status.to_dict()
    return {"data": out}

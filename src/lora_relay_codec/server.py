"""MCP server entry point for the LoRa relay codec.

Exposes the relay command codecs as tools, resources, and prompts via
the Model Context Protocol using the official Python MCP SDK with stdio
transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .exceptions import RelayCodecError
from .models.relay import RelayCommand
from .protocol.compact import build_compact_command
from .protocol.dispatcher import (
    DEFAULT_FPORT,
    BinaryPayload,
    ErrorPayload,
    JsonPayload,
    DecodeOutcome,
    decode_hex_payload,
    encode_command as _encode_command,
)
from .protocol.framing import MAGIC, RECORD_SIZE
from .protocol.hexwire import (
    bytes_to_hex,
    hex_to_bytes,
    hex_to_text as _hex_to_text,
    text_to_hex as _text_to_hex,
)
from .protocol.status import parse_status_packet
from .integrations import tago

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "lora-relay-codec",
    instructions="Encode and decode relay commands for a LoRaWAN relay controller",
)


def _outcome_to_dict(outcome: DecodeOutcome) -> dict[str, Any]:
    result: dict[str, Any] = {"message_type": outcome.kind, "length": outcome.length}
    if isinstance(outcome, BinaryPayload):
        result["relay_count"] = outcome.relay_count
        result["relays"] = outcome.commands.to_dict()["relays"]
    elif isinstance(outcome, JsonPayload):
        result["data"] = outcome.data
        if outcome.commands is not None:
            result["relays"] = outcome.commands.to_dict()["relays"]
    elif isinstance(outcome, ErrorPayload):
        result["error"] = outcome.message
        result["expected"] = outcome.expected
        result["actual"] = outcome.actual
    else:
        result["hex"] = bytes_to_hex(outcome.data)
    return result


# ─── CODEC TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def encode_command(
    command: dict[str, Any],
    fport: int = DEFAULT_FPORT,
    confirmed: bool = False,
) -> dict[str, Any]:
    """Encode a downlink command for the relay controller.

    Args:
        command: Either {"relays": [{"relay": 1, "state": true, "duration": 5000}, ...]}
                 (sent as a binary frame) or any other object (sent as JSON),
                 e.g. {"relay": 1, "state": true}.
        fport: LoRaWAN port to send on (default 1).
        confirmed: Request a confirmed downlink.
    """
    result = _encode_command(command, fport=fport, confirmed=confirmed)
    out = result.to_dict()
    out["hex"] = result.hex
    out["encoding"] = result.encoding
    return out


@mcp.tool()
def decode_payload(payload_hex: str) -> dict[str, Any]:
    """Decode a hex-encoded uplink or downlink payload.

    Binary frames (leading 0xFF) are decoded to relay commands, JSON is
    parsed, and anything else is returned as raw hex.

    Args:
        payload_hex: Payload bytes as hex, e.g. "FF0201018813".
    """
    try:
        outcome = decode_hex_payload(payload_hex)
    except RelayCodecError as exc:
        return {"error": str(exc)}
    return _outcome_to_dict(outcome)


@mcp.tool()
def decode_hex(payload_hex: str) -> dict[str, Any]:
    """Unwrap a hex transport string into its byte values.

    Args:
        payload_hex: Hex digits, two per byte, e.g. "FF02".
    """
    try:
        data = hex_to_bytes(payload_hex)
    except RelayCodecError as exc:
        return {"error": str(exc)}
    return {"bytes": list(data), "length": len(data)}


@mcp.tool()
def text_to_hex(text: str) -> dict[str, str]:
    """Hex-encode text (e.g. a JSON command) for consoles that only accept hex."""
    try:
        return {"hex": _text_to_hex(text)}
    except UnicodeEncodeError as exc:
        return {"error": f"Text must use single-byte characters: {exc}"}


@mcp.tool()
def hex_to_text(payload_hex: str) -> dict[str, str]:
    """Decode a hex string back to text, one character per byte."""
    try:
        return {"text": _hex_to_text(payload_hex)}
    except RelayCodecError as exc:
        return {"error": str(exc)}


@mcp.tool()
def build_compact(relay: int, state: bool, duration_s: int = 0) -> dict[str, Any]:
    """Build the firmware's compact single-relay command.

    Args:
        relay: Relay number (1-8).
        state: True to switch on.
        duration_s: Seconds before the relay switches back off (0-255).
    """
    if not 0 <= duration_s <= 255:
        return {"error": "Duration must be 0-255 seconds"}
    try:
        data = build_compact_command(
            RelayCommand(relay_id=relay, state=state, duration_ms=duration_s * 1000)
        )
    except ValueError as exc:
        return {"error": str(exc)}
    return {"bytes": list(data), "hex": bytes_to_hex(data)}


@mcp.tool()
def decode_status(payload_hex: str) -> dict[str, Any]:
    """Decode the device's periodic relay status packet (port 2).

    Args:
        payload_hex: The 2-byte status payload as hex, e.g. "0500".
    """
    try:
        status = parse_status_packet(hex_to_bytes(payload_hex))
    except RelayCodecError as exc:
        return {"error": str(exc)}
    return {"relays": status.to_dict(), "on": status.on_relays()}


# ─── INTEGRATION TOOLS ────────────────────────────────────────────────

@mcp.tool()
def tago_uplink(envelope: dict[str, Any]) -> dict[str, Any]:
    """Run the Tago uplink parser on a payload envelope.

    Args:
        envelope: Tago payload object, e.g. {"payload_raw": "FF0201018813..."}.
    """
    return {"variables": tago.decode_uplink(envelope)}


@mcp.tool()
def tago_downlink(envelope: dict[str, Any]) -> dict[str, Any]:
    """Run the Tago downlink encoder on a payload envelope.

    Args:
        envelope: Tago payload object whose payload is hex-encoded JSON,
                  plain JSON text, or an object.
    """
    return tago.encode_downlink(envelope)


# ─── RESOURCES ────────────────────────────────────────────────────────

@mcp.resource("relay://formats/binary")
def resource_binary_format() -> str:
    """Layout of the multi-relay binary frame."""
    return json.dumps({
        "magic": f"0x{MAGIC:02X}",
        "header": ["magic", "relay_count"],
        "record_size": RECORD_SIZE,
        "record": ["relay_id", "state", "duration_lo", "duration_hi"],
        "duration_unit": "ms",
        "byte_order": "little",
    })


@mcp.resource("relay://formats/json")
def resource_json_format() -> str:
    """Accepted JSON command shapes."""
    return json.dumps({
        "single": {"relay": 1, "state": True, "duration": 5000},
        "multi": {"relays": [{"relay": 1, "state": True, "duration": 5000}]},
        "state_values": [True, False, 1, 0],
    })


@mcp.resource("relay://formats/compact")
def resource_compact_format() -> str:
    """Layout of the firmware's compact single-relay command."""
    return json.dumps({
        "bytes": ["type (0x01)", "relay index bits 0-2 | state bit 7", "duration seconds (optional)"],
        "relay_index": "0-based (relay 1 = 0)",
    })


# ─── PROMPTS ──────────────────────────────────────────────────────────

@mcp.prompt()
def compose_downlink() -> str:
    """Help build a relay downlink from a plain-language request."""
    return """Turn the user's request into relay commands.
Relays are numbered 1-8. Durations are in milliseconds (max 65535);
0 means the relay stays in its new state.

For several relays, call encode_command with
{"relays": [{"relay": n, "state": true/false, "duration": ms}, ...]}
which produces a compact binary frame.
For a single relay, {"relay": n, "state": true/false} is sent as JSON.

If the console only accepts hex, pass the JSON through text_to_hex."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

"""Compact single-relay command understood by the relay firmware.

Layout::

    +--------------+-------------------------------+------------------+
    | Command type | Relay byte                    | Duration (opt.)  |
    | 0x01         | bits 0-2: index, bit 7: state | seconds, 0-255   |
    +--------------+-------------------------------+------------------+

The relay index is 0-based on the wire: relay 1 is sent as index 0.
The firmware treats any 1-3 byte downlink as a compact command.
"""

from __future__ import annotations

from ..exceptions import CompactCommandError
from ..models.relay import RelayCommand

RELAY_CONTROL = 0x01
RELAY_INDEX_MASK = 0x07
STATE_BIT = 0x80
RELAY_ID_WIRE_OFFSET = 1
MAX_COMPACT_LENGTH = 3
MAX_DURATION_S = 0xFF


def is_compact_command(data: bytes) -> bool:
    return 1 <= len(data) <= MAX_COMPACT_LENGTH


def build_compact_command(command: RelayCommand) -> bytes:
    """Encode one relay command in the compact form.

    The duration is rounded down to whole seconds and capped at 255.
    The duration byte is omitted when it is 0.

    Raises:
        ValueError: If the relay id is not 1-8.
    """
    if not 1 <= command.relay_id <= RELAY_INDEX_MASK + 1:
        raise ValueError(f"Compact commands address relays 1-8, got {command.relay_id}")
    relay_byte = command.relay_id - RELAY_ID_WIRE_OFFSET
    if command.state:
        relay_byte |= STATE_BIT
    seconds = min(command.duration_ms // 1000, MAX_DURATION_S)
    if seconds:
        return bytes([RELAY_CONTROL, relay_byte, seconds])
    return bytes([RELAY_CONTROL, relay_byte])


def parse_compact_command(data: bytes) -> RelayCommand:
    """Decode a compact command.

    Raises:
        CompactCommandError: If the payload is not 2-3 bytes or the
            command type is not relay control.
    """
    if not is_compact_command(data):
        raise CompactCommandError(
            f"Compact commands are 1-{MAX_COMPACT_LENGTH} bytes, got {len(data)}"
        )
    if data[0] != RELAY_CONTROL:
        raise CompactCommandError(f"Unknown compact command type 0x{data[0]:02X}")
    if len(data) < 2:
        raise CompactCommandError("Relay control command is missing the relay byte")

    relay_byte = data[1]
    seconds = data[2] if len(data) > 2 else 0
    return RelayCommand(
        relay_id=(relay_byte & RELAY_INDEX_MASK) + RELAY_ID_WIRE_OFFSET,
        state=bool(relay_byte & STATE_BIT),
        duration_ms=seconds * 1000,
    )

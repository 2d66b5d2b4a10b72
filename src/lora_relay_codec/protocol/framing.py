"""Multi-relay binary frame builder and parser.

Frame layout::

    +-------+-------+-----------------------------------------------+
    | Magic | Count |           Records (Count x 4 bytes)           |
    | 0xFF  | 1 byte| relay_id | state | duration_lo | duration_hi  |
    +-------+-------+-----------------------------------------------+

- Magic: 0xFF, marks the buffer as a binary frame
- Count: number of records that follow (0-255)
- relay_id: stored as-is, no offset (relay 1 is 0x01)
- state: 0 or 1; any nonzero byte decodes as on
- duration: little-endian milliseconds, 0 = no timed revert
"""

from __future__ import annotations

import logging

from ..exceptions import InvalidFrameLength, NotABinaryFrame
from ..models.relay import RelayCommand, RelayCommandSet

logger = logging.getLogger(__name__)

MAGIC = 0xFF
HEADER_SIZE = 2
RECORD_SIZE = 4
RELAY_ID_WIRE_OFFSET = 0


def expected_frame_length(relay_count: int) -> int:
    """Total frame size for a given relay count."""
    return HEADER_SIZE + RECORD_SIZE * relay_count


def is_binary_frame(data: bytes) -> bool:
    """True if ``data`` carries the binary magic tag."""
    return len(data) >= HEADER_SIZE and data[0] == MAGIC


def build_frame(commands: RelayCommandSet) -> bytes:
    """Encode a relay command set as a binary frame.

    Relay ids are masked to a byte and durations to 16 bits, so
    out-of-range values wrap instead of failing.

    Args:
        commands: At most 255 commands, in transport order.

    Returns:
        The frame, ``2 + 4 * len(commands)`` bytes long.
    """
    buf = bytearray([MAGIC, len(commands)])
    for command in commands:
        duration = command.duration_ms & 0xFFFF
        buf.append((command.relay_id - RELAY_ID_WIRE_OFFSET) & 0xFF)
        buf.append(1 if command.state else 0)
        buf += duration.to_bytes(2, "little")
    return bytes(buf)


def parse_frame(data: bytes) -> RelayCommandSet:
    """Decode a binary frame into a relay command set.

    Raises:
        NotABinaryFrame: If the buffer is shorter than the header or does
            not start with the magic tag.
        InvalidFrameLength: If the buffer size disagrees with the count
            byte. Nothing is decoded in that case.
    """
    if not is_binary_frame(data):
        raise NotABinaryFrame(
            f"Not a binary relay frame: {bytes(data[:2]).hex(' ') or '(empty)'}"
        )

    relay_count = data[1]
    expected = expected_frame_length(relay_count)
    if len(data) != expected:
        raise InvalidFrameLength(expected=expected, actual=len(data))

    commands = []
    for i in range(relay_count):
        offset = HEADER_SIZE + i * RECORD_SIZE
        record = data[offset : offset + RECORD_SIZE]
        commands.append(
            RelayCommand(
                relay_id=record[0] + RELAY_ID_WIRE_OFFSET,
                state=record[1] != 0,
                duration_ms=int.from_bytes(record[2:4], "little"),
            )
        )

    logger.debug("Parsed binary frame with %d relay(s)", relay_count)
    return RelayCommandSet(tuple(commands))

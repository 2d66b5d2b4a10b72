"""Periodic relay status uplink.

The device sends ``[state_bitmask, 0x00]`` on port 2, where bit *i* of
the mask is the state of relay *i + 1*.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..exceptions import StatusPacketError

STATUS_FPORT = 2
STATUS_PACKET_SIZE = 2
RELAY_CHANNELS = 8


@dataclass(frozen=True)
class RelayStatus:
    """States of all relay channels, relay 1 first."""

    states: tuple[bool, ...]

    def on_relays(self) -> list[int]:
        """1-based ids of the relays that are on."""
        return [i + 1 for i, state in enumerate(self.states) if state]

    def to_dict(self) -> dict:
        return {f"relay_{i + 1}": state for i, state in enumerate(self.states)}


def build_status_packet(states: Sequence[bool]) -> bytes:
    """Pack up to 8 relay states into a status packet.

    Raises:
        ValueError: If more than 8 states are given.
    """
    if len(states) > RELAY_CHANNELS:
        raise ValueError(f"Status packets carry {RELAY_CHANNELS} relays, got {len(states)}")
    mask = 0
    for i, state in enumerate(states):
        if state:
            mask |= 1 << i
    return bytes([mask, 0])


def parse_status_packet(data: bytes) -> RelayStatus:
    """Unpack a status packet.

    Raises:
        StatusPacketError: If the payload is not exactly 2 bytes.
    """
    if len(data) != STATUS_PACKET_SIZE:
        raise StatusPacketError(
            f"Status packet must be {STATUS_PACKET_SIZE} bytes, got {len(data)}"
        )
    mask = data[0]
    return RelayStatus(
        states=tuple(bool(mask & (1 << i)) for i in range(RELAY_CHANNELS))
    )

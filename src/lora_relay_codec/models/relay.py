"""Relay command models shared by every codec.

Relay ids are 1-based internally (relay 1 is the first channel). Codecs
that store a different numbering on the wire convert at their boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

MAX_RELAYS_PER_SET = 255  # count is a single byte on the wire
MAX_DURATION_MS = 0xFFFF
RELAY_ID_PLACEHOLDER = 0  # used when an encode input omits the relay number


def parse_state(value: Any) -> bool:
    """Map an accepted state literal (bool, or integer 0/1) to a bool.

    Raises:
        ValueError: For any other representation.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return value == 1
    raise ValueError(f"Relay state must be true/false or 0/1, got {value!r}")


def _parse_int(name: str, value: Any, limit: int, strict: bool) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Relay {name} must be an integer, got {value!r}")
    if strict and not 0 <= value <= limit:
        raise ValueError(f"Relay {name} must be 0-{limit}, got {value}")
    return value


@dataclass(frozen=True)
class RelayCommand:
    """One relay's instruction or reported state."""

    relay_id: int
    state: bool
    duration_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "relay": self.relay_id,
            "state": self.state,
            "duration": self.duration_ms,
        }

    @classmethod
    def from_dict(cls, item: dict[str, Any], strict: bool = True) -> RelayCommand:
        """Build a command from the single-command text shape.

        ``relay`` falls back to a placeholder, ``state`` to off and
        ``duration`` to 0 when absent. With ``strict`` the relay id must
        fit a byte and the duration 16 bits; without it out-of-range
        integers are kept and wrapped later by the binary encoder.

        Raises:
            ValueError: If a field has the wrong type or range.
        """
        if not isinstance(item, dict):
            raise ValueError(f"Relay entry must be an object, got {item!r}")
        relay_id = _parse_int(
            "relay", item.get("relay", RELAY_ID_PLACEHOLDER), 0xFF, strict
        )
        state = parse_state(item.get("state", False))
        duration = _parse_int(
            "duration", item.get("duration", 0), MAX_DURATION_MS, strict
        )
        return cls(relay_id=relay_id, state=state, duration_ms=duration)


@dataclass(frozen=True)
class RelayCommandSet:
    """An ordered sequence of relay commands, at most 255 long."""

    commands: tuple[RelayCommand, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.commands, tuple):
            object.__setattr__(self, "commands", tuple(self.commands))
        if len(self.commands) > MAX_RELAYS_PER_SET:
            raise ValueError(
                f"A relay command set holds at most {MAX_RELAYS_PER_SET} "
                f"commands, got {len(self.commands)}"
            )

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self) -> Iterator[RelayCommand]:
        return iter(self.commands)

    def __getitem__(self, index: int) -> RelayCommand:
        return self.commands[index]

    @classmethod
    def of(cls, commands: Iterable[RelayCommand]) -> RelayCommandSet:
        return cls(tuple(commands))

    def to_dict(self) -> dict[str, Any]:
        """Render as the multi-command text shape ``{"relays": [...]}``."""
        return {"relays": [command.to_dict() for command in self.commands]}

    @classmethod
    def from_dict(cls, data: dict[str, Any], strict: bool = True) -> RelayCommandSet:
        """Build a set from the multi-command text shape.

        Raises:
            ValueError: If ``relays`` is not a list, holds more than 255
                entries, or any entry is invalid.
        """
        relays = data.get("relays") if isinstance(data, dict) else None
        if not isinstance(relays, list):
            raise ValueError("Multi-relay command needs a 'relays' list")
        return cls(tuple(RelayCommand.from_dict(item, strict) for item in relays))

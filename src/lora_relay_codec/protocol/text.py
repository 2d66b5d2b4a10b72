"""Structured-text (JSON) codec for relay commands.

Two shapes are recognized by field presence::

    {"relay": 1, "state": true, "duration": 5000}
    {"relays": [{"relay": 1, "state": true}, ...]}

Any other JSON value passes through untouched, since the same path also
carries non-relay telemetry. Text is mapped one byte per character.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from ..exceptions import MalformedText
from ..models.relay import RelayCommand, RelayCommandSet

TEXT_ENCODING = "latin-1"


def is_multi_command(value: Any) -> bool:
    """True if ``value`` has the ``{"relays": [...]}`` shape."""
    return isinstance(value, dict) and isinstance(value.get("relays"), list)


def is_single_command(value: Any) -> bool:
    return isinstance(value, dict) and "relay" in value


def load_text(data: bytes | str) -> Any:
    """Parse a payload as JSON without interpreting it.

    Raises:
        MalformedText: If the payload is not JSON.
    """
    text = data.decode(TEXT_ENCODING) if isinstance(data, (bytes, bytearray)) else data
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedText(f"Payload is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise MalformedText("Payload JSON is nested too deeply") from exc


def relay_commands(value: Any) -> Optional[RelayCommandSet]:
    """Map a parsed JSON value to relay commands, or ``None`` if it has
    neither relay shape.

    Raises:
        MalformedText: If a relay shape carries a field with an
            unsupported type or range.
    """
    try:
        if is_multi_command(value):
            return RelayCommandSet.from_dict(value)
        if is_single_command(value):
            return RelayCommandSet((RelayCommand.from_dict(value),))
    except ValueError as exc:
        raise MalformedText(str(exc)) from exc
    return None


def parse_text(data: bytes | str) -> RelayCommandSet | Any:
    """Decode a JSON payload.

    Returns:
        A ``RelayCommandSet`` for either relay shape (a single command
        becomes a one-element set), otherwise the parsed value itself.

    Raises:
        MalformedText: If the payload is not JSON, or a relay shape
            carries a field with an unsupported type or range.
    """
    value = load_text(data)
    commands = relay_commands(value)
    return value if commands is None else commands


def build_text(value: Any) -> bytes:
    """Serialize a value to compact JSON bytes.

    Relay models are rendered through ``to_dict()`` first. Non-ASCII
    characters are escaped, so every character maps to one byte.
    """
    if isinstance(value, (RelayCommand, RelayCommandSet)):
        value = value.to_dict()
    text = json.dumps(value, separators=(",", ":"))
    return text.encode(TEXT_ENCODING)

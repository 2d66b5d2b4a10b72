"""Tests for relay command models."""

import pytest

from lora_relay_codec.models.relay import (
    RelayCommand,
    RelayCommandSet,
    parse_state,
)


def test_parse_state_literals():
    assert parse_state(True) is True
    assert parse_state(False) is False
    assert parse_state(1) is True
    assert parse_state(0) is False


def test_parse_state_rejects_other_values():
    """Only booleans and 0/1 are accepted."""
    for value in (2, -1, "on", "true", None, 1.0, [], {}):
        with pytest.raises(ValueError):
            parse_state(value)


def test_command_from_dict_defaults():
    """Missing duration is 0, missing state is off."""
    command = RelayCommand.from_dict({"relay": 3})
    assert command == RelayCommand(relay_id=3, state=False, duration_ms=0)


def test_command_from_dict_placeholder_relay():
    assert RelayCommand.from_dict({"state": True}).relay_id == 0


def test_command_from_dict_strict_ranges():
    with pytest.raises(ValueError):
        RelayCommand.from_dict({"relay": 1, "state": True, "duration": 70000})
    with pytest.raises(ValueError):
        RelayCommand.from_dict({"relay": 300, "state": True})
    with pytest.raises(ValueError):
        RelayCommand.from_dict({"relay": 1, "state": True, "duration": -5})


def test_command_from_dict_lenient_ranges():
    """Without strict checks, large integers are kept for wrapping."""
    command = RelayCommand.from_dict(
        {"relay": 1, "state": True, "duration": 70000}, strict=False
    )
    assert command.duration_ms == 70000


def test_command_from_dict_rejects_types():
    for item in (
        {"relay": "1", "state": True},
        {"relay": True, "state": True},
        {"relay": 1, "state": True, "duration": 1.5},
        {"relay": 1, "state": "yes"},
    ):
        with pytest.raises(ValueError):
            RelayCommand.from_dict(item, strict=False)


def test_command_to_dict():
    assert RelayCommand(2, True, 500).to_dict() == {
        "relay": 2,
        "state": True,
        "duration": 500,
    }


def test_set_from_dict():
    commands = RelayCommandSet.from_dict({"relays": [
        {"relay": 1, "state": True, "duration": 5000},
        {"relay": 2, "state": 0},
    ]})
    assert len(commands) == 2
    assert commands[1] == RelayCommand(2, False, 0)


def test_set_from_dict_requires_list():
    with pytest.raises(ValueError):
        RelayCommandSet.from_dict({"relays": {"relay": 1}})
    with pytest.raises(ValueError):
        RelayCommandSet.from_dict({"relays": [1, 2]})


def test_set_size_limit():
    """The count byte limits a set to 255 commands."""
    RelayCommandSet(tuple(RelayCommand(1, True) for _ in range(255)))
    with pytest.raises(ValueError):
        RelayCommandSet(tuple(RelayCommand(1, True) for _ in range(256)))


def test_set_accepts_list_and_compares_by_value():
    a = RelayCommandSet([RelayCommand(1, True)])
    b = RelayCommandSet.of(iter([RelayCommand(1, True)]))
    assert a == b
    assert isinstance(a.commands, tuple)


def test_set_to_dict():
    commands = RelayCommandSet((RelayCommand(1, True, 5000),))
    assert commands.to_dict() == {
        "relays": [{"relay": 1, "state": True, "duration": 5000}]
    }

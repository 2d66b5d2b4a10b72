"""Tests for codec selection on decode and encode."""

import logging

import pytest

from lora_relay_codec.exceptions import HexError
from lora_relay_codec.models.relay import RelayCommand, RelayCommandSet
from lora_relay_codec.protocol.dispatcher import (
    BinaryPayload,
    EncodeResult,
    ErrorPayload,
    JsonPayload,
    RawPayload,
    decode_hex_payload,
    decode_payload,
    encode_command,
)

SCENARIO_A = bytes([0xFF, 0x02, 0x01, 0x01, 0x88, 0x13, 0x02, 0x00, 0x10, 0x27])
SCENARIO_B_INPUT = {
    "relays": [
        {"relay": 1, "state": True, "duration": 5000},
        {"relay": 2, "state": False, "duration": 0},
    ]
}
SCENARIO_B_BYTES = bytes([0xFF, 0x02, 0x01, 0x01, 0x88, 0x13, 0x02, 0x00, 0x00, 0x00])


def test_decode_binary_frame():
    """Scenario: a two-relay frame decodes as binary."""
    outcome = decode_payload(SCENARIO_A)
    assert isinstance(outcome, BinaryPayload)
    assert outcome.kind == "multi_relay_binary"
    assert outcome.relay_count == 2
    assert outcome.length == 10
    assert list(outcome.commands) == [
        RelayCommand(1, True, 5000),
        RelayCommand(2, False, 10000),
    ]


def test_decode_single_relay_json():
    """Scenario: single-relay JSON is classified as JSON, not binary."""
    outcome = decode_payload(b'{"relay":1,"state":true,"duration":5000}')
    assert isinstance(outcome, JsonPayload)
    assert outcome.kind == "json"
    assert outcome.commands == RelayCommandSet((RelayCommand(1, True, 5000),))
    assert outcome.data == {"relay": 1, "state": True, "duration": 5000}


def test_decode_truncated_frame():
    """Scenario: a short frame is an error with both sizes."""
    outcome = decode_payload(bytes([0xFF, 0x02, 0x01, 0x01]))
    assert isinstance(outcome, ErrorPayload)
    assert outcome.error == "invalid_frame_length"
    assert outcome.expected == 10
    assert outcome.actual == 4
    assert outcome.length == 4


def test_magic_byte_never_falls_through_to_text():
    """A bad frame is reported even if the rest would parse otherwise."""
    outcome = decode_payload(b"\xFF\x05{}")
    assert isinstance(outcome, ErrorPayload)
    assert outcome.expected == 22


def test_lone_magic_byte_is_raw():
    """One 0xFF byte is too short to be a frame, and is not JSON."""
    outcome = decode_payload(b"\xFF")
    assert isinstance(outcome, RawPayload)


def test_decode_passthrough_json():
    outcome = decode_payload(b'{"battery":3.7}')
    assert isinstance(outcome, JsonPayload)
    assert outcome.commands is None
    assert outcome.data == {"battery": 3.7}


def test_decode_raw_fallback():
    """Unrecognized payloads are surfaced, not discarded."""
    outcome = decode_payload(bytes([0x05, 0x00]))
    assert isinstance(outcome, RawPayload)
    assert outcome.kind == "raw_data"
    assert outcome.data == b"\x05\x00"
    assert outcome.length == 2


def test_decode_malformed_relay_json_is_raw():
    """Relay JSON with an unsupported state falls back to raw bytes."""
    data = b'{"relay":1,"state":"on"}'
    outcome = decode_payload(data)
    assert isinstance(outcome, RawPayload)
    assert outcome.data == data


def test_decode_accepts_bytearray():
    outcome = decode_payload(bytearray(SCENARIO_A))
    assert isinstance(outcome, BinaryPayload)


def test_decode_hex_payload():
    outcome = decode_hex_payload("7B2272656C6179223A312C227374617465223A747275657D")
    assert isinstance(outcome, JsonPayload)
    assert outcome.commands[0] == RelayCommand(1, True, 0)


def test_decode_hex_payload_errors_propagate():
    """Bad hex stops before any frame or text decoding."""
    with pytest.raises(HexError):
        decode_hex_payload("FF0")
    with pytest.raises(HexError):
        decode_hex_payload("GG")


def test_encode_multi_relay_as_binary():
    """Scenario: the multi-relay shape encodes to a binary frame."""
    result = encode_command(SCENARIO_B_INPUT)
    assert result.payload == SCENARIO_B_BYTES
    assert result.encoding == "binary"
    assert result.hex == "FF020101881302000000"


def test_encode_command_set_as_binary():
    commands = RelayCommandSet((RelayCommand(1, True, 5000), RelayCommand(2, False)))
    assert encode_command(commands).payload == SCENARIO_B_BYTES


def test_encode_defaults_missing_fields():
    """Missing relay number and duration are sent as 0."""
    result = encode_command({"relays": [{"state": True}]})
    assert result.payload == bytes([0xFF, 0x01, 0x00, 0x01, 0x00, 0x00])


def test_encode_wraps_long_duration():
    result = encode_command({"relays": [{"relay": 1, "state": 1, "duration": 65536 + 10}]})
    assert result.payload[4:6] == bytes([10, 0])


def test_encode_single_relay_as_json():
    result = encode_command({"relay": 1, "state": True, "duration": 5000})
    assert result.encoding == "json"
    assert result.payload == b'{"relay":1,"state":true,"duration":5000}'


def test_encode_relay_command_as_json():
    result = encode_command(RelayCommand(3, False))
    assert result.payload == b'{"relay":3,"state":false,"duration":0}'


def test_encode_unframeable_multi_relay_falls_back_to_json(caplog):
    """A relays list that cannot be framed is still sent, as JSON."""
    value = {"relays": [{"relay": 1, "state": "on"}]}
    with caplog.at_level(logging.WARNING):
        result = encode_command(value)
    assert result.encoding == "json"
    assert result.payload == b'{"relays":[{"relay":1,"state":"on"}]}'
    assert "Cannot frame" in caplog.text


def test_encode_too_many_relays_falls_back_to_json():
    value = {"relays": [{"relay": 1, "state": True}] * 256}
    assert encode_command(value).encoding == "json"


def test_encode_passes_transport_hints_through():
    result = encode_command(SCENARIO_B_INPUT, fport=7, confirmed=True)
    assert result.fport == 7
    assert result.confirmed is True
    assert result.to_dict() == {
        "bytes": list(SCENARIO_B_BYTES),
        "fPort": 7,
        "confirmed": True,
    }


def test_encode_result_defaults():
    result = encode_command({"relay": 1, "state": False})
    assert result.fport == 1
    assert result.confirmed is False


def test_encode_decode_roundtrip():
    original = RelayCommandSet((RelayCommand(8, True, 65535), RelayCommand(1, False, 1)))
    outcome = decode_payload(encode_command(original).payload)
    assert isinstance(outcome, BinaryPayload)
    assert outcome.commands == original


def test_encode_result_is_value():
    assert EncodeResult(b"\x01") == EncodeResult(b"\x01", 1, False, "binary")


def test_deeply_nested_json_is_raw():
    """JSON nested past the parser's limit falls back to raw bytes."""
    data = b"[" * 100000
    outcome = decode_payload(data)
    assert isinstance(outcome, RawPayload)
    assert outcome.length == 100000

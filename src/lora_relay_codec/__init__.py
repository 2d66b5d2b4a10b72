"""Relay command codecs for a LoRaWAN relay controller."""

from .models.relay import RelayCommand, RelayCommandSet
from .protocol.dispatcher import decode_hex_payload, decode_payload, encode_command

__version__ = "0.1.0"

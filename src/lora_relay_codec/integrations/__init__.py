"""Payload formatters for LoRaWAN network servers and IoT consoles."""

from .envelope import PAYLOAD_ALIASES, payload_bytes, resolve_payload

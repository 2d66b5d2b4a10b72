"""Data models for relay commands."""

from .relay import RelayCommand, RelayCommandSet, parse_state

"""Exception types raised by the Morse decoder."""

from __future__ import annotations


class MorseNodeError(Exception):
    """Base class for decoder errors."""


class ConfigurationError(MorseNodeError, ValueError):
    """Raised when timing parameters or delimiters cannot decode sanely."""


class OrderingError(MorseNodeError, ValueError):
    """Raised when a sample arrives with a timestamp older than the last one."""

    def __init__(self, timestamp: float, last_timestamp: float) -> None:
        super().__init__(
            f"Sample timestamp {timestamp!r} precedes last processed timestamp {last_timestamp!r}"
        )
        self.timestamp = timestamp
        self.last_timestamp = last_timestamp


__all__ = ["ConfigurationError", "MorseNodeError", "OrderingError"]

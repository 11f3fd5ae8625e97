"""Custom exceptions for flume-handler.

Exceptions are organized by how the delivery channel treats them:

Swallowed at activation (channel becomes inert, events are dropped):
    - ConnectError: Collector unreachable, refused, or rejected the handshake
    - ConfigurationError: Host/port missing or invalid

Raised to the caller of append (logging framework decides what to do):
    - DeliveryError: Send to a connection believed alive failed

Usage:
    from flume_handler.exceptions import ConnectError, DeliveryError
"""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "ConnectError",
    "DeliveryError",
    "FlumeHandlerError",
]

from typing import Any


class FlumeHandlerError(Exception):
    """Base exception for all flume-handler errors.

    Attributes:
        message: Human-readable error description.
        host: Collector host the error relates to (if known).
        port: Collector port the error relates to (if known).
    """

    def __init__(
        self,
        message: str,
        *,
        host: str | None = None,
        port: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.host = host
        self.port = port

    @property
    def details(self) -> dict[str, Any]:
        """Structured context for diagnostic log entries."""
        data: dict[str, Any] = {}
        if self.host is not None:
            data["host"] = self.host
        if self.port is not None:
            data["port"] = self.port
        return data

    def __str__(self) -> str:
        if self.host is None and self.port is None:
            return self.message
        return f"{self.message} (host={self.host}, port={self.port})"


class ConnectError(FlumeHandlerError):
    """Cannot open a connection to the collector.

    Raised when:
    - Connection is refused or times out
    - Host name cannot be resolved
    - Collector answers the handshake with an error status
    """


class ConfigurationError(ConnectError):
    """Appender options are invalid or incomplete.

    Raised when host or port are missing, or fail validation
    (empty host, port outside 1-65535, non-positive timeout).
    """


class DeliveryError(FlumeHandlerError):
    """Sending an event over a connection believed alive failed.

    Raised when:
    - The request times out or the connection drops mid-send
    - The collector rejects the event (non-2xx, e.g. 503 channel full)
    - A reconnect attempt left no usable connection
    """

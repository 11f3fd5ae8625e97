"""logging.Handler that forwards records to a Flume agent.

FlumeHandler is a thin bridge between the standard logging package and a
DeliveryChannel. It can be created programmatically or from dictConfig:

    logging.config.dictConfig({
        "version": 1,
        "handlers": {
            "flume": {
                "class": "flume_handler.FlumeHandler",
                "host": "collector.local",
                "port": 41414,
                "type": "error",
                "format": "text",
                "version": "1",
            },
        },
        "root": {"level": "INFO", "handlers": ["flume"]},
    })

Delivery failures go through logging.Handler.handleError, so the logging
package's own policy (logging.raiseExceptions) decides whether they are
reported. They never propagate into the application's logging call.
"""

from __future__ import annotations

__all__ = ["FlumeHandler"]

import logging
from typing import Any

from flume_handler.channel import DeliveryChannel
from flume_handler.constants import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from flume_handler.transport import ClientFactory


class FlumeHandler(logging.Handler):
    """Send each log record to a Flume agent as one event.

    Records emitted on the same thread while the channel is connecting or
    sending (for example the HTTP client's own request logging) are dropped
    instead of being sent recursively.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        type: str = "",
        format: str = "",
        version: str = "",
        level: int | str = logging.NOTSET,
        *,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        client_factory: ClientFactory | None = None,
        activate: bool = True,
    ) -> None:
        """Create the handler and, by default, connect to the collector.

        Args:
            host: First hop the client connects to.
            port: Port on the host.
            type: Event type tag (e.g. "error").
            format: Event format tag (e.g. "json").
            version: Event version tag.
            level: Handler level.
            connect_timeout: Seconds allowed to connect.
            request_timeout: Seconds allowed per append.
            client_factory: Opens RPC clients; defaults to the HTTP source client.
            activate: Connect immediately. Pass False to call configure()
                and activate() later.
        """
        super().__init__(level)
        options: dict[str, Any] = {
            "host": host,
            "port": port,
            "type": type,
            "format": format,
            "version": version,
            "connect_timeout": connect_timeout,
            "request_timeout": request_timeout,
        }
        self.channel = DeliveryChannel(options, client_factory=client_factory)
        if activate:
            self.activate()

    def configure(self, **options: Any) -> None:
        """Update channel options; call activate() for them to take effect."""
        self.channel.configure(**options)

    def activate(self) -> None:
        """Connect to the collector. Failures disable the handler silently."""
        self.channel.activate()

    def requires_layout(self) -> bool:
        return self.channel.requires_layout()

    def emit(self, record: logging.LogRecord) -> None:
        """Append the record to the channel.

        Args:
            record: The log record to send.
        """
        try:
            self.channel.append(record)
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close the collector connection and unregister the handler."""
        try:
            self.channel.close()
        finally:
            super().close()

    def __repr__(self) -> str:
        level = logging.getLevelName(self.level)
        options = self.channel.options
        return f"<{self.__class__.__name__} {options.get('host')}:{options.get('port')} ({level})>"

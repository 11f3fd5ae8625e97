"""Delivery channel: owns the collector connection and appends events.

The channel holds the only mutable state in the package: whether it was
successfully activated, and the zero-or-one open RpcClient. Activation
failures are logged and leave the channel inert (events are dropped), so an
unreachable collector never breaks the host's logging calls. Send failures
on a connection believed alive are logged and raised as DeliveryError.

Append, close, activation and reconnection share one lock. A reconnect
inside append therefore never races another thread's append or close.
Records appended by the thread that already holds the lock (logging done by
the transport itself) are dropped.

Usage:
    channel = DeliveryChannel({"host": "collector.local", "port": 41414})
    channel.activate()
    channel.append(record)
    channel.close()
"""

from __future__ import annotations

__all__ = ["DeliveryChannel"]

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Mapping

from flume_handler.config import CONFIG_FIELDS, AppenderConfig
from flume_handler.constants import CONFIG_HINT
from flume_handler.diagnostics import get_diagnostic_logger
from flume_handler.exceptions import ConfigurationError, ConnectError, DeliveryError
from flume_handler.transport import ClientFactory, RpcClient, connect
from flume_handler.translator import build_event


class DeliveryChannel:
    """Lifecycle of one connection to a Flume agent.

    State invariants:
    - A client is held only while the channel is configured.
    - At most one client is open at a time; activating again closes the
      previous one first.
    """

    def __init__(
        self,
        options: AppenderConfig | Mapping[str, Any] | None = None,
        *,
        client_factory: ClientFactory | None = None,
    ) -> None:
        """Store options without connecting.

        Args:
            options: Appender options, validated or raw. Validation of raw
                options is deferred to activate().
            client_factory: Opens a client for a config. Defaults to
                transport.connect (HTTP source).
        """
        if isinstance(options, AppenderConfig):
            self._options: dict[str, Any] = options.model_dump()
        else:
            self._options = dict(options or {})
        self._client_factory: ClientFactory = client_factory or connect
        self._lock = threading.RLock()
        self._local = threading.local()
        self._config: AppenderConfig | None = None
        self._client: RpcClient | None = None
        self._configured = False
        self._last_connect_error: ConnectError | None = None
        self._logger = get_diagnostic_logger()

    @property
    def configured(self) -> bool:
        """True once an activation succeeded, until close()."""
        return self._configured

    @property
    def config(self) -> AppenderConfig | None:
        """Configuration of the last successful activation."""
        return self._config

    @property
    def options(self) -> dict[str, Any]:
        """Copy of the raw options used by the next activation."""
        return dict(self._options)

    def configure(self, **options: Any) -> None:
        """Update options for the next activation.

        Has no effect on an open connection; call activate() afterwards.

        Raises:
            TypeError: If an option name is unknown.
        """
        unknown = set(options) - CONFIG_FIELDS
        if unknown:
            raise TypeError(f"Unknown appender option(s): {', '.join(sorted(unknown))}")
        with self._exclusive():
            self._options.update(options)

    def requires_layout(self) -> bool:
        """Bodies are built from raw record fields, not a formatted line."""
        return False

    def activate(self) -> None:
        """Validate options and open a connection to the collector.

        Failures are logged, never raised. On failure the channel stays (or
        becomes) unconfigured and append() silently drops events.
        """
        with self._exclusive():
            self._configured = self._activate()

    def append(self, record: logging.LogRecord) -> None:
        """Translate a record and send it to the collector.

        Records without a message and records arriving while the channel is
        unconfigured are dropped. A dead connection is replaced once
        before the send; liveness is not re-checked after that.

        Raises:
            DeliveryError: If the send failed or no connection could be
                re-established.
        """
        if record.msg is None:
            return

        # Logged by our own transport on this thread (e.g. httpx request logs)
        if getattr(self._local, "busy", False):
            return

        with self._exclusive():
            if not self._configured:
                return

            if self._client is None or not self._client.is_active():
                self._reconnect()

            assert self._config is not None  # set by the activation that configured us
            event = build_event(record, self._config)

            if self._client is None:
                self._logger.error(
                    {
                        "event": "append_failed",
                        "message": "Flume append() failed: no connection to collector",
                        "host": self._config.host,
                        "port": self._config.port,
                    }
                )
                raise DeliveryError(
                    "Flume append() failed: no connection to collector",
                    host=self._config.host,
                    port=self._config.port,
                ) from self._last_connect_error

            try:
                self._client.append(event)
            except DeliveryError as e:
                self._logger.error(
                    {
                        "event": "append_failed",
                        "message": f"Flume append() failed: {e.message}",
                        **e.details,
                    }
                )
                raise DeliveryError(
                    "Flume append() failed",
                    host=self._config.host,
                    port=self._config.port,
                ) from e

    def close(self) -> None:
        """Close the connection and mark the channel unconfigured.

        Idempotent. Any append() after this is a silent no-op until the
        channel is activated again.
        """
        with self._exclusive():
            self._release()
            self._configured = False

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        """Hold the channel lock and mark this thread as inside the channel."""
        with self._lock:
            previous = getattr(self._local, "busy", False)
            self._local.busy = True
            try:
                yield
            finally:
                self._local.busy = previous

    def _reconnect(self) -> None:
        """Drop the current client and activate again with stored options.

        Keeps the channel configured even if the new connection fails, so
        the next append() tries again.
        """
        self._logger.info(
            {"event": "reconnecting", "message": "Collector connection lost, reconnecting", **self._target()}
        )
        self._release()
        self._activate()

    def _activate(self) -> bool:
        """Open a client, replacing any existing one. Caller holds the lock."""
        self._release()
        try:
            config = AppenderConfig.from_options(self._options)
        except ConfigurationError as e:
            self._last_connect_error = e
            self._logger.error(
                {
                    "event": "invalid_configuration",
                    "message": f"[Flume] Client configuration failed: {e.message}\n{CONFIG_HINT}",
                    **self._target(),
                }
            )
            return False

        try:
            client = self._client_factory(config)
        except ConnectError as e:
            self._last_connect_error = e
            self._logger.error(
                {
                    "event": "connect_failed",
                    "message": (
                        f"[Flume] Client configuration failed: connection failed on "
                        f"host:{config.host}, port:{config.port} ({e.message})\n{CONFIG_HINT}"
                    ),
                    "host": config.host,
                    "port": config.port,
                }
            )
            return False

        self._config = config
        self._client = client
        self._last_connect_error = None
        self._logger.info(
            {"event": "connected", "message": f"Connected to collector at {config.address}", **self._target()}
        )
        return True

    def _release(self) -> None:
        """Close and forget the current client, if any. Caller holds the lock."""
        client, self._client = self._client, None
        if client is not None:
            client.close()

    def _target(self) -> dict[str, Any]:
        return {"host": self._options.get("host"), "port": self._options.get("port")}

"""RPC client for delivering events to a Flume agent.

Defines the client capability the delivery channel depends on (RpcClient)
and the default implementation, which speaks to a Flume HTTP source using
its default JSON handler:

    POST http://<host>:<port>/
    Content-Type: application/json; charset=UTF-8

    [{"headers": {"k": "v"}, "body": "text"}]

The source answers 200 when the events were committed to its channel,
400 on malformed input and 503 when its channel is full.
"""

from __future__ import annotations

__all__ = [
    "USER_AGENT",
    "ClientFactory",
    "HttpRpcClient",
    "RpcClient",
    "connect",
]

import json
from typing import Any, Callable, Protocol, runtime_checkable

import httpx

from flume_handler import __version__
from flume_handler.config import AppenderConfig
from flume_handler.constants import APP_NAME, JSON_CONTENT_TYPE
from flume_handler.exceptions import ConnectError, DeliveryError
from flume_handler.models import TransportEvent

# User-Agent header for collector requests (informational)
USER_AGENT = f"{APP_NAME}/{__version__}"


@runtime_checkable
class RpcClient(Protocol):
    """Connection handle to a collector."""

    def is_active(self) -> bool:
        """Cheap liveness check, no network round-trip."""
        ...

    def append(self, event: TransportEvent) -> None:
        """Send one event.

        Raises:
            DeliveryError: If the collector did not accept the event.
        """
        ...

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        ...


ClientFactory = Callable[[AppenderConfig], RpcClient]


class HttpRpcClient:
    """RpcClient over HTTP, backed by a persistent httpx.Client.

    The underlying connection pool keeps the TCP connection to the agent
    open between appends. A failed send marks the client inactive so the
    owning channel replaces it on the next append.
    """

    def __init__(
        self,
        config: AppenderConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Create the client without contacting the collector.

        Args:
            config: Validated appender configuration.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._config = config
        self._client = httpx.Client(
            base_url=httpx.URL(scheme="http", host=config.host, port=config.port),
            timeout=httpx.Timeout(config.request_timeout, connect=config.connect_timeout),
            headers={"User-Agent": USER_AGENT, "Content-Type": JSON_CONTENT_TYPE},
            transport=transport,
        )
        self._active = True

    @classmethod
    def connect(
        cls,
        config: AppenderConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> "HttpRpcClient":
        """Open a client and verify the collector accepts requests.

        The handshake posts an empty event batch, which the HTTP source
        acknowledges without committing anything.

        Raises:
            ConnectError: If the host is not a valid URL host, or the
                collector is unreachable or rejects the handshake.
        """
        try:
            client = cls(config, transport=transport)
        except httpx.InvalidURL as e:
            raise ConnectError(
                f"Invalid collector address: {e}",
                host=config.host,
                port=config.port,
            ) from e
        try:
            client._post([])
        except httpx.HTTPStatusError as e:
            client.close()
            raise ConnectError(
                f"Collector rejected handshake with status {e.response.status_code}",
                host=config.host,
                port=config.port,
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            client.close()
            raise ConnectError(
                f"Connection failed: {e}",
                host=config.host,
                port=config.port,
            ) from e
        return client

    @property
    def config(self) -> AppenderConfig:
        """Configuration this client was opened with."""
        return self._config

    def is_active(self) -> bool:
        return self._active and not self._client.is_closed

    def append(self, event: TransportEvent) -> None:
        """Send one event as a single-element batch.

        Raises:
            DeliveryError: On transport failure or non-2xx response.
        """
        if self._client.is_closed:
            raise DeliveryError(
                "Client is closed",
                host=self._config.host,
                port=self._config.port,
            )
        try:
            self._post([event.to_wire()])
        except httpx.HTTPStatusError as e:
            self._active = False
            raise DeliveryError(
                f"Collector rejected event with status {e.response.status_code}",
                host=self._config.host,
                port=self._config.port,
            ) from e
        except httpx.HTTPError as e:
            self._active = False
            raise DeliveryError(
                f"Event delivery failed: {e}",
                host=self._config.host,
                port=self._config.port,
            ) from e

    def close(self) -> None:
        self._active = False
        if not self._client.is_closed:
            self._client.close()

    def _post(self, batch: list[dict[str, Any]]) -> None:
        """POST a batch of wire events and raise on non-2xx."""
        payload = json.dumps(batch, ensure_ascii=False).encode("utf-8")
        response = self._client.post("/", content=payload)
        response.raise_for_status()


def connect(config: AppenderConfig) -> RpcClient:
    """Default client factory: open an HttpRpcClient for config."""
    return HttpRpcClient.connect(config)

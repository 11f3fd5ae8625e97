"""Shared fixtures: log record builder, fake RPC clients, diagnostics capture."""

from __future__ import annotations

import logging
import sys
from typing import Any

import pytest

from flume_handler.config import AppenderConfig
from flume_handler.diagnostics import get_diagnostic_logger
from flume_handler.exceptions import ConnectError, DeliveryError
from flume_handler.models import TransportEvent


# ============================================================================
# Fake transport (mimicking the RpcClient protocol)
# ============================================================================


class FakeRpcClient:
    """In-memory RpcClient that records what it was asked to do."""

    def __init__(self, config: AppenderConfig) -> None:
        self.config = config
        self.active = True
        self.closed = False
        self.close_calls = 0
        self.sent: list[TransportEvent] = []
        self.fail_with: DeliveryError | None = None

    def is_active(self) -> bool:
        return self.active and not self.closed

    def append(self, event: TransportEvent) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(event)

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class FakeClientFactory:
    """Client factory that can be told to refuse connections."""

    def __init__(self) -> None:
        self.clients: list[FakeRpcClient] = []
        self.calls = 0
        self.refuse = False
        self.fail_sends: DeliveryError | None = None

    def __call__(self, config: AppenderConfig) -> FakeRpcClient:
        self.calls += 1
        if self.refuse:
            raise ConnectError("Connection refused", host=config.host, port=config.port)
        client = FakeRpcClient(config)
        client.fail_with = self.fail_sends
        self.clients.append(client)
        return client

    @property
    def latest(self) -> FakeRpcClient:
        return self.clients[-1]

    @property
    def sent(self) -> list[TransportEvent]:
        return [event for client in self.clients for event in client.sent]


class ListHandler(logging.Handler):
    """Collects records for assertions."""

    def __init__(self) -> None:
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def events(self) -> list[str]:
        return [r.msg.get("event") for r in self.records if isinstance(r.msg, dict)]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def factory() -> FakeClientFactory:
    """Fresh fake client factory."""
    return FakeClientFactory()


@pytest.fixture
def options() -> dict[str, Any]:
    """Valid raw appender options."""
    return {"host": "collector.test", "port": 41414, "type": "t", "format": "f", "version": "1"}


@pytest.fixture
def diagnostics() -> ListHandler:
    """Capture records written to the internal diagnostic logger."""
    logger = get_diagnostic_logger()
    handler = ListHandler()
    logger.addHandler(handler)
    yield handler
    logger.removeHandler(handler)


@pytest.fixture
def make_record():
    """Build LogRecords without going through a Logger."""

    def _make(
        msg: Any = "hello",
        *,
        name: str = "app.module",
        level: int = logging.INFO,
        args: Any = None,
        exc_info: Any = None,
        created: float | None = None,
    ) -> logging.LogRecord:
        record = logging.LogRecord(
            name=name,
            level=level,
            pathname=__file__,
            lineno=1,
            msg=msg,
            args=args,
            exc_info=exc_info,
        )
        if created is not None:
            record.created = created
        return record

    return _make


@pytest.fixture
def exc_info():
    """A real exc_info tuple from a raised ValueError."""
    try:
        raise ValueError("bad value")
    except ValueError:
        return sys.exc_info()

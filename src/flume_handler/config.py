"""Appender configuration for flume-handler.

Defines the validated, immutable configuration a delivery channel uses for
one connection lifetime. Raw options are collected first (constructor
keywords, dictConfig entries, configure() calls) and only validated when the
channel activates, so a bad option disables the handler instead of aborting
the host application's logging setup.

Example usage:
    config = AppenderConfig(host="collector.local", port=41414, type="error")
    config = AppenderConfig.from_options({"host": "collector.local", "port": "41414"})
"""

from __future__ import annotations

__all__ = [
    "CONFIG_FIELDS",
    "AppenderConfig",
]

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from flume_handler.constants import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    MAX_PORT,
    MIN_PORT,
)
from flume_handler.exceptions import ConfigurationError


class AppenderConfig(BaseModel):
    """Connection target and event classification tags.

    Attributes:
        host: First hop (Flume agent) to connect to.
        port: Port of the agent's source.
        type: Event type tag, forwarded verbatim as a header (e.g. "error").
        format: Event format tag, forwarded verbatim (e.g. "json").
        version: Event version tag, forwarded verbatim.
        connect_timeout: Seconds allowed to establish the connection.
        request_timeout: Seconds allowed for one append round-trip.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    host: str = Field(min_length=1)
    port: int = Field(ge=MIN_PORT, le=MAX_PORT)
    type: str = ""
    format: str = ""
    version: str = ""
    connect_timeout: float = Field(default=DEFAULT_CONNECT_TIMEOUT_SECONDS, gt=0)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT_SECONDS, gt=0)

    @property
    def address(self) -> str:
        """host:port of the collector, with IPv6 hosts in brackets."""
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "AppenderConfig":
        """Validate raw options, dropping unset (None) entries.

        Args:
            options: Raw option mapping (may contain None for unset values).

        Returns:
            Validated configuration.

        Raises:
            ConfigurationError: If required options are missing or invalid.
        """
        present = {key: value for key, value in options.items() if value is not None}
        try:
            return cls.model_validate(present)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            )
            port = present.get("port")
            raise ConfigurationError(
                f"Invalid appender configuration: {problems}",
                host=present.get("host"),
                port=port if isinstance(port, int) else None,
            ) from e


# Option names accepted by DeliveryChannel.configure()
CONFIG_FIELDS: frozenset[str] = frozenset(AppenderConfig.model_fields)

"""Pydantic model for the event delivered to the collector.

A TransportEvent is the wire-ready unit: a flat string header map plus a
UTF-8 encoded body. The wire form matches what Flume's HTTP source JSON
handler accepts: {"headers": {...}, "body": "..."}.
"""

from __future__ import annotations

__all__ = ["TransportEvent"]

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from flume_handler.constants import BODY_CHARSET


class TransportEvent(BaseModel):
    """Headers and body of one log event."""

    model_config = ConfigDict(frozen=True)

    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    @classmethod
    def with_body(cls, body: str, headers: dict[str, str]) -> "TransportEvent":
        """Build an event from a text body, encoding it as UTF-8."""
        return cls(headers=dict(headers), body=body.encode(BODY_CHARSET))

    @property
    def text(self) -> str:
        """Body decoded back to text."""
        return self.body.decode(BODY_CHARSET)

    def to_wire(self) -> dict[str, Any]:
        """JSON-serializable form for the collector."""
        return {"headers": dict(self.headers), "body": self.text}

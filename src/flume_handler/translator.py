"""Translation of logging records into transport events.

Pure functions with no network state. The body is built from the raw record
fields (message plus rendered traceback lines), so no logging.Formatter is
involved.
"""

from __future__ import annotations

__all__ = [
    "build_body",
    "build_event",
    "build_headers",
    "level_code",
    "render_error_frames",
]

import logging
import traceback

from flume_handler.config import AppenderConfig
from flume_handler.constants import LOG4J_LEVEL_SCALE, MESSAGE_ENCODING, EventHeader
from flume_handler.models import TransportEvent


def level_code(levelno: int) -> int:
    """Numeric level code sent on the wire (Log4j scale)."""
    return levelno * LOG4J_LEVEL_SCALE


def render_error_frames(record: logging.LogRecord) -> list[str] | None:
    """Render the record's exception as a list of lines.

    Uses exc_info when present, otherwise a pre-rendered exc_text
    (set by a Formatter that already handled this record).

    Returns:
        One string per traceback line, in traceback order, or None when the
        record carries no exception.
    """
    if record.exc_info and record.exc_info[0] is not None:
        text = "".join(traceback.format_exception(*record.exc_info))
    elif record.exc_text:
        text = record.exc_text
    else:
        return None
    return text.replace("\r\n", "\n").rstrip("\n").split("\n")


def build_headers(record: logging.LogRecord, config: AppenderConfig) -> dict[str, str]:
    """Build the seven event headers.

    Tags (type/format/version) are passed through verbatim, empty or not.

    Args:
        record: The log record.
        config: Active appender configuration.

    Returns:
        Header mapping with exactly one entry per EventHeader member.
    """
    return {
        EventHeader.LOGGER_NAME.value: record.name,
        EventHeader.TIMESTAMP.value: str(int(record.created * 1000)),
        EventHeader.LOG_LEVEL.value: str(level_code(record.levelno)),
        EventHeader.MESSAGE_ENCODING.value: MESSAGE_ENCODING,
        EventHeader.TYPE.value: config.type,
        EventHeader.FORMAT.value: config.format,
        EventHeader.VERSION.value: config.version,
    }


def build_body(record: logging.LogRecord) -> str:
    """Build the event body from the message and any exception lines.

    Without an exception the body is the message exactly. With one, a
    newline follows the message and every traceback line is terminated
    by a newline.
    """
    body = record.getMessage()
    frames = render_error_frames(record)
    if frames is not None:
        body += "\n" + "".join(f"{frame}\n" for frame in frames)
    return body


def build_event(record: logging.LogRecord, config: AppenderConfig) -> TransportEvent:
    """Translate a record into a transport event."""
    return TransportEvent.with_body(build_body(record), build_headers(record, config))

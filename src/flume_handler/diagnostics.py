"""Internal diagnostic logger.

flume-handler reports its own problems (collector unreachable, bad options,
failed sends) on a dedicated logger that writes to stderr and does not
propagate. This keeps diagnostics visible to the operator even when the
handler itself is the only thing attached to the root logger, and keeps
them from looping back into the handler.

Messages are dicts with an "event" key and a human-readable "message":

    get_diagnostic_logger().error(
        {"event": "connect_failed", "message": "...", "host": "h", "port": 1}
    )
"""

from __future__ import annotations

__all__ = [
    "ConsoleFormatter",
    "get_diagnostic_logger",
]

import logging
import sys

from flume_handler.constants import DIAGNOSTIC_LOGGER_NAME


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for stderr output.

    Extracts the 'message' (or 'event') field from dict messages.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a diagnostic record as "[flume] LEVEL: message".

        Args:
            record: The log record to format.

        Returns:
            str: Formatted line, with the traceback appended if present.
        """
        if isinstance(record.msg, dict):
            msg = record.msg.get("message") or record.msg.get("event", "")
        else:
            msg = record.getMessage()
        line = f"[flume] {record.levelname}: {msg}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# Module-level singleton logger
_diagnostic_logger: logging.Logger | None = None


def get_diagnostic_logger() -> logging.Logger:
    """Get the singleton diagnostic logger.

    Created on first call with a single stderr handler at WARNING.

    Returns:
        logging.Logger: Configured diagnostic logger.
    """
    global _diagnostic_logger

    if _diagnostic_logger is not None:
        return _diagnostic_logger

    _diagnostic_logger = logging.getLogger(DIAGNOSTIC_LOGGER_NAME)
    _diagnostic_logger.setLevel(logging.INFO)
    _diagnostic_logger.propagate = False

    # Close and remove any existing handlers to avoid duplicates
    for handler in _diagnostic_logger.handlers:
        handler.close()
    _diagnostic_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(ConsoleFormatter())
    _diagnostic_logger.addHandler(stderr_handler)

    return _diagnostic_logger

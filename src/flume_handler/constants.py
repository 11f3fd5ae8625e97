"""Application-wide constants for flume-handler.

Constants that define wire format and transport defaults.
For per-deployment settings, see config.py.
"""

from __future__ import annotations

__all__ = [
    # Application identity
    "APP_NAME",
    "DIAGNOSTIC_LOGGER_NAME",
    # Event headers
    "EventHeader",
    "MESSAGE_ENCODING",
    "BODY_CHARSET",
    "LOG4J_LEVEL_SCALE",
    # Collector connection
    "DEFAULT_PORT",
    "MIN_PORT",
    "MAX_PORT",
    "DEFAULT_CONNECT_TIMEOUT_SECONDS",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
    "JSON_CONTENT_TYPE",
    "CONFIG_HINT",
]

from enum import Enum

# =============================================================================
# Application identity
# =============================================================================

APP_NAME = "flume-handler"

# Internal diagnostics logger. Never propagates, so it never reaches a
# FlumeHandler attached to the root logger.
DIAGNOSTIC_LOGGER_NAME = "flume_handler.internal"


# =============================================================================
# Event headers
# =============================================================================


class EventHeader(str, Enum):
    """Header keys carried by every transport event.

    The first four share their names with Flume's own Log4j client so that
    collectors and interceptors written for it read our events unchanged.
    """

    LOGGER_NAME = "flume.client.log4j.logger.name"
    TIMESTAMP = "flume.client.log4j.timestamp"
    LOG_LEVEL = "flume.client.log4j.log.level"
    MESSAGE_ENCODING = "flume.client.log4j.message.encoding"
    TYPE = "flume.client.log4j.type"
    FORMAT = "flume.client.log4j.format"
    VERSION = "flume.client.log4j.version"

    def __str__(self) -> str:
        return self.value


# Value of the message-encoding header (Java charset name, not Python's)
MESSAGE_ENCODING = "UTF8"

# Python codec used to encode the body
BODY_CHARSET = "utf-8"

# Python levelno * 1000 == Log4j Level.toInt() for DEBUG..CRITICAL/FATAL
LOG4J_LEVEL_SCALE = 1000


# =============================================================================
# Collector connection
# =============================================================================

DEFAULT_PORT = 41414
MIN_PORT = 1
MAX_PORT = 65535

# Flume RpcClient defaults (connect-timeout / request-timeout: 20s)
DEFAULT_CONNECT_TIMEOUT_SECONDS = 20.0
DEFAULT_REQUEST_TIMEOUT_SECONDS = 20.0

# Flume HTTPSource JSONHandler reads the charset from the content type
JSON_CONTENT_TYPE = "application/json; charset=UTF-8"

# Shown after a failed activation
CONFIG_HINT = f"""Check your logging configuration, for example:
    "handlers": {{
        "flume": {{
            "class": "flume_handler.FlumeHandler",
            "host": "0.0.0.0",
            "port": {DEFAULT_PORT},
            "type": "error",
            "format": "text",
            "version": "1"
        }}
    }}"""

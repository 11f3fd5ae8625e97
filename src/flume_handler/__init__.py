"""flume-handler: forward Python log records to an Apache Flume agent.

Attach FlumeHandler to a logger (directly or via dictConfig) and every
record is sent as one event, with logger name, timestamp, level and
classification tags as headers and the message plus traceback as body.
"""

__version__ = "0.1.0"

from flume_handler.channel import DeliveryChannel
from flume_handler.config import AppenderConfig
from flume_handler.constants import EventHeader
from flume_handler.exceptions import (
    ConfigurationError,
    ConnectError,
    DeliveryError,
    FlumeHandlerError,
)
from flume_handler.handler import FlumeHandler
from flume_handler.models import TransportEvent

__all__ = [
    "AppenderConfig",
    "ConfigurationError",
    "ConnectError",
    "DeliveryChannel",
    "DeliveryError",
    "EventHeader",
    "FlumeHandler",
    "FlumeHandlerError",
    "TransportEvent",
    "__version__",
]

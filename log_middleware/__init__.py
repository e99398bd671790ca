"""Client-side logging middleware: local trace plus fire-and-forget remote delivery."""

from .emitter import LogEmitter
from .errors import (
    LogMiddlewareError,
    RecordValidationError,
    InvalidStack,
    InvalidLevel,
    MissingPackageName,
    MissingMessage,
    DeliveryError,
    TransportFault,
    RemoteRejected,
)
from .records import (
    ALLOWED_LEVELS,
    ALLOWED_STACKS,
    LogIntent,
    RemoteLogRecord,
    build_record,
)
from .trace import LoggingTraceSink, TraceSink
from .logging_config import setup_logging, get_logger

__all__ = [
    "LogEmitter",
    "LogMiddlewareError",
    "RecordValidationError",
    "InvalidStack",
    "InvalidLevel",
    "MissingPackageName",
    "MissingMessage",
    "DeliveryError",
    "TransportFault",
    "RemoteRejected",
    "ALLOWED_LEVELS",
    "ALLOWED_STACKS",
    "LogIntent",
    "RemoteLogRecord",
    "build_record",
    "LoggingTraceSink",
    "TraceSink",
    "setup_logging",
    "get_logger",
]

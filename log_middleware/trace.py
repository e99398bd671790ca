"""Local trace sink used by the logging middleware."""

import logging
from typing import Any, Optional, Protocol

from .logging_config import get_logger


SUCCESS_MARKER = "SUCCESS"


class TraceSink(Protocol):
    """Destination for leveled local trace messages.

    Implementations must not raise.
    """

    def info(self, *args: Any) -> None: ...

    def warn(self, *args: Any) -> None: ...

    def error(self, *args: Any) -> None: ...

    def success(self, *args: Any) -> None: ...


def _render(args) -> str:
    return " ".join(str(a) for a in args)


class LoggingTraceSink:
    """Trace sink backed by a stdlib logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize trace sink.

        Args:
            logger: Optional logger (defaults to "url_shortener.log_middleware")
        """
        self.logger = logger or get_logger("log_middleware")

    def info(self, *args: Any) -> None:
        self.logger.info(_render(args))

    def warn(self, *args: Any) -> None:
        self.logger.warning(_render(args))

    def error(self, *args: Any) -> None:
        self.logger.error(_render(args))

    def success(self, *args: Any) -> None:
        # Informational, tagged so it stands out in a console
        self.logger.info(f"{SUCCESS_MARKER} {_render(args)}", extra={"success": True})


def trace_intent(
    sink: TraceSink,
    normalized_level: str,
    stack: Any,
    package_name: Any,
    message: Any,
) -> None:
    """Render a log intent to the channel matching its level.

    Args:
        sink: Trace sink
        normalized_level: Uppercased level
        stack: Stack exactly as the caller passed it
        package_name: Emitting module
        message: Log message
    """
    tag = f"[{package_name}]"
    if normalized_level in ("ERROR", "FATAL"):
        sink.error(tag, message, {"stack": stack})
    elif normalized_level == "WARN":
        sink.warn(tag, message)
    elif normalized_level == "SUCCESS":
        sink.success(tag, message)
    else:
        sink.info(tag, message)

"""
Error classes for the logging middleware.

None of these ever reach a caller of LogEmitter.emit; they are raised
internally and rendered to the local trace sink.
"""

from typing import Any, Dict, Optional


class LogMiddlewareError(Exception):
    """
    Base logging middleware error.
    
    Attributes:
        message: Error message
        details: Optional additional error details
    """
    message: str = "Logging middleware error"
    
    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """
        Initialize logging middleware error.
        
        Args:
            message: Error message (overrides default)
            details: Optional additional error details
        """
        self.message = message or self.message
        self.details = details or {}
        super().__init__(self.message)


class RecordValidationError(LogMiddlewareError, ValueError):
    """Log intent cannot be mapped to an accepted remote record."""
    message = "Invalid log record"


class InvalidStack(RecordValidationError):
    """Stack is not one of the remote API's accepted stacks."""
    message = "Invalid stack for API"


class InvalidLevel(RecordValidationError):
    """Level is not one of the remote API's accepted levels."""
    message = "Invalid level for API"


class MissingPackageName(RecordValidationError):
    message = "Package name cannot be empty for API log."


class MissingMessage(RecordValidationError):
    message = "Log message cannot be empty for API log."


class DeliveryError(LogMiddlewareError):
    """Remote delivery of a valid record failed."""
    message = "Failed to send log"


class TransportFault(DeliveryError):
    """Network-level failure (timeout, DNS, refused or reset connection)."""
    message = "A network error occurred while sending the log."


class RemoteRejected(DeliveryError):
    """
    Remote endpoint answered with a non-2xx status.
    
    Attributes:
        status_code: HTTP status returned by the endpoint
        body: Response body, or None when it could not be read
    """
    message = "API Error"
    
    def __init__(self, status_code: int, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        details = {"status_code": status_code}
        if body is not None:
            details["details"] = body
        super().__init__(f"API Error: {status_code}. Failed to send log.", details)

"""Log intent and remote log record models, plus the mapping between them."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .errors import InvalidLevel, InvalidStack, MissingMessage, MissingPackageName


# Only values accepted by the remote logging API
ALLOWED_STACKS = frozenset({"backend", "frontend"})
ALLOWED_LEVELS = frozenset({"debug", "info", "warn", "error", "fatal"})

# Levels callers may pass; SUCCESS is display only
DISPLAY_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR", "FATAL", "SUCCESS")

DEFAULT_STACK = "frontend"
DEFAULT_LEVEL = "INFO"


class LogIntent(BaseModel):
    """A caller's request to log something. All fields are free-form."""

    stack: Optional[str] = Field(None, description="Origin tier, defaults to frontend")
    level: Optional[str] = Field(None, description="Severity, defaults to INFO")
    package: Optional[str] = Field(None, description="Emitting module")
    message: Optional[str] = Field(None, description="Human-readable description")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "stack": None,
                    "level": "SUCCESS",
                    "package": "ShortenerPage.jsx",
                    "message": "Successfully received 2 shortened URLs.",
                }
            ]
        }
    }


class RemoteLogRecord(BaseModel):
    """Record in the exact vocabulary accepted by the remote logging API."""

    stack: Literal["backend", "frontend"]
    level: Literal["debug", "info", "warn", "error", "fatal"]
    package: str
    message: str

    model_config = {"frozen": True}

    @field_validator("package", "message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        """Reject empty or whitespace-only values."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    def to_json(self) -> str:
        """Serialize to the JSON request body."""
        return self.model_dump_json()


def normalize_level(level: Any) -> str:
    """Uppercase the level, defaulting to INFO when absent or empty."""
    return str(level).upper() if level else DEFAULT_LEVEL


def map_stack(stack: Any, default: str = DEFAULT_STACK) -> str:
    """Lowercase the stack, using the default when absent or empty."""
    return str(stack).lower() if stack else default


def map_level(normalized_level: str) -> str:
    """Map a normalized display level to the remote vocabulary."""
    api_level = normalized_level.lower()
    if api_level == "success":
        api_level = "info"
    return api_level


def _is_blank(value: Any) -> bool:
    return not value or str(value).strip() == ""


def build_record(
    stack: Any,
    level: Any,
    package_name: Any,
    message: Any,
    default_stack: str = DEFAULT_STACK,
) -> RemoteLogRecord:
    """Map a log intent to a remote record and validate it.

    Checks run in order (stack, level, package name, message) and stop at
    the first failure.

    Args:
        stack: Free-form stack, may be None or empty
        level: Free-form level, may be None or empty
        package_name: Emitting module
        message: Log message
        default_stack: Stack used when none is given

    Returns:
        Validated RemoteLogRecord

    Raises:
        InvalidStack, InvalidLevel, MissingPackageName, MissingMessage
    """
    api_stack = map_stack(stack, default_stack)
    api_level = map_level(normalize_level(level))

    if api_stack not in ALLOWED_STACKS:
        raise InvalidStack(f'Invalid stack for API: "{api_stack}".', {"stack": api_stack})
    if api_level not in ALLOWED_LEVELS:
        raise InvalidLevel(f'Invalid level for API: "{api_level}".', {"level": api_level})
    if _is_blank(package_name):
        raise MissingPackageName()
    if _is_blank(message):
        raise MissingMessage()

    return RemoteLogRecord(
        stack=api_stack,
        level=api_level,
        package=str(package_name),
        message=str(message),
    )

"""Configuration management for URL shortener."""

from typing import Dict, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Remote logging API
    log_api_url: str = Field(
        default="http://20.244.56.144/evaluation-service/logs",
        description="Remote logging endpoint (POST)"
    )

    log_api_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Timeout in seconds for one log delivery attempt"
    )

    log_api_token: Optional[str] = Field(
        default=None,
        description="Bearer token sent to the logging endpoint, if it requires one"
    )

    log_default_stack: str = Field(
        default="frontend",
        description="Stack used when a caller does not give one"
    )

    log_stack: str = Field(
        default="backend",
        description="Stack reported by the shortener service's own logs"
    )

    log_workers: int = Field(
        default=4,
        ge=1,
        description="Threads used for log deliveries made outside the event loop"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=9200,
        description="Port to listen on"
    )

    # URL shortener settings
    base_url: str = Field(
        default="https://sh.rt",
        description="Base URL for generating short URLs"
    )

    short_code_length: int = Field(
        default=6,
        description="Default length for generated short codes"
    )

    max_urls_per_request: int = Field(
        default=5,
        ge=1,
        description="Maximum number of URLs shortened in one request"
    )

    default_validity_minutes: int = Field(
        default=60,
        ge=1,
        description="Validity of a short URL when none is given"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    def log_api_headers(self) -> Dict[str, str]:
        """Extra headers for the logging endpoint."""
        if self.log_api_token:
            return {"Authorization": f"Bearer {self.log_api_token}"}
        return {}


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()

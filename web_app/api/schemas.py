"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union
from datetime import datetime


class ShortenItem(BaseModel):
    """One URL to shorten. Values are checked by the service, not here."""
    
    url: str = Field(..., description="The URL to shorten")
    validity_minutes: Optional[Union[int, str]] = Field(
        None, description="Minutes the short URL stays valid (default 60)"
    )
    custom_code: Optional[str] = Field(None, description="Optional custom short code")


class ShortenRequest(BaseModel):
    """Request to shorten a batch of URLs."""
    
    urls: List[ShortenItem] = Field(..., description="URLs to shorten")
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "urls": [
                        {"url": "https://example.com/very/long/path/to/resource"},
                        {"url": "https://github.com/user/repo", "validity_minutes": 30, "custom_code": "myrepo"},
                    ]
                }
            ]
        }
    }


class ShortenResult(BaseModel):
    """A shortened URL."""
    
    short_code: str = Field(..., description="The generated short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The original long URL")
    created_at: datetime = Field(..., description="Creation timestamp")
    expires_at: datetime = Field(..., description="Expiry timestamp")


class ShortenResponse(BaseModel):
    """Response after shortening a batch of URLs."""
    
    results: List[ShortenResult]


class LinkStats(ShortenResult):
    """Statistics for one short URL."""
    
    clicks: List[Dict[str, Any]] = Field(
        default_factory=list, description="Always empty, clicks are not tracked"
    )


class LogAccepted(BaseModel):
    """Log intent was handed to the emitter."""
    
    status: str = Field("accepted", description="Always 'accepted'")


class HealthResponse(BaseModel):
    """Health check response."""
    
    status: str = Field(..., description="Overall status")
    issued_links: int = Field(..., description="Short URLs issued by this process")
    pending_log_deliveries: int = Field(..., description="Log deliveries still in flight")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""
    
    detail: Union[str, List[str]] = Field(..., description="Error message(s)")

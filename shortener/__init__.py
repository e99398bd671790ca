"""Stub URL shortener used as a caller of the logging middleware."""

from .shortcode import ShortCodeGenerator
from .service import ShortenerService, ShortenValidationError

__all__ = ["ShortCodeGenerator", "ShortenerService", "ShortenValidationError"]

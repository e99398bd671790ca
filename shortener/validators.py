"""Validation utilities for URL shortener."""

from urllib.parse import urlparse
from typing import Any, Tuple

from .shortcode import is_well_formed


def is_valid_url(url: Any) -> Tuple[bool, str]:
    """Validate a URL.
    
    Args:
        url: The URL to validate
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"
    
    if len(url) > 2048:
        return False, "URL is too long (max 2048 characters)"
    
    try:
        result = urlparse(url)
    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"
    
    if result.scheme not in ["http", "https"]:
        return False, "URL must use http or https protocol"
    
    if not result.netloc:
        return False, "URL must have a valid domain"
    
    return True, ""


def is_valid_short_code(short_code: Any, min_length: int = 4, max_length: int = 20) -> Tuple[bool, str]:
    """Validate a short code.
    
    Args:
        short_code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"
    
    if len(short_code) < min_length:
        return False, f"Short code must be at least {min_length} characters"
    
    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"
    
    if not is_well_formed(short_code):
        return False, "Short code can only contain letters, numbers, hyphens, and underscores"
    
    reserved_words = {"api", "health", "logs", "stats", "shorten", "docs"}
    if short_code.lower() in reserved_words:
        return False, f"'{short_code}' is a reserved word and cannot be used"
    
    return True, ""


def is_valid_validity(minutes: Any) -> Tuple[bool, str]:
    """Validate a validity period in minutes. None means "use the default".
    
    Returns:
        Tuple of (is_valid, error_message)
    """
    if minutes is None or minutes == "":
        return True, ""
    
    # bool is an int subclass
    if isinstance(minutes, bool):
        return False, "Validity must be a positive whole number"
    
    if isinstance(minutes, str):
        if not minutes.strip().isdigit():
            return False, "Validity must be a positive whole number"
        minutes = int(minutes)
    
    if not isinstance(minutes, int) or minutes <= 0:
        return False, "Validity must be a positive whole number"
    
    return True, ""


def build_short_url(short_code: str, base_url: str) -> str:
    """Build complete short URL.
    
    Args:
        short_code: The short code
        base_url: Base URL (e.g., https://sh.rt)
        
    Returns:
        Complete short URL
    """
    return f"{base_url.rstrip('/')}/{short_code}"

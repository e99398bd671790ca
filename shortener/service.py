"""Stub URL shortening service.

Issues short codes and reports the links issued by this process. Nothing
is persisted and no click analytics are collected. Every step is logged
through the shared LogEmitter.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Set

from log_middleware import LogEmitter

from .shortcode import ShortCodeGenerator
from .validators import build_short_url, is_valid_short_code, is_valid_url, is_valid_validity


PACKAGE = "shortener.service"
VALIDATION_PACKAGE = "Validation"


class ShortenValidationError(ValueError):
    """One or more rows of a shorten request are invalid."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class ShortenerService:
    """Service layer for the demo URL shortener."""

    def __init__(
        self,
        emitter: LogEmitter,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        base_url: str = "https://sh.rt",
        stack: Optional[str] = "backend",
        max_urls_per_request: int = 5,
        default_validity_minutes: int = 60,
        max_collision_retries: int = 5,
    ):
        """Initialize shortener service.

        Args:
            emitter: Shared log emitter
            short_code_generator: Optional short code generator
            logger: Optional logger
            base_url: Base URL of generated short links
            stack: Stack reported with every log (None means the emitter's default)
            max_urls_per_request: Maximum rows per shorten() call
            default_validity_minutes: Validity used when a row gives none
            max_collision_retries: Salted and random codes each tried after a collision
        """
        self.emitter = emitter
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.base_url = base_url
        self.stack = stack
        self.max_urls_per_request = max_urls_per_request
        self.default_validity_minutes = default_validity_minutes
        self.max_collision_retries = max_collision_retries
        # Links issued by this process only
        self._links: List[Dict[str, Any]] = []
        self._codes: Set[str] = set()

    def _log(self, level: str, message: str, package: str = PACKAGE) -> None:
        self.emitter.emit(self.stack, level, package, message)

    async def shorten(self, requests: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Shorten a batch of URLs.

        Args:
            requests: Rows with "url" and optional "validity_minutes", "custom_code"

        Returns:
            One result per row: short_code, short_url, original_url,
            created_at, expires_at

        Raises:
            ShortenValidationError: If the batch or any row is invalid
        """
        if not requests:
            self._log("WARN", "Shorten request contained no URLs.")
            raise ShortenValidationError(["At least one URL is required."])

        if len(requests) > self.max_urls_per_request:
            self._log(
                "WARN",
                f"User tried to shorten {len(requests)} URLs, limit is {self.max_urls_per_request}.",
            )
            raise ShortenValidationError(
                [f"You can only shorten up to {self.max_urls_per_request} URLs at a time."]
            )

        errors = self._validate(requests)
        if errors:
            self._log("ERROR", "Validation failed for one or more URLs.")
            raise ShortenValidationError(errors)

        self._log("INFO", f"All {len(requests)} URLs passed validation.")

        # Custom codes of this batch are taken before any code is generated
        reserved = {row["custom_code"] for row in requests if row.get("custom_code")}

        results = []
        for row in requests:
            results.append(self._issue(row, reserved))

        self._log("SUCCESS", f"Successfully shortened {len(results)} URLs.")
        return results

    async def fetch_stats(self) -> List[Dict[str, Any]]:
        """List links issued by this process, newest first.

        Returns:
            List of dicts with short_code, short_url, original_url,
            created_at, expires_at and an (always empty) clicks list
        """
        stats = [
            {**link, "clicks": []}
            for link in sorted(self._links, key=lambda link: link["created_at"], reverse=True)
        ]
        self._log("INFO", f"Loaded statistics for {len(stats)} short URLs.")
        return stats

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        return {
            "overall": True,
            "issued_links": len(self._links),
            "pending_log_deliveries": self.emitter.pending,
        }

    def _validate(self, requests: List[Dict[str, Any]]) -> List[str]:
        errors = []
        batch_codes = set()

        for index, row in enumerate(requests, start=1):
            url = row.get("url")
            is_valid, _ = is_valid_url(url)
            if not is_valid:
                errors.append(f"Row {index}: Invalid URL format.")
                self._log("WARN", f"Invalid URL format for input #{index}: {url}", VALIDATION_PACKAGE)

            validity = row.get("validity_minutes")
            is_valid, _ = is_valid_validity(validity)
            if not is_valid:
                errors.append(f"Row {index}: Validity must be a positive whole number.")
                self._log(
                    "WARN",
                    f'Invalid validity for input #{index}. Expected positive integer, got: "{validity}"',
                    VALIDATION_PACKAGE,
                )

            custom_code = row.get("custom_code")
            if custom_code:
                is_valid, error = is_valid_short_code(custom_code)
                if not is_valid:
                    errors.append(f"Row {index}: {error}.")
                    self._log("WARN", f"Invalid short code for input #{index}: {error}", VALIDATION_PACKAGE)
                elif custom_code in self._codes or custom_code in batch_codes:
                    errors.append(f"Row {index}: Short code '{custom_code}' already exists.")
                    self._log("WARN", f"Duplicate short code for input #{index}: {custom_code}", VALIDATION_PACKAGE)
                batch_codes.add(custom_code)

        return errors

    def _issue(self, row: Dict[str, Any], reserved: Set[str]) -> Dict[str, Any]:
        original_url = row["url"]
        short_code = row.get("custom_code") or self._generate_unique_short_code(original_url, reserved)
        validity = row.get("validity_minutes")
        minutes = int(validity) if validity not in (None, "") else self.default_validity_minutes

        created_at = datetime.now(timezone.utc)
        link = {
            "short_code": short_code,
            "short_url": build_short_url(short_code, self.base_url),
            "original_url": original_url,
            "created_at": created_at,
            "expires_at": created_at + timedelta(minutes=minutes),
        }
        self._links.append(link)
        self._codes.add(short_code)

        self.logger.info(f"Issued short URL: {short_code} -> {original_url}")
        self._log("DEBUG", f"Issued short code {short_code}, valid for {minutes} minutes.")
        return dict(link)

    def _generate_unique_short_code(self, original_url: str, reserved: Set[str]) -> str:
        """Generate a short code not yet issued and not reserved by the batch.

        Raises:
            ValueError: If every candidate code is taken
        """
        taken = self._codes | reserved
        candidates = self.generator.candidates(original_url, self.max_collision_retries)
        for attempt, code in enumerate(candidates):
            if code not in taken:
                if attempt:
                    self.logger.debug(f"Generated code after {attempt + 1} attempts: {code}")
                return code

        raise ValueError("Unable to generate unique short code after multiple attempts")

"""
Custom exceptions for the article scraper.

Error philosophy:
  - InvalidInputError → FAIL HARD: the caller passed nothing usable, do not retry.
  - FetchError        → FAIL HARD: the page could not be fetched; no partial
                        article is ever returned.  Retrying is the caller's call.
  - AuthenticationError → raised by the service layer when the injected
                        authenticator rejects the request credentials.

Anything that goes wrong *after* the page text is in hand (missing meta tags,
no <article>, no paragraphs) is not an error at all: the field is simply left
absent and the pipeline keeps going.
"""

from typing import Optional


# Status classification handed to whatever transport sits on top of the core.
BAD_INPUT = "bad_input"
UPSTREAM_FAILURE = "upstream_failure"
INTERNAL_FAILURE = "internal_failure"
UNAUTHORIZED = "unauthorized"


class ScraperError(Exception):
    """Base exception for all article scraper errors."""

    status = INTERNAL_FAILURE
    retryable = False

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> dict:
        """Convert to the `{"error": ...}` failure shape."""
        return {"error": self.message}


class InvalidInputError(ScraperError):
    """Raised when the scrape request carries no usable URL."""

    status = BAD_INPUT


class FetchError(ScraperError):
    """
    Raised when the target page cannot be fetched.

    Covers both non-2xx responses and transport-level failures (DNS, refused
    connections, timeouts).  `reason` holds the upstream status text when the
    server answered at all.
    """

    status = UPSTREAM_FAILURE
    retryable = True

    def __init__(
        self,
        message: str,
        reason: str = "",
        status_code: Optional[int] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.reason = reason
        self.status_code = status_code  # None when no response was received


class AuthenticationError(ScraperError):
    """Raised when request credentials are rejected."""

    status = UNAUTHORIZED

"""
Request-level wrapper around the scraper.

Turns a scrape request (JSON payload + credentials) into a status code and a
response body, with authentication and persistence left to injected
collaborators.  The web framework on top only has to serialize the body.

Status mapping:
  401  credentials rejected
  400  missing URL, or the target page could not be fetched
  500  anything else
  200  {"article": <wire record>}
"""

from typing import Any, Optional, Protocol

from .main import ArticleScraper
from .exceptions import (
    AuthenticationError,
    FetchError,
    InvalidInputError,
    ScraperError,
)
from .logger import get_module_logger

logger = get_module_logger("service")


class Authenticator(Protocol):
    """Verifies request credentials."""

    def verify(self, credentials: Any) -> Optional[Any]:
        """Return the authenticated identity, or None to reject."""
        ...


class ArticleStore(Protocol):
    """Persists extracted articles."""

    def save(self, article: dict) -> str:
        """Store a wire-format article record and return its generated id."""
        ...


class ScrapeService:
    """Authenticated scrape endpoint logic, independent of any web framework."""

    def __init__(
        self,
        scraper: ArticleScraper,
        authenticator: Authenticator,
        store: Optional[ArticleStore] = None
    ):
        self.scraper = scraper
        self.authenticator = authenticator
        self.store = store

    def _authenticate(self, credentials: Any) -> Any:
        identity = self.authenticator.verify(credentials)
        if identity is None:
            raise AuthenticationError("Unauthorized")
        return identity

    def handle_scrape(self, payload: Optional[dict], credentials: Any) -> tuple[int, dict]:
        """
        Handle one scrape request.

        Args:
            payload: Decoded request body, expected to hold {"url": ...}
            credentials: Whatever the authenticator understands (token, header)

        Returns:
            Tuple of (HTTP status code, response body)
        """
        try:
            self._authenticate(credentials)
        except AuthenticationError as e:
            return 401, e.to_response()

        url = (payload or {}).get("url")
        try:
            article = self.scraper.scrape(url)
        except InvalidInputError as e:
            return 400, e.to_response()
        except FetchError as e:
            return 400, e.to_response()
        except Exception:
            logger.exception(f"Scrape failed for {url}")
            return 500, {"error": "Failed to scrape article"}

        return 200, {"article": article.to_wire()}

    def scrape_and_store(self, url: str, credentials: Any) -> str:
        """
        Scrape a URL and hand the result to the store.

        Raises:
            AuthenticationError: credentials rejected
            ScraperError: no store configured, or the scrape itself failed
        """
        identity = self._authenticate(credentials)
        if self.store is None:
            raise ScraperError("No article store configured")

        article = self.scraper.scrape(url)
        article_id = self.store.save(article.to_wire())
        logger.info(f"Stored article {article_id} from {url} for {identity}")
        return article_id

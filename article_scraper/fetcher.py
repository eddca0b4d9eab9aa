"""
Page fetcher: given a URL, return the page text or fail with FetchError.

One blocking GET per call through requests.  No session object is kept
between calls, so concurrent scrapes never share connection state.
"""

import codecs
import re
from dataclasses import dataclass
from typing import Optional

import requests

from .config import ScraperConfig
from .exceptions import FetchError
from .logger import get_module_logger

logger = get_module_logger("fetcher")

# WHATWG encoding spec: browsers silently remap these charsets.
# https://encoding.spec.whatwg.org/#names-and-labels
# Every browser treats "iso-8859-1" as "windows-1252"; decoding the same way
# keeps curly quotes and dashes in the 0x80–0x9F range intact.
WHATWG_CHARSET_MAP = {
    'iso-8859-1': 'windows-1252',
    'iso8859-1': 'windows-1252',
    'iso88591': 'windows-1252',
    'latin-1': 'windows-1252',
    'latin1': 'windows-1252',
    'us-ascii': 'windows-1252',
    'ascii': 'windows-1252',
    'iso-8859-9': 'windows-1254',
    'iso-8859-11': 'windows-874',
}

CONTENT_TYPE_CHARSET_PATTERN = re.compile(r'charset\s*=\s*["\']?([^\s"\';]+)', re.IGNORECASE)


def normalize_charset(charset: Optional[str]) -> Optional[str]:
    """Lowercase, apply the WHATWG remapping, and drop names Python can't decode."""
    if not charset:
        return None
    charset = charset.strip().lower()
    charset = WHATWG_CHARSET_MAP.get(charset, charset)
    try:
        codecs.lookup(charset)
        # Binary codecs such as base64 resolve but cannot decode bytes to text
        b" ".decode(charset, errors="replace")
    except LookupError:
        logger.debug(f"Unknown charset {charset!r}, ignoring")
        return None
    return charset


def detect_charset_from_bytes(raw_bytes: bytes) -> str:
    """
    Detect charset from raw HTML bytes by scanning the first 2048 bytes
    for <meta charset=...> or <meta http-equiv="Content-Type" content="...; charset=...">.

    Returns the browser-equivalent charset or 'utf-8' as default.
    """
    # The HTML spec requires the declaration within the first 1024 bytes
    head_str = raw_bytes[:2048].decode('ascii', errors='ignore')

    m = re.search(r'<meta[^>]+charset=["\']?\s*([^\s"\';>]+)', head_str, re.IGNORECASE)
    if not m:
        m = re.search(
            r'<meta[^>]+content=["\'][^"\']*charset=([^\s"\';>]+)',
            head_str, re.IGNORECASE
        )

    return (normalize_charset(m.group(1)) if m else None) or 'utf-8'


def decode_body(raw_bytes: bytes, content_type: str = "") -> tuple[str, str]:
    """
    Decode a response body.

    The Content-Type header charset wins; otherwise the markup's own
    declaration; otherwise UTF-8.  Undecodable bytes become U+FFFD.

    Returns:
        Tuple of (text, charset used)
    """
    header_match = CONTENT_TYPE_CHARSET_PATTERN.search(content_type or "")
    charset = normalize_charset(header_match.group(1)) if header_match else None
    if charset is None:
        charset = detect_charset_from_bytes(raw_bytes)
    return raw_bytes.decode(charset, errors='replace'), charset


@dataclass(frozen=True)
class FetchedPage:
    """A successfully fetched page."""
    url: str            # final URL after redirects
    status_code: int
    text: str
    encoding: str


class PageFetcher:
    """Fetches pages with browser-like headers and a hard timeout."""

    def __init__(self, config: Optional[ScraperConfig] = None):
        self.config = config or ScraperConfig()

    def fetch(self, url: str) -> FetchedPage:
        """
        Fetch a URL.

        Raises:
            FetchError: on a non-2xx response, a timeout, or any transport failure
        """
        logger.info(f"Fetching {url}")

        try:
            response = requests.get(
                url,
                headers=self.config.request_headers(),
                timeout=self.config.timeout,
                allow_redirects=True,
            )
        except requests.Timeout as e:
            logger.warning(f"Timed out after {self.config.timeout}s fetching {url}")
            raise FetchError(
                f"Failed to fetch URL: timed out after {self.config.timeout}s",
                reason="timeout",
                details={"url": url, "exception": str(e)}
            ) from e
        except requests.RequestException as e:
            logger.warning(f"Transport error fetching {url}: {e}")
            raise FetchError(
                f"Failed to fetch URL: {e}",
                reason=type(e).__name__,
                details={"url": url, "exception": str(e)}
            ) from e

        if not 200 <= response.status_code < 300:
            reason = response.reason or str(response.status_code)
            logger.warning(f"Fetching {url} returned {response.status_code} {reason}")
            raise FetchError(
                f"Failed to fetch URL: {reason}",
                reason=reason,
                status_code=response.status_code,
                details={"url": url}
            )

        text, encoding = decode_body(
            response.content, response.headers.get("Content-Type", "")
        )
        logger.debug(f"Fetched {len(text)} chars from {response.url} ({encoding})")
        return FetchedPage(
            url=response.url or url,
            status_code=response.status_code,
            text=text,
            encoding=encoding,
        )

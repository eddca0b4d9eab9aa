"""
Main orchestrator for the article scraper.

Coordinates the pipeline:
  fetch → metadata (raw markup)
        → sanitize → locate → classify (body)
        → assemble ExtractedArticle

Only the fetch can fail.  Everything after it is best-effort: missing pieces
become absent fields, never errors.
"""

import re
from pathlib import Path
from typing import Optional, Union

from .config import ScraperConfig
from .fetcher import PageFetcher, detect_charset_from_bytes
from .sanitizer import Sanitizer
from .locator import locate_content
from .classifier import BlockClassifier
from .metadata import extract_metadata
from .schemas import ExtractedArticle, ImageRef, MetadataBundle
from .exceptions import InvalidInputError
from .logger import get_module_logger, setup_logger

logger = get_module_logger("main")

FEATURED_IMAGE_ALT = "Featured image"

# Trailing " | Site Name" / " - Site Name" / " — Site Name".  The search is
# leftmost, so the first separator whose remainder holds no "|" is cut.
TITLE_SUFFIX_PATTERN = re.compile(r'\s*[|\-–—]\s*[^|]*$')


def clean_title(title: Optional[str]) -> str:
    """Strip a trailing site-name suffix and surrounding whitespace."""
    if not title:
        return ""
    return TITLE_SUFFIX_PATTERN.sub('', title, count=1).strip()


class ArticleScraper:
    """
    Main orchestrator for article scraping.

    Holds only immutable collaborators, so one instance can serve concurrent
    scrape calls.
    """

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        fetcher: Optional[PageFetcher] = None,
        ordering: str = 'document',
        log_level: int = None
    ):
        if log_level is not None:
            setup_logger(level=log_level)

        self.config = config or ScraperConfig()
        self.fetcher = fetcher or PageFetcher(self.config)
        self.sanitizer = Sanitizer()
        self.classifier = BlockClassifier(ordering=ordering)

    def scrape(self, url: str) -> ExtractedArticle:
        """
        Fetch a URL and extract its article.

        Raises:
            InvalidInputError: url is missing or blank
            FetchError: the page could not be fetched
        """
        if not url or not url.strip():
            raise InvalidInputError("URL is required")
        url = url.strip()

        page = self.fetcher.fetch(url)
        return self.parse_html(page.text, source_url=url)

    def parse_html(self, html: str, source_url: str) -> ExtractedArticle:
        """Run extraction on already-fetched markup. Never raises on bad markup."""
        logger.info(f"Starting extraction for {source_url}")

        # Head tags are read from the raw markup, before sanitization
        metadata = extract_metadata(html)

        sanitized = self.sanitizer.process(html)
        for warning in sanitized.warnings:
            logger.debug(f"Sanitizer: {warning}")
        region = locate_content(sanitized.sanitized)
        blocks = self.classifier.classify(region)

        article = ExtractedArticle(
            title=clean_title(metadata.og_title or metadata.title),
            author=metadata.author,
            published_date=metadata.published_date,
            summary=metadata.summary,
            meta_description=metadata.meta_description,
            content=blocks,
            images=self._collect_images(metadata),
            source_url=source_url,
        )

        logger.info(f"Complete: {len(article.content)} blocks, {len(article.images)} images")
        return article

    def parse_file(
        self,
        file_path: Union[str, Path],
        source_url: Optional[str] = None
    ) -> ExtractedArticle:
        """Parse a saved HTML file."""
        file_path = Path(file_path)

        # Read bytes so the page's own charset declaration decides the decoding
        raw_bytes = file_path.read_bytes()
        charset = detect_charset_from_bytes(raw_bytes)
        html = raw_bytes.decode(charset, errors='replace')

        return self.parse_html(html, source_url=source_url or file_path.resolve().as_uri())

    def _collect_images(self, metadata: MetadataBundle) -> list[ImageRef]:
        # Images live only here, never in `content`
        images = []
        if metadata.og_image:
            images.append(ImageRef(url=metadata.og_image, alt=FEATURED_IMAGE_ALT))
        return images


def scrape_article(url: str, config: Optional[ScraperConfig] = None) -> ExtractedArticle:
    """Convenience function to scrape one URL."""
    return ArticleScraper(config=config).scrape(url)


def parse_article_html(html: str, source_url: str) -> ExtractedArticle:
    """Convenience function to extract an article from markup already in hand."""
    return ArticleScraper().parse_html(html, source_url=source_url)

"""
Article Scraper

Fetches a web page and turns it into a structured article record.
- Sanitizer:  pattern-based removal of scripts, page chrome and ad containers
- Metadata:   title/description/author/date/image from head tags
- Locator:    narrows the page to <article>, else <main>, else everything
- Classifier: emits heading, paragraph, list and quote blocks

Public API surface:
  Pipeline      — ArticleScraper, scrape_article, parse_article_html
  Stages        — Sanitizer, sanitize, locate_content, BlockClassifier,
                  classify, strip_tags, extract_metadata
  Fetching      — PageFetcher, ScraperConfig
  Data models   — ExtractedArticle, ContentBlock and its kinds, ImageRef,
                  MetadataBundle
  Error types   — ScraperError, InvalidInputError, FetchError,
                  AuthenticationError
  Service layer — ScrapeService, Authenticator, ArticleStore
"""

# --- Pipeline ---
from .main import ArticleScraper, scrape_article, parse_article_html, clean_title

# --- Stages ---
from .sanitizer import Sanitizer, sanitize
from .locator import locate_content
from .classifier import BlockClassifier, classify, strip_tags
from .metadata import extract_metadata

# --- Fetching and configuration ---
from .fetcher import PageFetcher, FetchedPage
from .config import ScraperConfig

# --- Data models ---
from .schemas import (
    ExtractedArticle,
    ContentBlock,
    HeadingBlock,
    ParagraphBlock,
    ListBlock,
    QuoteBlock,
    ImageRef,
    MetadataBundle,
)

# --- Exceptions ---
from .exceptions import ScraperError, InvalidInputError, FetchError, AuthenticationError

# --- Service layer ---
from .service import ScrapeService, Authenticator, ArticleStore

__version__ = "0.1.0"
__all__ = [
    "ArticleScraper",
    "scrape_article",
    "parse_article_html",
    "clean_title",
    "Sanitizer",
    "sanitize",
    "locate_content",
    "BlockClassifier",
    "classify",
    "strip_tags",
    "extract_metadata",
    "PageFetcher",
    "FetchedPage",
    "ScraperConfig",
    "ExtractedArticle",
    "ContentBlock",
    "HeadingBlock",
    "ParagraphBlock",
    "ListBlock",
    "QuoteBlock",
    "ImageRef",
    "MetadataBundle",
    "ScraperError",
    "InvalidInputError",
    "FetchError",
    "AuthenticationError",
    "ScrapeService",
    "Authenticator",
    "ArticleStore",
]

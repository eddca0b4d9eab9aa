"""
Block Classifier: pattern-based content block extraction.

Scans a content region and emits typed blocks (heading, paragraph, list,
quote).  Each block kind has its own independent scan over the whole region;
the scans never consult each other, so a <p> inside a <blockquote> yields
both a paragraph and a quote.

Pipeline position: Stage 3 of the body path (Sanitizer → Locator → Classifier).
Input:  content region markup
Output: list of ContentBlock
"""

import re
from typing import Optional

from .schemas import ContentBlock, HeadingBlock, ParagraphBlock, ListBlock, QuoteBlock
from .sanitizer import remove_scripts_and_styles
from .logger import get_module_logger

logger = get_module_logger("classifier")

# Matches any tag, opening or closing.  Non-recursive: one pass flattens
# nested inline markup to its text runs.
TAG_PATTERN = re.compile(r'<[^>]+>')

HEADING_PATTERN = re.compile(r'<h([1-6])\b[^>]*>([\s\S]*?)</h\1>', re.IGNORECASE)
PARAGRAPH_PATTERN = re.compile(r'<p\b[^>]*>([\s\S]*?)</p>', re.IGNORECASE)
LIST_PATTERN = re.compile(r'<(ul|ol)\b[^>]*>([\s\S]*?)</\1>', re.IGNORECASE)
LIST_ITEM_PATTERN = re.compile(r'<li\b[^>]*>([\s\S]*?)</li>', re.IGNORECASE)
QUOTE_PATTERN = re.compile(r'<blockquote\b[^>]*>([\s\S]*?)</blockquote>', re.IGNORECASE)

# Paragraphs this short are bylines, captions, "Advertisement" labels and
# similar noise.  Kept at exactly 20 for compatibility with stored articles.
MIN_PARAGRAPH_LENGTH = 20

ORDERINGS = ('document', 'grouped')


def strip_tags(text: str) -> str:
    """Remove every tag and trim. Idempotent: strip_tags(strip_tags(x)) == strip_tags(x)."""
    return TAG_PATTERN.sub('', text).strip()


class BlockClassifier:
    """
    Classifies markup into content blocks.

    Args:
        ordering: 'document' (default) emits blocks in reading order.
                  'grouped' emits all headings, then paragraphs, lists and
                  quotes, which is how older stored articles were built.
    """

    def __init__(self, ordering: str = 'document'):
        if ordering not in ORDERINGS:
            raise ValueError(f"ordering must be one of {ORDERINGS}, got {ordering!r}")
        self.ordering = ordering

    def _scan_headings(self, markup: str) -> list[tuple[int, ContentBlock]]:
        found = []
        for match in HEADING_PATTERN.finditer(markup):
            text = strip_tags(match.group(2))
            if text:
                found.append((match.start(), HeadingBlock(level=int(match.group(1)), text=text)))
        return found

    def _scan_paragraphs(self, markup: str) -> list[tuple[int, ContentBlock]]:
        found = []
        for match in PARAGRAPH_PATTERN.finditer(markup):
            text = strip_tags(match.group(1))
            if len(text) > MIN_PARAGRAPH_LENGTH:
                found.append((match.start(), ParagraphBlock(text=text)))
        return found

    def _scan_lists(self, markup: str) -> list[tuple[int, ContentBlock]]:
        found = []
        for match in LIST_PATTERN.finditer(markup):
            items = [strip_tags(item) for item in LIST_ITEM_PATTERN.findall(match.group(2))]
            items = [item for item in items if item]
            if items:
                ordered = match.group(1).lower() == 'ol'
                found.append((match.start(), ListBlock(ordered=ordered, items=items)))
        return found

    def _scan_quotes(self, markup: str) -> list[tuple[int, ContentBlock]]:
        found = []
        for match in QUOTE_PATTERN.finditer(markup):
            text = strip_tags(match.group(1))
            if text:
                found.append((match.start(), QuoteBlock(text=text)))
        return found

    def classify(self, markup: Optional[str]) -> list[ContentBlock]:
        """
        Extract content blocks from a content region.

        Args:
            markup: Content region markup (usually the Locator's output)

        Returns:
            Blocks in the configured ordering; empty list if nothing qualifies
        """
        if not markup:
            return []

        # Script/style bodies must never become text, even when the caller
        # skipped the sanitizer.
        markup = remove_scripts_and_styles(markup)

        scans = [
            self._scan_headings(markup),
            self._scan_paragraphs(markup),
            self._scan_lists(markup),
            self._scan_quotes(markup),
        ]

        # Scan order is the tie-breaker, so concatenating first and then
        # sorting stably by offset gives reading order.
        pairs = [pair for scan in scans for pair in scan]
        if self.ordering == 'document':
            pairs.sort(key=lambda pair: pair[0])

        blocks = [block for _, block in pairs]
        logger.debug(f"Classified {len(blocks)} blocks ({self.ordering} order)")
        return blocks


def classify(markup: str, ordering: str = 'document') -> list[ContentBlock]:
    """Convenience function to classify markup into content blocks."""
    return BlockClassifier(ordering=ordering).classify(markup)

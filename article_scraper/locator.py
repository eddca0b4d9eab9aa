"""
Main-Content Locator.

Narrows sanitized markup to the region most likely to hold the article body.
Policy, first match wins:
  1. inner markup of the first <article> element
  2. inner markup of the first <main> element
  3. the whole sanitized markup
"""

import re

from .logger import get_module_logger

logger = get_module_logger("locator")

# Ordered from most to least specific
CONTENT_REGION_PATTERNS = [
    ('article', re.compile(r'<article\b[^>]*>([\s\S]*?)</article>', re.IGNORECASE)),
    ('main', re.compile(r'<main\b[^>]*>([\s\S]*?)</main>', re.IGNORECASE)),
]


def locate_content(sanitized: str) -> str:
    """Return the best candidate content region. Never fails."""
    for region, pattern in CONTENT_REGION_PATTERNS:
        match = pattern.search(sanitized)
        if match:
            logger.debug(f"Content region: <{region}> ({len(match.group(1))} chars)")
            return match.group(1)

    logger.debug("No <article> or <main> found, using whole document")
    return sanitized

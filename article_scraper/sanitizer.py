"""
Markup Sanitizer: pattern-based removal of non-content regions.

Strips everything that is never article body before the content scan runs:
- <script> and <style> elements (including their bodies)
- page chrome: <nav>, <header>, <footer>, <aside>
- containers whose class marks them as sidebar/ads/comments/related/social/share
- HTML comments

Design principle: NEVER FAIL on bad markup. A pattern that doesn't match
leaves the text untouched.

Pipeline position: Stage 1 of the body path (Sanitizer → Locator → Classifier).
Input:  raw markup string
Output: sanitized markup string (or a SanitizeResult with warnings)
"""

import re
from dataclasses import dataclass, field

from .logger import get_module_logger

logger = get_module_logger("sanitizer")


# --- Executable / presentational content ---
# A plain `<script>.*?</script>` would do for well-formed pages, but this form
# walks tag by tag and only stops at a real closing tag, the same way browsers
# end a raw-text element.
SCRIPT_PATTERN = re.compile(
    r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>', re.IGNORECASE
)
STYLE_PATTERN = re.compile(
    r'<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>', re.IGNORECASE
)

# --- Page chrome ---
# Non-nested assumption: first opening tag up to the first closing tag of the
# same name.
CHROME_TAGS = ['nav', 'header', 'footer', 'aside']
CHROME_PATTERNS = [
    re.compile(rf'<{tag}\b[^>]*>[\s\S]*?</{tag}>', re.IGNORECASE)
    for tag in CHROME_TAGS
]

# --- Boilerplate containers, matched by class substring ---
# Substring match on purpose: "post-sidebar", "ads-top", "share-bar" all count.
BOILERPLATE_CLASS_MARKERS = [
    'sidebar', 'advertisement', 'ads', 'comments', 'related', 'social', 'share'
]
BOILERPLATE_CONTAINER_PATTERN = re.compile(
    r'<(div|section)\b[^>]*(?<![\w-])class\s*=\s*(["\'])[^"\']*(?:'
    + '|'.join(BOILERPLATE_CLASS_MARKERS)
    + r')[^"\']*\2[^>]*>[\s\S]*?</\1>',
    re.IGNORECASE
)

COMMENT_PATTERN = re.compile(r'<!--[\s\S]*?-->')

# Removal order.  Later patterns see text the earlier ones already cleaned.
REMOVAL_PATTERNS = [
    ('script', SCRIPT_PATTERN),
    ('style', STYLE_PATTERN),
    *zip(CHROME_TAGS, CHROME_PATTERNS),
    ('boilerplate', BOILERPLATE_CONTAINER_PATTERN),
    ('comment', COMMENT_PATTERN),
]


def remove_scripts_and_styles(markup: str) -> str:
    """Remove only <script> and <style> elements."""
    markup = SCRIPT_PATTERN.sub('', markup)
    return STYLE_PATTERN.sub('', markup)


@dataclass
class SanitizeResult:
    """Sanitized markup plus what was done to it."""
    sanitized: str
    removed: dict = field(default_factory=dict)    # region name → match count
    warnings: list = field(default_factory=list)


class Sanitizer:
    """
    Pattern-based markup sanitizer.

    Stateless: one instance can be shared between threads and calls.
    """

    def _normalize(self, markup: str) -> tuple[str, list[str]]:
        """
        String-level fixes applied before any pattern runs.

        Returns:
            Tuple of (normalized markup, list of warnings)
        """
        warnings = []

        # NULL bytes are never valid in HTML text and break the scans below
        if '\x00' in markup:
            markup = markup.replace('\x00', '')
            warnings.append("Removed NULL bytes")

        # Normalize line endings to \n for consistent downstream processing
        if '\r' in markup:
            markup = markup.replace('\r\n', '\n').replace('\r', '\n')

        return markup, warnings

    def process(self, markup: str) -> SanitizeResult:
        """
        Sanitize markup and report what was removed.

        Args:
            markup: Raw markup string

        Returns:
            SanitizeResult with the sanitized text, per-region removal counts
            and warnings
        """
        if not markup:
            return SanitizeResult(sanitized='')

        sanitized, warnings = self._normalize(markup)
        removed = {}

        for name, pattern in REMOVAL_PATTERNS:
            sanitized, count = pattern.subn('', sanitized)
            if count:
                removed[name] = removed.get(name, 0) + count

        logger.debug(
            f"Sanitization complete: {len(markup)} -> {len(sanitized)} chars, removed {removed}"
        )
        return SanitizeResult(sanitized=sanitized, removed=removed, warnings=warnings)


def sanitize(markup: str) -> str:
    """Convenience function returning only the sanitized markup."""
    return Sanitizer().process(markup).sanitized

"""
Metadata Extractor.

Pulls title, description, author, published date and featured image from
head-level tags (<title>, <meta name=...>, Open Graph <meta property=...>).

Runs on RAW markup: the sanitizer targets body boilerplate, and the head tags
read here must be seen exactly as served.

Every field is independent and best-effort.  A missing or unusable tag leaves
the field as None; nothing in this module raises on bad input.
"""

import re
from datetime import datetime
from typing import Optional

from dateutil.parser import isoparse

from .schemas import MetadataBundle
from .logger import get_module_logger

logger = get_module_logger("metadata")

TITLE_PATTERN = re.compile(r'<title\b[^>]*>([\s\S]*?)</title>', re.IGNORECASE)
# Quoted values are consumed whole so a '>' inside content="..." doesn't end the tag
META_TAG_PATTERN = re.compile(r'<meta\b((?:[^>"\']|"[^"]*"|\'[^\']*\')*)>', re.IGNORECASE)

# name="value", name='value' or name=value.  Attribute order inside the tag
# does not matter, so content= may come before property=.
ATTRIBUTE_PATTERN = re.compile(
    r'([\w:.-]+)\s*=\s*(?:"([^"]*)"|\'([^\']*)\'|([^\s"\'>]+))'
)

# field → (key attribute, key value)
META_FIELDS = {
    'og_title': ('property', 'og:title'),
    'meta_description': ('name', 'description'),
    'og_description': ('property', 'og:description'),
    'author': ('name', 'author'),
    'published_date': ('property', 'article:published_time'),
    'og_image': ('property', 'og:image'),
}


def _parse_attributes(attribute_text: str) -> dict:
    """Parse a tag's attribute string into a lowercase-keyed dict."""
    attributes = {}
    for match in ATTRIBUTE_PATTERN.finditer(attribute_text):
        name = match.group(1).lower()
        value = next((g for g in match.groups()[1:] if g is not None), '')
        # First occurrence wins, like browsers
        attributes.setdefault(name, value)
    return attributes


def _collect_meta(markup: str) -> dict:
    """
    Index every <meta> content value by (key attribute, lowercased key).

    Only the first tag for a given key is kept.  Tags whose content is empty
    are skipped so a later non-empty duplicate can still win.
    """
    index = {}
    for match in META_TAG_PATTERN.finditer(markup):
        attributes = _parse_attributes(match.group(1))
        content = attributes.get('content', '').strip()
        if not content:
            continue
        for key_attribute in ('property', 'name'):
            key = attributes.get(key_attribute)
            if key:
                index.setdefault((key_attribute, key.strip().lower()), content)
    return index


def parse_published_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; anything unparsable becomes None."""
    if not value:
        return None
    try:
        return isoparse(value.strip())
    except (ValueError, OverflowError) as e:
        logger.warning(f"Ignoring unparsable published date {value!r}: {e}")
        return None


def extract_metadata(markup: str) -> MetadataBundle:
    """Extract head-level metadata from raw markup."""
    if not markup:
        return MetadataBundle()

    title_match = TITLE_PATTERN.search(markup)
    title = title_match.group(1).strip() if title_match else None

    meta = _collect_meta(markup)
    values = {
        field_name: meta.get(key)
        for field_name, key in META_FIELDS.items()
    }
    values['published_date'] = parse_published_date(values['published_date'])

    bundle = MetadataBundle(title=title or None, **values)
    logger.debug(
        f"Metadata: title={bundle.title!r} og_title={bundle.og_title!r} "
        f"author={bundle.author!r} published={bundle.published_date}"
    )
    return bundle

"""
Pydantic schemas defining the contracts between pipeline stages.

MetadataBundle:   Metadata Extractor → Orchestrator
ContentBlock:     Block Classifier → Orchestrator
ExtractedArticle: the pipeline's final product, plus its wire representation

Data flow through the pipeline:
  raw markup → extract_metadata() → MetadataBundle
  raw markup → sanitize() → locate_content() → classify() → list[ContentBlock]
  MetadataBundle + blocks → ExtractedArticle → to_wire() → JSON-ready dict
"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Content blocks ---
# Each kind is its own model; `kind` is the discriminator so a list of blocks
# round-trips through model_dump()/model_validate() without losing the type.

class HeadingBlock(BaseModel):
    """An <h1>–<h6> heading."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["heading"] = "heading"
    level: int = Field(ge=1, le=6)
    text: str


class ParagraphBlock(BaseModel):
    """A <p> paragraph that survived the noise filter."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["paragraph"] = "paragraph"
    text: str


class ListBlock(BaseModel):
    """A <ul> or <ol> with at least one non-empty item."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    ordered: bool = False
    items: list[str] = Field(min_length=1)


class QuoteBlock(BaseModel):
    """A <blockquote>."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["quote"] = "quote"
    text: str


ContentBlock = Annotated[
    Union[HeadingBlock, ParagraphBlock, ListBlock, QuoteBlock],
    Field(discriminator="kind"),
]


def block_to_wire(block: ContentBlock) -> dict:
    """
    Flatten a block into the consumer-facing shape.

    Consumers expect a `type` discriminator plus a `content` string on every
    block; lists additionally carry `items` (content is the items joined by
    ", ") and headings carry `level`.
    """
    if isinstance(block, HeadingBlock):
        return {"type": "heading", "level": block.level, "content": block.text}
    if isinstance(block, ListBlock):
        return {
            "type": "ordered-list" if block.ordered else "unordered-list",
            "items": list(block.items),
            "content": ", ".join(block.items),
        }
    if isinstance(block, QuoteBlock):
        return {"type": "quote", "content": block.text}
    return {"type": "paragraph", "content": block.text}


# --- Metadata Extractor output ---

class MetadataBundle(BaseModel):
    """Head-level metadata; every field is None when its tag is missing."""
    title: Optional[str] = None
    og_title: Optional[str] = None
    meta_description: Optional[str] = None
    og_description: Optional[str] = None
    author: Optional[str] = None
    published_date: Optional[datetime] = None
    og_image: Optional[str] = None

    @property
    def summary(self) -> Optional[str]:
        """og:description, falling back to the plain meta description."""
        return self.og_description or self.meta_description


class ImageRef(BaseModel):
    """An image attached to an article (never part of `content`)."""
    model_config = ConfigDict(frozen=True)

    url: str
    alt: Optional[str] = None


# --- Pipeline output ---

class ExtractedArticle(BaseModel):
    """
    The article record produced by one successful scrape.

    Immutable after construction.  Persisting it is the storage
    collaborator's job; this core only builds and hands it over.
    """
    model_config = ConfigDict(frozen=True)

    title: str = ""
    author: Optional[str] = None
    published_date: Optional[datetime] = None
    summary: Optional[str] = None
    meta_description: Optional[str] = None
    content: tuple[ContentBlock, ...] = ()
    images: tuple[ImageRef, ...] = ()
    source_url: str

    def to_wire(self) -> dict:
        """Return the JSON-serializable record consumers expect (camelCase keys)."""
        return {
            "title": self.title,
            "author": self.author,
            "publishedDate": self.published_date.isoformat() if self.published_date else None,
            "summary": self.summary,
            "metaDescription": self.meta_description,
            "content": [block_to_wire(block) for block in self.content],
            "images": [
                {"url": image.url, "alt": image.alt} if image.alt is not None else {"url": image.url}
                for image in self.images
            ],
            "sourceUrl": self.source_url,
        }

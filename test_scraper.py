"""
Tests for the end-to-end pipeline: fetching, orchestration, wire format,
configuration and the service layer.

requests.get is replaced with a fake through monkeypatch, so nothing here
touches the network.
"""

import json
from datetime import datetime, timezone

import pytest
import requests
from pydantic import ValidationError

from article_scraper import fetcher as fetcher_module
from article_scraper.config import ScraperConfig, DEFAULT_USER_AGENT
from article_scraper.exceptions import (
    AuthenticationError,
    FetchError,
    InvalidInputError,
    ScraperError,
    BAD_INPUT,
    UPSTREAM_FAILURE,
)
from article_scraper.fetcher import (
    FetchedPage,
    PageFetcher,
    decode_body,
    detect_charset_from_bytes,
)
from article_scraper.main import ArticleScraper, clean_title, parse_article_html
from article_scraper.schemas import (
    ExtractedArticle,
    HeadingBlock,
    ImageRef,
    ListBlock,
    ParagraphBlock,
    QuoteBlock,
)
from article_scraper.service import ScrapeService


SAMPLE_HTML = """<html><head><title>Sample Article | News Site</title>
<meta property="og:description" content="A short summary."></head>
<body><nav>ignored</nav><article><h1>Main Heading</h1>
<p>This paragraph has more than twenty characters easily.</p>
<ul><li>Item one</li><li>Item two</li></ul></article></body></html>"""


class FakeResponse:
    """Just enough of requests.Response for PageFetcher."""

    def __init__(self, status_code=200, body=b"", reason="OK", headers=None, url=""):
        self.status_code = status_code
        self.content = body
        self.reason = reason
        self.headers = headers or {"Content-Type": "text/html; charset=utf-8"}
        self.url = url


@pytest.fixture
def fake_get(monkeypatch):
    """Install a fake requests.get; returns the list of recorded calls."""
    calls = []
    state = {"response": FakeResponse(body=SAMPLE_HTML.encode("utf-8")), "error": None}

    def _get(url, **kwargs):
        calls.append({"url": url, **kwargs})
        if state["error"] is not None:
            raise state["error"]
        response = state["response"]
        response.url = response.url or url
        return response

    monkeypatch.setattr(fetcher_module.requests, "get", _get)
    _get.calls = calls
    _get.state = state
    return _get


class StubFetcher:
    """Fetcher double that serves fixed markup or raises a fixed error."""

    def __init__(self, html=SAMPLE_HTML, error=None):
        self.html = html
        self.error = error
        self.urls = []

    def fetch(self, url):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return FetchedPage(url=url, status_code=200, text=self.html, encoding="utf-8")


# --- End-to-end pipeline ---

def test_sample_article_end_to_end(fake_get):
    article = ArticleScraper().scrape("https://news.example.com/story")

    assert article.title == "Sample Article"
    assert article.summary == "A short summary."
    assert article.meta_description is None
    assert article.author is None
    assert article.published_date is None
    assert list(article.content) == [
        HeadingBlock(level=1, text="Main Heading"),
        ParagraphBlock(text="This paragraph has more than twenty characters easily."),
        ListBlock(ordered=False, items=["Item one", "Item two"]),
    ]
    assert article.images == ()
    assert article.source_url == "https://news.example.com/story"


def test_scrape_sends_browser_user_agent_and_timeout(fake_get):
    ArticleScraper(config=ScraperConfig(timeout=7)).scrape("https://example.com/a")

    call = fake_get.calls[0]
    assert call["url"] == "https://example.com/a"
    assert call["headers"]["User-Agent"] == DEFAULT_USER_AGENT
    assert "Mozilla/5.0" in call["headers"]["User-Agent"]
    assert call["timeout"] == 7


@pytest.mark.parametrize("url", ["", "   ", None])
def test_scrape_rejects_empty_url(url, fake_get):
    with pytest.raises(InvalidInputError) as exc_info:
        ArticleScraper().scrape(url)
    assert exc_info.value.status == BAD_INPUT
    assert fake_get.calls == []


def test_non_2xx_response_raises_fetch_error(fake_get):
    fake_get.state["response"] = FakeResponse(status_code=404, body=b"<p>gone</p>", reason="Not Found")

    with pytest.raises(FetchError) as exc_info:
        ArticleScraper().scrape("https://example.com/missing")

    error = exc_info.value
    assert error.status_code == 404
    assert error.reason == "Not Found"
    assert error.status == UPSTREAM_FAILURE
    assert error.retryable
    assert error.to_response() == {"error": "Failed to fetch URL: Not Found"}


@pytest.mark.parametrize("exception,reason", [
    (requests.Timeout("read timed out"), "timeout"),
    (requests.ConnectionError("refused"), "ConnectionError"),
])
def test_transport_failure_raises_fetch_error(fake_get, exception, reason):
    fake_get.state["error"] = exception

    with pytest.raises(FetchError) as exc_info:
        PageFetcher().fetch("https://example.com/down")

    assert exc_info.value.reason == reason
    assert exc_info.value.status_code is None


def test_title_override_by_og_title():
    html = '<title>Foo | Site</title><meta property="og:title" content="Bar">'
    article = parse_article_html(html, source_url="https://example.com")
    assert article.title == "Bar"


def test_featured_image_is_only_in_images():
    html = (
        '<meta property="og:image" content="https://example.com/cover.jpg">'
        '<article><img src="https://example.com/inline.png" alt="inline">'
        '<p>Some paragraph with more than twenty characters.</p></article>'
    )
    article = parse_article_html(html, source_url="https://example.com")

    assert article.images == (ImageRef(url="https://example.com/cover.jpg", alt="Featured image"),)
    wire = article.to_wire()
    assert wire["images"] == [{"url": "https://example.com/cover.jpg", "alt": "Featured image"}]
    assert all(block["type"] != "image" for block in wire["content"])


def test_page_without_anything_still_yields_article():
    article = parse_article_html("", source_url="https://example.com/empty")
    assert article.title == ""
    assert article.content == ()
    assert article.images == ()
    assert article.source_url == "https://example.com/empty"


def test_sidebar_and_script_content_never_reaches_blocks():
    html = (
        "<body><main>"
        "<script>document.write('<p>Injected paragraph that is long enough</p>')</script>"
        "<div class='related-stories'><p>Related story teaser that is long enough</p></div>"
        "<p>The real body paragraph of this article.</p>"
        "</main></body>"
    )
    article = parse_article_html(html, source_url="https://example.com")
    assert list(article.content) == [ParagraphBlock(text="The real body paragraph of this article.")]


def test_grouped_ordering_is_configurable():
    html = (
        "<article><p>A paragraph that comes first in the page.</p>"
        "<h2>Heading after it</h2></article>"
    )
    default = ArticleScraper(fetcher=StubFetcher(html)).scrape("https://example.com")
    grouped = ArticleScraper(fetcher=StubFetcher(html), ordering="grouped").scrape("https://example.com")

    assert [b.kind for b in default.content] == ["paragraph", "heading"]
    assert [b.kind for b in grouped.content] == ["heading", "paragraph"]


def test_parse_file_uses_declared_charset(tmp_path):
    path = tmp_path / "page.html"
    path.write_bytes(
        b'<meta charset="iso-8859-1"><title>Caf\xe9 \x93news\x94 | Site</title>'
    )
    article = ArticleScraper().parse_file(path, source_url="https://example.com/cafe")
    assert article.title == "Café “news”"
    assert article.source_url == "https://example.com/cafe"


def test_extracted_article_is_immutable():
    article = parse_article_html(SAMPLE_HTML, source_url="https://example.com")
    with pytest.raises(ValidationError):
        article.title = "changed"


# --- Title cleanup ---

@pytest.mark.parametrize("raw,expected", [
    ("Sample Article | News Site", "Sample Article"),
    ("Headline - The Daily", "Headline"),
    ("Headline — The Daily", "Headline"),
    ("Headline – The Daily", "Headline"),
    ("Foo - Bar | Site", "Foo - Bar"),
    ("  No separator here  ", "No separator here"),
    ("", ""),
    (None, ""),
])
def test_clean_title(raw, expected):
    assert clean_title(raw) == expected


# --- Wire format ---

def test_wire_format_shape():
    article = ExtractedArticle(
        title="T",
        author="Jane Doe",
        published_date=datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc),
        summary="S",
        meta_description="M",
        content=[
            HeadingBlock(level=2, text="H"),
            ParagraphBlock(text="P"),
            ListBlock(ordered=True, items=["a", "b"]),
            ListBlock(ordered=False, items=["c"]),
            QuoteBlock(text="Q"),
        ],
        images=[ImageRef(url="https://example.com/x.png")],
        source_url="https://example.com",
    )

    wire = article.to_wire()
    assert wire == {
        "title": "T",
        "author": "Jane Doe",
        "publishedDate": "2024-03-05T10:00:00+00:00",
        "summary": "S",
        "metaDescription": "M",
        "content": [
            {"type": "heading", "level": 2, "content": "H"},
            {"type": "paragraph", "content": "P"},
            {"type": "ordered-list", "items": ["a", "b"], "content": "a, b"},
            {"type": "unordered-list", "items": ["c"], "content": "c"},
            {"type": "quote", "content": "Q"},
        ],
        "images": [{"url": "https://example.com/x.png"}],
        "sourceUrl": "https://example.com",
    }
    # Must serialize without a custom encoder
    json.dumps(wire)


def test_list_block_requires_items():
    with pytest.raises(ValidationError):
        ListBlock(ordered=False, items=[])


def test_heading_level_is_bounded():
    with pytest.raises(ValidationError):
        HeadingBlock(level=7, text="too deep")


# --- Decoding ---

def test_detect_charset_from_bytes():
    assert detect_charset_from_bytes(b'<meta charset="ISO-8859-1">') == "windows-1252"
    assert detect_charset_from_bytes(
        b'<meta http-equiv="Content-Type" content="text/html; charset=Shift_JIS">'
    ) == "shift_jis"
    assert detect_charset_from_bytes(b'<meta charset="x-made-up">') == "utf-8"
    assert detect_charset_from_bytes(b"<p>no declaration</p>") == "utf-8"


def test_decode_body_prefers_header_charset():
    text, charset = decode_body(b"caf\xe9", "text/html; charset=ISO-8859-1")
    assert text == "café"
    assert charset == "windows-1252"


@pytest.mark.parametrize("content_type", [
    "text/html; charset=x-user-defined-bogus",
    "text/html; charset=base64",
])
def test_decode_body_falls_back_to_utf8_on_unusable_header_charset(content_type):
    text, charset = decode_body("<p>héllo</p>".encode("utf-8"), content_type)
    assert charset == "utf-8"
    assert text == "<p>héllo</p>"


def test_parse_file_falls_back_to_utf8_on_unknown_meta_charset(tmp_path):
    path = tmp_path / "page.html"
    path.write_bytes('<meta charset="x-made-up"><title>Café | Site</title>'.encode("utf-8"))
    article = ArticleScraper().parse_file(path, source_url="https://example.com/x")
    assert article.title == "Café"


def test_fetcher_survives_unknown_charset(fake_get):
    fake_get.state["response"] = FakeResponse(
        body=SAMPLE_HTML.encode("utf-8"),
        headers={"Content-Type": "text/html; charset=x-user-defined-bogus"},
    )
    article = ArticleScraper().scrape("https://example.com/bogus")
    assert article.title == "Sample Article"
    assert len(article.content) == 3


def test_decode_body_replaces_invalid_bytes():
    text, charset = decode_body(b"ok \xff\xfe", "text/html")
    assert charset == "utf-8"
    assert text.startswith("ok ")
    assert "�" in text


def test_fetcher_returns_decoded_page(fake_get):
    fake_get.state["response"] = FakeResponse(
        body=b"<title>Gr\xfc\xdfe</title>",
        headers={"Content-Type": "text/html; charset=latin-1"},
        url="https://example.com/final",
    )
    page = PageFetcher().fetch("https://example.com/start")
    assert page.text == "<title>Grüße</title>"
    assert page.url == "https://example.com/final"
    assert page.status_code == 200


# --- Configuration ---

def test_config_from_env(monkeypatch):
    monkeypatch.setenv("ARTICLE_SCRAPER_TIMEOUT", "12.5")
    monkeypatch.setenv("ARTICLE_SCRAPER_USER_AGENT", "TestAgent/1.0")
    config = ScraperConfig.from_env()
    assert config.timeout == 12.5
    assert config.user_agent == "TestAgent/1.0"
    assert config.request_headers()["User-Agent"] == "TestAgent/1.0"


def test_config_overrides_win_over_env(monkeypatch):
    monkeypatch.setenv("ARTICLE_SCRAPER_TIMEOUT", "12.5")
    assert ScraperConfig.from_env(timeout=3).timeout == 3
    assert ScraperConfig.from_env(timeout=None).timeout == 12.5


def test_config_rejects_invalid_timeout(monkeypatch):
    monkeypatch.setenv("ARTICLE_SCRAPER_TIMEOUT", "soon")
    with pytest.raises(ValidationError):
        ScraperConfig.from_env()
    with pytest.raises(ValidationError):
        ScraperConfig(timeout=0)


# --- Service layer ---

class FakeAuthenticator:
    def __init__(self, valid_token="secret"):
        self.valid_token = valid_token

    def verify(self, credentials):
        return {"user": "admin"} if credentials == self.valid_token else None


class FakeStore:
    def __init__(self):
        self.saved = []

    def save(self, article):
        self.saved.append(article)
        return f"article-{len(self.saved)}"


def make_service(fetcher=None, store=None):
    scraper = ArticleScraper(fetcher=fetcher or StubFetcher())
    return ScrapeService(scraper, FakeAuthenticator(), store=store)


def test_service_success():
    status, body = make_service().handle_scrape({"url": "https://example.com/a"}, "secret")
    assert status == 200
    assert body["article"]["title"] == "Sample Article"
    assert body["article"]["sourceUrl"] == "https://example.com/a"


def test_service_rejects_bad_credentials():
    fetcher = StubFetcher()
    status, body = make_service(fetcher).handle_scrape({"url": "https://example.com"}, "wrong")
    assert (status, body) == (401, {"error": "Unauthorized"})
    assert fetcher.urls == []


@pytest.mark.parametrize("payload", [{}, {"url": ""}, None])
def test_service_missing_url(payload):
    status, body = make_service().handle_scrape(payload, "secret")
    assert (status, body) == (400, {"error": "URL is required"})


def test_service_fetch_failure_is_bad_request():
    error = FetchError("Failed to fetch URL: Forbidden", reason="Forbidden", status_code=403)
    status, body = make_service(StubFetcher(error=error)).handle_scrape(
        {"url": "https://example.com"}, "secret"
    )
    assert (status, body) == (400, {"error": "Failed to fetch URL: Forbidden"})


def test_service_unexpected_failure_is_internal_error():
    status, body = make_service(StubFetcher(error=RuntimeError("boom"))).handle_scrape(
        {"url": "https://example.com"}, "secret"
    )
    assert (status, body) == (500, {"error": "Failed to scrape article"})


def test_scrape_and_store_hands_wire_record_to_store():
    store = FakeStore()
    article_id = make_service(store=store).scrape_and_store("https://example.com/a", "secret")

    assert article_id == "article-1"
    assert store.saved[0]["title"] == "Sample Article"
    assert store.saved[0]["content"][0] == {"type": "heading", "level": 1, "content": "Main Heading"}


def test_scrape_and_store_requires_auth_and_store():
    with pytest.raises(AuthenticationError):
        make_service(store=FakeStore()).scrape_and_store("https://example.com", "wrong")
    with pytest.raises(ScraperError):
        make_service(store=None).scrape_and_store("https://example.com", "secret")

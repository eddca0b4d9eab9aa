#!/usr/bin/env python3
"""
CLI script to scrape articles.

Fetches each URL (or reads each local HTML file with --file) and prints the
extracted articles as JSON.

Usage:
    python run_scraper.py https://example.com/post
    python run_scraper.py saved_page.html --file -o article.json
    python run_scraper.py https://example.com/post --ordering grouped -v
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Load .env file automatically (ARTICLE_SCRAPER_* settings)
from dotenv import load_dotenv
load_dotenv()

from article_scraper.main import ArticleScraper
from article_scraper.config import ScraperConfig
from article_scraper.exceptions import ScraperError
from article_scraper.logger import setup_logger


def main():
    parser = argparse.ArgumentParser(description="Scrape articles into structured JSON")
    parser.add_argument("sources", nargs="+", help="URLs (or HTML files with --file)")
    parser.add_argument("--file", "-f", action="store_true", help="Treat sources as local HTML files")
    parser.add_argument("--output", "-o", help="Output JSON file")
    parser.add_argument("--timeout", type=float, help="Fetch timeout in seconds")
    parser.add_argument(
        "--ordering",
        choices=["document", "grouped"],
        default="document",
        help="Block order: reading order, or grouped by kind"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    setup_logger(level=logging.DEBUG if args.verbose else logging.INFO)

    config = ScraperConfig.from_env(timeout=args.timeout)
    scraper = ArticleScraper(config=config, ordering=args.ordering)

    results = []
    failures = 0

    for source in args.sources:
        print(f"Scraping: {source}", file=sys.stderr)

        try:
            if args.file:
                article = scraper.parse_file(Path(source))
            else:
                article = scraper.scrape(source)

            results.append({
                "source": source,
                "status": "success",
                "article": article.to_wire()
            })
            print(f"  ✓ {article.title!r}: {len(article.content)} blocks", file=sys.stderr)

        except ScraperError as e:
            failures += 1
            results.append({
                "source": source,
                "status": "error",
                **e.to_response()
            })
            print(f"  ✗ Error: {e.message}", file=sys.stderr)

        except OSError as e:
            failures += 1
            results.append({
                "source": source,
                "status": "error",
                "error": str(e)
            })
            print(f"  ✗ Error: {e}", file=sys.stderr)

    # ensure_ascii=False preserves unicode characters in the JSON
    output = json.dumps(results, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"\nSaved to: {args.output}", file=sys.stderr)
    else:
        print(output)

    return 1 if failures == len(args.sources) else 0


if __name__ == "__main__":
    sys.exit(main())

"""
Agro News Feed crawler.

Builds the static feed of agricultural machinery news:
1. Loads the sources from `news_sources.json` and keywords from `keywords.json`
2. For each source, reads its RSS/Atom feed or falls back to scraping listing pages
3. Keeps only the articles matching the keywords
4. Deduplicates articles by URL and sorts them newest first
5. Writes `site/data/articles.json` for the frontend

Run it with ``python -m agro_news_feed.main``; scheduling is left to the caller.
"""

import logging
import os
from datetime import datetime
from typing import Optional

from agro_news_feed.core.fetch_source import fetch_items_from_source
from agro_news_feed.core.http_client import build_session, polite_pause
from agro_news_feed.core.log_handler import configure_logging, run_file_logger
from agro_news_feed.core.store_news import (
    FeedRepository,
    build_payload,
    merge_articles,
)
from agro_news_feed.core.types import Article, FeedPayload, Source
from agro_news_feed.core.utils import ConfigLoader

# --- Configuration ---
PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_DIR = os.path.join(PACKAGE_DIR, "config")
NEWS_SOURCES_CONFIG_FILE = os.path.join(CONFIG_DIR, "news_sources.json")
KEYWORDS_CONFIG_FILE = os.path.join(CONFIG_DIR, "keywords.json")
OUTPUT_PATH = os.path.join("site", "data", "articles.json")

logger = logging.getLogger(__name__)


def fetch_all_sources(sources: list[Source], keywords: list[str]) -> list[Article]:
    """Fetch relevant articles from every source, one after the other."""
    all_articles: list[Article] = []
    session = build_session()

    try:
        for index, source in enumerate(sources):
            if index:
                polite_pause()
            logger.info("Fetching headlines from: %s (%s)", source.name, source.base)
            articles = fetch_items_from_source(source, keywords, session)
            all_articles.extend(articles)
    finally:
        session.close()

    return all_articles


def run_pipeline(
    output_path: str = OUTPUT_PATH,
    sources: Optional[list[Source]] = None,
    keywords: Optional[list[str]] = None,
    log_path: Optional[str] = None,
) -> FeedPayload:
    """Execute the complete crawl and publish the feed file.

    Args:
        output_path: Where to write the JSON feed.
        sources: Sources to crawl; defaults to the packaged configuration.
        keywords: Keyword phrases; defaults to the packaged configuration.
        log_path: Optional file receiving a copy of the run logs.

    Returns:
        The payload that was written.
    """
    start_time = datetime.now()

    with run_file_logger(log_path):
        logger.info("=== Starting Agro News Feed crawl ===")
        try:
            config_loader = ConfigLoader()
            if sources is None:
                sources = config_loader.load_news_sources(NEWS_SOURCES_CONFIG_FILE)
            if keywords is None:
                keywords = config_loader.load_keywords(KEYWORDS_CONFIG_FILE)

            logger.info(
                "Loaded %d news sources and %d keywords", len(sources), len(keywords)
            )

            all_articles = fetch_all_sources(sources, keywords)
            items = merge_articles(all_articles)

            payload = build_payload(sources, items)
            FeedRepository(output_path).save(payload)

            # Success summary
            for source in sources:
                count = sum(1 for item in items if item.source == source.name)
                logger.info("- %s: %d articles", source.name, count)
            logger.info("=== Crawl completed in %s ===", datetime.now() - start_time)
            return payload

        except Exception as e:
            logger.error("Crawl failed with error: %s", e, exc_info=True)
            raise


def main() -> None:
    """Entry point: configure logging and run the crawl."""
    configure_logging()
    run_pipeline()


if __name__ == "__main__":
    main()

"""
Per-source acquisition: structured feed first, HTML listing as fallback.
"""

import logging
from typing import Optional

import requests

from .fetch_news import fetch_html_items
from .fetch_rss_news import fetch_feed_items
from .http_client import polite_pause
from .types import Article, Source

logger = logging.getLogger(__name__)


def fetch_items_from_source(
    source: Source,
    keywords: list[str],
    session: Optional[requests.Session] = None,
) -> list[Article]:
    """Collect the relevant articles published by a single source.

    Args:
        source: The source to crawl.
        keywords: Keyword phrases used for the relevance filter.
        session: Optional HTTP session shared across the run.

    Returns:
        The relevant articles, or an empty list if neither the feeds nor the
        listing pages produced any.
    """
    articles = fetch_feed_items(source, keywords, session)
    if articles:
        logger.info("Fetched %d articles from %s via feed", len(articles), source.name)
        return articles

    polite_pause()
    articles = fetch_html_items(source, keywords, session)
    if articles:
        logger.info("Fetched %d articles from %s via HTML", len(articles), source.name)
        return articles

    logger.warning("No articles found for %s", source.name)
    return []

"""
RSS/Atom Feed Fetcher Module.

This module tries the usual feed endpoints of a site and extracts the
relevant articles from the first feed that has any.
"""

import logging
import re
from typing import Any, Optional

import feedparser
import requests

from .http_client import http_get, polite_pause
from .normalize import build_article, resolve_url
from .store_news import filter_articles_by_keywords
from .types import Article, Source

logger = logging.getLogger(__name__)

FEED_HINTS = ["/feed", "/?feed=rss2", "/rss", "/rss.xml", "/feed.xml", "/atom.xml"]

# application/rss+xml, application/atom+xml, text/xml, application/rdf+xml, ...
FEED_CONTENT_TYPE = re.compile(
    r"^(?:application|text)/(?:[\w.-]+\+)?(?:xml|rss|atom|rdf)", re.IGNORECASE
)


def is_feed_content_type(content_type: Optional[str]) -> bool:
    """True if the Content-Type header announces an XML/RSS/Atom document."""
    return bool(FEED_CONTENT_TYPE.match((content_type or "").strip()))


def article_from_entry(entry: Any, source: Source) -> Optional[Article]:
    """Build an Article from a feedparser entry.

    Args:
        entry: A feedparser entry (RSS item or Atom entry).
        source: Source the feed belongs to; relative links resolve against
            its base URL.

    Returns:
        The article, or None if the entry has no title or link.
    """
    title = str(entry.get("title") or "").strip()
    link = str(entry.get("link") or entry.get("id") or "").strip()
    description = str(entry.get("summary") or entry.get("description") or "").strip()
    raw_date = entry.get("published") or entry.get("updated")

    if not title or not link:
        return None

    return build_article(source.name, title, link, description, raw_date, source.base)


def fetch_rss_articles(
    url: str,
    source: Source,
    keywords: list[str],
    session: Optional[requests.Session] = None,
) -> list[Article]:
    """Fetch a single feed URL and return its relevant articles.

    Args:
        url: The URL of the candidate feed.
        source: The source the feed belongs to, for attribution.
        keywords: Keyword phrases used for the relevance filter.
        session: Optional HTTP session.

    Returns:
        Relevant articles; empty if the URL is not a usable feed.

    Raises:
        requests.exceptions.RequestException: If the request fails.
    """
    logger.info("Fetching feed from URL: %s", url)
    response = http_get(url, session)

    if response.status_code != 200:
        logger.info("Non-200 status code received for %s: %s", url, response.status_code)
        return []

    content_type = response.headers.get("content-type", "")
    if not is_feed_content_type(content_type):
        logger.info("Not a feed at %s (content-type: %s)", url, content_type or "none")
        return []

    feed = feedparser.parse(
        response.content, response_headers={"content-type": content_type}
    )
    if not feed.entries:
        logger.info("Feed at %s has no entries", url)
        return []

    candidates = []
    for entry in feed.entries:
        article = article_from_entry(entry, source)
        if article is not None:
            candidates.append(article)
    articles = filter_articles_by_keywords(candidates, keywords)

    logger.info(
        "Extracted %d relevant articles out of %d entries from %s",
        len(articles),
        len(feed.entries),
        url,
    )
    return articles


def fetch_feed_items(
    source: Source,
    keywords: list[str],
    session: Optional[requests.Session] = None,
) -> list[Article]:
    """Try the feed hints of a source, stopping at the first relevant feed.

    Errors on a single hint are logged and the next hint is tried.
    """
    for index, hint in enumerate(FEED_HINTS):
        if index:
            polite_pause()
        feed_url = resolve_url(hint, source.base)
        try:
            articles = fetch_rss_articles(feed_url, source, keywords, session)
        except requests.exceptions.RequestException as e:
            logger.warning("Request to %s failed: %s", feed_url, e)
            continue
        except Exception as e:
            logger.error("Unexpected error reading feed %s: %s", feed_url, e, exc_info=True)
            continue

        if articles:
            return articles

    logger.info("No usable feed found for %s", source.name)
    return []

"""
HTML listing scraper, used when a site exposes no usable feed.
"""

import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup
from bs4.element import Tag

from .http_client import http_get, polite_pause
from .normalize import build_article, resolve_url
from .store_news import filter_articles_by_keywords
from .types import Article, Source

logger = logging.getLogger(__name__)

LISTING_PATHS = [
    "/",
    "/maquinarias",
    "/maquinaria",
    "/category/maquinarias",
    "/seccion/maquinaria",
    "/tag/maquinaria",
]
ARTICLE_SELECTOR = "article, .post, .nota, .news-item, li"
TEASER_SELECTOR = "p, .excerpt, .summary"


def tag_text(tag: Optional[Tag]) -> str:
    """Text content of a tag with whitespace runs collapsed to single spaces."""
    if tag is None:
        return ""
    return " ".join(tag.get_text().split())


def article_from_block(block: Tag, source: Source) -> Optional[Article]:
    """Extract an article from a listing block (card, list item, ...).

    The first link gives title and URL, the first paragraph-like element the
    teaser and an optional <time> element the date. Relative links are
    resolved against the source base URL.
    """
    anchor = block.find("a")
    if anchor is None:
        return None

    title = (anchor.get("title") or "").strip() or tag_text(anchor)
    href = (anchor.get("href") or "").strip()
    if not title or not href:
        return None

    teaser = tag_text(block.select_one(TEASER_SELECTOR))

    raw_date = None
    time_tag = block.find("time")
    if time_tag is not None:
        raw_date = time_tag.get("datetime") or tag_text(time_tag) or None

    return build_article(source.name, title, href, teaser, raw_date, source.base)


def fetch_headlines_from_page(
    url: str,
    source: Source,
    keywords: list[str],
    session: Optional[requests.Session] = None,
) -> list[Article]:
    """Scrape relevant headlines from a single listing page.

    Raises:
        requests.exceptions.RequestException: If the request fails.
    """
    logger.info("Fetching listing page: %s", url)
    response = http_get(url, session)

    if response.status_code != 200:
        logger.info("Non-200 status code received for %s: %s", url, response.status_code)
        return []

    soup = BeautifulSoup(response.text, "lxml")
    blocks = soup.select(ARTICLE_SELECTOR)
    if not blocks:
        logger.info("No candidate blocks found at %s", url)
        return []

    candidates = []
    for block in blocks:
        article = article_from_block(block, source)
        if article is not None:
            candidates.append(article)
    articles = filter_articles_by_keywords(candidates, keywords)

    logger.info(
        "Extracted %d relevant articles out of %d blocks from %s",
        len(articles),
        len(blocks),
        url,
    )
    return articles


def fetch_html_items(
    source: Source,
    keywords: list[str],
    session: Optional[requests.Session] = None,
) -> list[Article]:
    """Try the listing paths of a source, stopping at the first with results."""
    for index, path in enumerate(LISTING_PATHS):
        if index:
            polite_pause()
        page_url = resolve_url(path, source.base)
        try:
            articles = fetch_headlines_from_page(page_url, source, keywords, session)
        except requests.exceptions.RequestException as e:
            logger.warning("Network or HTTP error fetching %s: %s", page_url, e)
            continue
        except Exception as e:
            logger.error(
                "An unexpected error occurred during scraping %s: %s",
                page_url,
                e,
                exc_info=True,
            )
            continue

        if articles:
            return articles

    logger.info("No relevant listing found for %s", source.name)
    return []

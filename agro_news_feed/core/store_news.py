"""
Article filtering, merging and publishing module.

This module turns the articles extracted from every source into the static
JSON feed read by the frontend.

Components:
- is_relevant / filter_articles_by_keywords: keyword relevance filter
- merge_articles: deduplication by URL hash and date ordering
- FeedRepository: writes the feed payload to disk
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from .normalize import matched_keywords, parse_iso_date
from .types import Article, FeedPayload, Source

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def is_relevant(title: str, teaser: str, keywords: list[str]) -> bool:
    """Check whether title plus teaser mention at least one keyword."""
    found = matched_keywords(f"{title} {teaser}", keywords)
    if found:
        logger.debug("'%s' matched keywords %s", title, found)
    return bool(found)


def filter_articles_by_keywords(
    articles: list[Article], keywords: list[str]
) -> list[Article]:
    """Filter articles based on keyword matching in title or teaser.

    Args:
        articles: Articles to filter.
        keywords: Keyword phrases, matched case and accent insensitively.

    Returns:
        The articles that matched at least one keyword, in input order.
    """
    logger.info("Filtering %d articles with %d keywords", len(articles), len(keywords))
    filtered_articles = []

    for article in articles:
        if not article.url or not article.title:
            logger.warning("Skipping article with missing URL or title: %s", article)
            continue

        if is_relevant(article.title, article.teaser, keywords):
            filtered_articles.append(article)
        else:
            logger.debug("Article '%s' did not match any keywords", article.title)

    logger.info("Found %d articles matching keywords", len(filtered_articles))
    return filtered_articles


def _date_key(article: Article) -> tuple[bool, datetime]:
    # Undated articles rank below every dated one.
    parsed = parse_iso_date(article.date)
    if parsed is None:
        return (False, _EPOCH)
    return (True, parsed)


def merge_articles(articles: list[Article]) -> list[Article]:
    """Deduplicate articles by id and sort them by date, newest first.

    When two articles share an id, the later one replaces the kept one only
    if its date is strictly more recent. Articles without a date are placed
    after all dated articles; equal dates keep their input order.
    """
    by_id: dict[str, Article] = {}
    for article in articles:
        existing = by_id.get(article.id)
        if existing is None:
            by_id[article.id] = article
        elif _date_key(article) > _date_key(existing):
            logger.debug("Replacing %s with a more recent copy", article.url)
            by_id[article.id] = article

    merged = sorted(by_id.values(), key=_date_key, reverse=True)
    logger.info(
        "Merged %d raw articles into %d unique articles", len(articles), len(merged)
    )
    return merged


def build_payload(
    sources: list[Source],
    items: list[Article],
    generated_at: Optional[datetime] = None,
) -> FeedPayload:
    """Assemble the feed document with its generation timestamp."""
    generated_at = generated_at or datetime.now(timezone.utc)
    stamp = (
        generated_at.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )
    return FeedPayload(
        generated_at=stamp,
        sources=[source.name for source in sources],
        items=items,
    )


class FeedRepository:
    """Handle writing of the static feed file.

    The file is the only state the crawler keeps: each run overwrites it.
    """

    def __init__(self, output_path: str) -> None:
        """Initialize the repository with the output file path.

        Args:
            output_path: Path of the JSON file served to the frontend.
        """
        self.output_path = output_path

    def save(self, payload: FeedPayload) -> str:
        """Write the payload as UTF-8 JSON, creating parent directories.

        Returns:
            The path written to.
        """
        directory = os.path.dirname(self.output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(self.output_path, "w", encoding="utf-8") as f:
            json.dump(payload.model_dump(by_alias=True), f, ensure_ascii=False, indent=2)

        logger.info("Saved %d items to %s", len(payload.items), self.output_path)
        return self.output_path

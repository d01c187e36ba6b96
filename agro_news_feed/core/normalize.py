"""
Normalization helpers shared by the feed and HTML extractors.

- text normalization for keyword matching (lowercase, accents stripped)
- URL resolution and hashing (article identity)
- publication date parsing to ISO-8601 UTC
"""

import hashlib
import logging
import unicodedata
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional
from urllib.parse import urljoin

from dateutil import parser as dateutil_parser

from .types import Article

logger = logging.getLogger(__name__)


def normalize(text: Optional[str]) -> str:
    """Lowercase the text and strip diacritics ("Agrícola" -> "agricola")."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def matched_keywords(text: str, keywords: list[str]) -> list[str]:
    """Return the keywords found in the text, case and accent insensitive.

    Args:
        text: Text to search, usually title and teaser joined by a space.
        keywords: Keyword phrases in configuration order.

    Returns:
        The matching keywords, in the order they were given.
    """
    haystack = normalize(text)
    return [
        keyword
        for keyword in keywords
        if normalize(keyword) and normalize(keyword) in haystack
    ]


def url_hash(url: str) -> str:
    """SHA-1 hex digest of an absolute URL, used as the article id."""
    return hashlib.sha1(url.encode("utf-8")).hexdigest()


def resolve_url(link: str, base: str) -> str:
    """Make a link absolute. Links already starting with http are kept."""
    link = link.strip()
    if link.startswith("http"):
        return link
    return urljoin(base, link)


def _parse_datetime(value: str) -> Optional[datetime]:
    # RFC 822 first (RSS pubDate), then anything dateutil understands.
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        pass
    try:
        return dateutil_parser.parse(value)
    except (ValueError, OverflowError) as e:
        logger.debug("Unparseable date '%s': %s", value, e)
        return None


def to_iso_date(value: Optional[str]) -> Optional[str]:
    """Convert a raw date string to ISO-8601 UTC, or None if unparseable.

    Naive timestamps are taken as UTC. The output always has millisecond
    precision and a trailing ``Z``, e.g. ``2024-03-01T00:00:00.000Z``.
    """
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None

    parsed = _parse_datetime(value)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        parsed = parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return None
    return parsed.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a date produced by to_iso_date back into an aware datetime."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def build_article(
    source_name: str,
    title: str,
    link: str,
    teaser: str,
    raw_date: Optional[str],
    base_url: str,
) -> Article:
    """Normalize extracted fields into an Article keyed by its resolved URL."""
    url = resolve_url(link, base_url)
    return Article(
        id=url_hash(url),
        source=source_name,
        title=title.strip(),
        url=url,
        teaser=(teaser or "").strip(),
        date=to_iso_date(raw_date),
    )

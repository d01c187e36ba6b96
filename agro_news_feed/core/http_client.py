"""
HTTP helpers for the crawler.

All outbound traffic is a plain GET with a fixed user agent and a per-request
timeout. Callers sleep ``REQUEST_DELAY_SECONDS`` between attempts.
"""

import logging
import time
from typing import Optional

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (content-aggregator; +github-pages)"
REQUEST_TIMEOUT_SECONDS = 15
REQUEST_DELAY_SECONDS = 0.4  # politeness delay between attempts


def build_session() -> requests.Session:
    """Create a session carrying the crawler user agent."""
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def http_get(url: str, session: Optional[requests.Session] = None) -> requests.Response:
    """Issue a GET request without raising on HTTP error statuses.

    Args:
        url: Absolute URL to fetch.
        session: Optional session to reuse connections across requests.

    Returns:
        The response, whatever its status code.

    Raises:
        requests.exceptions.RequestException: On network errors or timeouts.
    """
    logger.debug("GET %s", url)
    if session is None:
        return requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
    return session.get(url, timeout=REQUEST_TIMEOUT_SECONDS)


def polite_pause() -> None:
    """Fixed pause between two network attempts."""
    time.sleep(REQUEST_DELAY_SECONDS)

"""
Configuration loading for the crawler.

Sources and keywords are shipped as JSON files in the package ``config``
directory and validated on load.
"""

import json
import logging
import os
from typing import Any

from .types import Source

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load the sources and keyword lists from JSON files."""

    @staticmethod
    def _read_json(path: str) -> Any:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def load_news_sources(self, path: str) -> list[Source]:
        """Load and validate the source list.

        Args:
            path: JSON file holding a list of ``{"name": ..., "base": ...}``.

        Returns:
            The sources, in file order.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the document is not a list.
            pydantic.ValidationError: If an entry is malformed.
        """
        raw_sources = self._read_json(path)
        if not isinstance(raw_sources, list):
            raise ValueError(f"Expected a list of sources in {path}")
        sources = [Source.model_validate(entry) for entry in raw_sources]
        logger.info("Loaded %d news sources from %s", len(sources), path)
        return sources

    def load_keywords(self, path: str) -> list[str]:
        """Load the keyword phrases, dropping blank entries.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not a list of strings.
        """
        raw_keywords = self._read_json(path)
        if not isinstance(raw_keywords, list) or not all(
            isinstance(keyword, str) for keyword in raw_keywords
        ):
            raise ValueError(f"Expected a list of strings in {path}")
        keywords = [keyword.strip() for keyword in raw_keywords if keyword.strip()]
        logger.info("Loaded %d keywords from %s", len(keywords), path)
        return keywords

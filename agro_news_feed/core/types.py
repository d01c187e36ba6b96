"""
Type definitions and Pydantic models for the Agro News Feed.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class Source(BaseModel):
    """Configuration for a single content source."""
    name: str = Field(..., min_length=1, description="Name of the news source")
    base: str = Field(..., min_length=1, description="Base URL of the site")


class Article(BaseModel):
    """Represents a relevant news article extracted from a source."""
    id: str
    source: str
    title: str
    url: str
    teaser: str = ""
    date: Optional[str] = None

    class Config:
        extra = "ignore"
        frozen = True


class FeedPayload(BaseModel):
    """Static JSON document consumed by the browsing frontend."""
    generated_at: str = Field(..., alias="generatedAt")
    sources: List[str]
    items: List[Article]

    class Config:
        populate_by_name = True

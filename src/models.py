"""
Data models for the Hot Topic Studio application.
"""

from enum import Enum
from typing import NamedTuple, Optional, TypedDict


class Platform(str, Enum):
    """Topic providers selectable by platform key."""

    BAIDU = "baidu"
    GOOGLE = "google"
    YAHOO = "yahoo"


class _TopicBase(TypedDict):
    id: int
    title: str
    popularity_score: int
    source: str
    link: Optional[str]
    snippet: str
    published_at: str
    thumbnail: Optional[str]
    is_featured: bool


class Topic(_TopicBase, total=False):
    """Type definition for a trending topic."""

    extracted_image: str  # Added by batch image extraction
    has_real_image: bool


class GeneratedContent(TypedDict):
    """Text and image shown for one selected topic."""

    text: str
    image_url: str
    image_prompt: str


class ImageCandidate(NamedTuple):
    """An <img> element considered while looking for a representative image."""

    raw_src: str
    width: int
    height: int
    selector_rank: int

"""
Representative image discovery for article pages.

This module holds the pure parts of image extraction: resolving image
references against the page URL, deciding whether a URL looks like an image,
and an ordered chain of lookup strategies run over a parsed document.
Network access lives in image_service.
"""

import re
from typing import Callable, Iterable, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from src.models import ImageCandidate

MIN_IMAGE_WIDTH = 200
MIN_IMAGE_HEIGHT = 150

_ABSOLUTE_URL = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")
_LEADING_DIGITS = re.compile(r"^\s*(\d+)")

DECORATIVE_PATTERN = re.compile(
    r"logo|icon|avatar|profile|thumbnail|small|tiny|placeholder|sprite|button|badge"
    r"|\.svg(?:[?#].*)?$",
    re.I,
)
IMAGE_EXTENSION_PATTERN = re.compile(r"\.(?:jpe?g|png|gif|webp|bmp|svg)$", re.I)
IMAGE_PATH_PATTERN = re.compile(r"/(?:image|photo|picture|media)", re.I)
MEDIA_CDN_DOMAINS = (
    "cloudfront.net",
    "amazonaws.com",
    "googleusercontent.com",
    "fbcdn.net",
    "twimg.com",
)

Strategy = Callable[[BeautifulSoup, str], Optional[str]]


def normalize_url(candidate_url: Optional[str], page_url: str) -> Optional[str]:
    """Resolves an image reference found on page_url to an absolute URL."""
    if not candidate_url:
        return None
    candidate = candidate_url.strip()
    if not candidate or candidate.lower().startswith("data:"):
        return None

    if _ABSOLUTE_URL.match(candidate):
        return candidate

    try:
        page = urlparse(page_url)
        if not page.scheme or not page.netloc:
            return None

        if candidate.startswith("//"):
            resolved = f"{page.scheme}:{candidate}"
        elif candidate.startswith("/"):
            resolved = f"{page.scheme}://{page.netloc}{candidate}"
        else:
            directory = page.path[: page.path.rfind("/") + 1] or "/"
            resolved = f"{page.scheme}://{page.netloc}{directory}{candidate}"

        result = urlparse(resolved)
        if not result.scheme or not result.netloc:
            return None
        return resolved
    except ValueError:
        return None


def is_valid_url(url: Optional[str]) -> bool:
    """True for well-formed http(s) URLs with a host."""
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_plausible_image_url(url: Optional[str]) -> bool:
    """Checks whether a URL looks like it points at an image."""
    if not is_valid_url(url):
        return False
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()

    if IMAGE_EXTENSION_PATTERN.search(parsed.path):
        return True
    if IMAGE_PATH_PATTERN.search(parsed.path):
        return True
    return any(host == d or host.endswith("." + d) for d in MEDIA_CDN_DOMAINS)


def is_likely_decorative(src: str) -> bool:
    """Logos, icons, avatars and similar page chrome."""
    return bool(DECORATIVE_PATTERN.search(src))


def _dimension(value: Optional[str]) -> int:
    if not value:
        return 0
    match = _LEADING_DIGITS.match(str(value))
    return int(match.group(1)) if match else 0


def _is_too_small(candidate: ImageCandidate) -> bool:
    # Only judged when both dimensions are declared; 0 means unknown.
    if not (candidate.width and candidate.height):
        return False
    return candidate.width < MIN_IMAGE_WIDTH or candidate.height < MIN_IMAGE_HEIGHT


def _candidates(images: Iterable[Tag], rank: int) -> List[ImageCandidate]:
    return [
        ImageCandidate(
            raw_src=str(img.get("src") or ""),
            width=_dimension(img.get("width")),
            height=_dimension(img.get("height")),
            selector_rank=rank,
        )
        for img in images
    ]


def _accept(raw_src: Optional[str], page_url: str) -> Optional[str]:
    url = normalize_url(raw_src, page_url)
    if url and is_plausible_image_url(url):
        return url
    return None


def meta_strategy(attr: str, value: str) -> Strategy:
    """Reads the content of the first <meta attr="value"> tag."""

    def lookup(soup: BeautifulSoup, page_url: str) -> Optional[str]:
        tag = soup.find("meta", attrs={attr: value})
        if not isinstance(tag, Tag):
            return None
        content = tag.get("content")
        return _accept(str(content) if content else None, page_url)

    lookup.__name__ = f"meta_{value.replace(':', '_')}"
    return lookup


def img_strategy(selector: str, rank: int) -> Strategy:
    """Takes the first acceptable <img> under a CSS selector, in document order."""

    def lookup(soup: BeautifulSoup, page_url: str) -> Optional[str]:
        for candidate in _candidates(soup.select(selector), rank):
            if not candidate.raw_src:
                continue
            if is_likely_decorative(candidate.raw_src) or _is_too_small(candidate):
                continue
            # The first qualifying element decides this strategy.
            return _accept(candidate.raw_src, page_url)
        return None

    lookup.__name__ = f"img_{selector}"
    return lookup


CONTAINER_SELECTORS = [
    "article img[src]",
    ".article-image img[src]",
    ".news-image img[src]",
    ".story-image img[src]",
    ".featured-image img[src]",
    ".hero-image img[src]",
    ".main-image img[src]",
    ".content img[src]",
    ".post-content img[src]",
    "main img[src]",
]

IMAGE_STRATEGIES: List[Strategy] = [
    meta_strategy("property", "og:image"),
    meta_strategy("property", "og:image:url"),
    meta_strategy("name", "twitter:image"),
    meta_strategy("name", "twitter:image:src"),
]
IMAGE_STRATEGIES += [
    img_strategy(selector, rank)
    for rank, selector in enumerate(CONTAINER_SELECTORS, start=len(IMAGE_STRATEGIES))
]
IMAGE_STRATEGIES.append(img_strategy("img[src]", len(IMAGE_STRATEGIES)))


def first_match(
    strategies: Iterable[Strategy], soup: BeautifulSoup, page_url: str
) -> Optional[str]:
    """Runs strategies in order and returns the first non-empty result."""
    for strategy in strategies:
        found = strategy(soup, page_url)
        if found:
            return found
    return None


def find_representative_image(soup: BeautifulSoup, page_url: str) -> Optional[str]:
    """Returns the absolute URL of the page's representative image, if any."""
    return first_match(IMAGE_STRATEGIES, soup, page_url)

"""
Image extraction service.

This module provides the ImageExtractionService class which fetches an article
page, looks for its representative image and always hands back a usable URL:
the discovered image, a caller supplied fallback, or a random placeholder.
"""

import concurrent.futures
import logging
import random
import threading
import time
from typing import Callable, Dict, List, Optional

import requests
from bs4 import BeautifulSoup

from src.models import Topic
from src.services.image_scorer import (
    find_representative_image,
    is_plausible_image_url,
    is_valid_url,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_HOST = "picsum.photos"
MAX_PAGE_BYTES = 2 * 1024 * 1024
CHUNK_SIZE = 16 * 1024


def placeholder_image_url(
    seed: str, width: int = 600, height: int = 400
) -> str:
    """Builds a placeholder image URL for the given seed."""
    return f"https://{PLACEHOLDER_HOST}/seed/{seed}/{width}/{height}"


class ImageExtractionService:
    """Finds a representative image for news articles."""

    _HEADERS: Dict[str, str] = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
        ),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
    }

    def __init__(
        self,
        timeout: float = 10,
        max_redirects: int = 5,
        session_factory: Callable[[], requests.Session] = requests.Session,
        rng: Optional[random.Random] = None,
        max_workers: int = 8,
        max_bytes: int = MAX_PAGE_BYTES,
    ):
        self.timeout = timeout
        self.max_redirects = max_redirects
        self.session_factory = session_factory
        self.rng = rng or random.Random()
        self.max_workers = max_workers
        self.max_bytes = max_bytes
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """The calling thread's HTTP session, created on first use."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self.session_factory()
            session.max_redirects = self.max_redirects
            self._local.session = session
        return session

    def generate_fallback_image(self) -> str:
        """Returns a random 600x400 placeholder image URL."""
        return placeholder_image_url(f"news{self.rng.randint(0, 999)}")

    def _fetch_page(self, url: str) -> str:
        # The timeout bounds the whole download, not each socket read.
        deadline = time.monotonic() + self.timeout
        with self.session.get(
            url,
            timeout=self.timeout,
            headers=self._HEADERS,
            allow_redirects=True,
            stream=True,
        ) as resp:
            resp.raise_for_status()
            chunks: List[bytes] = []
            received = 0
            for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                if time.monotonic() > deadline:
                    raise requests.Timeout(
                        f"Page download exceeded {self.timeout}s: {url}"
                    )
                chunks.append(chunk)
                received += len(chunk)
                if received >= self.max_bytes:
                    logger.warning("Truncating %s at %d bytes", url, received)
                    break
            encoding = resp.encoding or "utf-8"
        return b"".join(chunks)[: self.max_bytes].decode(encoding, errors="replace")

    def extract_image(self, article_url: Optional[str], fallback_url: Optional[str] = None) -> str:
        """Returns the article's main image, or a fallback. Never raises."""
        if not article_url or not is_valid_url(article_url):
            return fallback_url or self.generate_fallback_image()

        logger.info("Extracting image from: %s", article_url)
        try:
            html = self._fetch_page(article_url)
            soup = BeautifulSoup(html, "html.parser")
            image_url = find_representative_image(soup, article_url)
        except requests.RequestException as req_err:
            logger.error("Network error fetching %s: %s", article_url, req_err)
            return fallback_url or self.generate_fallback_image()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error extracting image from %s: %s", article_url, e)
            return fallback_url or self.generate_fallback_image()

        if image_url and is_plausible_image_url(image_url):
            logger.info("Found image: %s", image_url)
            return image_url

        logger.info("No valid image found on %s, using fallback.", article_url)
        return fallback_url or self.generate_fallback_image()

    def _process_item(self, item: Topic) -> Topic:
        enriched = dict(item)
        link = item.get("link")
        thumbnail = item.get("thumbnail")
        if link:
            extracted = self.extract_image(link, thumbnail)
            enriched["extracted_image"] = extracted
            enriched["has_real_image"] = (
                extracted != thumbnail and PLACEHOLDER_HOST not in extracted
            )
        else:
            enriched["extracted_image"] = thumbnail or self.generate_fallback_image()
            enriched["has_real_image"] = False
        return enriched  # type: ignore[return-value]

    def process_news_images(self, items: List[Topic]) -> List[Topic]:
        """Extracts images for every item in parallel, keeping input order."""
        if not items:
            return []

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(items))
        ) as executor:
            futures = [executor.submit(self._process_item, item) for item in items]

        results: List[Topic] = []
        for item, future in zip(items, futures):
            try:
                results.append(future.result())
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.error("Image extraction for %r failed: %s", item.get("title"), exc)
                fallback = dict(item)
                fallback["extracted_image"] = (
                    item.get("thumbnail") or self.generate_fallback_image()
                )
                fallback["has_real_image"] = False
                results.append(fallback)  # type: ignore[arg-type]
        return results

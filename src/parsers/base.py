"""
Base classes and interfaces for topic sources.

This module defines the contract that all topic sources follow, plus the
SerpApiSource base class holding the request/fallback flow shared by the
providers that are reached through SerpAPI.
"""

import datetime
import logging
import random
from typing import Any, Dict, List, Optional, Protocol

import requests

from src.errors import ParseFailure, UpstreamUnavailable
from src.models import Topic
from src.parsers.formatting import (
    clean_title,
    enhance_snippet,
    order_topics,
    parse_news_date,
    popularity_score,
    utcnow,
)

logger = logging.getLogger(__name__)

SERPAPI_URL = "https://serpapi.com/search.json"


class TopicSource(Protocol):
    """
    Protocol for topic sources.

    Implementations return a non-empty, significance-ordered list of topics,
    falling back to a fixed list when the provider cannot be used.
    """

    name: str
    display_name: str

    def fetch_topics(self) -> List[Topic]:
        """Fetches the current hot topics."""


class SerpApiSource(TopicSource):
    """Shared SerpAPI request, normalization and fallback logic."""

    name = "serpapi"
    display_name = "News"
    default_title = "Untitled"
    max_results = 20

    # popularity synthesis
    base_score = 5_000_000
    featured_score = 6_000_000
    score_step = 200_000

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = SERPAPI_URL,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
        rng: Optional[random.Random] = None,
        clock=utcnow,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.rng = rng or random.Random()
        self.clock = clock

    def build_params(self) -> Dict[str, Any]:
        """Provider-specific SerpAPI query parameters."""
        raise NotImplementedError

    def parse_response(self, data: Dict[str, Any]) -> List[Topic]:
        """Maps a SerpAPI response body to topics."""
        raise NotImplementedError

    def fallback_topics(self) -> List[Topic]:
        """Hand-curated topics served when the provider is unavailable."""
        raise NotImplementedError

    def _search(self) -> Dict[str, Any]:
        if not self.api_key:
            raise UpstreamUnavailable("SERPAPI_KEY not configured")

        params = {**self.build_params(), "api_key": self.api_key}
        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as req_err:
            raise UpstreamUnavailable(str(req_err)) from req_err

        try:
            data = resp.json()
        except ValueError as e:
            raise ParseFailure(f"Invalid JSON from SerpAPI: {e}") from e
        if not isinstance(data, dict):
            raise ParseFailure("Unexpected SerpAPI response shape")
        if data.get("error"):
            raise UpstreamUnavailable(str(data["error"]))
        return data

    def fetch_topics(self) -> List[Topic]:
        """Fetches topics from SerpAPI, serving the fallback list on failure."""
        logger.info("Fetching %s topics...", self.display_name)
        try:
            topics = self.parse_response(self._search())
        except (UpstreamUnavailable, ParseFailure) as e:
            logger.error("Error fetching %s topics: %s", self.display_name, e)
            return order_topics(self.fallback_topics())
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Unexpected error parsing %s topics: %s", self.display_name, e)
            return order_topics(self.fallback_topics())

        if not topics:
            logger.warning("%s returned no topics, using fallback data.", self.display_name)
            return order_topics(self.fallback_topics())
        return order_topics(topics)

    def make_topic(
        self,
        item: Dict[str, Any],
        index: int,
        featured: bool = False,
        source: Optional[str] = None,
        link: Optional[str] = None,
        thumbnail: Optional[str] = None,
    ) -> Topic:
        """Normalizes one provider item; missing fields get explicit defaults."""
        title = clean_title(str(item.get("title") or item.get("headline") or ""))
        raw_date = item.get("date") or item.get("time")
        return Topic(
            id=index + 1,
            title=title or self.default_title,
            popularity_score=popularity_score(
                index,
                self.rng,
                featured=featured,
                base=self.base_score,
                featured_base=self.featured_score,
                step=self.score_step,
            ),
            source=source or str(item.get("source") or self.display_name),
            link=link if link is not None else (item.get("link") or None),
            snippet=enhance_snippet(item.get("snippet")),
            published_at=(
                parse_news_date(str(raw_date), self.rng, self.clock())
                if raw_date
                else self.clock().isoformat()
            ),
            thumbnail=thumbnail,
            is_featured=featured,
        )

    def fixed_topic(
        self,
        index: int,
        title: str,
        popularity: int,
        source: str,
        link: Optional[str] = None,
        snippet: str = "",
        thumbnail: Optional[str] = None,
    ) -> Topic:
        """Builds a fallback topic with a fixed popularity value."""
        now: datetime.datetime = self.clock()
        return Topic(
            id=index,
            title=title,
            popularity_score=popularity,
            source=source,
            link=link,
            snippet=enhance_snippet(snippet),
            published_at=now.isoformat(),
            thumbnail=thumbnail,
            is_featured=False,
        )

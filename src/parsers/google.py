"""
Google Top Stories source.

Queries the SerpAPI Google engine in news mode for the last day's trending
stories. Falls back to organic results when the news block is missing.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from src.errors import ParseFailure
from src.models import Topic
from src.parsers.base import SerpApiSource
from src.parsers.formatting import extract_domain

logger = logging.getLogger(__name__)


class GoogleNewsSource(SerpApiSource):
    """Fetches Google News top stories."""

    name = "google"
    display_name = "Google News"

    # Outlets with their own thumbnail seed
    known_outlets = (
        "CNN",
        "BBC",
        "Reuters",
        "AP News",
        "ABC News",
        "NBC News",
        "Fox News",
        "NPR",
    )
    generic_seed = "news"

    def build_params(self) -> Dict[str, Any]:
        return {
            "engine": "google",
            "tbm": "nws",
            "q": 'breaking news OR trending OR "top stories"',
            "num": self.max_results,
            "gl": "us",
            "hl": "en",
            "tbs": "qdr:d",
            "sort": "date",
        }

    def generate_fallback_thumbnail(self, source: Optional[str]) -> str:
        """Seeded 200x150 thumbnail, keyed on the outlet when it is a known one."""
        if source and source in self.known_outlets:
            seed = re.sub(r"\s+", "", source.lower())
        else:
            seed = self.generic_seed
        return f"https://picsum.photos/seed/{seed}{self.rng.randrange(100)}/200/150"

    def clean_link(self, link: Optional[str]) -> Optional[str]:
        return link or None

    def format_news_results(self, results: List[Dict[str, Any]]) -> List[Topic]:
        topics = []
        for index, item in enumerate(results[: self.max_results]):
            source = str(item.get("source") or self.display_name)
            topics.append(
                self.make_topic(
                    {**item, "snippet": item.get("snippet") or item.get("title")},
                    index,
                    source=source,
                    link=self.clean_link(item.get("link")),
                    thumbnail=item.get("thumbnail") or self.generate_fallback_thumbnail(source),
                )
            )
        return topics

    def format_organic_results(self, results: List[Dict[str, Any]]) -> List[Topic]:
        topics = []
        for index, item in enumerate(results[: self.max_results]):
            link = self.clean_link(item.get("link"))
            domain = extract_domain(link)
            topics.append(
                self.make_topic(
                    {key: value for key, value in item.items() if key != "date"},
                    index,
                    source=domain or self.display_name,
                    link=link,
                    thumbnail=self.generate_fallback_thumbnail(domain),
                )
            )
        return topics

    def parse_response(self, data: Dict[str, Any]) -> List[Topic]:
        if data.get("news_results"):
            return self.format_news_results(
                [item for item in data["news_results"] if isinstance(item, dict)]
            )
        if data.get("organic_results"):
            return self.format_organic_results(
                [item for item in data["organic_results"] if isinstance(item, dict)]
            )
        raise ParseFailure("No news results found")

    def fallback_topics(self) -> List[Topic]:
        entries = [
            (
                "Breaking: Major Technology Breakthrough Announced",
                2500000,
                "Google News",
                "Scientists announce significant advancement in quantum computing...",
            ),
            (
                "Global Climate Summit Reaches Historic Agreement",
                1800000,
                "Reuters",
                "World leaders unite on comprehensive climate action plan...",
            ),
            (
                "Stock Markets React to Federal Reserve Decision",
                1200000,
                "Bloomberg",
                "Markets show mixed reactions following interest rate announcement...",
            ),
            (
                "New Archaeological Discovery Rewrites History",
                950000,
                "National Geographic",
                "Ancient artifacts found in Egypt provide new insights into early dynasties...",
            ),
            (
                "Tech Giant Announces Revolutionary AI Model",
                890000,
                "TechCrunch",
                "Next-generation AI promises to transform industries...",
            ),
            (
                "Space Agency Confirms Date for Crewed Lunar Mission",
                780000,
                "AP News",
                "Astronauts are scheduled to orbit the Moon in the first crewed flight in decades...",
            ),
            (
                "Heatwave Warnings Issued Across Southern Europe",
                650000,
                "BBC",
                "Authorities urge residents to stay indoors as temperatures climb past records...",
            ),
            (
                "Electric Vehicle Sales Hit New Quarterly High",
                540000,
                "CNBC",
                "Automakers report strong demand despite higher interest rates...",
            ),
            (
                "Championship Final Draws Record Streaming Audience",
                430000,
                "ESPN",
                "Streaming platforms report their largest live sports audience to date...",
            ),
            (
                "Researchers Unveil Faster Test for Early Cancer Detection",
                320000,
                "NPR",
                "A blood test identified several cancers before symptoms appeared in a trial...",
            ),
        ]
        return [
            self.fixed_topic(i, title, hot, source, snippet=snippet)
            for i, (title, hot, source, snippet) in enumerate(entries, start=1)
        ]

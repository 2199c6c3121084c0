"""
Yahoo Top Stories source.

Same response shapes as the Google source; Yahoo additionally wraps result
links in redirect URLs which are unwrapped here.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, unquote, urlparse

from src.models import Topic
from src.parsers.formatting import generate_recent_date
from src.parsers.google import GoogleNewsSource

logger = logging.getLogger(__name__)

YAHOO_NEWS_ORIGIN = "https://news.yahoo.com"


class YahooNewsSource(GoogleNewsSource):
    """Fetches Yahoo News top stories."""

    name = "yahoo"
    display_name = "Yahoo News"

    known_outlets = (
        "Yahoo News",
        "Reuters",
        "Associated Press",
        "USA Today",
        "CNN",
        "BBC",
        "Fox News",
        "CNBC",
    )
    generic_seed = "yahoo"

    def build_params(self) -> Dict[str, Any]:
        return {
            "engine": "yahoo",
            "type": "news",
            "p": "top stories",
            "num": self.max_results,
            "gl": "us",
            "hl": "en",
            "qdr": "d",
        }

    def clean_link(self, link: Optional[str]) -> Optional[str]:
        """Unwraps Yahoo redirect links and completes relative ones."""
        if not link:
            return None

        # e.g. https://r.search.yahoo.com/_ylt=...;_ylu=.../RU=https%3a%2f%2fexample.com%2fa/RK=2/RS=...
        if "yahoo.com" in link and "RU=" in link:
            try:
                query = parse_qs(urlparse(link).query)
                if query.get("RU"):
                    return query["RU"][0]
                real = link.split("RU=", 1)[1].split("/RK=", 1)[0].split("/RS=", 1)[0]
                if real:
                    return unquote(real)
            except (ValueError, IndexError) as e:
                logger.info("Failed to extract real URL from Yahoo redirect: %s", e)

        if link.startswith("//"):
            return "https:" + link
        if link.startswith("/"):
            return YAHOO_NEWS_ORIGIN + link
        return link

    def format_organic_results(self, results: List[Dict[str, Any]]) -> List[Topic]:
        topics = super().format_organic_results(results)
        # Organic results carry no date; spread them over the last day.
        return [
            {**topic, "published_at": self._recent_date()}  # type: ignore[misc]
            for topic in topics
        ]

    def _recent_date(self) -> str:
        return generate_recent_date(self.rng, self.clock())

    def fallback_topics(self) -> List[Topic]:
        entries = [
            (
                "Yahoo Finance Reports: Tech Stocks Surge in Morning Trading",
                2800000,
                "Yahoo Finance",
                "https://finance.yahoo.com",
                "Major technology companies see significant gains as investors show confidence in the sector...",
            ),
            (
                "Yahoo Sports: Championship Game Sets New Viewership Record",
                2100000,
                "Yahoo Sports",
                "https://sports.yahoo.com",
                "Record-breaking audience tunes in for the biggest game of the season...",
            ),
            (
                "International Summit Addresses Global Economic Challenges",
                1900000,
                "Yahoo News",
                "https://news.yahoo.com",
                "World leaders gather to discuss coordinated response to economic pressures...",
            ),
            (
                "Breakthrough Medical Research Published in Leading Journal",
                1500000,
                "Yahoo Health",
                "https://news.yahoo.com/health",
                "New treatment shows promising results in clinical trials...",
            ),
            (
                "Environmental Initiative Launches Across Major Cities",
                1200000,
                "Yahoo News",
                "https://news.yahoo.com",
                "Comprehensive sustainability program aims to reduce carbon emissions...",
            ),
            (
                "Housing Market Cools as Mortgage Rates Edge Higher",
                1050000,
                "Yahoo Finance",
                "https://finance.yahoo.com",
                "Home sales slowed for a third straight month as buyers weigh borrowing costs...",
            ),
            (
                "Streaming Service Announces Price Changes for Next Year",
                930000,
                "Yahoo Entertainment",
                "https://www.yahoo.com/entertainment",
                "Subscribers will see new plan tiers as the company reshapes its lineup...",
            ),
            (
                "Severe Storms Expected Across the Midwest This Weekend",
                810000,
                "Yahoo News",
                "https://news.yahoo.com",
                "Forecasters warn of damaging winds and hail from Friday evening into Sunday...",
            ),
            (
                "Rookie Quarterback Breaks Franchise Passing Record",
                690000,
                "Yahoo Sports",
                "https://sports.yahoo.com",
                "The first-year starter threw for a career high in a come-from-behind win...",
            ),
            (
                "Smartphone Makers Race to Ship On-Device AI Features",
                570000,
                "Yahoo Tech",
                "https://www.yahoo.com/tech",
                "New handsets promise assistants that run without a network connection...",
            ),
        ]
        return [
            self.fixed_topic(
                i,
                title,
                hot,
                source,
                link=link,
                snippet=snippet,
                thumbnail=f"https://picsum.photos/seed/yahoo{i}/200/150",
            )
            for i, (title, hot, source, link, snippet) in enumerate(entries, start=1)
        ]

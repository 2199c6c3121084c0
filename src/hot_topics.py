"""
Hot Topic aggregation pipeline.

Picks a topic source by platform key, produces display text for a selected
topic (model-written or the real article's own text) and resolves an image
for it. Every failure below this layer is converted to a fallback; only a
request without a topic title is rejected.
"""

import logging
import random
import re
from typing import Any, Dict, List, Mapping, Optional

from src import config
from src.errors import InputValidationError
from src.models import GeneratedContent, Platform, Topic
from src.parsers.baidu import BaiduNewsSource
from src.parsers.base import TopicSource
from src.parsers.google import GoogleNewsSource
from src.parsers.yahoo import YahooNewsSource
from src.services.content import ContentGenerator
from src.services.image_service import ImageExtractionService, placeholder_image_url
from src.services.llm import LLMService

logger = logging.getLogger(__name__)

# Legacy keys from the original UI tabs
PLATFORM_ALIASES: Dict[str, Platform] = {
    "baidu": Platform.BAIDU,
    "google": Platform.GOOGLE,
    "weibo": Platform.GOOGLE,
    "yahoo": Platform.YAHOO,
    "zhihu": Platform.YAHOO,
}
DEFAULT_PLATFORM = Platform.BAIDU

# Platforms whose topics are real articles shown without rewriting
REAL_ARTICLE_PLATFORMS = frozenset({Platform.GOOGLE, Platform.YAHOO})
# Platforms whose topic lists get scraped article images
IMAGE_ENRICHED_PLATFORMS = frozenset({Platform.YAHOO})
# Fields that mark a topic as carrying original article data
ARTICLE_FIELDS = ("snippet", "link", "published_at")


def resolve_platform(platform_key: Optional[str]) -> Platform:
    """Maps a request's platform key to a platform; unknown keys use the default."""
    key = (platform_key or "").strip().lower()
    return PLATFORM_ALIASES.get(key, DEFAULT_PLATFORM)


def topic_seed(title: str) -> str:
    """Lower-cased ASCII alphanumerics of the title, at most 20 chars."""
    return re.sub(r"[^a-z0-9]", "", title.lower())[:20]


class NewsAggregator:
    """Request-level orchestration of sources, content and images."""

    def __init__(
        self,
        sources: Mapping[Platform, TopicSource],
        content: ContentGenerator,
        images: ImageExtractionService,
        rng: Optional[random.Random] = None,
    ):
        self.sources = dict(sources)
        self.content = content
        self.images = images
        self.rng = rng or random.Random()

    def source_for(self, platform: Platform) -> TopicSource:
        return self.sources.get(platform) or self.sources[DEFAULT_PLATFORM]

    def get_topics(self, platform_key: Optional[str]) -> List[Topic]:
        """Returns the ordered topic list for a platform."""
        platform = resolve_platform(platform_key)
        topics = self.source_for(platform).fetch_topics()
        logger.info("Fetched %d topics for %s.", len(topics), platform.value)

        if platform in IMAGE_ENRICHED_PLATFORMS and topics:
            logger.info("Extracting real news images...")
            topics = self.images.process_news_images(topics)
        return topics

    def _seeded_placeholder(self, title: str) -> str:
        return placeholder_image_url(f"{topic_seed(title)}{self.rng.randrange(100)}")

    def _random_placeholder(self) -> str:
        return placeholder_image_url(str(self.rng.randrange(1000)))

    def _resolve_image(self, topic: Mapping[str, Any], real_article: bool) -> str:
        title = str(topic.get("title") or "")
        if not real_article:
            return self._random_placeholder()

        link = topic.get("link")
        if not link:
            return self._seeded_placeholder(title)
        try:
            return self.images.extract_image(link)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to extract news image: %s", e)
            return self._seeded_placeholder(title)

    def _attribution(
        self,
        topic: Mapping[str, Any],
        platform: Platform,
        real_article: bool,
        source: Optional[str],
    ) -> str:
        if not real_article:
            return str(topic.get("source") or source or "")
        # Article text attributes the topic's own source; a bare title has none.
        if not any(topic.get(field) for field in ARTICLE_FIELDS):
            return ""
        return str(topic.get("source") or self.source_for(platform).display_name)

    def generate_for_topic(
        self,
        topic: Mapping[str, Any],
        platform_key: Optional[str],
        source: Optional[str] = None,
    ) -> GeneratedContent:
        """Builds the text and image shown for one selected topic.

        ``source`` is the caller's outlet hint for model-written text; article
        text only attributes sources the topic itself carries.
        """
        title = str(topic.get("title") or "").strip()
        if not title:
            raise InputValidationError("Missing topic")

        platform = resolve_platform(platform_key)
        real_article = platform in REAL_ARTICLE_PLATFORMS
        source = self._attribution(topic, platform, real_article, source)

        generated = self.content.generate_content(
            {**topic, "title": title}, source=source, real_article=real_article
        )
        return GeneratedContent(
            text=generated["text"],
            image_url=self._resolve_image(topic, real_article),
            image_prompt=generated["image_prompt"],
        )


def build_aggregator(rng: Optional[random.Random] = None) -> NewsAggregator:
    """Wires the services from application configuration."""
    rng = rng or random.Random()
    source_kwargs: Dict[str, Any] = {
        "api_key": config.SERPAPI_KEY,
        "base_url": config.SERPAPI_URL,
        "timeout": config.REQUEST_TIMEOUT,
        "rng": rng,
    }
    if not config.SERPAPI_KEY:
        logger.warning("SERPAPI_KEY not set. Topic lists will use fallback data.")
    if not config.DEEPSEEK_API_KEY:
        logger.warning("NVIDIA_DEEPSEEK_KEY not set. Generated text will use templates.")

    llm = LLMService(
        api_key=config.DEEPSEEK_API_KEY,
        base_url=config.DEEPSEEK_BASE_URL,
        model=config.DEEPSEEK_MODEL,
        rng=rng,
    )
    images = ImageExtractionService(
        timeout=config.IMAGE_FETCH_TIMEOUT,
        max_redirects=config.MAX_REDIRECTS,
        rng=rng,
    )
    return NewsAggregator(
        sources={
            Platform.BAIDU: BaiduNewsSource(**source_kwargs),
            Platform.GOOGLE: GoogleNewsSource(**source_kwargs),
            Platform.YAHOO: YahooNewsSource(**source_kwargs),
        },
        content=ContentGenerator(llm),
        images=images,
        rng=rng,
    )

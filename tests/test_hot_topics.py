"""Unit tests for the aggregation pipeline."""

import random
import unittest
from unittest.mock import MagicMock, patch

from src.errors import InputValidationError
from src.hot_topics import (
    NewsAggregator,
    build_aggregator,
    resolve_platform,
    topic_seed,
)
from src.models import Platform
from src.services.content import ContentGenerator

RANDOM_PLACEHOLDER = r"^https://picsum\.photos/seed/\d{1,3}/600/400$"


class TestPlatforms(unittest.TestCase):
    def test_resolve_platform(self):
        self.assertEqual(resolve_platform("baidu"), Platform.BAIDU)
        self.assertEqual(resolve_platform("Google"), Platform.GOOGLE)
        self.assertEqual(resolve_platform("weibo"), Platform.GOOGLE)
        self.assertEqual(resolve_platform("zhihu"), Platform.YAHOO)
        self.assertEqual(resolve_platform("yahoo"), Platform.YAHOO)
        self.assertEqual(resolve_platform("myspace"), Platform.BAIDU)
        self.assertEqual(resolve_platform(None), Platform.BAIDU)

    def test_topic_seed(self):
        self.assertEqual(topic_seed("Breaking: Storm Hits Coast!"), "breakingstormhitscoa")
        self.assertEqual(topic_seed("北京新闻"), "")


class TestNewsAggregator(unittest.TestCase):
    def setUp(self):
        self.sources = {
            Platform.BAIDU: MagicMock(display_name="百度新闻"),
            Platform.GOOGLE: MagicMock(display_name="Google News"),
            Platform.YAHOO: MagicMock(display_name="Yahoo News"),
        }
        for platform, source in self.sources.items():
            source.fetch_topics.return_value = [
                {"id": 1, "title": f"{platform.value} topic", "link": "https://e.com/1"}
            ]
        self.llm = MagicMock()
        self.llm.generate_content.return_value = {
            "text": "model text",
            "image_prompt": "News image, high quality, professional, about: X",
        }
        self.images = MagicMock()
        self.aggregator = NewsAggregator(
            self.sources, ContentGenerator(self.llm), self.images, rng=random.Random(4)
        )

    def test_get_topics_selects_source(self):
        topics = self.aggregator.get_topics("google")

        self.assertEqual(topics[0]["title"], "google topic")
        self.sources[Platform.GOOGLE].fetch_topics.assert_called_once()
        self.sources[Platform.BAIDU].fetch_topics.assert_not_called()
        self.images.process_news_images.assert_not_called()

    def test_unknown_platform_defaults_to_baidu(self):
        topics = self.aggregator.get_topics("unknown")
        self.assertEqual(topics[0]["title"], "baidu topic")

    def test_yahoo_topics_are_image_enriched(self):
        self.images.process_news_images.side_effect = lambda items: [
            {**item, "extracted_image": "https://e.com/i.jpg", "has_real_image": True}
            for item in items
        ]

        topics = self.aggregator.get_topics("zhihu")

        self.images.process_news_images.assert_called_once()
        self.assertEqual(topics[0]["extracted_image"], "https://e.com/i.jpg")

    def test_model_platform_without_link(self):
        result = self.aggregator.generate_for_topic({"title": "X", "link": None}, "baidu")

        self.llm.generate_content.assert_called_once_with("X", "")
        self.images.extract_image.assert_not_called()
        self.assertEqual(result["text"], "model text")
        self.assertRegex(result["image_url"], RANDOM_PLACEHOLDER)

    def test_model_platform_never_scrapes(self):
        result = self.aggregator.generate_for_topic(
            {"title": "X", "link": "https://e.com/a"}, "baidu"
        )

        self.images.extract_image.assert_not_called()
        self.assertRegex(result["image_url"], RANDOM_PLACEHOLDER)

    def test_real_article_platform(self):
        self.images.extract_image.return_value = "https://e.com/images/a.jpg"

        result = self.aggregator.generate_for_topic(
            {"title": "Y", "link": "https://example.com/a", "snippet": "short"}, "google"
        )

        self.llm.generate_content.assert_not_called()
        self.images.extract_image.assert_called_once_with("https://example.com/a")
        self.assertIn("short...", result["text"])
        self.assertIn("Source: Google News", result["text"])
        self.assertEqual(result["image_url"], "https://e.com/images/a.jpg")
        self.assertEqual(result["image_prompt"], "News image about: Y")

    def test_bare_title_on_article_platform(self):
        result = self.aggregator.generate_for_topic({"title": "Bare"}, "google", source="CNN")

        self.llm.generate_content.assert_not_called()
        self.assertIn("breaking news story", result["text"])
        self.assertNotIn("Source:", result["text"])

    def test_topic_source_wins_over_platform_name(self):
        result = self.aggregator.generate_for_topic(
            {"title": "Y", "snippet": "Done.", "source": "Reuters"}, "yahoo"
        )

        self.assertIn("Source: Reuters", result["text"])
        self.assertNotIn("Yahoo News", result["text"])

    def test_source_hint_reaches_model(self):
        self.aggregator.generate_for_topic({"title": "X"}, "baidu", source="新华社")
        self.llm.generate_content.assert_called_once_with("X", "新华社")

    def test_real_article_without_link_uses_seeded_placeholder(self):
        result = self.aggregator.generate_for_topic({"title": "Storm Hits!"}, "yahoo")

        self.images.extract_image.assert_not_called()
        self.assertRegex(
            result["image_url"], r"^https://picsum\.photos/seed/stormhits\d{1,2}/600/400$"
        )

    def test_extraction_failure_uses_seeded_placeholder(self):
        self.images.extract_image.side_effect = RuntimeError("boom")

        result = self.aggregator.generate_for_topic(
            {"title": "Quake", "link": "https://e.com/q"}, "weibo"
        )

        self.assertRegex(result["image_url"], r"^https://picsum\.photos/seed/quake\d{1,2}/600/400$")
        self.assertTrue(result["text"])

    def test_missing_title_is_rejected(self):
        with self.assertRaises(InputValidationError):
            self.aggregator.generate_for_topic({"title": "  "}, "baidu")
        with self.assertRaises(InputValidationError):
            self.aggregator.generate_for_topic({}, "google")


class TestBuildAggregator(unittest.TestCase):
    @patch("src.hot_topics.config")
    def test_wires_all_platforms(self, mock_config):
        mock_config.SERPAPI_KEY = None
        mock_config.SERPAPI_URL = "https://serpapi.example.com/search.json"
        mock_config.REQUEST_TIMEOUT = 5
        mock_config.DEEPSEEK_API_KEY = None
        mock_config.DEEPSEEK_BASE_URL = "https://llm.example.com/v1"
        mock_config.DEEPSEEK_MODEL = "deepseek-ai/deepseek-r1"
        mock_config.IMAGE_FETCH_TIMEOUT = 10
        mock_config.MAX_REDIRECTS = 5

        aggregator = build_aggregator(random.Random(0))

        self.assertEqual(set(aggregator.sources), set(Platform))
        self.assertEqual(aggregator.sources[Platform.GOOGLE].base_url, mock_config.SERPAPI_URL)
        # No keys configured: every platform still yields topics.
        for key in ("baidu", "google"):
            self.assertTrue(aggregator.get_topics(key))

        content = aggregator.generate_for_topic({"title": "测试"}, "baidu")
        self.assertIn("测试", content["text"])
        self.assertRegex(content["image_url"], RANDOM_PLACEHOLDER)


if __name__ == "__main__":
    unittest.main()

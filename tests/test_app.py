"""Unit tests for the HTTP API."""

import unittest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from src.app import create_app
from src.errors import InputValidationError


class TestApi(unittest.TestCase):
    def setUp(self):
        self.aggregator = MagicMock()
        self.client = TestClient(create_app(self.aggregator))

    def test_hot_topics(self):
        self.aggregator.get_topics.return_value = [
            {"id": 1, "title": "A", "popularity_score": 10, "is_featured": False}
        ]

        resp = self.client.get("/api/hot-topics", params={"platform": "google"})

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"][0]["title"], "A")
        self.aggregator.get_topics.assert_called_once_with("google")

    def test_hot_topics_default_platform(self):
        self.aggregator.get_topics.return_value = []
        self.client.get("/api/hot-topics")
        self.aggregator.get_topics.assert_called_once_with("baidu")

    def test_hot_topics_failure(self):
        self.aggregator.get_topics.side_effect = RuntimeError("boom")

        resp = self.client.get("/api/hot-topics")

        self.assertEqual(resp.status_code, 500)
        self.assertFalse(resp.json()["success"])

    def test_generate_content(self):
        self.aggregator.generate_for_topic.return_value = {
            "text": "body",
            "image_url": "https://e.com/a.jpg",
            "image_prompt": "News image about: T",
        }

        resp = self.client.post(
            "/api/generate-content",
            json={
                "topic": "T",
                "source": "CNN",
                "platform": "google",
                "originalNews": {"title": "T (old)", "link": "https://e.com/a", "snippet": "s"},
            },
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json()["data"],
            {"text": "body", "imageUrl": "https://e.com/a.jpg", "imagePrompt": "News image about: T"},
        )
        args, kwargs = self.aggregator.generate_for_topic.call_args
        topic, platform = args
        self.assertEqual(topic["title"], "T")
        self.assertNotIn("source", topic)
        self.assertEqual(kwargs["source"], "CNN")
        self.assertEqual(topic["link"], "https://e.com/a")
        self.assertEqual(platform, "google")

    def test_generate_content_without_original_news(self):
        self.aggregator.generate_for_topic.return_value = {
            "text": "t", "image_url": "https://e.com/a.jpg", "image_prompt": "p",
        }

        self.client.post(
            "/api/generate-content", json={"topic": "Bare", "source": "CNN", "platform": "google"}
        )

        args, kwargs = self.aggregator.generate_for_topic.call_args
        self.assertEqual(args[0], {"title": "Bare"})
        self.assertEqual(kwargs["source"], "CNN")

    def test_malformed_body_is_rejected(self):
        resp = self.client.post(
            "/api/generate-content",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"success": False, "message": "Invalid request body"})

    def test_non_string_fields_are_rejected(self):
        for payload in ({"topic": ["a", "b"]}, {"topic": "T", "originalNews": "oops"}):
            resp = self.client.post("/api/generate-content", json=payload)
            self.assertEqual(resp.status_code, 400)
            self.assertFalse(resp.json()["success"])
        self.aggregator.generate_for_topic.assert_not_called()

    def test_generate_content_requires_topic(self):
        for payload in ({}, {"topic": ""}, {"topic": "   ", "platform": "baidu"}):
            resp = self.client.post("/api/generate-content", json=payload)
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.json(), {"success": False, "message": "Missing topic"})
        self.aggregator.generate_for_topic.assert_not_called()

    def test_validation_error_from_pipeline(self):
        self.aggregator.generate_for_topic.side_effect = InputValidationError("Missing topic")

        resp = self.client.post("/api/generate-content", json={"topic": "T"})

        self.assertEqual(resp.status_code, 400)

    def test_api_test(self):
        body = self.client.get("/api/test").json()
        self.assertTrue(body["success"])
        self.assertIn("timestamp", body)


if __name__ == "__main__":
    unittest.main()

"""Unit tests for configuration loading."""

import unittest
from unittest.mock import mock_open, patch

from src.config import load_config


class TestConfig(unittest.TestCase):
    @patch(
        "builtins.open",
        new_callable=mock_open,
        read_data='{"serpapi_url": "https://serp.example.com/search.json"}',
    )
    def test_load_config_mock(self, mock_file):
        """Test load_config with mocked file."""
        config = load_config("dummy_config.json")
        self.assertEqual(config["serpapi_url"], "https://serp.example.com/search.json")
        self.assertTrue(mock_file.call_args[0][0].endswith("dummy_config.json"))

    def test_missing_config_file(self):
        self.assertEqual(load_config("does_not_exist.json"), {})

    def test_bundled_config(self):
        config = load_config()
        self.assertEqual(config["max_redirects"], 5)
        self.assertEqual(config["image_fetch_timeout"], 10)


if __name__ == "__main__":
    unittest.main()

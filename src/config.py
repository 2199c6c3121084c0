"""
Application configuration.

Non-secret settings live in config.json next to this module; API keys are
read from the environment. A missing key is not fatal: the affected provider
serves its fallback content instead.
"""

import json
import logging
import os
from typing import Any, Dict, Optional, cast

logger = logging.getLogger(__name__)


def load_config(config_filename: str = "config.json") -> Dict[str, Any]:
    """Loads configuration from a JSON file."""
    base_dir = os.path.dirname(os.path.abspath(__file__))
    config_path = os.path.join(base_dir, config_filename)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.warning("Config file not found at %s. Using defaults.", config_path)
        return {}


CONFIG: Dict[str, Any] = load_config()

SERPAPI_URL: str = cast(str, CONFIG.get("serpapi_url", "https://serpapi.com/search.json"))
DEEPSEEK_MODEL: str = cast(str, CONFIG.get("deepseek_model", "deepseek-ai/deepseek-r1"))
REQUEST_TIMEOUT: float = float(CONFIG.get("request_timeout", 10))
IMAGE_FETCH_TIMEOUT: float = float(CONFIG.get("image_fetch_timeout", 10))
MAX_REDIRECTS: int = int(CONFIG.get("max_redirects", 5))

# Env Vars
SERPAPI_KEY: Optional[str] = os.environ.get("SERPAPI_KEY")
DEEPSEEK_API_KEY: Optional[str] = os.environ.get("NVIDIA_DEEPSEEK_KEY")
DEEPSEEK_BASE_URL: str = os.environ.get(
    "NVIDIA_DEEPSEEK_BASE_URL",
    cast(str, CONFIG.get("deepseek_base_url", "https://integrate.api.nvidia.com/v1")),
)

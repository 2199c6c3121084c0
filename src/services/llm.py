"""
LLM Service Module.

This module provides the LLMService class, which calls a hosted chat
completion endpoint (NVIDIA-hosted DeepSeek R1 by default) to write a short
news piece about a hot topic, and falls back to template text when the model
cannot be used.
"""

import logging
import random
import re
from typing import Any, Dict, Optional, TypedDict

import requests

from src.errors import ParseFailure, UpstreamUnavailable

logger = logging.getLogger(__name__)


class ModelContent(TypedDict):
    """Text produced for a topic and a description of a matching image."""

    text: str
    image_prompt: str


class LLMService:
    """
    Service for interacting with an OpenAI-compatible chat completion API.

    The service never raises to its caller: any failure produces fallback
    text assembled from a fixed set of template sentences.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        model: str = "deepseek-ai/deepseek-r1",
        timeout: float = 60,
        session: Optional[requests.Session] = None,
        rng: Optional[random.Random] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()
        self.rng = rng or random.Random()

    _PROMPT = """你是一位专业新闻编辑，请根据以下热搜话题"{topic}"{attribution}撰写一篇简短的新闻内容，要求：
1. 内容要符合事实，客观中立
2. 语言简洁专业，有新闻风格
3. 不要过长，300字左右即可
4. 内容需包含适当的细节和背景信息
5. 只需生成正文内容，无需标题
6. 一定要使用简体中文

新闻正文："""

    _FALLBACK_SENTENCES = (
        '关于"{topic}"的最新消息引发了广泛关注。',
        '据权威媒体报道，"{topic}"已成为公众热议的焦点话题。',
        '专家分析认为，"{topic}"反映了当前社会的重要趋势和变化。',
        '"{topic}"背后有着深刻的社会意义，值得我们深入思考。',
        '从最新数据来看，"{topic}"已经影响了众多人的日常生活和工作。',
        '对于"{topic}"，不同群体表现出了不同的态度和观点。',
        '未来，"{topic}"可能会带来更多深远的影响和变化。',
        '值得注意的是，"{topic}"并非偶然现象，而是有其发展脉络的。',
        '多方观点认为，"{topic}"折射出我们这个时代的特点和挑战。',
        '随着事态发展，"{topic}"将持续引发讨论和关注。',
    )

    def _get_prompt(self, topic: str, source: str) -> str:
        """Returns the prompt for the model."""
        attribution = f"（来源：{source}）" if source else ""
        return self._PROMPT.format(topic=topic, attribution=attribution)

    def clean_response(self, raw: str) -> str:
        """Strips reasoning blocks, trailing notes and extra blank lines."""
        cleaned = re.sub(r"<think>.*?</think>\n*", "", raw, flags=re.S)
        # A trailing "注：..." / "Note: ..." annotation runs to the end of the text
        cleaned = re.sub(r"\n*^(?:注：|注:|Note:).*", "", cleaned, flags=re.S | re.M)
        cleaned = re.sub(r"\n{2,}", "\n", cleaned)
        return cleaned.strip()

    def fallback_text(self, topic: str) -> str:
        """Assembles 4-6 random template sentences about the topic."""
        count = self.rng.randint(4, 6)
        return " ".join(
            self.rng.choice(self._FALLBACK_SENTENCES).format(topic=topic)
            for _ in range(count)
        )

    def image_prompt(self, topic: str, text: str) -> str:
        keywords = " ".join(topic.split()[:3])
        return f"News image, high quality, professional, about: {keywords}, {text[:50]}"

    def _chat(self, prompt: str) -> str:
        if not self.api_key:
            raise UpstreamUnavailable("Text generation API key not set")

        try:
            resp = self.session.post(
                f"{self.base_url}/chat/completions",
                json={
                    "model": self.model,
                    "messages": [{"role": "user", "content": prompt}],
                    "temperature": 0.8,
                    "max_tokens": 1000,
                    "top_p": 0.95,
                },
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as req_err:
            raise UpstreamUnavailable(str(req_err)) from req_err

        try:
            result: Dict[str, Any] = resp.json()
            content = result["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ParseFailure(f"Malformed completion response: {e}") from e
        if not isinstance(content, str) or not content.strip():
            raise ParseFailure("Empty completion")
        return content

    def generate_content(self, topic: str, source: str = "") -> ModelContent:
        """Writes a short news text about the topic."""
        logger.info("Generating content for topic %r", topic)
        try:
            text = self.clean_response(self._chat(self._get_prompt(topic, source)))
            if not text:
                raise ParseFailure("Completion was empty after cleanup")
        except (UpstreamUnavailable, ParseFailure) as e:
            logger.error("Text generation failed: %s", e)
            return ModelContent(
                text=self.fallback_text(topic), image_prompt=f"News image about: {topic}"
            )
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Text generation API error: %s", e)
            return ModelContent(
                text=self.fallback_text(topic), image_prompt=f"News image about: {topic}"
            )

        return ModelContent(text=text, image_prompt=self.image_prompt(topic, text))

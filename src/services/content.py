"""
Content generation for a selected topic.

Topics from real-article platforms are shown as-is (snippet, attribution and
a pointer to the original article); other topics are written by the LLM
service.
"""

import logging
from typing import Any, Mapping, Optional

from src.services.llm import LLMService, ModelContent

logger = logging.getLogger(__name__)

SENTENCE_END = (".", "!", "?", "…", "。", "！", "？")


def build_article_text(topic: Mapping[str, Any], default_source: str = "") -> str:
    """Reconstructs a readable block from a real article's own fields."""
    title = str(topic.get("title") or "").strip()
    snippet = str(topic.get("snippet") or "").strip()
    source = str(topic.get("source") or default_source).strip()
    published = topic.get("published_at") or topic.get("date")
    link = topic.get("link")

    if not (snippet or source or link):
        return (
            f'This is a breaking news story: "{title}". '
            "Please visit the original source for complete details."
        )

    parts = [title]
    if snippet:
        if not snippet.endswith(SENTENCE_END):
            snippet += "..."
        parts.append(snippet)

    if source:
        attribution = f"Source: {source}"
        if published:
            attribution += f" | Published: {published}"
        parts.append(attribution)

    if link:
        parts.append(
            "For the complete story and latest updates, "
            "visit the original article at the source website."
        )
    else:
        parts.append(
            "This story is developing. Check major news sources for the latest updates."
        )
    return "\n\n".join(parts)


class ContentGenerator:
    """Chooses between model-written text and the real article's own text."""

    def __init__(self, llm: LLMService):
        self.llm = llm

    def generate_content(
        self,
        topic: Mapping[str, Any],
        source: Optional[str] = None,
        real_article: bool = False,
    ) -> ModelContent:
        """Returns text and an image description for the topic."""
        title = str(topic.get("title") or "")
        if real_article:
            logger.info("Using original article text for %r", title)
            return ModelContent(
                text=build_article_text(topic, source or ""),
                image_prompt=f"News image about: {title}",
            )
        return self.llm.generate_content(title, source or str(topic.get("source") or ""))

"""
Text, date and ranking helpers shared by the topic sources.
"""

import datetime
import random
import re
from typing import List, Optional
from urllib.parse import urlparse

from src.models import Topic

_RELATIVE_EN = re.compile(r"(\d+)\s*(minute|min|hour|hr|day|week)s?\s*ago", re.I)
_RELATIVE_ZH = re.compile(r"(\d+)\s*(分钟|小时|天|周)前")
_UNIT_SECONDS = {
    "minute": 60,
    "min": 60,
    "hour": 3600,
    "hr": 3600,
    "day": 86400,
    "week": 7 * 86400,
    "分钟": 60,
    "小时": 3600,
    "天": 86400,
    "周": 7 * 86400,
}
_DATE_FORMATS = (
    "%m/%d/%Y, %I:%M %p, %z UTC",  # SerpAPI Google News
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%b %d, %Y",
    "%B %d, %Y",
    "%Y年%m月%d日 %H:%M",
    "%Y年%m月%d日",
)

NO_DESCRIPTION = "No description available."
READ_MORE = " Read the full story for more details."
TERMINAL_PUNCTUATION = (".", "!", "?", "…", "。", "！", "？")


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def clean_title(title: str) -> str:
    """Collapses whitespace and strips separator characters from the ends."""
    title = re.sub(r"\s+", " ", title or "")
    title = re.sub(r"^[\s\-|]+", "", title)
    title = re.sub(r"[\s\-|]+$", "", title)
    return title.strip()


def enhance_snippet(snippet: Optional[str]) -> str:
    """Makes a snippet presentable as a short description."""
    snippet = (snippet or "").strip()
    if not snippet:
        return NO_DESCRIPTION
    if len(snippet) < 50:
        return snippet + READ_MORE
    if not snippet.endswith(TERMINAL_PUNCTUATION):
        return snippet + "..."
    return snippet


def extract_domain(url: Optional[str]) -> Optional[str]:
    """Host of a URL without the www. prefix."""
    if not url:
        return None
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    if not host:
        return None
    return host[4:] if host.startswith("www.") else host


def generate_recent_date(
    rng: random.Random, now: Optional[datetime.datetime] = None
) -> str:
    """A random moment within the last 24 hours, as ISO-8601."""
    now = now or utcnow()
    seconds_ago = rng.randint(60, 24 * 3600)
    return (now - datetime.timedelta(seconds=seconds_ago)).isoformat()


def parse_news_date(
    value: Optional[str],
    rng: random.Random,
    now: Optional[datetime.datetime] = None,
) -> str:
    """Normalizes provider dates ("2 hours ago", "3小时前", ISO...) to ISO-8601 UTC."""
    now = now or utcnow()
    if not value:
        return generate_recent_date(rng, now)
    text = str(value).strip()

    match = _RELATIVE_EN.search(text) or _RELATIVE_ZH.search(text)
    if match:
        amount = int(match.group(1))
        unit = match.group(2).lower()
        return (now - datetime.timedelta(seconds=amount * _UNIT_SECONDS[unit])).isoformat()

    parsed: Optional[datetime.datetime] = None
    try:
        parsed = datetime.datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        for fmt in _DATE_FORMATS:
            try:
                parsed = datetime.datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return generate_recent_date(rng, now)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed.astimezone(datetime.timezone.utc).isoformat()


def popularity_score(
    index: int,
    rng: random.Random,
    featured: bool = False,
    base: int = 7_000_000,
    featured_base: int = 8_000_000,
    step: int = 500_000,
    jitter: int = 100_000,
) -> int:
    """Synthesizes a rank-decreasing popularity value with a little noise."""
    start = featured_base if featured else base
    return max(0, start - index * step + rng.randrange(jitter))


def order_topics(topics: List[Topic]) -> List[Topic]:
    """Featured first, then by popularity; ids re-assigned in that order."""
    ranked = sorted(
        topics, key=lambda t: (not t["is_featured"], -t["popularity_score"])
    )
    return [{**topic, "id": i} for i, topic in enumerate(ranked, start=1)]  # type: ignore[misc]

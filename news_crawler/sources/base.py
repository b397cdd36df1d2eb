"""
Feed item format shared by the feed reader and the crawl pipeline
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class FeedItem:
    """One feed entry, before analysis"""
    title: str
    url: Optional[str]
    published_at: int
    content: str = ""
    content_format: str = "text"

    @property
    def is_crawlable(self) -> bool:
        return bool(self.url and self.title)

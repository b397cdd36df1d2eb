"""
RSS/Atom feed reader: downloads a source's feed and turns entries into FeedItems.
"""

import calendar
from typing import List, Optional

import feedparser
import httpx
import structlog

from .base import FeedItem
from ..clients.base import USER_AGENT, create_http_client
from ..config import CrawlerConfig
from ..exceptions import TransientNetworkError, ValidationError
from ..models import Source
from ..utils.async_utils import retry_async, with_timeout
from ..utils.string_utils import guess_content_format
from ..utils.time_utils import now_ms
from ..utils.url_utils import is_http_url

logger = structlog.get_logger(__name__)


def pick_url(entry) -> Optional[str]:
    url = entry.get("link") or entry.get("id")
    return url if is_http_url(url or "") else None


def pick_content(entry) -> str:
    content = entry.get("content") or []
    for block in content:
        value = block.get("value")
        if value:
            return value.strip()
    return (entry.get("summary") or "").strip()


def entry_timestamp_ms(entry) -> int:
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            return calendar.timegm(parsed) * 1000
    return now_ms()


def parse_entry(entry) -> FeedItem:
    content = pick_content(entry)
    return FeedItem(
        title=(entry.get("title") or "").strip(),
        url=pick_url(entry),
        published_at=entry_timestamp_ms(entry),
        content=content,
        content_format=guess_content_format(content)
    )


class FeedReader:
    ACCEPT = "application/rss+xml, application/atom+xml, application/xml, text/xml"

    def __init__(self, config: CrawlerConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.timeout = config.request_timeout_seconds
        self._owns_client = client is None
        self.client = client or create_http_client(config)

    async def fetch_items(self, source: Source, limit: Optional[int] = None) -> List[FeedItem]:
        """Return up to ``limit`` items in feed order."""
        entries = await self._fetch_entries(source.url)
        items = [parse_entry(entry) for entry in entries[:limit or self.config.items_per_source]]
        logger.info("feed_read", source_id=source.id, entries=len(entries), items=len(items))
        return items

    @retry_async()
    async def _fetch_entries(self, feed_url: str) -> list:
        try:
            response = await with_timeout(
                self.client.get(
                    feed_url,
                    headers={"user-agent": USER_AGENT, "accept": self.ACCEPT},
                    follow_redirects=True
                ),
                self.timeout,
                "fetch_feed"
            )
        except httpx.HTTPError as e:
            raise TransientNetworkError(f"Feed request failed for {feed_url}: {e}") from e

        if not response.is_success:
            raise TransientNetworkError(
                f"Feed request failed for {feed_url}: HTTP {response.status_code}",
                status_code=response.status_code
            )

        feed = feedparser.parse(response.content)
        if feed.bozo and not feed.entries:
            raise ValidationError(f"Unparseable feed {feed_url}: {feed.get('bozo_exception')}")
        return list(feed.entries)

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

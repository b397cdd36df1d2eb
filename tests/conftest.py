import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock

from news_crawler.config import load_config
from news_crawler.utils import async_utils
from news_crawler.models import Source
from news_crawler.sources.base import FeedItem


BASE_ENV = {
    "AI_NEWS_BASE_URL": "http://api.test",
    "INGEST_SECRET": "test-secret",
}


@pytest.fixture
def base_env():
    return dict(BASE_ENV)


@pytest.fixture
def config(base_env):
    return load_config(base_env)


@pytest.fixture
def make_config(base_env):
    def _make(**overrides):
        return load_config({**base_env, **overrides})
    return _make


@pytest.fixture
def source_json():
    return {
        "id": "src-openai",
        "name": "OpenAI Blog",
        "url": "https://openai.com/blog/rss.xml",
        "type": "blog",
        "category": "ai_company",
        "language": "en",
        "crawlFrequency": 3600,
        "needCrawl": False,
        "lastCrawledAt": 1700000000000,
        "errorCount": 0
    }


@pytest.fixture
def make_source():
    def _make(source_id: str = "src-1", need_crawl: bool = False, category: str = "ai_company") -> Source:
        return Source(
            id=source_id,
            name=f"Source {source_id}",
            url=f"https://{source_id}.example.com/feed.xml",
            type="blog",
            category=category,
            language="en",
            crawl_frequency=3600,
            need_crawl=need_crawl
        )
    return _make


@pytest.fixture
def make_item():
    def _make(slug: str, title: str = "OpenAI announces a new GPT release", content: str = "Release notes") -> FeedItem:
        return FeedItem(
            title=title,
            url=f"https://news.example.com/{slug}",
            published_at=1700000000000,
            content=content,
            content_format="text"
        )
    return _make


@pytest.fixture
def mock_http_client():
    """Build an httpx.AsyncClient whose requests are answered by ``handler``."""
    def _make(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return _make


@pytest.fixture
def mock_sleep(monkeypatch):
    sleep = AsyncMock()
    monkeypatch.setattr(async_utils.asyncio, "sleep", sleep)
    return sleep


@pytest.fixture
def mock_registry():
    registry = MagicMock()
    registry.fetch_due_sources = AsyncMock(return_value=[])
    registry.report_status = AsyncMock(return_value=True)
    return registry


@pytest.fixture
def mock_ingest():
    ingest = MagicMock()
    ingest.post_ingest = AsyncMock(return_value=None)
    return ingest


@pytest.fixture
def mock_content_fetcher():
    fetcher = MagicMock()
    fetcher.fetch_full_content = AsyncMock(return_value="# Full article\n\nBody text")
    return fetcher

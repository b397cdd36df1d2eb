from .base import FeedItem
from .content_fetcher import ContentFetcher
from .feed_reader import FeedReader

__all__ = ["FeedItem", "FeedReader", "ContentFetcher"]

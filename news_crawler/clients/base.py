from typing import Any, Dict, Optional

import httpx
import structlog

from ..config import CrawlerConfig
from ..exceptions import TransientNetworkError
from ..utils.async_utils import with_timeout

USER_AGENT = "ai-news-crawler/0.1"


def create_http_client(config: CrawlerConfig) -> httpx.AsyncClient:
    """Client whose transport timeout matches the configured request deadline"""
    return httpx.AsyncClient(timeout=config.request_timeout_seconds)


class BaseApiClient:
    """Base class for content API communication with shared infrastructure."""

    def __init__(self, config: CrawlerConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.base_url = config.base_url
        self.timeout = config.request_timeout_seconds
        self._owns_client = client is None
        self.client = client or create_http_client(config)
        self.logger = structlog.get_logger(self.__class__.__name__)

    def _get_headers(self) -> Dict[str, str]:
        """Get headers with the shared ingest secret"""
        return {
            "x-ingest-secret": self.config.ingest_secret,
            "user-agent": USER_AGENT
        }

    async def _request(self, method: str, path: str, operation: str, **kwargs: Any) -> httpx.Response:
        """
        Send one request under the configured deadline.

        Raises:
            TransientNetworkError: on timeout, transport failure or non-2xx status
        """
        url = f"{self.base_url}{path}"
        try:
            response = await with_timeout(
                self.client.request(method, url, headers=self._get_headers(), **kwargs),
                self.timeout,
                operation
            )
        except httpx.HTTPError as e:
            raise TransientNetworkError(f"{operation} failed: {e}") from e

        if not response.is_success:
            raise TransientNetworkError(
                f"{operation} failed: {response.status_code} {response.text[:500]}",
                status_code=response.status_code
            )
        return response

    async def close(self):
        """Close the httpx client if this instance created it"""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

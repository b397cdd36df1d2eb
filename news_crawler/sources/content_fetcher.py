import httpx
import structlog
from typing import Optional

from ..clients.base import USER_AGENT, create_http_client
from ..config import CrawlerConfig
from ..exceptions import ContentFetchError, TransientNetworkError
from ..utils.async_utils import with_timeout
from ..utils.url_utils import strip_scheme, validate_url

logger = structlog.get_logger(__name__)


class ContentFetcher:
    """Fetches an article's readable text through the reader proxy (single attempt)."""

    MAX_CONTENT_LENGTH = 1_000_000

    def __init__(self, config: CrawlerConfig, client: Optional[httpx.AsyncClient] = None):
        self.prefix = config.jina_reader_prefix
        self.timeout = config.request_timeout_seconds
        self._owns_client = client is None
        self.client = client or create_http_client(config)

    def reader_url(self, url: str) -> str:
        return f"{self.prefix}{strip_scheme(url)}"

    async def fetch_full_content(self, url: str) -> str:
        validate_url(url)

        try:
            content = await with_timeout(self._download(url), self.timeout, "fetch_full_content")
        except ContentFetchError:
            raise
        except TransientNetworkError as e:
            raise ContentFetchError(str(e)) from e
        except httpx.HTTPError as e:
            raise ContentFetchError(f"Reader request failed for {url}: {e}") from e

        logger.debug("full_content_fetched", url=url, content_length=len(content))
        return content

    async def _download(self, url: str) -> str:
        """Stream the reader response, giving up as soon as it exceeds the size cap."""
        async with self.client.stream(
            "GET",
            self.reader_url(url),
            headers={"user-agent": USER_AGENT},
            follow_redirects=True
        ) as response:
            content_length = response.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > self.MAX_CONTENT_LENGTH:
                raise ContentFetchError(f"Content too large: {content_length} bytes (max {self.MAX_CONTENT_LENGTH})")

            if not response.is_success:
                raise ContentFetchError(
                    f"Reader fetch failed for {url}: HTTP {response.status_code}",
                    status_code=response.status_code
                )

            chunks = []
            received = 0
            async for chunk in response.aiter_bytes():
                received += len(chunk)
                if received > self.MAX_CONTENT_LENGTH:
                    raise ContentFetchError(f"Content too large: over {self.MAX_CONTENT_LENGTH} bytes")
                chunks.append(chunk)

            return b"".join(chunks).decode(response.charset_encoding or "utf-8", errors="replace")

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

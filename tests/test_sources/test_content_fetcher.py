import httpx
import pytest

from news_crawler.exceptions import ContentFetchError, ValidationError
from news_crawler.sources.content_fetcher import ContentFetcher


class CountingStream(httpx.AsyncByteStream):
    """Response body that records how many bytes the client pulled."""

    def __init__(self, total: int, chunk_size: int = 64 * 1024):
        self.total = total
        self.chunk_size = chunk_size
        self.consumed = 0

    async def __aiter__(self):
        remaining = self.total
        while remaining > 0:
            size = min(self.chunk_size, remaining)
            remaining -= size
            self.consumed += size
            yield b"x" * size

    async def aclose(self):
        pass


class TestContentFetcher:
    def test_reader_url_drops_scheme(self, config):
        fetcher = ContentFetcher(config, client=httpx.AsyncClient())

        assert fetcher.reader_url("https://example.com/post?id=1") == "https://r.jina.ai/http://example.com/post?id=1"
        assert fetcher.reader_url("http://example.com/post") == "https://r.jina.ai/http://example.com/post"

    @pytest.mark.asyncio
    async def test_returns_reader_text(self, config, mock_http_client):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="# Title\n\nBody")

        fetcher = ContentFetcher(config, client=mock_http_client(handler))
        content = await fetcher.fetch_full_content("https://example.com/post")

        assert content == "# Title\n\nBody"
        assert str(seen[0].url) == "https://r.jina.ai/http://example.com/post"

    @pytest.mark.asyncio
    async def test_custom_prefix(self, make_config, mock_http_client):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, text="ok")

        fetcher = ContentFetcher(make_config(JINA_READER_PREFIX="https://reader.internal/"), client=mock_http_client(handler))
        await fetcher.fetch_full_content("https://example.com/a")

        assert seen == ["https://reader.internal/example.com/a"]

    @pytest.mark.asyncio
    async def test_http_error_status(self, config, mock_http_client):
        fetcher = ContentFetcher(config, client=mock_http_client(lambda request: httpx.Response(500)))

        with pytest.raises(ContentFetchError) as exc_info:
            await fetcher.fetch_full_content("https://example.com/post")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_oversized_body(self, config, mock_http_client):
        body = "x" * (ContentFetcher.MAX_CONTENT_LENGTH + 1)
        fetcher = ContentFetcher(config, client=mock_http_client(lambda request: httpx.Response(200, text=body)))

        with pytest.raises(ContentFetchError, match="too large"):
            await fetcher.fetch_full_content("https://example.com/post")

    @pytest.mark.asyncio
    async def test_transport_error(self, config, mock_http_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        fetcher = ContentFetcher(config, client=mock_http_client(handler))

        with pytest.raises(ContentFetchError):
            await fetcher.fetch_full_content("https://example.com/post")

    @pytest.mark.asyncio
    async def test_invalid_url(self, config, mock_http_client):
        fetcher = ContentFetcher(config, client=mock_http_client(lambda request: httpx.Response(200)))

        with pytest.raises(ValidationError):
            await fetcher.fetch_full_content("mailto:someone@example.com")

    @pytest.mark.asyncio
    async def test_declared_oversize_is_rejected_before_reading(self, config, mock_http_client):
        body = CountingStream(5 * 1024 * 1024)

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"content-length": str(body.total)}, stream=body)

        fetcher = ContentFetcher(config, client=mock_http_client(handler))

        with pytest.raises(ContentFetchError, match="too large"):
            await fetcher.fetch_full_content("https://example.com/post")

        assert body.consumed == 0

    @pytest.mark.asyncio
    async def test_undeclared_oversize_stops_reading_at_the_cap(self, config, mock_http_client):
        body = CountingStream(5 * 1024 * 1024)
        fetcher = ContentFetcher(config, client=mock_http_client(lambda request: httpx.Response(200, stream=body)))

        with pytest.raises(ContentFetchError, match="too large"):
            await fetcher.fetch_full_content("https://example.com/post")

        assert body.consumed <= ContentFetcher.MAX_CONTENT_LENGTH + body.chunk_size

    @pytest.mark.asyncio
    async def test_decodes_declared_charset(self, config, mock_http_client):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                content="新闻正文".encode("gb18030"),
                headers={"content-type": "text/plain; charset=gb18030"}
            )

        fetcher = ContentFetcher(config, client=mock_http_client(handler))

        assert await fetcher.fetch_full_content("https://例子.中国/新闻") == "新闻正文"

    @pytest.mark.asyncio
    async def test_own_client_uses_configured_timeout_and_is_closed(self, make_config):
        fetcher = ContentFetcher(make_config(REQUEST_TIMEOUT_SECONDS="45"))

        assert fetcher.client.timeout == httpx.Timeout(45.0)
        await fetcher.close()
        assert fetcher.client.is_closed

    @pytest.mark.asyncio
    async def test_shared_client_is_left_open(self, config, mock_http_client):
        shared = mock_http_client(lambda request: httpx.Response(200))
        fetcher = ContentFetcher(config, client=shared)

        await fetcher.close()

        assert shared.is_closed is False
        await shared.aclose()

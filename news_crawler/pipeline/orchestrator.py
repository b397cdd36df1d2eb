"""
Batch Crawl Orchestrator

One batch run:
1. Fetch due sources from the registry
2. Crawl each source under a bounded worker pool
3. Per item: optional full-text fetch, analysis, ingest
4. Report each source's outcome back to the registry
"""

import asyncio
import time
from typing import List, Optional

import structlog

from .results import BatchResult, ItemMetrics, SourceOutcome, SourceStatus
from ..analysis.engine import AnalysisEngine
from ..clients.ingest_client import IngestClient
from ..clients.registry_client import SourceRegistryClient
from ..config import CrawlerConfig
from ..exceptions import CrawlerError
from ..models import Analysis, AnalysisInput, IngestPayload, Source
from ..sources.base import FeedItem
from ..sources.content_fetcher import ContentFetcher
from ..sources.feed_reader import FeedReader
from ..utils.time_utils import now_ms
from ..utils.url_utils import id_from_url

logger = structlog.get_logger(__name__)


def build_ingest_payload(
    source: Source,
    item: FeedItem,
    content: str,
    content_format: str,
    analysis: Analysis,
    crawled_at: Optional[int] = None
) -> IngestPayload:
    return IngestPayload(
        id=id_from_url(item.url),
        url=item.url,
        title=item.title,
        source_id=source.id,
        source_name=source.name,
        source_url=source.url,
        source_type=source.type,
        source_category=source.category,
        source_language=source.language,
        published_at=item.published_at,
        crawled_at=crawled_at or now_ms(),
        summary=analysis.summary,
        one_line=analysis.one_line,
        content=content,
        content_format=content_format,
        category=analysis.category,
        tags=analysis.tags,
        importance=analysis.importance,
        sentiment=analysis.sentiment,
        language=analysis.language
    )


class CrawlOrchestrator:
    """Drives crawl -> analyze -> ingest for a batch of due sources."""

    def __init__(
        self,
        config: CrawlerConfig,
        registry: SourceRegistryClient,
        ingest: IngestClient,
        feed_reader: FeedReader,
        content_fetcher: ContentFetcher,
        engine: AnalysisEngine
    ):
        self.config = config
        self.registry = registry
        self.ingest = ingest
        self.feed_reader = feed_reader
        self.content_fetcher = content_fetcher
        self.engine = engine

    async def run_once(self) -> BatchResult:
        """
        Run one batch over the registry's due sources.

        Raises:
            CrawlerError: if the due-source list cannot be fetched
        """
        batch_start = time.time()
        sources = await self.registry.fetch_due_sources(self.config.sources_limit)
        if not sources:
            logger.info("no_due_sources")
            return BatchResult()

        logger.info("batch_started", sources=len(sources), concurrency=self.config.concurrency)
        result = await self.run_batch(sources)
        logger.info("batch_completed", duration=round(time.time() - batch_start, 2), **result.to_dict())
        return result

    async def run_batch(self, sources: List[Source]) -> BatchResult:
        semaphore = asyncio.Semaphore(self.config.concurrency)
        outcomes = await asyncio.gather(*[self._run_worker(source, semaphore) for source in sources])
        return BatchResult.from_outcomes(outcomes)

    async def _run_worker(self, source: Source, semaphore: asyncio.Semaphore) -> SourceOutcome:
        async with semaphore:
            outcome = await self._crawl_and_classify(source)
            await self.registry.report_status(
                source.id,
                crawled_at=now_ms(),
                success=outcome.status != SourceStatus.FAILED,
                error_count_delta=outcome.error_count_delta
            )
            return outcome

    async def _crawl_and_classify(self, source: Source) -> SourceOutcome:
        start_time = time.time()
        log = logger.bind(source_id=source.id, source_name=source.name)

        try:
            metrics = await self.crawl_source(source)
        except Exception as e:
            duration = time.time() - start_time
            log.warning("source_crawl_failed", error=str(e), duration=round(duration, 2))
            return SourceOutcome(
                source_id=source.id,
                status=SourceStatus.FAILED,
                error=str(e) or e.__class__.__name__,
                duration_seconds=duration
            )

        duration = time.time() - start_time
        status = metrics.classify()
        log.info(
            "source_crawl_completed",
            status=status.value,
            ok=metrics.ok,
            skipped=metrics.skipped,
            failed=metrics.failed,
            total=metrics.total,
            duration=round(duration, 2)
        )
        return SourceOutcome(source_id=source.id, status=status, metrics=metrics, duration_seconds=duration)

    async def crawl_source(self, source: Source) -> ItemMetrics:
        """Crawl one source's current items in feed order. Item failures are counted, not raised."""
        items = await self.feed_reader.fetch_items(source, self.config.items_per_source)
        metrics = ItemMetrics(total=len(items))

        for item in items:
            if not item.is_crawlable:
                metrics.skipped += 1
                continue
            try:
                await self._process_item(source, item)
                metrics.ok += 1
            except Exception as e:
                metrics.failed += 1
                logger.warning("item_failed", source_id=source.id, url=item.url, error=str(e))

        return metrics

    async def _process_item(self, source: Source, item: FeedItem) -> None:
        content = item.content
        content_format = item.content_format

        if source.need_crawl:
            try:
                content = await self.content_fetcher.fetch_full_content(item.url)
                content_format = "markdown"
            except CrawlerError as e:
                logger.warning("full_content_fallback", url=item.url, error=str(e))

        analysis = await self.engine.analyze(AnalysisInput(
            title=item.title,
            content=content,
            source_name=source.name,
            source_category=source.category
        ))

        payload = build_ingest_payload(source, item, content, content_format, analysis)
        await self.ingest.post_ingest(payload)

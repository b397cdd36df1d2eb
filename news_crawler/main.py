import asyncio
import sys
from typing import Optional

import httpx
import structlog

from .analysis.engine import AnalysisEngine
from .clients.base import create_http_client
from .clients.ingest_client import IngestClient
from .clients.registry_client import SourceRegistryClient
from .config import CrawlerConfig, get_settings
from .exceptions import ConfigError, CrawlerError
from .logging_config import configure_logging
from .pipeline.orchestrator import CrawlOrchestrator
from .pipeline.scheduler import LoopScheduler
from .sources.content_fetcher import ContentFetcher
from .sources.feed_reader import FeedReader

logger = structlog.get_logger(__name__)


def create_orchestrator(
    config: CrawlerConfig,
    http_client: httpx.AsyncClient,
    engine: Optional[AnalysisEngine] = None
) -> CrawlOrchestrator:
    return CrawlOrchestrator(
        config=config,
        registry=SourceRegistryClient(config, http_client),
        ingest=IngestClient(config, http_client),
        feed_reader=FeedReader(config, http_client),
        content_fetcher=ContentFetcher(config, http_client),
        engine=engine or AnalysisEngine(config, http_client=http_client)
    )


async def run(config: CrawlerConfig) -> None:
    async with create_http_client(config) as http_client:
        orchestrator = create_orchestrator(config, http_client)
        scheduler = LoopScheduler(config, orchestrator.run_once)
        if config.loop:
            scheduler.install_signal_handlers()

        logger.info("crawler_starting", base_url=config.base_url, loop=config.loop)
        try:
            await scheduler.run()
        finally:
            await orchestrator.engine.close()


def main() -> int:
    try:
        config = get_settings()
    except ConfigError as e:
        logger.error("invalid_config", fields=e.fields, error=e.message)
        return 1

    configure_logging(config)

    try:
        asyncio.run(run(config))
    except CrawlerError as e:
        logger.error("crawler_run_failed", **e.to_dict())
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

import asyncio
import signal
from typing import Any, Awaitable, Callable

import structlog

from ..config import CrawlerConfig

logger = structlog.get_logger(__name__)


class LoopScheduler:
    """
    Runs batches once, or back to back with a pause between them.

    A run never overlaps the previous one: the pause starts only after the
    previous batch has drained. Stopping never cancels an in-flight batch.
    """

    def __init__(self, config: CrawlerConfig, run_once: Callable[[], Awaitable[Any]]):
        self.config = config
        self.run_once = run_once
        self.runs = 0
        self._stop = asyncio.Event()

    @property
    def stopping(self) -> bool:
        return self._stop.is_set()

    def request_stop(self) -> None:
        if not self._stop.is_set():
            logger.info("shutdown_requested", detail="finishing current batch")
        self._stop.set()

    def install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_stop)
            except (NotImplementedError, RuntimeError):
                logger.debug("signal_handler_unavailable", signal=sig.name)

    async def run(self) -> None:
        if not self.config.loop:
            await self.run_once()
            self.runs += 1
            return

        logger.info("loop_started", interval_ms=self.config.loop_interval_ms)
        while not self.stopping:
            try:
                await self.run_once()
            except Exception as e:
                logger.error("batch_run_failed", error=str(e), exc_info=True)
            self.runs += 1

            if self.stopping:
                break
            await self._wait_interval()

        logger.info("loop_stopped", runs=self.runs)

    async def _wait_interval(self) -> None:
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=self.config.loop_interval_seconds)
        except asyncio.TimeoutError:
            pass

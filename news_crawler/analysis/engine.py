from typing import List, Optional

import httpx
import structlog

from .base_strategy import AnalysisStrategy
from .heuristic_strategy import HeuristicAnalysisStrategy, detect_language, heuristic_analysis
from .strategy_factory import AnalysisStrategyFactory
from ..config import CrawlerConfig
from ..models import Analysis, AnalysisInput

logger = structlog.get_logger(__name__)


class AnalysisEngine:
    """Runs the strategy chain left to right; the first success wins. Never raises."""

    def __init__(
        self,
        config: CrawlerConfig,
        strategies: Optional[List[AnalysisStrategy]] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.config = config
        if strategies is None:
            strategies = AnalysisStrategyFactory(http_client).build_chain(config)
        if not any(isinstance(s, HeuristicAnalysisStrategy) for s in strategies):
            strategies = [*strategies, HeuristicAnalysisStrategy(config)]
        self.strategies = strategies

    async def analyze(self, analysis_input: AnalysisInput) -> Analysis:
        language = detect_language(f"{analysis_input.title}\n{analysis_input.content}")

        for strategy in self.strategies:
            result = await strategy.run(analysis_input, language)
            if result.success:
                logger.debug(
                    "item_analyzed",
                    strategy=result.strategy_used,
                    processing_time=round(result.processing_time_seconds or 0, 3)
                )
                return result.analysis

        return heuristic_analysis(analysis_input, language)

    async def close(self) -> None:
        for strategy in self.strategies:
            await strategy.close()


async def analyze(config: CrawlerConfig, analysis_input: AnalysisInput) -> Analysis:
    """One-shot analysis with a throwaway engine."""
    engine = AnalysisEngine(config)
    try:
        return await engine.analyze(analysis_input)
    finally:
        await engine.close()

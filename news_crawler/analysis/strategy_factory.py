"""
Strategy Factory for Item Analysis

Builds the ordered provider chain from configuration.
"""

from typing import Dict, List, Optional, Type

import httpx
import structlog

from .anthropic_strategy import AnthropicAnalysisStrategy
from .base_strategy import AnalysisStrategy
from .gemini_strategy import GeminiAnalysisStrategy
from .heuristic_strategy import HeuristicAnalysisStrategy
from ..config import CrawlerConfig

logger = structlog.get_logger(__name__)


class AnalysisStrategyFactory:
    """
    Creates analysis strategies and orders them into a fallback chain:
    Anthropic (if keyed), then Gemini (if keyed), then the heuristic.
    """

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self.http_client = http_client
        self._strategies: Dict[str, Type[AnalysisStrategy]] = {
            "anthropic": AnthropicAnalysisStrategy,
            "gemini": GeminiAnalysisStrategy,
            "heuristic": HeuristicAnalysisStrategy,
        }

    def create_strategy(self, strategy_type: str, config: CrawlerConfig) -> AnalysisStrategy:
        """
        Create a specific strategy instance.

        Raises:
            ValueError: If strategy type is not available
        """
        if strategy_type not in self._strategies:
            available = list(self._strategies.keys())
            raise ValueError(
                f"Strategy '{strategy_type}' not available. "
                f"Available strategies: {available}"
            )

        if strategy_type == "gemini":
            return GeminiAnalysisStrategy(config, client=self.http_client)
        return self._strategies[strategy_type](config)

    def build_chain(self, config: CrawlerConfig) -> List[AnalysisStrategy]:
        chain = []
        if config.anthropic_api_key:
            chain.append(self.create_strategy("anthropic", config))
        if config.gemini_api_key:
            chain.append(self.create_strategy("gemini", config))
        chain.append(self.create_strategy("heuristic", config))

        logger.info("analysis_chain_built", strategies=[s.strategy_name for s in chain])
        return chain

    def get_available_strategies(self) -> List[str]:
        return list(self._strategies.keys())

"""
Base Strategy Interface for Item Analysis

Every analysis provider implements one capability: produce an Analysis for
an item or report that it produced nothing. Provider exceptions are turned
into a failed StrategyResult here and never reach the caller.
"""

import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from ..config import CrawlerConfig
from ..exceptions import ProviderError
from ..models import Analysis, AnalysisInput
from ..utils.string_utils import strip_code_fences

logger = structlog.get_logger(__name__)

TEMPERATURE = 0.2
MAX_OUTPUT_TOKENS = 700


class StrategyStatus(Enum):
    """Outcome of one strategy attempt"""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class StrategyResult:
    """Result of running one analysis strategy"""
    status: StrategyStatus
    analysis: Optional[Analysis] = None
    error: Optional[str] = None
    strategy_used: Optional[str] = None
    processing_time_seconds: Optional[float] = None

    @property
    def success(self) -> bool:
        return self.status == StrategyStatus.SUCCESS and self.analysis is not None


class AnalysisStrategy(ABC):
    """
    Abstract base class for all analysis strategies.

    Subclasses implement _analyze and may raise anything; run() converts
    failures into a StrategyResult.
    """

    def __init__(self, config: CrawlerConfig):
        self.config = config
        self.strategy_name = self.get_strategy_name()

    @abstractmethod
    def get_strategy_name(self) -> str:
        pass

    @abstractmethod
    async def _analyze(self, analysis_input: AnalysisInput, language: str) -> Analysis:
        """
        Produce an Analysis for one item.

        Args:
            analysis_input: Title, content and source hints
            language: Language detected from the raw text

        Raises:
            Exception: any failure; the caller falls through to the next strategy
        """
        pass

    async def run(self, analysis_input: AnalysisInput, language: str) -> StrategyResult:
        start_time = time.time()
        try:
            analysis = await self._analyze(analysis_input, language)
        except Exception as e:
            error = e if isinstance(e, ProviderError) else ProviderError(self.strategy_name, str(e) or e.__class__.__name__)
            logger.warning("analysis_strategy_failed", strategy=self.strategy_name, error=error.message)
            return StrategyResult(
                status=StrategyStatus.FAILED,
                error=error.message,
                strategy_used=self.strategy_name,
                processing_time_seconds=time.time() - start_time
            )

        return StrategyResult(
            status=StrategyStatus.SUCCESS,
            analysis=analysis,
            strategy_used=self.strategy_name,
            processing_time_seconds=time.time() - start_time
        )

    async def close(self) -> None:
        return


class LLMAnalysisStrategy(AnalysisStrategy):
    """Shared response handling for providers that answer with JSON text."""

    def _parse_response(self, text: str) -> Analysis:
        cleaned = strip_code_fences(text)
        if not cleaned:
            raise ProviderError(self.strategy_name, "empty response")

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise ProviderError(self.strategy_name, f"invalid JSON: {e}")

        try:
            return Analysis.model_validate(data)
        except PydanticValidationError as e:
            raise ProviderError(self.strategy_name, f"response does not match Analysis: {e.error_count()} errors")

"""
Anthropic Strategy

Asks a Claude model for the Analysis JSON through the Messages API.
"""

from typing import Optional

import anthropic
import structlog

from .base_strategy import LLMAnalysisStrategy, MAX_OUTPUT_TOKENS, TEMPERATURE
from .prompts import AnalysisPrompts
from ..config import CrawlerConfig
from ..models import Analysis, AnalysisInput
from ..utils.async_utils import with_timeout

logger = structlog.get_logger(__name__)


class AnthropicAnalysisStrategy(LLMAnalysisStrategy):

    def __init__(self, config: CrawlerConfig, client: Optional[anthropic.AsyncAnthropic] = None):
        super().__init__(config)
        self._owns_client = client is None
        # Retries are disabled: a failing provider falls through to the next strategy instead
        self.client = client or anthropic.AsyncAnthropic(
            api_key=config.anthropic_api_key,
            max_retries=0,
            timeout=config.request_timeout_seconds
        )

    def get_strategy_name(self) -> str:
        return "anthropic"

    async def _analyze(self, analysis_input: AnalysisInput, language: str) -> Analysis:
        prompt = AnalysisPrompts.get_detailed_prompt(analysis_input)

        response = await with_timeout(
            self.client.messages.create(
                model=self.config.anthropic_model,
                max_tokens=MAX_OUTPUT_TOKENS,
                temperature=TEMPERATURE,
                messages=[{"role": "user", "content": prompt}]
            ),
            self.config.request_timeout_seconds,
            "anthropic_analysis"
        )

        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )
        logger.debug("anthropic_response_received", model=self.config.anthropic_model, response_length=len(text))
        return self._parse_response(text)

    async def close(self) -> None:
        if self._owns_client:
            await self.client.close()

"""
Gemini Strategy

Asks a Gemini model for the Analysis JSON through the REST generateContent
endpoint; the API key travels as the ``key`` query parameter.
"""

from typing import Optional
from urllib.parse import quote

import httpx
import structlog

from .base_strategy import LLMAnalysisStrategy, MAX_OUTPUT_TOKENS, TEMPERATURE
from .prompts import AnalysisPrompts
from ..clients.base import create_http_client
from ..config import CrawlerConfig
from ..exceptions import ProviderError
from ..models import Analysis, AnalysisInput
from ..utils.async_utils import with_timeout

logger = structlog.get_logger(__name__)


class GeminiAnalysisStrategy(LLMAnalysisStrategy):
    API_BASE = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(self, config: CrawlerConfig, client: Optional[httpx.AsyncClient] = None):
        super().__init__(config)
        self._owns_client = client is None
        self.client = client or create_http_client(config)

    def get_strategy_name(self) -> str:
        return "gemini"

    def _endpoint(self) -> str:
        return f"{self.API_BASE}/models/{quote(self.config.gemini_model, safe='')}:generateContent"

    async def _analyze(self, analysis_input: AnalysisInput, language: str) -> Analysis:
        body = {
            "contents": [
                {"role": "user", "parts": [{"text": AnalysisPrompts.get_compact_prompt(analysis_input)}]}
            ],
            "generationConfig": {
                "temperature": TEMPERATURE,
                "maxOutputTokens": MAX_OUTPUT_TOKENS
            }
        }

        response = await with_timeout(
            self.client.post(self._endpoint(), params={"key": self.config.gemini_api_key}, json=body),
            self.config.request_timeout_seconds,
            "gemini_analysis"
        )
        if not response.is_success:
            raise ProviderError(self.strategy_name, f"HTTP {response.status_code} {response.text[:300]}")

        text = self._extract_text(response.json())
        logger.debug("gemini_response_received", model=self.config.gemini_model, response_length=len(text))
        return self._parse_response(text)

    @staticmethod
    def _extract_text(data: dict) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text") or "" for part in parts)

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

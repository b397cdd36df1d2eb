"""
Item Analysis

Ordered chain of analysis strategies:
- Anthropic (Claude Messages API)
- Gemini (generateContent REST API)
- Heuristic (deterministic keyword rules, always last)
"""

from .base_strategy import AnalysisStrategy, StrategyResult, StrategyStatus
from .engine import AnalysisEngine, analyze
from .heuristic_strategy import detect_language
from .strategy_factory import AnalysisStrategyFactory

__all__ = [
    "AnalysisStrategy",
    "StrategyResult",
    "StrategyStatus",
    "AnalysisEngine",
    "AnalysisStrategyFactory",
    "analyze",
    "detect_language"
]

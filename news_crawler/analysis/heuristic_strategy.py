"""
Heuristic Strategy

Deterministic, network-free analysis used when no provider is configured or
every provider failed. Keyword lists are English/romanized only, so Chinese
titles without those substrings land on the defaults.
"""

import re
from typing import List, Optional

from .base_strategy import AnalysisStrategy
from ..models import Analysis, AnalysisInput

LANGUAGE_SAMPLE_CHARS = 4000
SUMMARY_CHARS = 600
ONE_LINE_CHARS = 140
MAX_TAGS = 8
MAX_TAG_CANDIDATES = 12

CJK_PATTERN = re.compile(r"[\u4e00-\u9fff]")
URL_PATTERN = re.compile(r"https?://\S+")
NON_WORD_PATTERN = re.compile(r"[^\w\s-]|_")

# Checked in order; first match wins
CATEGORY_PATTERNS = [
    ("release", re.compile(r"release|launch|announce|introduc|unveil|ship")),
    ("research", re.compile(r"research|paper|benchmark|dataset|arxiv")),
    ("security", re.compile(r"security|vuln|cve|attack|prompt injection")),
    ("business", re.compile(r"funding|acquir|ipo|valuation|invest")),
    ("policy", re.compile(r"policy|regulat|law|compliance|copyright")),
]
DEFAULT_CATEGORY = "news"

BASE_IMPORTANCE = 50
AI_COMPANY_CATEGORY = "ai_company"
IMPORTANCE_BOOSTS = [
    (re.compile(r"openai|anthropic|deepmind|google|meta|microsoft|amazon|nvidia", re.IGNORECASE), 10),
    (re.compile(r"gpt|claude|gemini|llama|qwen|kimi|deepseek", re.IGNORECASE), 8),
    (re.compile(r"release|launch|announce|unveil", re.IGNORECASE), 6),
]


def detect_language(text: str) -> str:
    return "zh" if CJK_PATTERN.search(text[:LANGUAGE_SAMPLE_CHARS]) else "en"


def heuristic_category(title: str) -> str:
    lowered = title.lower()
    for category, pattern in CATEGORY_PATTERNS:
        if pattern.search(lowered):
            return category
    return DEFAULT_CATEGORY


def heuristic_tags(title: str) -> List[str]:
    cleaned = NON_WORD_PATTERN.sub(" ", URL_PATTERN.sub("", title)).strip()
    candidates = [token for token in cleaned.split() if 3 <= len(token) <= 24][:MAX_TAG_CANDIDATES]

    tags = []
    seen = set()
    for token in candidates:
        tag = token.replace("-", "")
        key = tag.lower()
        if not tag or key in seen:
            continue
        seen.add(key)
        tags.append(tag)
    return tags[:MAX_TAGS]


def heuristic_importance(title: str, source_category: Optional[str]) -> int:
    score = BASE_IMPORTANCE
    if source_category == AI_COMPANY_CATEGORY:
        score += 10
    for pattern, boost in IMPORTANCE_BOOSTS:
        if pattern.search(title):
            score += boost
    return max(0, min(100, score))


def heuristic_analysis(analysis_input: AnalysisInput, language: str) -> Analysis:
    content = analysis_input.content
    return Analysis(
        summary=content[:SUMMARY_CHARS].strip() if content else None,
        one_line=analysis_input.title[:ONE_LINE_CHARS],
        category=heuristic_category(analysis_input.title),
        tags=heuristic_tags(analysis_input.title),
        importance=heuristic_importance(analysis_input.title, analysis_input.source_category),
        sentiment="neutral",
        language=language
    )


class HeuristicAnalysisStrategy(AnalysisStrategy):

    def get_strategy_name(self) -> str:
        return "heuristic"

    async def _analyze(self, analysis_input: AnalysisInput, language: str) -> Analysis:
        return heuristic_analysis(analysis_input, language)

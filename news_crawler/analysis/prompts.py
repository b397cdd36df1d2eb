from ..models import AnalysisInput

MAX_PROMPT_CONTENT_CHARS = 12_000


def _input_block(analysis_input: AnalysisInput) -> str:
    category = analysis_input.source_category or "unknown"
    return (
        f"Source: {analysis_input.source_name} ({category})\n"
        f"Title: {analysis_input.title}\n"
        f"Content:\n{analysis_input.content[:MAX_PROMPT_CONTENT_CHARS]}\n"
    )


class AnalysisPrompts:
    @staticmethod
    def get_detailed_prompt(analysis_input: AnalysisInput) -> str:
        """Prompt with field-by-field rules, for models that follow long instructions well"""
        return f"""You are a news analyst for an AI news aggregation site.
Return ONLY valid JSON (no markdown, no backticks) matching this shape:
{{
  "summary": string | null,
  "oneLine": string | null,
  "category": string | null,
  "tags": string[],
  "importance": number,
  "sentiment": "positive" | "neutral" | "negative",
  "language": "en" | "zh"
}}

Rules:
- summary: 2-4 sentences
- oneLine: <= 120 chars
- tags: 3-8 short tags
- importance: integer 0-100; consider source + novelty + industry impact
- language: the language the article is written in

Input:
{_input_block(analysis_input)}"""

    @staticmethod
    def get_compact_prompt(analysis_input: AnalysisInput) -> str:
        """Short prompt carrying only the JSON shape"""
        return f"""Return ONLY valid JSON matching:
{{"summary":string|null,"oneLine":string|null,"category":string|null,"tags":string[],"importance":number,"sentiment":"positive"|"neutral"|"negative","language":"en"|"zh"}}

{_input_block(analysis_input)}"""

import pytest

from news_crawler.analysis.heuristic_strategy import (
    HeuristicAnalysisStrategy,
    detect_language,
    heuristic_analysis,
    heuristic_category,
    heuristic_importance,
    heuristic_tags,
)
from news_crawler.analysis.engine import analyze
from news_crawler.models import AnalysisInput


class TestDetectLanguage:
    @pytest.mark.parametrize("text", ["OpenAI 发布新模型", "中", "mixed text with 一 ideograph"])
    def test_cjk_is_chinese(self, text):
        assert detect_language(text) == "zh"

    @pytest.mark.parametrize("text", ["", "Plain English", "Café naïve résumé", "Привет мир"])
    def test_everything_else_is_english(self, text):
        assert detect_language(text) == "en"

    def test_only_leading_window_is_sampled(self):
        assert detect_language("a" * 4000 + "中") == "en"
        assert detect_language("a" * 3999 + "中") == "zh"


class TestHeuristicRules:
    def test_category_first_match_wins(self):
        assert heuristic_category("Lab releases benchmark results") == "release"
        assert heuristic_category("New paper on scaling laws") == "research"
        assert heuristic_category("Critical CVE in inference server") == "security"
        assert heuristic_category("Startup closes funding round") == "business"
        assert heuristic_category("EU regulation update") == "policy"
        assert heuristic_category("Weekly roundup") == "news"

    def test_importance_boosts_accumulate(self):
        title = "OpenAI announces a new GPT release"

        assert heuristic_importance(title, "ai_company") == 84
        assert heuristic_importance(title, "media") == 74
        assert heuristic_importance("Weekly roundup", None) == 50

    def test_tags_strip_urls_and_punctuation(self):
        tags = heuristic_tags("Meta's Llama-3 is out! https://ai.meta.com/blog (details)")

        assert "https" not in " ".join(tags)
        assert "Llama3" in tags
        assert "details" in tags
        assert all(3 <= len(tag) <= 24 for tag in tags)

    def test_tags_deduplicate_case_insensitively(self):
        assert heuristic_tags("GPT gpt Gpt-4 GPT4 model") == ["GPT", "Gpt4", "model"]

    def test_tags_are_capped(self):
        title = " ".join(f"word{i}" for i in range(20))

        assert heuristic_tags(title) == [f"word{i}" for i in range(8)]


class TestHeuristicAnalysis:
    def test_release_headline(self):
        analysis = heuristic_analysis(
            AnalysisInput(
                title="OpenAI announces a new GPT release",
                content="  Full release notes.  ",
                source_name="OpenAI Blog",
                source_category="ai_company"
            ),
            "en"
        )

        assert analysis.category == "release"
        assert analysis.importance == 84
        assert analysis.sentiment == "neutral"
        assert analysis.summary == "Full release notes."
        assert analysis.one_line == "OpenAI announces a new GPT release"
        assert analysis.tags == ["OpenAI", "announces", "new", "GPT", "release"]

    def test_empty_content_has_no_summary(self):
        analysis = heuristic_analysis(AnalysisInput(title="t" * 300, source_name="s"), "en")

        assert analysis.summary is None
        assert len(analysis.one_line) == 140

    def test_is_deterministic(self):
        analysis_input = AnalysisInput(title="Anthropic ships Claude update", content="Body", source_name="s")

        assert heuristic_analysis(analysis_input, "en") == heuristic_analysis(analysis_input, "en")

    @pytest.mark.asyncio
    async def test_chinese_item_without_providers(self, config):
        analysis = await analyze(
            config,
            AnalysisInput(
                title="OpenAI 发布新模型",
                content="这是一个关于 AI 的新闻。",
                source_name="Example",
                source_category="ai_company"
            )
        )

        assert analysis.language == "zh"
        assert analysis.sentiment == "neutral"
        assert analysis.importance >= 60
        assert analysis.category == "news"

    @pytest.mark.asyncio
    async def test_strategy_run_reports_success(self, config):
        result = await HeuristicAnalysisStrategy(config).run(
            AnalysisInput(title="Weekly roundup", source_name="s"),
            "en"
        )

        assert result.success
        assert result.strategy_used == "heuristic"
        assert result.analysis.importance == 50

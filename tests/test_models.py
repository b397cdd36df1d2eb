import pytest
from pydantic import ValidationError as PydanticValidationError

from news_crawler.models import Analysis, IngestPayload, Source, SourceStatusUpdate
from news_crawler.utils.url_utils import id_from_url, strip_scheme, validate_url
from news_crawler.exceptions import ValidationError


def analysis_json(**overrides):
    data = {
        "summary": "A summary.",
        "oneLine": "One line",
        "category": "release",
        "tags": ["openai", "gpt"],
        "importance": 80,
        "sentiment": "positive",
        "language": "en"
    }
    data.update(overrides)
    return data


class TestAnalysis:
    def test_parses_camel_case(self):
        analysis = Analysis.model_validate(analysis_json())

        assert analysis.one_line == "One line"
        assert analysis.importance == 80

    @pytest.mark.parametrize("raw,expected", [(150, 100), (-5, 0), (42.6, 43), ("77", 77)])
    def test_importance_is_clamped(self, raw, expected):
        assert Analysis.model_validate(analysis_json(importance=raw)).importance == expected

    @pytest.mark.parametrize("raw", ["high", True, None])
    def test_non_numeric_importance_rejected(self, raw):
        with pytest.raises(PydanticValidationError):
            Analysis.model_validate(analysis_json(importance=raw))

    def test_unknown_sentiment_rejected(self):
        with pytest.raises(PydanticValidationError):
            Analysis.model_validate(analysis_json(sentiment="mixed"))

    def test_null_tags_become_empty(self):
        assert Analysis.model_validate(analysis_json(tags=None)).tags == []


class TestWireModels:
    def test_source_from_registry_json(self, source_json):
        source = Source.model_validate(source_json)

        assert source.need_crawl is False
        assert source.crawl_frequency == 3600
        assert source.last_crawled_at == 1700000000000

    def test_status_update_omits_unset_delta(self):
        update = SourceStatusUpdate(id="s1", crawled_at=1, success=True)

        assert update.to_wire() == {"id": "s1", "crawledAt": 1, "success": True}

    def test_ingest_payload_wire_format(self):
        payload = IngestPayload(
            url="https://example.com/a",
            title="Title",
            source_id="s1",
            published_at=1700000000000,
            summary=None,
            content_format="markdown"
        )

        assert payload.to_wire() == {
            "url": "https://example.com/a",
            "title": "Title",
            "sourceId": "s1",
            "publishedAt": 1700000000000,
            "summary": None,
            "contentFormat": "markdown"
        }


class TestUrlUtils:
    def test_id_from_url_is_stable_and_short(self):
        first = id_from_url("https://example.com/post")

        assert first == id_from_url("https://example.com/post")
        assert len(first) == 16
        assert "=" not in first
        assert first != id_from_url("https://example.com/other")

    def test_strip_scheme(self):
        assert strip_scheme("https://example.com/a?b=1") == "example.com/a?b=1"
        assert strip_scheme("http://example.com") == "example.com"

    @pytest.mark.parametrize("url", [
        "https://example.com/path",
        "https://example.xn--p1ai/a",
        "http://[::1]:8080/a",
        "https://my_host.example.com/a",
        "https://例子.中国/新闻",
    ])
    def test_validate_url_accepts_http_urls(self, url):
        validate_url(url)

    @pytest.mark.parametrize("url", ["", "ftp://example.com", "mailto:someone@example.com", "/relative/path", "https://"])
    def test_validate_url_rejects(self, url):
        with pytest.raises(ValidationError):
            validate_url(url)

import math
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for payloads exchanged with the content API (camelCase on the wire)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class Source(WireModel):
    """Crawl target as returned by the sources registry"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    url: str
    type: str
    category: Optional[str]
    language: Optional[str]
    crawl_frequency: float
    need_crawl: bool
    last_crawled_at: Optional[int] = None
    error_count: Optional[int] = None


class SourcesResponse(WireModel):
    """Response body of GET /api/admin/sources"""
    sources: List[Source]


class SourceStatusUpdate(WireModel):
    """Request body of POST /api/admin/sources"""
    id: str
    crawled_at: int
    success: bool
    error_count_delta: Optional[int] = None


class Analysis(WireModel):
    """Enrichment computed for one crawled item"""
    summary: Optional[str]
    one_line: Optional[str]
    category: Optional[str]
    tags: List[str] = Field(default_factory=list)
    importance: int = Field(ge=0, le=100)
    sentiment: Literal["positive", "neutral", "negative"]
    language: Literal["en", "zh"]

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_are_empty(cls, value):
        return [] if value is None else value

    @field_validator("importance", mode="before")
    @classmethod
    def clamp_importance(cls, value):
        if isinstance(value, bool):
            raise ValueError("importance must be a number")
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                raise ValueError("importance must be a number")
        if isinstance(value, (int, float)):
            if not math.isfinite(value):
                raise ValueError("importance must be finite")
            return max(0, min(100, int(round(value))))
        return value


class AnalysisInput(WireModel):
    title: str
    content: str = ""
    source_name: str
    source_category: Optional[str] = None


class IngestPayload(WireModel):
    """Request body of POST /api/ingest"""
    id: Optional[str] = None
    url: str
    title: str
    source_id: str
    source_name: Optional[str] = None
    source_url: Optional[str] = None
    source_type: Optional[str] = None
    source_category: Optional[str] = None
    source_language: Optional[str] = None
    published_at: int
    crawled_at: Optional[int] = None
    summary: Optional[str] = None
    one_line: Optional[str] = None
    content: Optional[str] = None
    content_format: Optional[Literal["markdown", "html", "text"]] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    importance: Optional[int] = None
    sentiment: Optional[str] = None
    language: Optional[str] = None

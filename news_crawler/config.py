import os
from functools import lru_cache
from typing import Literal, Mapping, Optional

from pydantic import AnyHttpUrl, Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError


class CrawlerConfig(BaseSettings):

    # Registry / ingest API
    ai_news_base_url: AnyHttpUrl = Field(
        validation_alias="AI_NEWS_BASE_URL",
        description="Base URL of the content API (sources registry and ingest)",
        examples=["http://localhost:3000"]
    )
    ingest_secret: str = Field(
        min_length=1,
        validation_alias="INGEST_SECRET",
        description="Shared secret sent as x-ingest-secret"
    )

    # Batch sizing
    sources_limit: int = Field(default=200, ge=1, le=500, validation_alias="SOURCES_LIMIT", description="Max due sources per batch")
    items_per_source: int = Field(default=20, ge=1, le=50, validation_alias="ITEMS_PER_SOURCE", description="Max feed items crawled per source")
    concurrency: int = Field(default=5, ge=1, le=50, validation_alias="CONCURRENCY", description="Max concurrent source workers")

    # Loop mode
    loop: bool = Field(default=False, validation_alias="LOOP", description="Re-run batches continuously")
    loop_interval_ms: int = Field(default=60_000, ge=5000, validation_alias="LOOP_INTERVAL_MS", description="Pause between batches in loop mode")

    # Full-text reader proxy
    jina_reader_prefix: str = Field(
        default="https://r.jina.ai/http://",
        validation_alias="JINA_READER_PREFIX",
        description="Prefix prepended to article URLs (without scheme) to fetch readable text"
    )

    # LLM providers
    anthropic_api_key: Optional[str] = Field(default=None, validation_alias="ANTHROPIC_API_KEY", description="Anthropic API key")
    anthropic_model: str = Field(default="claude-3-5-haiku-latest", validation_alias="ANTHROPIC_MODEL", description="Anthropic model name")
    gemini_api_key: Optional[str] = Field(default=None, validation_alias="GEMINI_API_KEY", description="Google Gemini API key")
    gemini_model: str = Field(default="gemini-1.5-flash", validation_alias="GEMINI_MODEL", description="Gemini model name")

    # Networking
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        validation_alias="REQUEST_TIMEOUT_SECONDS",
        description="Deadline applied to every outbound HTTP call"
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="json", validation_alias="LOG_FORMAT", description="Log format (json or text)")

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Values come only from the mapping handed to load_config
        return (init_settings,)

    @field_validator("loop", mode="before")
    @classmethod
    def parse_loop_flag(cls, value):
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        return str(value).lower() == "true"

    @field_validator("anthropic_api_key", "gemini_api_key", mode="before")
    @classmethod
    def blank_key_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def base_url(self) -> str:
        return str(self.ai_news_base_url).rstrip("/")

    @property
    def loop_interval_seconds(self) -> float:
        return self.loop_interval_ms / 1000


def load_config(env: Optional[Mapping[str, str]] = None) -> CrawlerConfig:
    """
    Validate an environment mapping into a CrawlerConfig.

    Only the given mapping is read (os.environ when omitted); no .env files.

    Raises:
        ConfigError: naming every environment variable that failed validation
    """
    source = os.environ if env is None else env
    # Leading-underscore names are reserved for BaseSettings init options
    values = {name: value for name, value in source.items() if not name.startswith("_")}
    try:
        return CrawlerConfig(**values)
    except PydanticValidationError as e:
        fields = []
        problems = []
        for error in e.errors():
            name = str(error["loc"][0]) if error["loc"] else "<root>"
            if name not in fields:
                fields.append(name)
            problems.append(f"{name}: {error['msg']}")
        raise ConfigError(f"Invalid config: {'; '.join(problems)}", fields=fields) from e


@lru_cache()
def get_settings() -> CrawlerConfig:
    return load_config()

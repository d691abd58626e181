from __future__ import annotations

from functools import lru_cache
from typing import Annotated
from urllib.parse import quote_plus

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
PREVIEW_USER_AGENT = "Mozilla/5.0 (compatible; FoodForBrain/1.0)"

_ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=False,
    extra="ignore",
    populate_by_name=True,
)


class DatabaseSettings(BaseSettings):
    model_config = _ENV_CONFIG

    url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "DATABASE__URL"),
    )
    host: str = Field(
        default="localhost",
        validation_alias=AliasChoices("DB_HOST", "DATABASE__HOST"),
    )
    port: int = Field(
        default=5432,
        validation_alias=AliasChoices("DB_PORT", "DATABASE__PORT"),
    )
    name: str = Field(
        default="foodforbrain",
        validation_alias=AliasChoices("DB_NAME", "DATABASE__NAME"),
    )
    user: str = Field(
        default="postgres",
        validation_alias=AliasChoices("DB_USER", "DATABASE__USER"),
    )
    password: SecretStr = Field(
        default=SecretStr("postgres"),
        validation_alias=AliasChoices("DB_PASSWORD", "DATABASE__PASSWORD"),
    )

    def sqlalchemy_url(self) -> str:
        if self.url:
            return self.url
        user = quote_plus(self.user)
        pwd = quote_plus(self.password.get_secret_value())
        return f"postgresql+psycopg://{user}:{pwd}@{self.host}:{self.port}/{self.name}"


class ExtractorSettings(BaseSettings):
    model_config = _ENV_CONFIG

    timeout: float = Field(
        default=10.0,
        validation_alias=AliasChoices("EXTRACTOR_TIMEOUT", "EXTRACTOR__TIMEOUT"),
    )
    preview_timeout: float = Field(
        default=5.0,
        validation_alias=AliasChoices(
            "EXTRACTOR_PREVIEW_TIMEOUT",
            "EXTRACTOR__PREVIEW_TIMEOUT",
        ),
    )
    user_agent: str = Field(
        default=BROWSER_USER_AGENT,
        validation_alias=AliasChoices("EXTRACTOR_USER_AGENT", "EXTRACTOR__USER_AGENT"),
    )
    preview_user_agent: str = Field(
        default=PREVIEW_USER_AGENT,
        validation_alias=AliasChoices(
            "EXTRACTOR_PREVIEW_USER_AGENT",
            "EXTRACTOR__PREVIEW_USER_AGENT",
        ),
    )


class OpenAIProviderSettings(BaseSettings):
    """OpenAI-compatible chat completions provider configuration."""

    model_config = _ENV_CONFIG

    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "OPENAI_API_KEY",
            "SUMMARIZATION__OPENAI__API_KEY",
        ),
    )
    base_url: str = Field(
        default="https://api.openai.com",
        validation_alias=AliasChoices(
            "OPENAI_BASE_URL",
            "SUMMARIZATION__OPENAI__BASE_URL",
        ),
    )
    model: str = Field(
        default="gpt-3.5-turbo",
        validation_alias=AliasChoices(
            "OPENAI_MODEL",
            "SUMMARIZATION__OPENAI__MODEL",
        ),
    )
    temperature: float = Field(
        default=0.7,
        validation_alias=AliasChoices(
            "OPENAI_TEMPERATURE",
            "SUMMARIZATION__OPENAI__TEMPERATURE",
        ),
    )
    max_tokens: int = Field(
        default=200,
        validation_alias=AliasChoices(
            "OPENAI_MAX_TOKENS",
            "SUMMARIZATION__OPENAI__MAX_TOKENS",
        ),
    )
    timeout: float = Field(
        default=60.0,
        validation_alias=AliasChoices(
            "OPENAI_TIMEOUT",
            "SUMMARIZATION__OPENAI__TIMEOUT",
        ),
    )


class HuggingFaceProviderSettings(BaseSettings):
    """HuggingFace inference endpoint configuration."""

    model_config = _ENV_CONFIG

    api_base: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "SUMMARIZATION_API_BASE",
            "SUMMARIZATION__HUGGINGFACE__API_BASE",
        ),
    )
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "SUMMARIZATION_API_KEY",
            "SUMMARIZATION__HUGGINGFACE__API_KEY",
        ),
    )
    model: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "HUGGINGFACE_MODEL",
            "SUMMARIZATION__HUGGINGFACE__MODEL",
        ),
    )


class SummarizationSettings(BaseSettings):
    model_config = _ENV_CONFIG

    enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("ENABLE_SUMMARIZATION", "SUMMARIZATION__ENABLED"),
    )
    providers: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["openai"],
        validation_alias=AliasChoices("SUMMARY_PROVIDERS", "SUMMARIZATION__PROVIDERS"),
    )
    language: str = Field(
        default="French",
        validation_alias=AliasChoices("SUMMARY_LANGUAGE", "SUMMARIZATION__LANGUAGE"),
    )

    openai: OpenAIProviderSettings = Field(default_factory=OpenAIProviderSettings)
    huggingface: HuggingFaceProviderSettings = Field(
        default_factory=HuggingFaceProviderSettings
    )

    @field_validator("providers", mode="before")
    @classmethod
    def _parse_providers(cls, value):
        if value is None:
            return ["openai"]
        if isinstance(value, str):
            items = [item.strip() for item in value.split(",") if item.strip()]
            return items or ["openai"]
        if isinstance(value, (list, tuple, set)):
            items = [str(item).strip() for item in value if str(item).strip()]
            return items or ["openai"]
        return ["openai"]


class AppSettings(BaseSettings):
    """Application configuration loaded from environment variables.

    Uses pydantic-settings to support .env and environment overrides.
    """

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL"))
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    extractor: ExtractorSettings = Field(default_factory=ExtractorSettings)
    summarization: SummarizationSettings = Field(default_factory=SummarizationSettings)

    model_config = _ENV_CONFIG


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()

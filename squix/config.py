"""
Squix Configuration

Settings are read from the environment (and a .env file) with pydantic-settings,
grouped by prefix:

    LLM_*       providers, per-role routing, generation defaults
    DATABASE_*  default target database, pool size, timeout, hidden tables
    SQUIX_*     default persona
    LOG_*       logging

Usage:
    from squix.config import get_settings

    settings = get_settings()
    settings.llm.provider_for("sql")   # "google" unless LLM_SQL_PROVIDER is set
    settings.database.url
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["google", "openai"]
PIPELINE_ROLES = ("classifier", "sql", "analysis", "chat")

DEFAULT_COACH_PERSONA_PROMPT = (
    'You are "Ace," an expert AI coach for students preparing for competitive exams. '
    "Your tone is always encouraging, analytical, and focused on helping the student "
    "improve. You never just state data; you interpret it and provide insights. When "
    "you identify a weakness, you frame it constructively and suggest a clear, "
    "actionable next step. When you see a strength, you celebrate it and suggest how "
    "to leverage it."
)

# Migration bookkeeping written by common ORMs and migration tools
DEFAULT_EXCLUDED_TABLES = [
    "_prisma_migrations",
    "alembic_version",
    "django_migrations",
    "schema_migrations",
    "flyway_schema_history",
]


class LLMSettings(BaseSettings):
    """Model providers and per-role routing."""

    default_provider: ProviderName = "google"

    # Per-role overrides; unset roles use default_provider and its main/mini model
    classifier_provider: ProviderName | None = None
    sql_provider: ProviderName | None = None
    analysis_provider: ProviderName | None = None
    chat_provider: ProviderName | None = None
    classifier_model: str | None = None
    sql_model: str | None = None
    analysis_model: str | None = None
    chat_model: str | None = None

    google_api_key: str | None = None
    google_model: str = "gemini-2.5-flash"
    google_model_mini: str = "gemini-2.0-flash"

    openai_api_key: str | None = Field(None, min_length=20)
    openai_model: str = "gpt-4o"
    openai_model_mini: str = "gpt-4o-mini"

    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, gt=0, le=16000)
    timeout: int = Field(default=30, gt=0, description="Request timeout in seconds")

    model_config = SettingsConfigDict(env_prefix="LLM_", env_file=".env", extra="ignore")

    @field_validator("openai_api_key")
    @classmethod
    def validate_openai_key(cls, v: str | None) -> str | None:
        if v and not v.startswith("sk-"):
            raise ValueError("OpenAI API key must start with 'sk-'")
        return v

    @model_validator(mode="after")
    def validate_provider_keys(self) -> "LLMSettings":
        """Every provider some role routes to needs its API key."""
        for provider in {self.provider_for(role) for role in PIPELINE_ROLES}:
            if not getattr(self, f"{provider}_api_key"):
                raise ValueError(
                    f"API key required for {provider} provider. Set LLM_{provider.upper()}_API_KEY"
                )
        return self

    def provider_for(self, role: str) -> ProviderName:
        return getattr(self, f"{role}_provider", None) or self.default_provider

    def model_for(self, role: str) -> str | None:
        """Configured model override for a role, if any."""
        return getattr(self, f"{role}_model", None)


class DatabaseSettings(BaseSettings):
    """Default target database, used by the CLI when no URL is passed."""

    db_type: Literal["postgresql", "mysql"] = Field(
        default="postgresql", validation_alias="DATABASE_TYPE"
    )
    url: str | None = None
    pool_size: int = Field(default=5, gt=0, le=20)
    timeout: int = Field(default=30, gt=0, description="Statement timeout in seconds")
    excluded_tables: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_TABLES))

    model_config = SettingsConfigDict(env_prefix="DATABASE_", env_file=".env", extra="ignore")

    @field_validator("url", mode="before")
    @classmethod
    def empty_url_is_unset(cls, v: str | None) -> str | None:
        return v or None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        if v is None:
            return v
        parsed = urlparse(v)
        scheme = parsed.scheme.split("+")[0].lower()
        if scheme not in {"postgres", "postgresql", "mysql"}:
            raise ValueError("DATABASE_URL must use postgresql or mysql scheme.")
        if not parsed.hostname:
            raise ValueError("DATABASE_URL must include a host.")
        return v


class AssistantSettings(BaseSettings):
    """Persona used when a call does not supply its own system prompt."""

    default_system_prompt: str = DEFAULT_COACH_PERSONA_PROMPT

    model_config = SettingsConfigDict(env_prefix="SQUIX_", env_file=".env", extra="ignore")

    @field_validator("default_system_prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("SQUIX_DEFAULT_SYSTEM_PROMPT cannot be blank")
        return v


class LoggingSettings(BaseSettings):
    """Root logger configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file: Path | None = None

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    def configure(self) -> None:
        handlers: list[logging.Handler] = [logging.StreamHandler()]
        if self.file:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.file))

        logging.basicConfig(
            level=getattr(logging, self.level),
            format=self.format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,
        )


class Settings(BaseSettings):
    """
    Application settings.

    Loading an instance configures logging as a side effect.

    Example:
        >>> get_settings().llm.default_provider
        'google'
    """

    environment: Literal["development", "staging", "production"] = "development"
    app_name: str = "Squix"

    llm: LLMSettings = Field(default_factory=LLMSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    assistant: AssistantSettings = Field(default_factory=AssistantSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @model_validator(mode="after")
    def configure_logging(self) -> "Settings":
        self.logging.configure()
        logging.getLogger(__name__).info(
            f"Settings loaded for {self.app_name} ({self.environment})",
            extra={
                "environment": self.environment,
                "llm_provider": self.llm.default_provider,
                "database_type": self.database.db_type,
            },
        )
        return self


_DOTENV_PATH = Path.cwd() / ".env"


def _apply_dotenv_precedence() -> None:
    """
    Let .env values win over the process environment.

    Set SQUIX_ENV_SOURCE=environment to keep the process environment
    authoritative.
    """
    env_source = os.getenv("SQUIX_ENV_SOURCE", "dotenv").lower()
    if env_source not in {"dotenv", "envfile", "file"}:
        return
    if _DOTENV_PATH.exists():
        load_dotenv(_DOTENV_PATH, override=True)


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    _apply_dotenv_precedence()
    return Settings()


def clear_settings_cache() -> None:
    """Forget cached settings so the next get_settings() reloads them."""
    get_settings.cache_clear()

"""Application configuration management."""

from typing import Literal

from pydantic import AnyUrl, ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # HH.ru OAuth
    hh_client_id: str
    hh_client_secret: str
    hh_resume_id: str | None = Field(
        default=None,
        description="Resume used for applications; first resume on HH.ru if empty",
    )
    hh_user_agent: str = "jobpilot/1.0 (jobpilot@example.com)"

    # LLM Configuration (any OpenAI-compatible endpoint)
    llm_provider: Literal["openrouter", "ollama"] = "openrouter"
    llm_base_url: str = "https://openrouter.ai/api/v1"
    llm_api_key: str = ""
    llm_model: str = "google/gemini-2.0-flash-001"
    llm_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "qwen3:14b"

    # Database
    database_url: AnyUrl

    # Scheduler loop
    scheduler_enabled: bool = True
    scheduler_tick_seconds: int = Field(default=30, ge=1)
    apply_delay_seconds: float = Field(default=3.0, ge=0.0)
    query_delay_seconds: float = Field(default=2.0, ge=0.0)
    max_queries_per_cycle: int = Field(default=5, ge=1, le=50)

    # Search defaults, used until the settings row is created
    search_text: str | None = None
    search_interval_minutes: int = Field(default=60, ge=1)
    min_ai_score: int = Field(default=70, ge=0, le=100)
    auto_apply_enabled: bool = True
    auto_tags_enabled: bool = True

    # Contacts used when the contact directory is empty
    default_telegram: str = "https://t.me/username"
    default_email: str = "email@example.com"

    log_level: str = "INFO"

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()

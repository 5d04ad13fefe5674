"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Storage Configuration
    data_dir: Path = Path("data/state")
    config_dir: Path = Path("config/local")

    # LLM request defaults
    request_timeout_seconds: float = 60.0
    connectivity_timeout_seconds: float = 15.0
    anthropic_default_max_tokens: int = 4096

    # OpenRouter attribution headers
    openrouter_referer: str = "https://github.com/arxivlearner"
    openrouter_title: str = "ArxivLearner"

    # Paper chat: context budget in characters (~128k tokens * 4 chars/token)
    chat_context_window_chars: int = Field(default=512_000, gt=0)
    chars_per_token: int = Field(default=4, gt=0)

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logs")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PAPER_LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        if value in (None, ""):
            return "INFO"
        return str(value).strip().upper()


# Global settings instance
settings = Settings()

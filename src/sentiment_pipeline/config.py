"""
Configuration settings for the Post Sentiment Pipeline.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Post Sentiment Pipeline"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # development | production

    # === Sources ===
    SOURCES: list[str] = ["FighterJets", "aviation", "WarplanePorn", "hoggit"]
    SOURCE_FETCH_LIMIT: int = 10  # posts per source
    SOURCE_BASE_URL: str = "https://old.reddit.com"
    SOURCE_USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    SOURCE_TIMEOUT: int = 15  # seconds
    SOURCE_POLITENESS_DELAY_MS: int = 1000
    MIN_CONTENT_LENGTH: int = 10  # content must be strictly longer than this

    # === LLM ===
    LLM_PROVIDER: str = "openai"  # openai | ollama
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4o-mini"
    OLLAMA_BASE_URL: str = "http://ollama:11434"
    OLLAMA_MODEL: str = "qwen2.5:7b"
    LLM_TIMEOUT: int = 120  # seconds
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 4096
    CLASSIFICATION_TOPIC: str = "military aviation and fighter jets"

    # === Batch Classification ===
    BATCH_SIZE: int = 40
    CONTENT_CHAR_LIMIT: int = 1000  # per post, inside the batch prompt
    SETTLE_DELAY_MS: int = 2000  # between ingestion and classification

    # === Retry & Backoff ===
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_INITIAL_DELAY_MS: int = 1000
    RETRY_MAX_DELAY_MS: int = 10000
    CLASSIFIER_RETRY_INITIAL_DELAY_MS: int = 2000

    # === Store ===
    STORE_BACKEND: str = "redis"  # redis | memory
    REDIS_URL: str = "redis://redis:6379/0"
    REDIS_MAX_CONNECTIONS: int = 50
    REDIS_KEY_PREFIX: str = "sentiment"

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


@lru_cache()
def get_settings() -> Settings:
    """Settings instance for the application edge (ASGI app, scripts)."""
    return Settings()

"""Shared test fixtures and configuration for all tests.

Provides settings, record stores and a recording sleep so backoff,
politeness and settle delays never actually wait.
"""

from unittest.mock import AsyncMock

import pytest

from sentiment_pipeline.config import Settings
from sentiment_pipeline.persistence.lifecycle import LifecycleStore
from sentiment_pipeline.persistence.memory_store import InMemoryItemStore


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing."""
    return Settings(
        # === Application ===
        APP_NAME="Post Sentiment Pipeline (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Sources ===
        SOURCES=["FighterJets", "aviation", "WarplanePorn", "hoggit"],
        SOURCE_FETCH_LIMIT=10,

        # === LLM ===
        LLM_PROVIDER="openai",
        OPENAI_API_KEY="sk-test",
        OPENAI_BASE_URL="http://llm.test/v1",

        # === Store ===
        STORE_BACKEND="memory",
        REDIS_URL="redis://localhost:6379/0",
        REDIS_MAX_CONNECTIONS=10,

        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def recording_sleep() -> AsyncMock:
    """Stand-in for asyncio.sleep; inspect ``await_args_list`` for delays (seconds)."""
    return AsyncMock(return_value=None)


@pytest.fixture
def memory_store() -> InMemoryItemStore:
    return InMemoryItemStore()


@pytest.fixture
def lifecycle(memory_store: InMemoryItemStore) -> LifecycleStore:
    return LifecycleStore(memory_store)

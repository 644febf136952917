"""Shared fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from til.config import AppConfig, StoreConfig
from til.logging import configure_logger
from til.store import FactStore


@pytest.fixture(autouse=True)
def log_dir(tmp_path: Path) -> Path:
    """Send structured logs to a temporary directory."""
    path = tmp_path / "logs"
    configure_logger(path)
    return path


@pytest.fixture
def store_config() -> StoreConfig:
    return StoreConfig(url="https://example.supabase.co", key="test-key")


@pytest.fixture
def app_config(store_config: StoreConfig) -> AppConfig:
    return AppConfig(store=store_config, telegram_token="test-token")


@pytest.fixture
def mock_store() -> AsyncMock:
    """A FactStore double whose coroutines are AsyncMocks."""
    return AsyncMock(spec=FactStore)

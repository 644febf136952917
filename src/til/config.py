"""Application configuration loaded from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_FETCH_LIMIT = 1000
DEFAULT_TABLE = "facts"


@dataclass
class StoreConfig:
    """Connection settings for the remote fact table."""

    url: str = ""
    key: str = ""
    table: str = DEFAULT_TABLE
    fetch_limit: int = DEFAULT_FETCH_LIMIT
    timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.fetch_limit < 1:
            raise ValueError("fetch_limit must be at least 1")

    @property
    def rest_url(self) -> str:
        """Base URL of the PostgREST API."""
        return self.url.rstrip("/") + "/rest/v1"


@dataclass
class AppConfig:
    """Top-level configuration shared by the bot and the CLI."""

    store: StoreConfig
    telegram_token: str | None = None
    max_rendered_facts: int = 20
    session_ttl: float = 3600  # 1 hour
    log_dir: Path | None = None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load configuration from environment variables."""
        store = StoreConfig(
            url=os.getenv("SUPABASE_URL", ""),
            key=os.getenv("SUPABASE_KEY", ""),
            table=os.getenv("TIL_FACTS_TABLE", DEFAULT_TABLE),
            fetch_limit=int(os.getenv("TIL_FETCH_LIMIT", str(DEFAULT_FETCH_LIMIT))),
            timeout=float(os.getenv("TIL_REQUEST_TIMEOUT", "10")),
        )
        log_dir = os.getenv("TIL_LOG_DIR")

        return cls(
            store=store,
            telegram_token=os.getenv("TELEGRAM_TOKEN"),
            max_rendered_facts=int(os.getenv("TIL_MAX_RENDERED_FACTS", "20")),
            session_ttl=float(os.getenv("TIL_SESSION_TTL", "3600")),
            log_dir=Path(log_dir) if log_dir else None,
        )

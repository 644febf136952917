"""Per-chat coordinators and their lifecycle."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from ..coordinator import Coordinator
from ..store import FactStore

logger = logging.getLogger(__name__)

AlertFactory = Callable[[str], Callable[[str], Awaitable[None]]]


@dataclass
class Session:
    """State for a single chat."""

    chat_id: str
    coordinator: Coordinator
    created_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)
    mounted: bool = False
    form_message_id: int | None = None

    def touch(self) -> None:
        """Update last activity timestamp."""
        self.last_activity = time.time()

    def is_expired(self, ttl_seconds: float) -> bool:
        """Check if session has expired based on TTL."""
        return (time.time() - self.last_activity) > ttl_seconds


@dataclass
class SessionConfig:
    """Configuration for session manager."""

    ttl_seconds: float = 3600  # 1 hour
    cleanup_interval: float = 300  # 5 minutes


class SessionManager:
    """Creates one Coordinator per chat and expires idle ones.

    Sessions live in memory only; a restarted bot starts every chat with a
    fresh fetch.
    """

    def __init__(
        self,
        store: FactStore,
        config: SessionConfig | None = None,
        alert_factory: AlertFactory | None = None,
    ) -> None:
        self.store = store
        self.config = config or SessionConfig()
        self.alert_factory = alert_factory
        self._sessions: dict[str, Session] = {}
        self._cleanup_task: asyncio.Task | None = None

    def __contains__(self, chat_id: str) -> bool:
        return chat_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def get_session(self, chat_id: str) -> Session:
        """Get or create a session for chat_id."""
        if chat_id not in self._sessions:
            alert = self.alert_factory(chat_id) if self.alert_factory else None
            coordinator = Coordinator(self.store, alert=alert, chat_id=chat_id)
            self._sessions[chat_id] = Session(chat_id=chat_id, coordinator=coordinator)
            logger.debug("Created session for chat %s", chat_id)

        session = self._sessions[chat_id]
        session.touch()
        return session

    async def get_mounted(self, chat_id: str) -> Session:
        """Get a session, running the initial fetch the first time."""
        session = self.get_session(chat_id)
        if not session.mounted:
            session.mounted = True
            await session.coordinator.mount()
        return session

    def destroy_session(self, chat_id: str) -> None:
        """Forget a chat's session."""
        self._sessions.pop(chat_id, None)

    def cleanup_expired(self) -> int:
        """Clean up expired sessions. Returns count of cleaned sessions."""
        expired = [
            chat_id
            for chat_id, session in self._sessions.items()
            if session.is_expired(self.config.ttl_seconds)
        ]
        for chat_id in expired:
            self.destroy_session(chat_id)
        return len(expired)

    async def _cleanup_loop(self) -> None:
        """Background task for periodic cleanup."""
        while True:
            try:
                await asyncio.sleep(self.config.cleanup_interval)
                count = self.cleanup_expired()
                if count:
                    logger.info("Expired %d idle session(s)", count)
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Session cleanup failed")

    def start_cleanup_task(self) -> None:
        """Start the background cleanup task."""
        if self._cleanup_task is None or self._cleanup_task.done():
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())

    def stop_cleanup_task(self) -> None:
        """Stop the background cleanup task."""
        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()

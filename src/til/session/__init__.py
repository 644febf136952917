"""Per-chat session management."""

from .manager import Session, SessionConfig, SessionManager

__all__ = ["Session", "SessionConfig", "SessionManager"]

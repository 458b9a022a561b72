"""Data store implementations."""

from .session_store import JsonSessionStore, SessionStoreError

__all__ = ["JsonSessionStore", "SessionStoreError"]

"""Server-side login sessions.

A ``SessionStore`` is created with the application and lives on
``app.state``; nothing is persisted, so every session is lost on restart.
"""

import logging
import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request

logger = logging.getLogger(__name__)


@dataclass
class SessionEntry:
    user_id: str
    expires_at: float


class SessionStore:
    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, SessionEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def create(self, user_id: str) -> str:
        self.purge_expired()
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._entries[token] = SessionEntry(user_id=user_id, expires_at=self._clock() + self.ttl_seconds)
        return token

    def get(self, token: str | None) -> str | None:
        if not token:
            return None
        with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[token]
                return None
            return entry.user_id

    def destroy(self, token: str | None) -> bool:
        if not token:
            return False
        with self._lock:
            return self._entries.pop(token, None) is not None

    def destroy_user(self, user_id: str) -> int:
        """Drop every session belonging to ``user_id``."""
        with self._lock:
            tokens = [token for token, entry in self._entries.items() if entry.user_id == user_id]
            for token in tokens:
                del self._entries[token]
        return len(tokens)

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [token for token, entry in self._entries.items() if entry.expires_at <= now]
            for token in expired:
                del self._entries[token]
        if expired:
            logger.debug("Purged %d expired session(s)", len(expired))
        return len(expired)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions

"""Bearer session tokens.

A session maps an opaque token to the email that logged in. Tokens come from
``secrets`` and are never derived from the email or the clock. Entries expire
after a fixed time to live and can be removed explicitly on logout.
"""

import secrets
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Callable

from backend.core import config

TOKEN_BYTES = 32


def new_session_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore(ABC):
    """Storage for token to email mappings."""

    @abstractmethod
    def get(self, token: str) -> str | None:
        """Return the email for ``token``, or None if unknown or expired."""

    @abstractmethod
    def put(self, token: str, email: str) -> None:
        """Store ``token`` for ``email``, replacing any previous entry."""

    @abstractmethod
    def delete(self, token: str) -> bool:
        """Remove ``token``. Returns True if a live entry was removed."""


class InMemorySessionStore(SessionStore):
    """Process-local session store. Entries are lost on restart."""

    def __init__(
        self,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.ttl = ttl if ttl is not None else timedelta(minutes=config.SESSION_TTL_MINUTES)
        self._clock = clock
        self._entries: dict[str, tuple[str, datetime]] = {}
        self._lock = Lock()

    def get(self, token: str) -> str | None:
        with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            email, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[token]
                return None
            return email

    def put(self, token: str, email: str) -> None:
        with self._lock:
            self._entries[token] = (email, self._clock() + self.ttl)

    def delete(self, token: str) -> bool:
        with self._lock:
            entry = self._entries.pop(token, None)
        return entry is not None and entry[1] > self._clock()

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [token for token, (_, expires_at) in self._entries.items() if expires_at <= now]
            for token in expired:
                del self._entries[token]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

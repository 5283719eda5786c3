# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from threading import Lock
from uuid import UUID

from accounts.domain.users.entities import Session
from accounts.domain.users.repositories import SessionStore
from accounts.shared.logging import logger


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InMemorySessionStore(SessionStore):
    """Process-wide token table. Expired entries are dropped lazily on lookup."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = Lock()
        self._clock = clock

    def add_session(self, token: str, user_id: UUID, expires_at: datetime) -> None:
        with self._lock:
            self._sessions[token] = Session(token=token, user_id=user_id, expires_at=expires_at)

    def try_get_session(self, token: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None

            if session.is_expired(self._clock()):
                del self._sessions[token]
                logger.debug(f"sessions: evicted expired session user_id={session.user_id}")
                return None

            return session

    def remove_session(self, token: str) -> bool:
        if not token or not token.strip():
            return False
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def get_all_sessions(self) -> list[Session]:
        with self._lock:
            return list(self._sessions.values())

    def has_active_session_for_user(self, user_id: UUID) -> bool:
        with self._lock:
            now = self._clock()
            return any(
                session.user_id == user_id and not session.is_expired(now)
                for session in self._sessions.values()
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

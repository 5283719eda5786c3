# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from accounts.application.services.account_service import AccountService
from accounts.domain.users.exceptions import ActiveSessionExistsError, InvalidCredentialsError
from accounts.domain.users.repositories import SessionStore
from accounts.shared.logging import logger

DEFAULT_SESSION_TTL = timedelta(hours=1)


@dataclass(slots=True, frozen=True)
class LoginResult:
    token: str
    user_id: UUID
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LoginUserUseCase:
    def __init__(
        self,
        *,
        accounts: AccountService,
        sessions: SessionStore,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = _utcnow,
        token_factory: Callable[[], str] = lambda: secrets.token_urlsafe(48),
    ) -> None:
        self._accounts = accounts
        self._sessions = sessions
        self._ttl = ttl
        self._clock = clock
        self._token_factory = token_factory
        # serialises the active-session check with the insert that follows it
        self._issue_lock = threading.Lock()

    def execute(self, username: str, password: str) -> LoginResult:
        user = self._accounts.validate_credentials(username, password)
        if user is None:
            logger.info(f"auth.login: invalid credentials username={username}")
            raise InvalidCredentialsError()

        with self._issue_lock:
            current = self._current_session_expiry(user.id)
            if current is not None:
                logger.info(
                    f"auth.login: refused, session active user_id={user.id} "
                    f"until={current.isoformat()}"
                )
                raise ActiveSessionExistsError(current)

            token = self._token_factory()
            expires_at = self._clock() + self._ttl
            self._sessions.add_session(token, user.id, expires_at)

        logger.info(
            f"auth.login: issued session user_id={user.id} exp={expires_at.isoformat()} "
            f"tok={token[:8]}…"
        )
        return LoginResult(token=token, user_id=user.id, expires_at=expires_at)

    def _current_session_expiry(self, user_id: UUID) -> datetime | None:
        if not self._sessions.has_active_session_for_user(user_id):
            return None
        now = self._clock()
        expiries = [
            session.expires_at
            for session in self._sessions.get_all_sessions()
            if session.user_id == user_id and not session.is_expired(now)
        ]
        return max(expiries, default=None)

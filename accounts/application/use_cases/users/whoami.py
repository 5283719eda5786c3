# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from accounts.application.services.account_service import AccountService
from accounts.domain.users.repositories import SessionStore
from accounts.shared.errors.base import UnauthorizedError


@dataclass(slots=True, frozen=True)
class Identity:
    user_id: UUID
    username: str | None


class WhoAmIUseCase:
    def __init__(self, *, accounts: AccountService, sessions: SessionStore) -> None:
        self._accounts = accounts
        self._sessions = sessions

    def execute(self, token: str) -> Identity:
        session = self._sessions.try_get_session(token) if token else None
        if session is None:
            raise UnauthorizedError()
        return Identity(
            user_id=session.user_id,
            username=self._accounts.get_username_by_id(session.user_id),
        )

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case for revoking session tokens."""

from __future__ import annotations

from accounts.domain.users.repositories import SessionStore
from accounts.shared.logging import logger


class LogoutUserUseCase:
    def __init__(self, *, sessions: SessionStore) -> None:
        self._sessions = sessions

    def execute(self, token: str) -> bool:
        """Return True when a live session was removed."""

        removed = self._sessions.remove_session(token)
        logger.info(f"auth.logout: removed={removed}")
        return removed

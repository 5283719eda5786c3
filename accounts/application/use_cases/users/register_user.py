# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from uuid import UUID

from accounts.application.services.account_service import AccountService
from accounts.domain.users.entities import CreateUserCommand


class RegisterUserUseCase:
    """Public self-registration; never grants admin."""

    def __init__(self, *, accounts: AccountService) -> None:
        self._accounts = accounts

    def execute(self, command: CreateUserCommand) -> UUID:
        return self._accounts.create_user(command)

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from uuid import UUID

from accounts.application.services.account_service import AccountService
from accounts.domain.users.entities import CreateUserCommand
from accounts.shared.logging import logger


class CreateAdminUserUseCase:
    def __init__(self, *, accounts: AccountService) -> None:
        self._accounts = accounts

    def execute(self, command: CreateUserCommand, caller_token: str | None) -> UUID:
        caller_is_admin = self._accounts.is_admin_token(caller_token)
        if not caller_is_admin:
            logger.warning(f"admin.create: refused for non-admin caller username={command.username}")
        return self._accounts.create_admin_user(command, caller_is_admin=caller_is_admin)

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from http import HTTPStatus

from accounts.shared.errors.base import (
    ConfigurationError,
    ConflictError,
    NotFoundError,
    UnauthorizedError,
)


class UsernameTakenError(ConflictError):
    default_code = "username_taken"

    def __init__(self, username: str) -> None:
        super().__init__(context={"username": username})


class ActiveSessionExistsError(ConflictError):
    default_code = "active_session_exists"

    def __init__(self, expires_at: datetime) -> None:
        super().__init__(context={"expires_at": expires_at.isoformat()})
        self.expires_at = expires_at


class InvalidCredentialsError(UnauthorizedError):
    default_code = "invalid_credentials"


class AdminPrivilegeRequiredError(UnauthorizedError):
    default_code = "admin_privilege_required"
    default_status = HTTPStatus.FORBIDDEN


class SessionNotFoundError(NotFoundError):
    default_code = "session_not_found"


class AdminCredentialsMissingError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__(
            "admin_credentials_missing",
            context={"required": ["ADMIN_USERNAME", "ADMIN_PASSWORD"]},
        )

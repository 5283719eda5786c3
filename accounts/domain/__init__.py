# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users.entities import (
    Address,
    City,
    ContactInfo,
    CreateUserCommand,
    LoginInformation,
    Session,
    User,
    UserType,
)
from .users.exceptions import (
    ActiveSessionExistsError,
    AdminCredentialsMissingError,
    AdminPrivilegeRequiredError,
    InvalidCredentialsError,
    SessionNotFoundError,
    UsernameTakenError,
)

__all__ = [
    "Address",
    "City",
    "ContactInfo",
    "CreateUserCommand",
    "LoginInformation",
    "Session",
    "User",
    "UserType",
    "ActiveSessionExistsError",
    "AdminCredentialsMissingError",
    "AdminPrivilegeRequiredError",
    "InvalidCredentialsError",
    "SessionNotFoundError",
    "UsernameTakenError",
]

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .create_admin_user import CreateAdminUserUseCase
from .login_user import LoginResult, LoginUserUseCase
from .logout_user import LogoutUserUseCase
from .register_user import RegisterUserUseCase
from .whoami import Identity, WhoAmIUseCase

__all__ = [
    "CreateAdminUserUseCase",
    "Identity",
    "LoginResult",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "RegisterUserUseCase",
    "WhoAmIUseCase",
]

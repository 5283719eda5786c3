# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from accounts.application.services.account_service import AccountService
from accounts.application.use_cases.users.create_admin_user import CreateAdminUserUseCase
from accounts.application.use_cases.users.login_user import LoginUserUseCase
from accounts.application.use_cases.users.logout_user import LogoutUserUseCase
from accounts.application.use_cases.users.register_user import RegisterUserUseCase
from accounts.application.use_cases.users.whoami import WhoAmIUseCase
from accounts.domain.users.exceptions import SessionNotFoundError
from accounts.infrastructure.audit import AuditAction, audit_log
from accounts.interfaces.http.dto.account import (
    CreateUserResponseDTO,
    LoginRequestDTO,
    OkDTO,
    RegisterUserRequestDTO,
    SeedAdminRequestDTO,
    SessionTokenDTO,
    WhoAmIResponseDTO,
)
from accounts.interfaces.http.session_gate import extract_bearer_token
from accounts.shared.errors.base import AppError
from accounts.shared.errors.validation import raise_validation_error
from accounts.shared.logging import logger
from accounts.shared.middleware.rate_limit import InMemoryRateLimiter, rate_limit
from accounts.shared.middleware.request_logger import client_ip

# Reachable without a session token.
PUBLIC_ENDPOINTS = (
    "account.create_user",
    "account.login",
    "account.logout",
    "account.seed_admin",
)


def _request_token() -> str:
    return extract_bearer_token(request.headers.get("Authorization"))


class AccountController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        create_admin_use_case: CreateAdminUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        whoami_use_case: WhoAmIUseCase,
        accounts: AccountService,
        login_limiter: InMemoryRateLimiter | None = None,
        create_limiter: InMemoryRateLimiter | None = None,
    ) -> None:
        self._register_use_case = register_use_case
        self._create_admin_use_case = create_admin_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._whoami_use_case = whoami_use_case
        self._accounts = accounts
        self._login_limiter = login_limiter
        self._create_limiter = create_limiter

    def create_user(self) -> tuple[Response, int]:
        try:
            dto = RegisterUserRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user_id = self._register_use_case.execute(dto.to_command())

        audit_log(
            AuditAction.REGISTER,
            user_id=user_id,
            ip_address=client_ip(),
            details={"username": dto.username},
            success=True,
        )
        payload = CreateUserResponseDTO(user_id=user_id).model_dump(mode="json")
        return jsonify(payload), 200

    def create_admin(self) -> tuple[Response, int]:
        try:
            dto = RegisterUserRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user_id = self._create_admin_use_case.execute(
            dto.to_command(), caller_token=getattr(g, "token", None)
        )

        audit_log(
            AuditAction.ADMIN_CREATED,
            user_id=user_id,
            ip_address=client_ip(),
            details={"username": dto.username, "created_by": getattr(g, "user_id", None)},
            success=True,
        )
        payload = CreateUserResponseDTO(user_id=user_id).model_dump(mode="json")
        return jsonify(payload), 200

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = client_ip()

        try:
            result = self._login_use_case.execute(dto.username, dto.password)
        except AppError as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                user_id=None,
                ip_address=ip_address,
                details={"username": dto.username, "error": exc.code},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=result.user_id,
            ip_address=ip_address,
            details={"username": dto.username},
            success=True,
        )
        payload = SessionTokenDTO(
            token=result.token,
            user_id=result.user_id,
            expires_at=result.expires_at,
        ).model_dump(mode="json")
        return jsonify(payload), 200

    def logout(self) -> tuple[Response, int]:
        token = _request_token()
        if not self._logout_use_case.execute(token):
            raise SessionNotFoundError()

        audit_log(
            AuditAction.LOGOUT,
            user_id=None,
            ip_address=client_ip(),
            details={},
            success=True,
        )
        return jsonify(OkDTO().model_dump()), 200

    def whoami(self) -> tuple[Response, int]:
        identity = self._whoami_use_case.execute(getattr(g, "token", None) or _request_token())
        payload = WhoAmIResponseDTO(
            user_id=identity.user_id,
            username=identity.username,
        ).model_dump(mode="json")
        return jsonify(payload), 200

    def seed_admin(self) -> tuple[Response, int]:
        try:
            dto = SeedAdminRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        token = dto.token or _request_token() or None
        user_id = self._accounts.seed_admin_user(token)

        if user_id is not None:
            audit_log(
                AuditAction.ADMIN_SEEDED,
                user_id=user_id,
                ip_address=client_ip(),
                success=True,
            )
        logger.info(f"account.seed_admin: created={user_id is not None}")
        return jsonify({"ok": True, "created": user_id is not None}), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("account", __name__, url_prefix="/api/account")
        bp.add_url_rule(
            "/create",
            endpoint="create_user",
            view_func=rate_limit(self._create_limiter)(self.create_user),
            methods=["POST"],
        )
        bp.add_url_rule("/admin", endpoint="create_admin", view_func=self.create_admin, methods=["POST"])
        bp.add_url_rule(
            "/login",
            endpoint="login",
            view_func=rate_limit(self._login_limiter)(self.login),
            methods=["POST"],
        )
        bp.add_url_rule("/logout", endpoint="logout", view_func=self.logout, methods=["DELETE", "POST"])
        bp.add_url_rule("/whoami", endpoint="whoami", view_func=self.whoami, methods=["GET"])
        bp.add_url_rule("/seed-admin", endpoint="seed_admin", view_func=self.seed_admin, methods=["POST"])
        return bp

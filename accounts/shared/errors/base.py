# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Error hierarchy shared by every layer.

Each error carries a machine-readable ``code``, the HTTP status it maps to and
an optional ``context`` mapping that is echoed back in the JSON body.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, ClassVar


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.code}
        if self.context:
            body["context"] = dict(self.context)
        return body


class DomainError(AppError):
    """Business-rule failure; subclasses pin ``default_code`` and ``default_status``."""

    default_code: ClassVar[str] = "domain_error"
    default_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code or self.default_code,
            status=status or self.default_status,
            context=context,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, status=status, context=context)


class ValidationError(AppError):
    def __init__(self, code: str = "validation_error", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(code=code, status=HTTPStatus.UNPROCESSABLE_ENTITY, context=context)


class ConflictError(DomainError):
    default_code = "conflict"
    default_status = HTTPStatus.CONFLICT


class UnauthorizedError(DomainError):
    default_code = "unauthorized"
    default_status = HTTPStatus.UNAUTHORIZED


class NotFoundError(DomainError):
    default_code = "not_found"
    default_status = HTTPStatus.NOT_FOUND


class OperationFailedError(InfrastructureError):
    """Fault raised inside a unit of work; the original exception is ``__cause__``."""

    def __init__(self, operation: str, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__("operation_failed", context={"operation": operation, **(context or {})})


class ConfigurationError(InfrastructureError):
    def __init__(self, code: str = "configuration_error", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(code, context=context)

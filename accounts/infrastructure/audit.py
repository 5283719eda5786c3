# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Audit trail for account and session events.

Events go to the application logger with an ``AUDIT`` prefix so they can be
filtered out of the regular stream. Detail keys that look like credentials or
contact data are masked before anything is written.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from accounts.shared.logging import logger


class AuditAction(StrEnum):
    REGISTER = "register"
    ADMIN_CREATED = "admin_created"
    ADMIN_SEEDED = "admin_seeded"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"


_MASKED_KEY_PARTS = ("password", "token", "secret", "email", "phone")


def _mask(details: dict[str, Any]) -> dict[str, Any]:
    return {
        key: "***" if any(part in key.lower() for part in _MASKED_KEY_PARTS) else value
        for key, value in details.items()
    }


def audit_log(
    action: AuditAction,
    *,
    user_id: object | None = None,
    ip_address: str | None = None,
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    line = f"AUDIT {action} ok={success} user={user_id} ip={ip_address}"
    if details:
        line += f" details={_mask(details)}"

    if success:
        logger.info(line)
    else:
        logger.warning(line)


__all__ = ["AuditAction", "audit_log"]

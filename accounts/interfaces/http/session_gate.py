# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Request gate that admits only callers holding a live session token.

Endpoints listed as public skip the gate. Everything else needs an
``Authorization`` header carrying a token the session store still knows
about, either bare or as ``Bearer <token>``. A missing header answers 400,
an unknown or expired token 401. Admitted requests see ``g.user_id`` and
``g.token``.
"""

from __future__ import annotations

from collections.abc import Iterable

from flask import Flask, g, jsonify, request

from accounts.domain.users.repositories import SessionStore
from accounts.shared.logging import logger


def extract_bearer_token(header_value: str | None) -> str:
    if not header_value:
        return ""
    value = header_value.strip()
    if value[:7].lower() == "bearer ":
        return value[7:].strip()
    return value


def configure_session_gate(
    app: Flask,
    *,
    sessions: SessionStore,
    public_endpoints: Iterable[str],
) -> None:
    exempt = frozenset(public_endpoints)

    @app.before_request
    def _require_session():
        if request.method == "OPTIONS" or request.endpoint is None:
            return None
        if request.endpoint in exempt or request.endpoint == "static":
            return None

        header = request.headers.get("Authorization")
        if header is None:
            logger.info(f"session_gate: missing Authorization on {request.method} {request.path}")
            return jsonify({"error": "authorization_required"}), 400

        token = extract_bearer_token(header)
        session = sessions.try_get_session(token) if token else None
        if session is None:
            logger.warning(
                f"session_gate: rejected token on {request.method} {request.path}"
            )
            return jsonify({"error": "unauthorized"}), 401

        g.user_id = session.user_id
        g.token = token
        return None


__all__ = ["configure_session_gate", "extract_bearer_token"]

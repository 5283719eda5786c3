# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify
from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from accounts.shared.logging import logger


class MiscController:
    def __init__(self, *, engine: Engine) -> None:
        self._engine = engine

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        return bp

    def check_database(self) -> bool:
        with self._engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True

    def health(self):
        status: dict[str, object] = {"status": "ok"}
        try:
            self.check_database()
            status["database"] = "ok"
        except SQLAlchemyError as exc:
            logger.error(f"health: database check failed: {type(exc).__name__}")
            status["status"] = "degraded"
            status["database"] = "error"
            return jsonify(status), 503
        return jsonify(status), 200

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from accounts.shared.logging import logger

from .base import AppError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error.to_dict()), error.status


def _describe_request() -> str:
    return f"{request.method} {request.path}"


def register_error_handler(
    app: Flask,
    *,
    debug_mode: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:
    """Map ``AppError`` subclasses to their JSON body and hide everything else."""

    @app.errorhandler(AppError)
    def _on_app_error(exc: AppError):
        if exc.status < HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.warning(f"errors: {exc.code} ({int(exc.status)}) on {_describe_request()}")
        else:
            cause = exc.__cause__
            cause_name = type(cause).__name__ if cause is not None else None
            logger.error(f"errors: {exc.code} on {_describe_request()} cause={cause_name}: {cause}")
        return handle_app_error(exc)

    # werkzeug already renders 404/405 and friends
    @app.errorhandler(HTTPException)
    def _on_http_exception(exc: HTTPException):
        return exc

    @app.errorhandler(Exception)
    def _on_unexpected(exc: Exception):
        if debug_mode:
            logger.exception(
                f"errors: unhandled {type(exc).__name__} on {_describe_request()} "
                f"user={g.get('user_id')} args={dict(request.args)} bytes={len(request.data)}"
            )
        else:
            logger.error(f"errors: unhandled {type(exc).__name__} on {_describe_request()}")
        return jsonify({"error": "internal_error"}), default_status

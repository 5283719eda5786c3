# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from time import perf_counter

from flask import Flask, Response, g, request

from accounts.shared.logging import clear_correlation_id, logger, set_correlation_id

_HIDDEN_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})
_REQUEST_ID_HEADER = "X-Request-ID"


def client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr or "unknown"


def _visible_headers() -> dict[str, str]:
    return {
        name: ("<hidden>" if name.lower() in _HIDDEN_HEADERS else value)
        for name, value in request.headers.items()
    }


def configure_request_logging(app: Flask, *, debug_mode: bool = False) -> None:
    """Tag each request with a correlation id and log its start and outcome."""

    @app.before_request
    def _start() -> None:
        request_id = request.headers.get(_REQUEST_ID_HEADER) or secrets.token_hex(6)
        set_correlation_id(request_id)
        g.request_id = request_id
        g.request_started = perf_counter()

        if debug_mode:
            logger.debug(
                f"http: -> {request.method} {request.path} ip={client_ip()} "
                f"headers={_visible_headers()} bytes={request.content_length or 0}"
            )
        else:
            logger.info(f"http: -> {request.method} {request.path} ip={client_ip()}")

    @app.after_request
    def _finish(response: Response) -> Response:
        elapsed_ms = (perf_counter() - g.get("request_started", perf_counter())) * 1000
        response.headers.setdefault(_REQUEST_ID_HEADER, g.get("request_id", "-"))
        logger.info(
            f"http: <- {request.method} {request.path} status={response.status_code} "
            f"ms={elapsed_ms:.1f} user={g.get('user_id')}"
        )
        return response

    @app.teardown_request
    def _cleanup(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"http: {type(exc).__name__} escaped {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["client_ip", "configure_request_logging"]

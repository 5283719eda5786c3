# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import importlib
import os
from typing import Any, Protocol, cast

from flask import Flask

from accounts.infrastructure.container import Container
from accounts.interfaces.http.controllers.account_controller import PUBLIC_ENDPOINTS
from accounts.interfaces.http.session_gate import configure_session_gate
from accounts.shared.logging import logger, setup_logging
from accounts.shared.middleware.error_handler import configure_error_handling
from accounts.shared.middleware.request_logger import configure_request_logging


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)


def create_app(container: Container | None = None) -> Flask:
    container = container or Container()
    config = container.config

    setup_logging(config.log_level, debug_mode=config.debug_logging)

    inserted = container.init_database()
    logger.info(f"db.bootstrap: user types ready (inserted={inserted})")

    if config.admin.seed_on_startup:
        # fails start-up when no admin exists and no credentials are configured
        container.account_service.ensure_admin_seeded()

    app = Flask(__name__)
    app.config.update(SECRET_KEY=config.secret_key)
    app.extensions["accounts.container"] = container

    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    CORS(app, **cors_kwargs)

    configure_session_gate(
        app,
        sessions=container.session_store,
        public_endpoints=(*PUBLIC_ENDPOINTS, "misc.health"),
    )

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.account_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")
        return resp

    logger.info("Flask app initialized")
    return app


def main() -> None:
    app = create_app()
    port = int(os.environ.get("PORT", "5000"))
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()

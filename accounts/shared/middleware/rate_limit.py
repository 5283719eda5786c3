# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
import time
from collections import deque
from collections.abc import Callable
from functools import wraps
from threading import Lock

from flask import jsonify, request

from accounts.shared.logging import logger
from accounts.shared.middleware.request_logger import client_ip


class InMemoryRateLimiter:
    """Sliding-window request counter keyed by caller."""

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = max(1, int(limit))
        self.window = max(0.1, float(window_seconds))
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = Lock()

    def allow(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            hits = self._hits.setdefault(key, deque())
            while hits and now - hits[0] > self.window:
                hits.popleft()
            if len(hits) >= self.limit:
                return False
            hits.append(now)
            return True


def _caller_key() -> str:
    return f"{request.endpoint}:{client_ip()}"


def rate_limit(limiter: InMemoryRateLimiter | None):
    """Wrap a view with ``limiter``; ``None`` leaves the view untouched."""

    def decorator(view: Callable):
        if limiter is None:
            return view

        @wraps(view)
        def limited(*args, **kwargs):
            key = _caller_key()
            if limiter.allow(key):
                return view(*args, **kwargs)
            logger.warning(f"rate_limit: blocked {request.method} {request.path} key={key}")
            response = jsonify({"error": "rate_limited"})
            response.headers["Retry-After"] = str(math.ceil(limiter.window))
            return response, 429

        return limited

    return decorator


__all__ = ["InMemoryRateLimiter", "rate_limit"]

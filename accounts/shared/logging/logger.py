"""Structured logging utilities."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_LINE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_NOISY_LIBRARIES = {"werkzeug": logging.INFO, "sqlalchemy.engine": logging.WARNING}

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")


class _StdlibBridge(logging.Handler):
    """Routes records from stdlib loggers (werkzeug, sqlalchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.bind(correlation_id=_CORRELATION_ID.get()).opt(
            depth=6, exception=record.exc_info
        ).log(level, record.getMessage())


class ContextualLogger:
    """Proxy for loguru that binds the current correlation id on every call."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(correlation_id=_CORRELATION_ID.get()), name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or "-")


def clear_correlation_id() -> None:
    _CORRELATION_ID.set("-")


def _add_sink(sink: Any, level: str, **options: Any) -> None:
    _logger.add(
        sink,
        level=level,
        format=_LINE_FORMAT,
        backtrace=False,
        diagnose=False,
        filter=sanitize_record,
        **options,
    )


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    resolved = "DEBUG" if debug_mode else (level or os.getenv("LOG_LEVEL") or "INFO").upper()

    _logger.remove()
    _logger.configure(extra={"correlation_id": "-"})
    _add_sink(sys.stderr, resolved, colorize=True)

    # LOG_FILE adds a plain-text sink next to stderr
    log_file = os.getenv("LOG_FILE")
    if log_file:
        Path(log_file).resolve().parent.mkdir(parents=True, exist_ok=True)
        _add_sink(log_file, resolved, colorize=False, enqueue=True, encoding="utf-8")

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    for name, lib_level in _NOISY_LIBRARIES.items():
        logging.getLogger(name).setLevel(lib_level)


logger = ContextualLogger()

__all__ = [
    "logger",
    "setup_logging",
    "set_correlation_id",
    "clear_correlation_id",
]

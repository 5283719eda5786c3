# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def _field_path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc if part is not None)


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Flatten pydantic's error list into ``{"fields": [...], "errors": [...]}``."""

    errors = [
        {
            "field": _field_path(item.get("loc", ())) or "unknown",
            "type": item.get("type", "value_error"),
            "message": item.get("msg", ""),
        }
        for item in exc.errors()
    ]
    fields = sorted({entry["field"] for entry in errors if entry["field"] != "unknown"})
    return {"fields": fields, "errors": errors}


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(context=format_pydantic_errors(exc)) from exc


__all__ = [
    "format_pydantic_errors",
    "raise_validation_error",
]

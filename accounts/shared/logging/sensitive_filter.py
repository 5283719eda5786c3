# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Redaction applied to every log record before it reaches a sink."""

from __future__ import annotations

import re
from typing import Any

_MASK = "***"

_RULES: list[tuple[re.Pattern[str], str]] = [
    # Authorization headers and bearer tokens
    (re.compile(r"(authorization['\"]?\s*[:=]\s*['\"]?)[^'\",}\s]+(\s+[^'\",}\s]+)?", re.I), rf"\1{_MASK}"),
    (re.compile(r"(bearer\s+)[\w\-.~+/]{16,}=*", re.I), rf"\1{_MASK}"),
    # key=value and JSON style secrets
    (
        re.compile(r"((?:password|passwd|token|secret)['\"]?\s*[:=]\s*['\"]?)[^'\"\s,}]+", re.I),
        rf"\1{_MASK}",
    ),
    # credentials inside database URLs
    (re.compile(r"(\w+(?:\+\w+)?://[^:/@\s]+:)[^@\s]+@"), rf"\1{_MASK}@"),
    # contact details
    (re.compile(r"[\w.%+-]+@([\w-]+\.[\w.-]+)"), rf"{_MASK}@\1"),
    (re.compile(r"((?:phone|phone_number)['\"]?\s*[:=]\s*['\"]?)\+?[\d ]{8,15}", re.I), rf"\1{_MASK}"),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    """Loguru filter: rewrites the message in place and never drops a record."""

    record["message"] = sanitize_message(record["message"])
    return True

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services import AccountService, WerkzeugPasswordHasher
from .validation import FieldViolation, validate_create_user_command

__all__ = [
    "AccountService",
    "FieldViolation",
    "WerkzeugPasswordHasher",
    "validate_create_user_command",
]

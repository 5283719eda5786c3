# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .create_user import FieldViolation, validate_create_user_command

__all__ = ["FieldViolation", "validate_create_user_command"]

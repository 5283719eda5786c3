# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import StrEnum


class ValidationErrorType(StrEnum):
    MISSING = "missing"

    USERNAME_INVALID = "username_invalid"

    PASSWORD_TOO_SHORT = "password_too_short"
    PASSWORD_TOO_LONG = "password_too_long"
    PASSWORD_NO_UPPERCASE = "password_no_uppercase"
    PASSWORD_NO_LOWERCASE = "password_no_lowercase"
    PASSWORD_NO_DIGIT = "password_no_digit"
    PASSWORD_NO_SPECIAL = "password_no_special"

    EMAIL_INVALID = "email_invalid"
    PHONE_INVALID = "phone_invalid"
    STREET_NUMBER_NOT_POSITIVE = "street_number_not_positive"
    STREET_NAME_INVALID_CHARS = "street_name_invalid_chars"
    POSTAL_CODE_OUT_OF_RANGE = "postal_code_out_of_range"
    USER_TYPE_UNKNOWN = "user_type_unknown"


__all__ = ["ValidationErrorType"]

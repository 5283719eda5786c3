# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Structural rules for registration commands.

Every field is checked on its own, so a single command can produce several
violations. No rule touches storage.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from accounts.domain.users.entities import CreateUserCommand, UserType
from accounts.shared.errors.validation_types import ValidationErrorType

USERNAME_RE = re.compile(r"[a-zA-Z0-9]{3,12}")
EMAIL_RE = re.compile(r"[a-zA-Z0-9._-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"(?:\+45 ?)?[0-9]{2} ?[0-9]{2} ?[0-9]{2} ?[0-9]{2}")
STREET_NAME_RE = re.compile(r"[A-Za-zÀ-ÖØ-öø-ÿ ]+")
PASSWORD_SYMBOL_RE = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 64
POSTAL_CODE_MIN = 1000
POSTAL_CODE_MAX = 9999


@dataclass(slots=True, frozen=True)
class FieldViolation:
    field: str
    type: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "type": self.type, "message": self.message}


def _missing(message: str) -> PydanticCustomError:
    return PydanticCustomError(ValidationErrorType.MISSING, message, {})


class _CreateUserRules(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str | None = None
    password: str | None = None
    email: str | None = None
    phone_number: str | None = None
    street_number: int | None = None
    street_name: str | None = None
    city: str | None = None
    postal_code: int | None = None
    user_type_id: int | None = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str | None) -> str | None:
        if not value:
            raise _missing("Username cannot be empty.")
        if not USERNAME_RE.fullmatch(value):
            raise PydanticCustomError(
                ValidationErrorType.USERNAME_INVALID,
                "Username must be between 3 and 12 characters and contain only letters and numbers.",
                {"pattern": USERNAME_RE.pattern},
            )
        return value

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: str | None) -> str | None:
        if not value:
            raise _missing("Password cannot be empty.")

        if len(value) < PASSWORD_MIN_LENGTH:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_TOO_SHORT,
                "Password must be at least {min_length} characters long.",
                {"min_length": PASSWORD_MIN_LENGTH},
            )

        if len(value) > PASSWORD_MAX_LENGTH:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_TOO_LONG,
                "Password must be at most {max_length} characters long.",
                {"max_length": PASSWORD_MAX_LENGTH},
            )

        if not re.search(r"[A-Z]", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_UPPERCASE,
                "Password must contain at least one uppercase letter.",
                {},
            )

        if not re.search(r"[a-z]", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_LOWERCASE,
                "Password must contain at least one lowercase letter.",
                {},
            )

        if not re.search(r"\d", value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_DIGIT,
                "Password must contain at least one number.",
                {},
            )

        if not PASSWORD_SYMBOL_RE.search(value):
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_NO_SPECIAL,
                "Password must contain at least one symbol.",
                {},
            )

        return value

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if not value:
            raise _missing("Email cannot be empty.")
        if not EMAIL_RE.fullmatch(value):
            raise PydanticCustomError(
                ValidationErrorType.EMAIL_INVALID, "Invalid email format.", {}
            )
        return value

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, value: str | None) -> str | None:
        if not value:
            raise _missing("Phone number cannot be empty.")
        if not PHONE_RE.fullmatch(value):
            raise PydanticCustomError(
                ValidationErrorType.PHONE_INVALID,
                "Phone number must be in Danish format.",
                {"pattern": PHONE_RE.pattern},
            )
        return value

    @field_validator("street_number")
    @classmethod
    def validate_street_number(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise PydanticCustomError(
                ValidationErrorType.STREET_NUMBER_NOT_POSITIVE,
                "Street number must be greater than 0.",
                {},
            )
        return value

    @field_validator("street_name")
    @classmethod
    def validate_street_name(cls, value: str | None) -> str | None:
        if not value or not value.strip():
            raise _missing("Street name cannot be empty.")
        if not STREET_NAME_RE.fullmatch(value):
            raise PydanticCustomError(
                ValidationErrorType.STREET_NAME_INVALID_CHARS,
                "Street name must only contain letters.",
                {},
            )
        return value

    @field_validator("city")
    @classmethod
    def validate_city(cls, value: str | None) -> str | None:
        if not value or not value.strip():
            raise _missing("City name cannot be empty.")
        return value

    @field_validator("postal_code")
    @classmethod
    def validate_postal_code(cls, value: int | None) -> int | None:
        if value is None:
            raise _missing("Postal code cannot be empty.")
        if not POSTAL_CODE_MIN <= value <= POSTAL_CODE_MAX:
            raise PydanticCustomError(
                ValidationErrorType.POSTAL_CODE_OUT_OF_RANGE,
                "Postal code must be a 4-digit number.",
                {"min": POSTAL_CODE_MIN, "max": POSTAL_CODE_MAX},
            )
        return value

    @field_validator("user_type_id")
    @classmethod
    def validate_user_type(cls, value: int | None) -> int | None:
        if value not in {member.value for member in UserType}:
            raise PydanticCustomError(
                ValidationErrorType.USER_TYPE_UNKNOWN,
                "User type must be one of {allowed}.",
                {"allowed": sorted(member.value for member in UserType)},
            )
        return value


def validate_create_user_command(command: CreateUserCommand) -> list[FieldViolation]:
    """Return every rule the command violates; an empty list means valid."""

    try:
        _CreateUserRules.model_validate(asdict(command))
    except PydanticValidationError as exc:
        violations = []
        for error in exc.errors():
            loc = error.get("loc", ())
            violations.append(
                FieldViolation(
                    field=".".join(str(part) for part in loc) or "unknown",
                    type=error.get("type", "value_error"),
                    message=error.get("msg", ""),
                )
            )
        return violations
    return []


__all__ = ["FieldViolation", "validate_create_user_command"]

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from accounts.domain.users.entities import CreateUserCommand, UserType

_CAMEL = ConfigDict(alias_generator=to_camel, validate_by_name=True, serialize_by_alias=True)


class RegisterUserRequestDTO(BaseModel):
    # Shape only: field rules are enforced by the account service so every
    # violation is reported together.
    model_config = _CAMEL

    first_name: str = ""
    last_name: str = ""
    username: str = ""
    password: str = ""
    user_type_id: int = int(UserType.ORDINARY)
    email: str = ""
    phone_number: str = ""
    street_number: int | None = None
    street_name: str = ""
    postal_code: int = 0
    city: str = ""

    def to_command(self) -> CreateUserCommand:
        return CreateUserCommand(
            first_name=self.first_name,
            last_name=self.last_name,
            username=self.username,
            password=self.password,
            user_type_id=self.user_type_id,
            email=self.email,
            phone_number=self.phone_number,
            street_number=self.street_number,
            street_name=self.street_name,
            postal_code=self.postal_code,
            city=self.city,
        )


class LoginRequestDTO(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login


class SeedAdminRequestDTO(BaseModel):
    token: str | None = None


class CreateUserResponseDTO(BaseModel):
    model_config = _CAMEL

    user_id: UUID


class SessionTokenDTO(BaseModel):
    model_config = _CAMEL

    token: str
    user_id: UUID
    expires_at: datetime


class WhoAmIResponseDTO(BaseModel):
    model_config = _CAMEL

    user_id: UUID
    username: str | None


class OkDTO(BaseModel):
    ok: bool = True

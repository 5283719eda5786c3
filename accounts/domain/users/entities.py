# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from uuid import UUID


class UserType(IntEnum):
    ORDINARY = 1
    DELIVERY_AGENT = 2
    ADMIN = 3

    @property
    def label(self) -> str:
        return _USER_TYPE_LABELS[self]


_USER_TYPE_LABELS = {
    UserType.ORDINARY: "user",
    UserType.DELIVERY_AGENT: "deliveryAgent",
    UserType.ADMIN: "admin",
}


@dataclass(slots=True, frozen=True)
class City:
    postal_code: int
    name: str


@dataclass(slots=True, frozen=True)
class Address:
    """Street address; shared by every contact living at the same place."""

    id: UUID
    street_number: int | None
    street_name: str
    postal_code: int

    def natural_key(self) -> tuple[int | None, str, int]:
        return self.street_number, self.street_name, self.postal_code


@dataclass(slots=True, frozen=True)
class ContactInfo:
    id: UUID
    email: str
    phone_number: str
    address_id: UUID


@dataclass(slots=True, frozen=True)
class LoginInformation:
    username: str
    password_hash: str


@dataclass(slots=True, frozen=True)
class User:
    id: UUID
    first_name: str
    last_name: str
    username: str
    user_type: UserType
    contact_info_id: UUID
    login: LoginInformation | None = None

    @property
    def is_admin(self) -> bool:
        return self.user_type is UserType.ADMIN


@dataclass(slots=True, frozen=True)
class Session:
    token: str
    user_id: UUID
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


@dataclass(slots=True, frozen=True)
class CreateUserCommand:
    """Registration request as decoded by the HTTP layer."""

    first_name: str
    last_name: str
    username: str
    password: str
    user_type_id: int
    email: str
    phone_number: str
    street_name: str
    postal_code: int
    city: str
    street_number: int | None = None

    def __repr__(self) -> str:
        return (
            f"CreateUserCommand(username={self.username!r}, "
            f"user_type_id={self.user_type_id}, postal_code={self.postal_code})"
        )

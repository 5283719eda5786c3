# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Protocol, TypeVar
from uuid import UUID

from .entities import Address, City, ContactInfo, LoginInformation, Session, User, UserType

T = TypeVar("T")


class UserRepository(Protocol):
    def username_exists(self, username: str) -> bool: ...
    def find_by_username(self, username: str) -> User | None: ...
    def find_by_id(self, user_id: UUID) -> User | None: ...
    def admin_account_exists(self) -> bool: ...
    def add(self, user: User) -> User: ...


class LoginInfoRepository(Protocol):
    def add(self, login: LoginInformation) -> LoginInformation: ...


class UserTypeRepository(Protocol):
    def ensure_defaults(self, user_types: Sequence[UserType]) -> int: ...


class CityRepository(Protocol):
    def get_or_create(self, postal_code: int, name: str) -> City: ...


class AddressRepository(Protocol):
    def get_or_create(self, address: Address) -> Address: ...


class ContactInfoRepository(Protocol):
    def add(self, contact: ContactInfo) -> ContactInfo: ...


class TransactionHandler(Protocol):
    def execute(self, operation: Callable[[], T]) -> T: ...


class PasswordHasher(Protocol):
    """Salted, non-deterministic hashing: two calls on one password give different
    strings, so stored hashes are checked with ``verify`` and never compared directly.
    """

    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class SessionStore(Protocol):
    def add_session(self, token: str, user_id: UUID, expires_at: datetime) -> None: ...
    def try_get_session(self, token: str) -> Session | None: ...
    def remove_session(self, token: str) -> bool: ...
    def get_all_sessions(self) -> list[Session]: ...
    def has_active_session_for_user(self, user_id: UUID) -> bool: ...

# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError

from accounts.domain.users.entities import LoginInformation, User, UserType
from accounts.domain.users.exceptions import UsernameTakenError
from accounts.domain.users.repositories import (
    LoginInfoRepository,
    UserRepository,
    UserTypeRepository,
)
from accounts.infrastructure.db.models import LoginInformationRow, UserRow, UserTypeRow
from accounts.infrastructure.db.session import SessionFactory
from accounts.infrastructure.unit_of_work import session_for
from accounts.shared.logging import logger


def _to_domain(row: UserRow, *, with_login: bool) -> User:
    login = None
    if with_login and row.login is not None:
        login = LoginInformation(username=row.login.username, password_hash=row.login.password)
    return User(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        username=row.username,
        user_type=UserType(row.user_type_id),
        contact_info_id=row.contact_info_id,
        login=login,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def username_exists(self, username: str) -> bool:
        with session_for(self._session_factory) as session:
            return bool(session.scalar(select(exists().where(UserRow.username == username))))

    def find_by_username(self, username: str) -> User | None:
        with session_for(self._session_factory) as session:
            row = session.scalars(select(UserRow).where(UserRow.username == username)).first()
            if not row:
                return None
            return _to_domain(row, with_login=True)

    def find_by_id(self, user_id: UUID) -> User | None:
        with session_for(self._session_factory) as session:
            row = session.get(UserRow, user_id)
            if not row:
                return None
            return _to_domain(row, with_login=False)

    def admin_account_exists(self) -> bool:
        with session_for(self._session_factory) as session:
            stmt = select(exists().where(UserRow.user_type_id == int(UserType.ADMIN)))
            return bool(session.scalar(stmt))

    def add(self, user: User) -> User:
        with session_for(self._session_factory) as session:
            row = UserRow(
                id=user.id,
                first_name=user.first_name,
                last_name=user.last_name,
                username=user.username,
                user_type_id=int(user.user_type),
                contact_info_id=user.contact_info_id,
            )
            session.add(row)
            try:
                session.flush()
            except IntegrityError as exc:
                if self._is_username_conflict(exc):
                    raise UsernameTakenError(user.username) from exc
                raise
            return user

    @staticmethod
    def _is_username_conflict(exc: IntegrityError) -> bool:
        message = str(exc.orig).lower()
        return "username" in message and "unique" in message


class SqlAlchemyLoginInfoRepository(LoginInfoRepository):
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def add(self, login: LoginInformation) -> LoginInformation:
        with session_for(self._session_factory) as session:
            session.add(LoginInformationRow(username=login.username, password=login.password_hash))
            try:
                session.flush()
            except IntegrityError as exc:
                # primary key on username: a concurrent registration got there first
                raise UsernameTakenError(login.username) from exc
            return login


class SqlAlchemyUserTypeRepository(UserTypeRepository):
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def ensure_defaults(self, user_types: Sequence[UserType] = tuple(UserType)) -> int:
        with session_for(self._session_factory) as session:
            existing = set(session.scalars(select(UserTypeRow.id)))
            missing = [ut for ut in user_types if int(ut) not in existing]
            for user_type in missing:
                session.add(UserTypeRow(id=int(user_type), type=user_type.label))
            session.flush()
        if missing:
            logger.info(f"db.seed: inserted user types {[ut.label for ut in missing]}")
        return len(missing)

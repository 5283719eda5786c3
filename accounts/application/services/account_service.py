# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Account registration saga and credential checks."""

from __future__ import annotations

import uuid
from dataclasses import replace
from uuid import UUID

from accounts.application.validation import validate_create_user_command
from accounts.domain.users.entities import (
    Address,
    ContactInfo,
    CreateUserCommand,
    LoginInformation,
    User,
    UserType,
)
from accounts.domain.users.exceptions import (
    AdminCredentialsMissingError,
    AdminPrivilegeRequiredError,
    UsernameTakenError,
)
from accounts.domain.users.repositories import (
    AddressRepository,
    CityRepository,
    ContactInfoRepository,
    LoginInfoRepository,
    PasswordHasher,
    SessionStore,
    TransactionHandler,
    UserRepository,
)
from accounts.shared.config import AdminConfig
from accounts.shared.errors.base import AppError, OperationFailedError, ValidationError
from accounts.shared.logging import logger


class AccountService:
    def __init__(
        self,
        *,
        users: UserRepository,
        logins: LoginInfoRepository,
        cities: CityRepository,
        addresses: AddressRepository,
        contacts: ContactInfoRepository,
        transactions: TransactionHandler,
        password_hasher: PasswordHasher,
        sessions: SessionStore,
        admin_config: AdminConfig,
    ) -> None:
        self._users = users
        self._logins = logins
        self._cities = cities
        self._addresses = addresses
        self._contacts = contacts
        self._transactions = transactions
        self._password_hasher = password_hasher
        self._sessions = sessions
        self._admin_config = admin_config

    def create_user(
        self,
        command: CreateUserCommand,
        allow_admin_creation: bool = False,
        is_admin: bool = False,
    ) -> UUID:
        """Register a user with contact details and login in one unit of work.

        Validation and the admin gate run before anything touches storage.
        Application errors raised inside the unit of work roll it back and
        propagate as they are; any other fault rolls back and surfaces as
        ``OperationFailedError`` chained to the original exception.
        """

        violations = validate_create_user_command(command)
        if violations:
            logger.info(
                f"accounts.create_user: rejected username={command.username} "
                f"violations={[v.field for v in violations]}"
            )
            raise ValidationError(
                context={
                    "fields": sorted({v.field for v in violations}),
                    "errors": [v.to_dict() for v in violations],
                }
            )

        user_type = UserType(command.user_type_id)
        if user_type is UserType.ADMIN and not (allow_admin_creation and is_admin):
            logger.warning(
                f"accounts.create_user: admin creation refused username={command.username}"
            )
            raise AdminPrivilegeRequiredError()

        try:
            user = self._transactions.execute(lambda: self._register(command, user_type))
        except AppError:
            raise
        except Exception as exc:
            logger.exception(f"accounts.create_user: failed username={command.username}")
            raise OperationFailedError(
                "create_user", context={"reason": type(exc).__name__}
            ) from exc

        logger.info(
            f"accounts.create_user: ok user_id={user.id} type={user_type.label}"
        )
        return user.id

    def _register(self, command: CreateUserCommand, user_type: UserType) -> User:
        if self._users.username_exists(command.username):
            raise UsernameTakenError(command.username)

        city = self._cities.get_or_create(command.postal_code, command.city)
        address = self._addresses.get_or_create(
            Address(
                id=uuid.uuid4(),
                street_number=command.street_number,
                street_name=command.street_name,
                postal_code=city.postal_code,
            )
        )
        contact = self._contacts.add(
            ContactInfo(
                id=uuid.uuid4(),
                email=command.email,
                phone_number=command.phone_number,
                address_id=address.id,
            )
        )
        login = self._logins.add(
            LoginInformation(
                username=command.username,
                password_hash=self._password_hasher.hash(command.password),
            )
        )
        return self._users.add(
            User(
                id=uuid.uuid4(),
                first_name=command.first_name,
                last_name=command.last_name,
                username=command.username,
                user_type=user_type,
                contact_info_id=contact.id,
                login=login,
            )
        )

    def validate_credentials(self, username: str, password: str) -> User | None:
        user = self._users.find_by_username(username)
        if user is None or user.login is None:
            return None
        if not self._password_hasher.verify(password, user.login.password_hash):
            return None
        return user

    def get_username_by_id(self, user_id: UUID) -> str | None:
        user = self._users.find_by_id(user_id)
        return user.username if user else None

    def is_admin_token(self, token: str | None) -> bool:
        if not token:
            return False
        session = self._sessions.try_get_session(token)
        if session is None:
            return False
        user = self._users.find_by_id(session.user_id)
        return bool(user and user.is_admin)

    def ensure_admin_seeded(self) -> UUID | None:
        """Create the bootstrap admin from configuration unless an admin exists."""

        return self.seed_admin_user(token=None)

    def seed_admin_user(self, token: str | None = None) -> UUID | None:
        if self._users.admin_account_exists():
            logger.debug("accounts.seed_admin: admin already present, skipping")
            return None

        command = self._bootstrap_admin_command()
        if token is not None and not self.is_admin_token(token):
            raise AdminPrivilegeRequiredError()

        user_id = self.create_user(command, allow_admin_creation=True, is_admin=True)
        logger.info(f"accounts.seed_admin: created admin username={command.username}")
        return user_id

    def create_admin_user(self, command: CreateUserCommand, caller_is_admin: bool) -> UUID:
        if not caller_is_admin:
            raise AdminPrivilegeRequiredError()
        command = replace(command, user_type_id=int(UserType.ADMIN))
        return self.create_user(command, allow_admin_creation=True, is_admin=True)

    def _bootstrap_admin_command(self) -> CreateUserCommand:
        cfg = self._admin_config
        if not cfg.username or not cfg.password:
            logger.error("accounts.seed_admin: ADMIN_USERNAME/ADMIN_PASSWORD not configured")
            raise AdminCredentialsMissingError()
        return CreateUserCommand(
            first_name=cfg.first_name,
            last_name=cfg.last_name,
            username=cfg.username,
            password=cfg.password,
            user_type_id=int(UserType.ADMIN),
            email=cfg.email,
            phone_number=cfg.phone_number,
            street_number=cfg.street_number,
            street_name=cfg.street_name,
            postal_code=cfg.postal_code,
            city=cfg.city,
        )

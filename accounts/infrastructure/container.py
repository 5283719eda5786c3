# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from accounts.application.services.account_service import AccountService
from accounts.application.services.password_hashing import WerkzeugPasswordHasher
from accounts.application.use_cases.users.create_admin_user import CreateAdminUserUseCase
from accounts.application.use_cases.users.login_user import LoginUserUseCase
from accounts.application.use_cases.users.logout_user import LogoutUserUseCase
from accounts.application.use_cases.users.register_user import RegisterUserUseCase
from accounts.application.use_cases.users.whoami import WhoAmIUseCase
from accounts.infrastructure.auth.session_store import InMemorySessionStore
from accounts.infrastructure.db import create_db_engine, init_db, make_session_factory
from accounts.infrastructure.repositories import (
    SqlAlchemyAddressRepository,
    SqlAlchemyCityRepository,
    SqlAlchemyContactInfoRepository,
    SqlAlchemyLoginInfoRepository,
    SqlAlchemyUserRepository,
    SqlAlchemyUserTypeRepository,
)
from accounts.infrastructure.unit_of_work import SqlAlchemyTransactionHandler
from accounts.interfaces.http.controllers.account_controller import AccountController
from accounts.interfaces.http.controllers.misc_controller import MiscController
from accounts.shared.config import AppConfig, load_config
from accounts.shared.logging import logger
from accounts.shared.middleware.rate_limit import InMemoryRateLimiter


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()

    # Persistence

    @cached_property
    def engine(self) -> Engine:
        return create_db_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return make_session_factory(self.engine)

    @cached_property
    def transaction_handler(self) -> SqlAlchemyTransactionHandler:
        return SqlAlchemyTransactionHandler(self.session_factory)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def login_info_repository(self) -> SqlAlchemyLoginInfoRepository:
        return SqlAlchemyLoginInfoRepository(self.session_factory)

    @cached_property
    def user_type_repository(self) -> SqlAlchemyUserTypeRepository:
        return SqlAlchemyUserTypeRepository(self.session_factory)

    @cached_property
    def city_repository(self) -> SqlAlchemyCityRepository:
        return SqlAlchemyCityRepository(self.session_factory)

    @cached_property
    def address_repository(self) -> SqlAlchemyAddressRepository:
        return SqlAlchemyAddressRepository(self.session_factory)

    @cached_property
    def contact_info_repository(self) -> SqlAlchemyContactInfoRepository:
        return SqlAlchemyContactInfoRepository(self.session_factory)

    def init_database(self) -> int:
        """Create tables and the fixed user types; returns how many types were inserted."""

        init_db(self.engine)
        return self.user_type_repository.ensure_defaults()

    # Services

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def session_store(self) -> InMemorySessionStore:
        return InMemorySessionStore()

    @cached_property
    def account_service(self) -> AccountService:
        return AccountService(
            users=self.user_repository,
            logins=self.login_info_repository,
            cities=self.city_repository,
            addresses=self.address_repository,
            contacts=self.contact_info_repository,
            transactions=self.transaction_handler,
            password_hasher=self.password_hasher,
            sessions=self.session_store,
            admin_config=self.config.admin,
        )

    # Use cases

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(accounts=self.account_service)

    @cached_property
    def create_admin_user_use_case(self) -> CreateAdminUserUseCase:
        return CreateAdminUserUseCase(accounts=self.account_service)

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            accounts=self.account_service,
            sessions=self.session_store,
            ttl=timedelta(seconds=self.config.session.ttl_seconds),
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_store)

    @cached_property
    def whoami_use_case(self) -> WhoAmIUseCase:
        return WhoAmIUseCase(accounts=self.account_service, sessions=self.session_store)

    # Controllers

    def _limiter(self) -> InMemoryRateLimiter | None:
        security = self.config.security
        if not security.enable_rate_limit:
            logger.info("rate_limit: disabled by configuration")
            return None
        return InMemoryRateLimiter(security.rate_limit_requests, security.rate_limit_window)

    @cached_property
    def account_controller(self) -> AccountController:
        return AccountController(
            register_use_case=self.register_user_use_case,
            create_admin_use_case=self.create_admin_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            whoami_use_case=self.whoami_use_case,
            accounts=self.account_service,
            login_limiter=self._limiter(),
            create_limiter=self._limiter(),
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)

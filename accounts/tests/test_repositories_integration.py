from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from accounts.application.services.account_service import AccountService
from accounts.application.services.password_hashing import WerkzeugPasswordHasher
from accounts.domain.users.entities import UserType
from accounts.domain.users.exceptions import UsernameTakenError
from accounts.infrastructure.auth.session_store import InMemorySessionStore
from accounts.infrastructure.db import create_db_engine, init_db, make_session_factory
from accounts.infrastructure.db.models import (
    AddressRow,
    CityRow,
    ContactInfoRow,
    LoginInformationRow,
    UserRow,
    UserTypeRow,
)
from accounts.infrastructure.repositories import (
    SqlAlchemyAddressRepository,
    SqlAlchemyCityRepository,
    SqlAlchemyContactInfoRepository,
    SqlAlchemyLoginInfoRepository,
    SqlAlchemyUserRepository,
    SqlAlchemyUserTypeRepository,
)
from accounts.infrastructure.unit_of_work import SqlAlchemyTransactionHandler
from accounts.shared.config import AdminConfig, DatabaseConfig
from accounts.shared.errors import OperationFailedError
from fakes import make_command


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_db_engine(DatabaseConfig(url="sqlite://"))
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine):
    factory = make_session_factory(engine)
    SqlAlchemyUserTypeRepository(factory).ensure_defaults()
    return factory


class ExplodingLoginRepository(SqlAlchemyLoginInfoRepository):
    def add(self, login):
        raise RuntimeError("login store unavailable")


class LateCityRepository(SqlAlchemyCityRepository):
    """Misses the first lookup, as if another registration committed the city meanwhile."""

    def __init__(self, session_factory) -> None:
        super().__init__(session_factory)
        self.lookups = 0

    def _find(self, session, postal_code):
        self.lookups += 1
        if self.lookups == 1:
            return None
        return super()._find(session, postal_code)


def _service(session_factory, *, logins=None, cities=None) -> AccountService:
    return AccountService(
        users=SqlAlchemyUserRepository(session_factory),
        logins=logins or SqlAlchemyLoginInfoRepository(session_factory),
        cities=cities or SqlAlchemyCityRepository(session_factory),
        addresses=SqlAlchemyAddressRepository(session_factory),
        contacts=SqlAlchemyContactInfoRepository(session_factory),
        transactions=SqlAlchemyTransactionHandler(session_factory),
        password_hasher=WerkzeugPasswordHasher(method="pbkdf2:sha256:1000"),
        sessions=InMemorySessionStore(),
        admin_config=AdminConfig(username="root", password="Adm1n!Secret", seed_on_startup=False),
    )


def _count(session_factory, model) -> int:
    with session_factory() as session:
        return session.scalar(select(func.count()).select_from(model))


def test_user_types_seeded_once(session_factory) -> None:
    assert SqlAlchemyUserTypeRepository(session_factory).ensure_defaults() == 0

    with session_factory() as session:
        rows = {row.id: row.type for row in session.scalars(select(UserTypeRow))}
    assert rows == {1: "user", 2: "deliveryAgent", 3: "admin"}


def test_create_user_stores_linked_rows(session_factory) -> None:
    user_id = _service(session_factory).create_user(make_command())

    with session_factory() as session:
        user = session.get(UserRow, user_id)
        contact = session.get(ContactInfoRow, user.contact_info_id)
        address = session.get(AddressRow, contact.address_id)
        city = session.get(CityRow, address.city_postal_code)
        login = session.get(LoginInformationRow, "alice")

    assert user.user_type_id == int(UserType.ORDINARY)
    assert contact.email == "alice@example.com"
    assert (address.street_number, address.street_name) == (12, "Main Street")
    assert (city.postal_code, city.name) == (8000, "Aarhus")
    assert login.password != "Str0ng!Pass"


def test_city_and_address_are_shared(session_factory) -> None:
    service = _service(session_factory)
    service.create_user(make_command())
    service.create_user(make_command(username="bob", email="bob@example.com", city="Other"))
    service.create_user(make_command(username="carol", street_number=None))

    assert _count(session_factory, CityRow) == 1
    assert _count(session_factory, AddressRow) == 2
    assert _count(session_factory, ContactInfoRow) == 3
    with session_factory() as session:
        assert session.get(CityRow, 8000).name == "Aarhus"


def test_duplicate_username_leaves_no_partial_rows(session_factory) -> None:
    service = _service(session_factory)
    service.create_user(make_command())

    with pytest.raises(UsernameTakenError):
        service.create_user(make_command(email="x@example.com", postal_code=9000, city="Aalborg"))

    assert _count(session_factory, UserRow) == 1
    assert _count(session_factory, ContactInfoRow) == 1
    assert _count(session_factory, LoginInformationRow) == 1
    assert _count(session_factory, CityRow) == 1


def test_failure_mid_saga_rolls_everything_back(session_factory) -> None:
    service = _service(session_factory, logins=ExplodingLoginRepository(session_factory))

    with pytest.raises(OperationFailedError) as exc_info:
        service.create_user(make_command())

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    for model in (CityRow, AddressRow, ContactInfoRow, LoginInformationRow, UserRow):
        assert _count(session_factory, model) == 0


def test_unique_index_reports_conflict_when_precheck_is_bypassed(session_factory) -> None:
    service = _service(session_factory)
    service.create_user(make_command())

    users = SqlAlchemyUserRepository(session_factory)
    users.username_exists = lambda username: False  # type: ignore[method-assign]
    racing = AccountService(
        users=users,
        logins=SqlAlchemyLoginInfoRepository(session_factory),
        cities=SqlAlchemyCityRepository(session_factory),
        addresses=SqlAlchemyAddressRepository(session_factory),
        contacts=SqlAlchemyContactInfoRepository(session_factory),
        transactions=SqlAlchemyTransactionHandler(session_factory),
        password_hasher=WerkzeugPasswordHasher(method="pbkdf2:sha256:1000"),
        sessions=InMemorySessionStore(),
        admin_config=AdminConfig(seed_on_startup=False),
    )

    with pytest.raises(UsernameTakenError):
        racing.create_user(make_command(email="late@example.com"))

    assert _count(session_factory, UserRow) == 1
    assert _count(session_factory, ContactInfoRow) == 1


def test_credentials_and_admin_lookup(session_factory) -> None:
    service = _service(session_factory)
    user_id = service.create_user(make_command())

    user = service.validate_credentials("alice", "Str0ng!Pass")
    assert user is not None and user.id == user_id
    assert service.validate_credentials("alice", "nope") is None
    assert service.get_username_by_id(user_id) == "alice"

    users = SqlAlchemyUserRepository(session_factory)
    assert users.admin_account_exists() is False
    service.ensure_admin_seeded()
    assert users.admin_account_exists() is True
    assert service.ensure_admin_seeded() is None


def test_city_inserted_concurrently_is_reused(session_factory) -> None:
    _service(session_factory).create_user(make_command())

    late = _service(session_factory, cities=LateCityRepository(session_factory))
    user_id = late.create_user(make_command(username="bob", email="bob@example.com", city="Other"))

    assert late.get_username_by_id(user_id) == "bob"
    assert _count(session_factory, CityRow) == 1
    assert _count(session_factory, UserRow) == 2
    with session_factory() as session:
        assert session.get(CityRow, 8000).name == "Aarhus"


def test_failure_after_city_savepoint_still_rolls_back(session_factory) -> None:
    service = _service(session_factory, logins=ExplodingLoginRepository(session_factory))

    with pytest.raises(OperationFailedError):
        service.create_user(make_command(postal_code=9000, city="Aalborg"))

    assert _count(session_factory, CityRow) == 0


def test_password_hashes_are_salted_and_verified_not_compared() -> None:
    hasher = WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")

    first, second = hasher.hash("Str0ng!Pass"), hasher.hash("Str0ng!Pass")

    assert first != second
    assert hasher.verify("Str0ng!Pass", first) and hasher.verify("Str0ng!Pass", second)
    assert not hasher.verify("Str0ng!Pass", "")

from __future__ import annotations

import pytest

from accounts.domain.users.entities import UserType
from accounts.domain.users.exceptions import (
    AdminCredentialsMissingError,
    AdminPrivilegeRequiredError,
    UsernameTakenError,
)
from accounts.shared.config import AdminConfig
from accounts.shared.errors import (
    ConflictError,
    OperationFailedError,
    UnauthorizedError,
    ValidationError,
)
from fakes import Harness, make_command


@pytest.fixture()
def admin_config() -> AdminConfig:
    return AdminConfig(username="root", password="Adm1n!Secret", seed_on_startup=False)


@pytest.fixture()
def harness(admin_config: AdminConfig) -> Harness:
    return Harness(admin_config)


def test_create_user_persists_full_graph(harness: Harness) -> None:
    user_id = harness.service.create_user(make_command())

    user = harness.users.users["alice"]
    assert user.id == user_id
    assert user.user_type is UserType.ORDINARY
    contact = harness.contacts.contacts[user.contact_info_id]
    address = next(a for a in harness.addresses.addresses.values() if a.id == contact.address_id)
    assert harness.cities.cities[address.postal_code].name == "Aarhus"
    assert harness.logins.logins["alice"].password_hash == "hashed:Str0ng!Pass"


def test_second_user_at_same_address_reuses_it(harness: Harness) -> None:
    harness.service.create_user(make_command())
    harness.service.create_user(make_command(username="bob", email="bob@example.com"))

    contacts = list(harness.contacts.contacts.values())
    assert len(contacts) == 2
    assert contacts[0].address_id == contacts[1].address_id
    assert len(harness.addresses.addresses) == 1


def test_invalid_command_rejected_before_persistence(harness: Harness) -> None:
    with pytest.raises(ValidationError) as exc_info:
        harness.service.create_user(make_command(username="a", password="weak"))

    assert exc_info.value.status == 422
    assert set(exc_info.value.context["fields"]) == {"username", "password"}
    assert harness.transactions.executions == 0
    assert harness.users.calls == []


def test_newline_suffixed_username_is_not_a_second_account(harness: Harness) -> None:
    harness.service.create_user(make_command())

    with pytest.raises(ValidationError) as exc_info:
        harness.service.create_user(
            make_command(
                username="alice\n",
                email="a@example.com\n",
                phone_number="12345678\n",
            )
        )

    assert set(exc_info.value.context["fields"]) == {"username", "email", "phone_number"}
    assert list(harness.users.users) == ["alice"]


def test_admin_creation_without_privilege_rejected_before_persistence(harness: Harness) -> None:
    command = make_command(user_type_id=int(UserType.ADMIN))

    for flags in ({}, {"allow_admin_creation": True}, {"is_admin": True}):
        with pytest.raises(UnauthorizedError):
            harness.service.create_user(command, **flags)

    assert harness.transactions.executions == 0
    assert harness.users.calls == []


def test_admin_creation_with_privilege(harness: Harness) -> None:
    harness.service.create_user(
        make_command(user_type_id=int(UserType.ADMIN)), allow_admin_creation=True, is_admin=True
    )

    assert harness.users.users["alice"].is_admin


def test_duplicate_username_conflicts_and_leaves_no_rows(harness: Harness) -> None:
    harness.service.create_user(make_command())

    with pytest.raises(ConflictError) as exc_info:
        harness.service.create_user(make_command(email="other@example.com", postal_code=9000))

    assert isinstance(exc_info.value, UsernameTakenError)
    assert exc_info.value.status == 409
    assert len(harness.users.users) == 1
    assert len(harness.contacts.contacts) == 1
    assert list(harness.cities.cities) == [8000]


def test_fault_inside_unit_of_work_wrapped_and_rolled_back(harness: Harness) -> None:
    boom = RuntimeError("disk on fire")
    harness.contacts.fail_with = boom

    with pytest.raises(OperationFailedError) as exc_info:
        harness.service.create_user(make_command())

    assert exc_info.value.__cause__ is boom
    assert exc_info.value.context["operation"] == "create_user"
    assert harness.cities.cities == {}
    assert harness.addresses.addresses == {}
    assert harness.users.users == {}


def test_validate_credentials(harness: Harness) -> None:
    harness.service.create_user(make_command())

    assert harness.service.validate_credentials("alice", "Str0ng!Pass") is not None
    assert harness.service.validate_credentials("alice", "wrong") is None
    assert harness.service.validate_credentials("nobody", "Str0ng!Pass") is None


def test_get_username_by_id(harness: Harness) -> None:
    user_id = harness.service.create_user(make_command())

    assert harness.service.get_username_by_id(user_id) == "alice"


def test_seed_admin_creates_admin_once(harness: Harness) -> None:
    first = harness.service.ensure_admin_seeded()
    second = harness.service.ensure_admin_seeded()

    assert first is not None
    assert second is None
    admin = harness.users.users["root"]
    assert admin.is_admin
    assert admin.first_name == "Main"


def test_seed_admin_without_credentials_fails() -> None:
    harness = Harness(AdminConfig(username=None, password=None, seed_on_startup=False))

    with pytest.raises(AdminCredentialsMissingError):
        harness.service.seed_admin_user()


def test_seed_admin_with_non_admin_token_refused(harness: Harness) -> None:
    harness.service.create_user(make_command())
    token = harness.login_as("alice")

    with pytest.raises(AdminPrivilegeRequiredError):
        harness.service.seed_admin_user(token)

    assert not harness.users.admin_account_exists()


def test_is_admin_token(harness: Harness) -> None:
    harness.service.ensure_admin_seeded()
    harness.service.create_user(make_command())

    assert harness.service.is_admin_token(harness.login_as("root")) is True
    assert harness.service.is_admin_token(harness.login_as("alice")) is False
    assert harness.service.is_admin_token("unknown") is False
    assert harness.service.is_admin_token(None) is False


def test_create_admin_user_requires_admin_caller(harness: Harness) -> None:
    with pytest.raises(AdminPrivilegeRequiredError):
        harness.service.create_admin_user(make_command(), caller_is_admin=False)

    harness.service.create_admin_user(make_command(), caller_is_admin=True)
    assert harness.users.users["alice"].user_type is UserType.ADMIN

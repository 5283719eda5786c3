from __future__ import annotations

from typing import Any

import pytest
from flask import Flask
from flask.testing import FlaskClient

from accounts.app import create_app
from accounts.application.services.password_hashing import WerkzeugPasswordHasher
from accounts.domain.users.exceptions import AdminCredentialsMissingError
from accounts.infrastructure.container import Container
from accounts.shared.config import AdminConfig, AppConfig, DatabaseConfig
from accounts.shared.config.settings import SecurityConfig


def _config(**admin: Any) -> AppConfig:
    admin_settings = {"username": "root", "password": "Adm1n!Secret", "seed_on_startup": False}
    admin_settings.update(admin)
    return AppConfig(
        app_env="test",
        secret_key="test",
        database=DatabaseConfig(url="sqlite://"),
        admin=AdminConfig(**admin_settings),
        security=SecurityConfig(enable_rate_limit=False),
    )


def _container(config: AppConfig) -> Container:
    container = Container(config)
    container.password_hasher = WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")
    return container


@pytest.fixture()
def app() -> Flask:
    return create_app(_container(_config()))


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


def _payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "firstName": "Alice",
        "lastName": "Jensen",
        "username": "alice",
        "password": "Str0ng!Pass",
        "userTypeId": 1,
        "email": "alice@example.com",
        "phoneNumber": "12 34 56 78",
        "streetNumber": 12,
        "streetName": "Main Street",
        "postalCode": 8000,
        "city": "Aarhus",
    }
    payload.update(overrides)
    return payload


def _login(client: FlaskClient, username: str = "alice", password: str = "Str0ng!Pass"):
    return client.post("/api/account/login", json={"username": username, "password": password})


def test_health(client: FlaskClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok", "database": "ok"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_create_user(client: FlaskClient) -> None:
    response = client.post("/api/account/create", json=_payload())

    assert response.status_code == 200
    assert response.get_json()["userId"]


def test_create_user_accepts_snake_case_fields(client: FlaskClient) -> None:
    payload = {
        "first_name": "Bob",
        "last_name": "Berg",
        "username": "bob",
        "password": "Str0ng!Pass",
        "email": "bob@example.com",
        "phone_number": "87654321",
        "street_name": "Side Street",
        "postal_code": 8200,
        "city": "Aarhus N",
    }

    response = client.post("/api/account/create", json=payload)

    assert response.status_code == 200


def test_create_user_reports_every_violation(client: FlaskClient) -> None:
    response = client.post(
        "/api/account/create",
        json=_payload(username="a", email="broken", postalCode=42),
    )

    body = response.get_json()
    assert response.status_code == 422
    assert body["error"] == "validation_error"
    assert set(body["context"]["fields"]) == {"username", "email", "postal_code"}


def test_create_user_rejects_wrong_types(client: FlaskClient) -> None:
    response = client.post("/api/account/create", json=_payload(postalCode="north"))

    assert response.status_code == 422
    assert "postalCode" in response.get_json()["context"]["fields"]


def test_duplicate_username_conflicts(client: FlaskClient) -> None:
    client.post("/api/account/create", json=_payload())

    response = client.post("/api/account/create", json=_payload(email="other@example.com"))

    assert response.status_code == 409
    assert response.get_json() == {"error": "username_taken", "context": {"username": "alice"}}


def test_public_create_cannot_make_admin(client: FlaskClient) -> None:
    response = client.post("/api/account/create", json=_payload(userTypeId=3))

    assert response.status_code == 403
    assert response.get_json()["error"] == "admin_privilege_required"


def test_login_whoami_logout_flow(client: FlaskClient) -> None:
    user_id = client.post("/api/account/create", json=_payload()).get_json()["userId"]

    login = _login(client)
    assert login.status_code == 200
    session = login.get_json()
    assert session["userId"] == user_id
    assert session["token"] and session["expiresAt"]

    again = _login(client)
    assert again.status_code == 409
    assert again.get_json()["error"] == "active_session_exists"
    assert "expires_at" in again.get_json()["context"]

    headers = {"Authorization": f"Bearer {session['token']}"}
    whoami = client.get("/api/account/whoami", headers=headers)
    assert whoami.status_code == 200
    assert whoami.get_json() == {"userId": user_id, "username": "alice"}

    raw = client.get("/api/account/whoami", headers={"Authorization": session["token"]})
    assert raw.status_code == 200

    logout = client.delete("/api/account/logout", headers=headers)
    assert logout.status_code == 200
    assert logout.get_json() == {"ok": True}

    assert client.get("/api/account/whoami", headers=headers).status_code == 401
    assert client.post("/api/account/logout", headers=headers).status_code == 404


def test_login_with_bad_credentials(client: FlaskClient) -> None:
    client.post("/api/account/create", json=_payload())

    response = _login(client, password="Wr0ng!Pass")

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_credentials"}


def test_login_requires_fields(client: FlaskClient) -> None:
    response = client.post("/api/account/login", json={"username": "alice"})

    assert response.status_code == 422
    assert "password" in response.get_json()["context"]["fields"]


def test_gate_requires_authorization_header(client: FlaskClient) -> None:
    response = client.get("/api/account/whoami")

    assert response.status_code == 400
    assert response.get_json() == {"error": "authorization_required"}


def test_gate_rejects_unknown_token(client: FlaskClient) -> None:
    response = client.get("/api/account/whoami", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401
    assert response.get_json() == {"error": "unauthorized"}


def test_seed_admin_and_create_admin(client: FlaskClient) -> None:
    seeded = client.post("/api/account/seed-admin")
    assert seeded.status_code == 200
    assert seeded.get_json() == {"ok": True, "created": True}
    assert client.post("/api/account/seed-admin").get_json()["created"] is False

    client.post("/api/account/create", json=_payload())
    alice = {"Authorization": _login(client).get_json()["token"]}
    root = {"Authorization": _login(client, "root", "Adm1n!Secret").get_json()["token"]}
    new_admin = _payload(username="boss", email="boss@example.com")

    refused = client.post("/api/account/admin", json=new_admin, headers=alice)
    assert refused.status_code == 403

    created = client.post("/api/account/admin", json=new_admin, headers=root)
    assert created.status_code == 200
    assert _login(client, "boss").status_code == 200


def test_seed_admin_with_non_admin_token_is_refused(client: FlaskClient) -> None:
    client.post("/api/account/create", json=_payload())
    token = _login(client).get_json()["token"]

    response = client.post("/api/account/seed-admin", json={"token": token})

    assert response.status_code == 403


def test_startup_seeds_admin_when_enabled() -> None:
    container = _container(_config(seed_on_startup=True))
    app = create_app(container)

    response = _login(app.test_client(), "root", "Adm1n!Secret")

    assert response.status_code == 200
    assert container.user_repository.admin_account_exists()


def test_startup_fails_without_admin_credentials() -> None:
    config = _config(username=None, password=None, seed_on_startup=True)

    with pytest.raises(AdminCredentialsMissingError):
        create_app(_container(config))


def test_rate_limit_on_login() -> None:
    config = _config()
    config.security = SecurityConfig(
        enable_rate_limit=True, rate_limit_requests=2, rate_limit_window=60
    )
    client = create_app(_container(config)).test_client()

    statuses = [_login(client, "ghost", "Wr0ng!Pass").status_code for _ in range(3)]

    assert statuses == [401, 401, 429]

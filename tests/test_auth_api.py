"""Tests for auth, user and health endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cvfast.api.main import app
from cvfast.config import get_settings


@pytest.fixture
def client() -> TestClient:
    """Create a test client for the API."""
    return TestClient(app)


def _register(client: TestClient, email: str = "alice@example.com", password: str = "s3cret!"):
    return client.post(
        "/api/auth/register",
        json={"email": email, "name": "Alice", "password": password},
    )


def test_health_check(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_register_returns_token_and_user(client: TestClient) -> None:
    response = _register(client, email="Alice@Example.com")

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["errors"] is None
    data = body["data"]
    assert data["token"]
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["name"] == "Alice"


def test_register_duplicate_email_conflicts(client: TestClient) -> None:
    assert _register(client).status_code == 201

    response = _register(client, email="ALICE@example.com")

    assert response.status_code == 409
    assert response.json() == {
        "success": False,
        "message": "Email already in use.",
        "data": None,
        "errors": None,
    }


def test_register_validation_errors_use_envelope(client: TestClient) -> None:
    response = client.post(
        "/api/auth/register",
        json={"email": "not-an-email", "name": "A", "password": "123"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Invalid data"
    assert body["data"] is None
    assert len(body["errors"]) == 3
    assert any(error.startswith("email") for error in body["errors"])


def test_login_and_me(client: TestClient) -> None:
    _register(client)

    response = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "s3cret!"}
    )
    assert response.status_code == 200
    token = response.json()["data"]["token"]

    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "alice@example.com"


@pytest.mark.parametrize(
    ("email", "password"),
    [("alice@example.com", "wrong"), ("nobody@example.com", "s3cret!")],
)
def test_login_rejects_bad_credentials(client: TestClient, email: str, password: str) -> None:
    _register(client)

    response = client.post("/api/auth/login", json={"email": email, "password": password})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "Bearer not-a-jwt"}, {"Authorization": "Basic abc"}],
)
def test_me_requires_valid_token(client: TestClient, headers: dict) -> None:
    response = client.get("/api/users/me", headers=headers)

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json()["success"] is False


def test_expired_token_is_rejected(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_EXPIRATION_MINUTES", "-5")
    get_settings.cache_clear()
    token = _register(client).json()["data"]["token"]

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_token_signed_with_other_secret_is_rejected(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    token = _register(client).json()["data"]["token"]
    monkeypatch.setenv("JWT_SECRET_KEY", "a-completely-different-secret-value")
    get_settings.cache_clear()

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401

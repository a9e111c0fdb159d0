"""Tests for short link API endpoints."""

from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

import cvfast.api.routes.short_links as short_link_routes
import cvfast.services.access_log as access_log_module
from cvfast.api.main import app
from cvfast.services.errors import ShortLinkConflictError

NOT_FOUND_BODY = {
    "success": False,
    "message": "Short link not found or revoked",
    "data": None,
    "errors": None,
}


@pytest.fixture
def client() -> TestClient:
    """Create a test client for the API."""
    return TestClient(app)


def _auth_headers(client: TestClient, email: str) -> dict[str, str]:
    response = client.post(
        "/api/auth/register",
        json={"email": email, "name": "Someone", "password": "password123"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.fixture
def owner_headers(client: TestClient) -> dict[str, str]:
    return _auth_headers(client, "owner@example.com")


@pytest.fixture
def other_headers(client: TestClient) -> dict[str, str]:
    return _auth_headers(client, "intruder@example.com")


@pytest.fixture
def curriculum(client: TestClient, owner_headers: dict) -> dict:
    """An Active curriculum with a skill and its implicit short link."""
    response = client.post(
        "/api/curriculums",
        json={"title": "Frontend Developer", "status": "Active"},
        headers=owner_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    skill = client.post(
        f"/api/curriculums/{data['id']}/skills",
        json={"tech_name": "TypeScript", "proficiency": "Advanced"},
        headers=owner_headers,
    )
    assert skill.status_code == 201
    return data


def _logs(client: TestClient, link_id: str, headers: dict) -> list[dict]:
    response = client.get(f"/api/shortlinks/{link_id}/logs", headers=headers)
    assert response.status_code == 200
    return response.json()["data"]


def test_anonymous_access_returns_curriculum_and_records_it(
    client: TestClient, curriculum: dict, owner_headers: dict
) -> None:
    link = curriculum["short_links"][0]

    response = client.get(
        f"/api/shortlinks/access/{link['hash']}", headers={"User-Agent": "Recruiter/1.0"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Frontend Developer"
    assert [s["tech_name"] for s in data["skills"]] == ["TypeScript"]
    assert [s["hash"] for s in data["short_links"]] == [link["hash"]]

    logs = _logs(client, link["id"], owner_headers)
    assert len(logs) == 1
    assert logs[0]["short_link_id"] == link["id"]
    assert logs[0]["ip"] == "testclient"
    assert logs[0]["user_agent"] == "Recruiter/1.0"


def test_oversized_user_agent_still_logs_once(
    client: TestClient, curriculum: dict, owner_headers: dict
) -> None:
    link = curriculum["short_links"][0]

    response = client.get(
        f"/api/shortlinks/access/{link['hash']}", headers={"User-Agent": "B" * 2000}
    )

    assert response.status_code == 200
    logs = _logs(client, link["id"], owner_headers)
    assert len(logs) == 1
    assert logs[0]["user_agent"] == "B" * 512


def test_each_resolution_adds_exactly_one_log(
    client: TestClient, curriculum: dict, owner_headers: dict
) -> None:
    link = curriculum["short_links"][0]

    for expected in (1, 2, 3):
        assert client.get(f"/api/shortlinks/access/{link['hash']}").status_code == 200
        assert len(_logs(client, link["id"], owner_headers)) == expected

    # The curriculum route shares the gateway and the log
    assert client.get(f"/api/curriculums/shortlink/{link['hash']}").status_code == 200
    assert len(_logs(client, link["id"], owner_headers)) == 4


def test_create_second_link_then_revoke_first(
    client: TestClient, curriculum: dict, owner_headers: dict
) -> None:
    first = curriculum["short_links"][0]

    created = client.post(
        "/api/shortlinks", json={"curriculum_id": curriculum["id"]}, headers=owner_headers
    )
    assert created.status_code == 201
    second = created.json()["data"]
    assert second["hash"] != first["hash"]
    assert second["full_url"].endswith(f"/api/shortlinks/access/{second['hash']}")

    revoked = client.put(f"/api/shortlinks/{first['id']}/revoke", headers=owner_headers)
    assert revoked.status_code == 200
    assert revoked.json()["data"]["is_revoked"] is True
    assert revoked.json()["data"]["revoked_at"] is not None

    old = client.get(f"/api/shortlinks/access/{first['hash']}")
    assert old.status_code == 404
    assert old.json() == NOT_FOUND_BODY

    new = client.get(f"/api/shortlinks/access/{second['hash']}")
    assert new.status_code == 200
    assert [s["hash"] for s in new.json()["data"]["short_links"]] == [second["hash"]]

    listed = client.get(
        f"/api/shortlinks/curriculum/{curriculum['id']}", headers=owner_headers
    ).json()["data"]
    assert [(s["hash"], s["is_revoked"]) for s in listed] == [
        (first["hash"], True),
        (second["hash"], False),
    ]


def test_unknown_and_revoked_hashes_are_indistinguishable(
    client: TestClient, curriculum: dict, owner_headers: dict
) -> None:
    link = curriculum["short_links"][0]
    client.put(f"/api/shortlinks/{link['id']}/revoke", headers=owner_headers)

    revoked = client.get(f"/api/shortlinks/access/{link['hash']}")
    unknown = client.get("/api/shortlinks/access/Unknown1")
    malformed = client.get("/api/shortlinks/access/x")

    for response in (revoked, unknown, malformed):
        assert response.status_code == 404
        assert response.json() == NOT_FOUND_BODY

    # Failed lookups never produce access logs
    assert _logs(client, link["id"], owner_headers) == []


def test_revoke_twice_keeps_first_timestamp(
    client: TestClient, curriculum: dict, owner_headers: dict
) -> None:
    link_id = curriculum["short_links"][0]["id"]

    first = client.put(f"/api/shortlinks/{link_id}/revoke", headers=owner_headers)
    second = client.put(f"/api/shortlinks/{link_id}/revoke", headers=owner_headers)

    assert first.status_code == second.status_code == 200
    assert second.json()["data"]["is_revoked"] is True
    assert second.json()["data"]["revoked_at"] == first.json()["data"]["revoked_at"]


def test_get_short_link(client: TestClient, curriculum: dict, owner_headers: dict) -> None:
    link = curriculum["short_links"][0]

    response = client.get(f"/api/shortlinks/{link['id']}", headers=owner_headers)

    assert response.status_code == 200
    assert response.json()["data"]["hash"] == link["hash"]
    assert client.get(f"/api/shortlinks/{uuid.uuid4()}", headers=owner_headers).status_code == 404


def test_links_of_other_users_are_not_found(
    client: TestClient, curriculum: dict, other_headers: dict
) -> None:
    link_id = curriculum["short_links"][0]["id"]

    created = client.post(
        "/api/shortlinks", json={"curriculum_id": curriculum["id"]}, headers=other_headers
    )
    assert created.status_code == 404
    assert created.json()["message"] == "Curriculum not found"

    listed = client.get(f"/api/shortlinks/curriculum/{curriculum['id']}", headers=other_headers)
    assert listed.status_code == 404

    for response in (
        client.get(f"/api/shortlinks/{link_id}", headers=other_headers),
        client.put(f"/api/shortlinks/{link_id}/revoke", headers=other_headers),
        client.get(f"/api/shortlinks/{link_id}/logs", headers=other_headers),
    ):
        assert response.status_code == 404

    # The link is still active
    assert client.get(f"/api/shortlinks/access/{curriculum['short_links'][0]['hash']}").is_success


def test_management_requires_authentication(client: TestClient, curriculum: dict) -> None:
    link_id = curriculum["short_links"][0]["id"]

    payload = {"curriculum_id": curriculum["id"]}
    assert client.post("/api/shortlinks", json=payload).status_code == 401
    assert client.put(f"/api/shortlinks/{link_id}/revoke").status_code == 401
    assert client.get(f"/api/shortlinks/{link_id}/logs").status_code == 401


def test_access_survives_logging_failure(
    client: TestClient,
    curriculum: dict,
    owner_headers: dict,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def boom(*_args, **_kwargs):
        raise RuntimeError("log table locked")

    monkeypatch.setattr(access_log_module, "record_access", boom)
    link = curriculum["short_links"][0]

    response = client.get(f"/api/shortlinks/access/{link['hash']}")

    assert response.status_code == 200
    assert response.json()["data"]["id"] == curriculum["id"]
    assert _logs(client, link["id"], owner_headers) == []


def test_hash_conflict_maps_to_409(
    client: TestClient,
    curriculum: dict,
    owner_headers: dict,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def exhausted(_curriculum_id):
        raise ShortLinkConflictError("Could not generate a unique hash after 5 attempts")

    monkeypatch.setattr(short_link_routes, "create_short_link", exhausted)

    response = client.post(
        "/api/shortlinks", json={"curriculum_id": curriculum["id"]}, headers=owner_headers
    )

    assert response.status_code == 409
    assert response.json()["success"] is False
    assert "unique hash" in response.json()["message"]

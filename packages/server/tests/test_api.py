"""
HTTP tests for the project, directory and session endpoints.

The store dependency is overridden with one bound to the per-test SQLite
database; viewers authenticate with their profile id as bearer token.
"""

from __future__ import annotations

import uuid

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.auth import get_store
from app.main import app


@pytest.fixture
async def client(store):
    app.dependency_overrides[get_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def _auth(profile_id):
    return {"Authorization": f"Bearer {profile_id}"}


def _names(payload):
    return [p["name"] for p in payload["data"]["projects"]]


class TestIdentity:
    async def test_missing_token_requires_login(self, client, org):
        response = await client.get("/api/v1/projects/")
        assert response.status_code == 401
        assert response.json()["detail"] == "Please log in."

    async def test_unknown_profile_requires_login(self, client, org):
        response = await client.get("/api/v1/projects/", headers=_auth(uuid.uuid4()))
        assert response.status_code == 401

    async def test_malformed_token_requires_login(self, client, org):
        response = await client.get("/api/v1/projects/", headers=_auth("not-a-uuid"))
        assert response.status_code == 401

    async def test_deactivated_profile_requires_login(self, client, org, store):
        await store.update("profiles", {"is_active": False}, filters={"id": org.c})
        response = await client.get("/api/v1/projects/", headers=_auth(org.c))
        assert response.status_code == 401

    async def test_me(self, client, org):
        response = await client.get("/auth/me", headers=_auth(org.b))
        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "contractor"
        assert data["privileged"] is False
        assert data["org_id"] == str(org.org)

    async def test_logout_redirects_to_login(self, client, org):
        response = await client.post("/auth/logout", headers=_auth(org.a))
        assert response.status_code == 200
        assert response.json() == {"ok": True, "redirect": "/login"}


class TestProjectListing:
    async def test_admin_listing(self, client, org):
        response = await client.get("/api/v1/projects/", headers=_auth(org.a))
        assert response.status_code == 200
        payload = response.json()
        assert _names(payload) == ["P1", "P2"]
        assert payload["data"]["mode"] == "Admin/Manager view (all projects)"
        assert payload["error"] is None

    async def test_contractor_listing(self, client, org):
        response = await client.get("/api/v1/projects/", headers=_auth(org.b))
        payload = response.json()
        assert _names(payload) == ["P1"]
        assert payload["data"]["mode"] == "Contractor view (membership only — Model B)"

    async def test_unassigned_contractor_listing(self, client, org):
        response = await client.get("/api/v1/projects/", headers=_auth(org.c))
        assert _names(response.json()) == []

    async def test_focus_label(self, client, org):
        response = await client.get(
            "/api/v1/projects/", params={"user": str(org.c)}, headers=_auth(org.a)
        )
        assert response.json()["data"]["focus"] == "Cara"

    async def test_blank_focus_is_no_focus(self, client, org):
        response = await client.get("/api/v1/projects/?user=", headers=_auth(org.a))
        assert response.status_code == 200
        payload = response.json()
        assert payload["data"]["focus"] is None
        assert _names(payload) == ["P1", "P2"]

    async def test_malformed_focus_rejected(self, client, org):
        response = await client.get(
            "/api/v1/projects/", params={"user": "nobody"}, headers=_auth(org.a)
        )
        assert response.status_code == 422

    async def test_unknown_role_profile_does_not_break_listing(self, client, org, store):
        await store.insert(
            "profiles",
            {"org_id": org.org, "full_name": "Olga", "role": "owner", "is_active": True},
            returning=["id"],
        )
        response = await client.get("/api/v1/projects/", headers=_auth(org.a))
        assert response.status_code == 200
        payload = response.json()
        assert _names(payload) == ["P1", "P2"]
        assert payload["error"] is None

    async def test_directory(self, client, org):
        response = await client.get("/api/v1/directory/", headers=_auth(org.b))
        names = [p["full_name"] for p in response.json()["data"]]
        assert names == ["Alice", "Bob", "Cara"]


class TestProjectCreation:
    async def test_admin_creates(self, client, org):
        response = await client.post(
            "/api/v1/projects/", json={"name": "  KeHE — Ops "}, headers=_auth(org.a)
        )
        assert response.status_code == 201
        payload = response.json()
        assert payload["data"]["project"]["name"] == "KeHE — Ops"
        assert _names(payload) == ["KeHE — Ops", "P1", "P2"]

    async def test_contractor_gets_message(self, client, org):
        response = await client.post(
            "/api/v1/projects/", json={"name": "P9"}, headers=_auth(org.b)
        )
        payload = response.json()
        assert payload["data"]["project"] is None
        assert payload["error"] == "Only admin/manager can create projects."

    async def test_blank_name_creates_nothing(self, client, org):
        response = await client.post(
            "/api/v1/projects/", json={"name": "   "}, headers=_auth(org.a)
        )
        payload = response.json()
        assert payload["data"]["project"] is None
        assert payload["error"] is None
        assert _names(payload) == ["P1", "P2"]


class TestMembershipEndpoints:
    async def test_list_members(self, client, org):
        response = await client.get(f"/api/v1/projects/{org.p1}/members", headers=_auth(org.a))
        data = response.json()["data"]
        assert [(m["display_name"], m["role"]) for m in data] == [("Bob", "contractor")]

    async def test_add_then_remove(self, client, org):
        added = await client.post(
            f"/api/v1/projects/{org.p2}/members",
            json={"profile_id": str(org.c)},
            headers=_auth(org.a),
        )
        assert added.status_code == 201
        members = added.json()["data"]
        assert [m["profile_id"] for m in members] == [str(org.c)]

        removed = await client.delete(
            f"/api/v1/projects/{org.p2}/members/{members[0]['id']}", headers=_auth(org.a)
        )
        assert removed.json()["data"] == []

        # Row survives as an inactive membership
        rows = await client.get(f"/api/v1/projects/{org.p2}/candidates", headers=_auth(org.a))
        assert str(org.c) in {p["id"] for p in rows.json()["data"]}

    async def test_blank_profile_ignored(self, client, org):
        response = await client.post(
            f"/api/v1/projects/{org.p2}/members", json={"profile_id": ""}, headers=_auth(org.a)
        )
        assert response.status_code == 201
        assert response.json() == {"data": [], "error": None}

    async def test_contractor_cannot_manage(self, client, org):
        response = await client.post(
            f"/api/v1/projects/{org.p1}/members",
            json={"profile_id": str(org.c)},
            headers=_auth(org.b),
        )
        assert response.json()["error"] == "Only admin/manager can manage project membership."

    async def test_candidates_exclude_members(self, client, org):
        response = await client.get(f"/api/v1/projects/{org.p1}/candidates", headers=_auth(org.a))
        names = [p["full_name"] for p in response.json()["data"]]
        assert names == ["Alice", "Cara"]

    async def test_candidates_focus(self, client, org):
        response = await client.get(
            f"/api/v1/projects/{org.p1}/candidates",
            params={"user": str(org.b)},
            headers=_auth(org.a),
        )
        assert response.json()["data"] == []

    async def test_candidates_blank_focus_lists_everyone(self, client, org):
        response = await client.get(
            f"/api/v1/projects/{org.p1}/candidates?user=", headers=_auth(org.a)
        )
        assert response.status_code == 200
        names = [p["full_name"] for p in response.json()["data"]]
        assert names == ["Alice", "Cara"]

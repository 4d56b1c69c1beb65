"""API tests for login, the session view and the ARMember relay."""

import httpx
import pytest
from fastapi.testclient import TestClient

from ffi_backend.config import ARMEMBER_MEMBERSHIPS_URL, JWT_AUTH_URL


@pytest.fixture
def membership_site(upstream, make_token):
    """Upstream that accepts any login and reports the plans set on it."""
    token = make_token({"data": {"user": {"id": "42"}}})

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url.startswith(JWT_AUTH_URL):
            return httpx.Response(200, json={"token": token, "user_display_name": "Jo"})
        if url.startswith(ARMEMBER_MEMBERSHIPS_URL):
            return httpx.Response(200, json={"response": {"result": {"memberships": handler.plans}}})
        return httpx.Response(404)

    handler.plans = [{"id": 7, "name": "Gold Membership"}]
    upstream.handler = handler
    return handler


def test_login_with_paid_plan(client: TestClient, membership_site, upstream):
    r = client.post("/api/auth/login", json={"username": " jo ", "password": "pw"})
    assert r.status_code == 200
    data = r.json()
    assert data["is_paid"] is True
    assert data["user"]["user_display_name"] == "Jo"
    assert data["plans"] == [{"id": 7, "name": "Gold Membership"}]
    assert upstream.requests[1].url.params["arm_user_id"] == "42"

    me = client.get("/api/auth/me").json()
    assert me["is_paid"] is True

    r = client.post("/api/calculators/risk-based-ffi", json={})
    assert r.status_code == 200


def test_login_with_free_plan_keeps_gate_closed(client: TestClient, membership_site):
    membership_site.plans = [{"id": 1, "name": "Free"}]
    r = client.post("/api/auth/login", json={"username": "jo", "password": "pw"})
    assert r.status_code == 200
    assert r.json()["is_paid"] is False
    assert client.post("/api/calculators/economic-optimum-ffi", json={}).status_code == 403


def test_login_rejected(client: TestClient, upstream):
    upstream.handler = lambda request: httpx.Response(403, json={"code": "incorrect_password"})
    r = client.post("/api/auth/login", json={"username": "jo", "password": "bad"})
    assert r.status_code == 401
    assert r.json()["detail"].startswith("Login Failed.")
    assert client.get("/api/auth/me").json() == {"user": None, "plans": [], "is_paid": False}


def test_login_requires_credentials(client: TestClient):
    r = client.post("/api/auth/login", json={"username": "", "password": "pw"})
    assert r.status_code == 422


def test_logout_clears_session(client: TestClient, membership_site):
    client.post("/api/auth/login", json={"username": "jo", "password": "pw"})
    r = client.post("/api/auth/logout")
    assert r.status_code == 200
    assert r.json() == {"message": "Logged out"}
    assert client.get("/api/auth/me").json()["is_paid"] is False
    assert client.post("/api/calculators/risk-based-ffi", json={}).status_code == 403


def test_armember_relay(client: TestClient, membership_site):
    r = client.post("/api/armember-details", json={"arm_member_id": "42"})
    assert r.status_code == 200
    data = r.json()
    assert data["message"] == "AR Member Details Fetched Successfully"
    assert data["data"]["response"]["result"]["memberships"][0]["name"] == "Gold Membership"


def test_armember_relay_upstream_failure(client: TestClient):
    r = client.post("/api/armember-details", json={"arm_member_id": "42"})
    assert r.status_code == 500
    assert "message" in r.json()

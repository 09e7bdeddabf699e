"""Tests for registration, login, the user profile and deck templates."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from pitchdeck.core.security import create_access_token, decode_access_token
from pitchdeck.models.core import User

from conftest import SAMPLE_PASSWORD, SAMPLE_USER_ID

pytestmark = pytest.mark.anyio

REGISTER_BODY = {
    "firstName": "Grace",
    "lastName": "Builder",
    "email": "Grace@Example.com",
    "password": "correct-horse",
    "companyName": "Builder Labs",
    "role": "ceo",
}


class TestRegisterAndLogin:
    async def test_register_returns_token_and_profile(self, client: AsyncClient):
        resp = await client.post("/api/auth/register", json=REGISTER_BODY)
        assert resp.status_code == 201
        data = resp.json()
        assert data["user"]["email"] == "grace@example.com"
        assert data["user"]["role"] == "ceo"
        assert data["user"]["subscription"]["plan"] == "free"
        assert data["user"]["preferences"]["theme"] == "light"
        assert decode_access_token(data["token"])["sub"] == data["user"]["id"]

    async def test_duplicate_email_is_rejected(self, client: AsyncClient):
        await client.post("/api/auth/register", json=REGISTER_BODY)
        resp = await client.post(
            "/api/auth/register", json={**REGISTER_BODY, "email": "grace@example.com"}
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "User already exists"

    async def test_short_password_is_a_validation_error(self, client: AsyncClient):
        resp = await client.post("/api/auth/register", json={**REGISTER_BODY, "password": "abc"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Request validation failed"
        assert body["errors"][0]["field"] == "password"

    async def test_login(self, client: AsyncClient, sample_user: User):
        resp = await client.post(
            "/api/auth/login",
            json={"email": "founder@example.com", "password": SAMPLE_PASSWORD},
        )
        assert resp.status_code == 200
        assert resp.json()["user"]["id"] == str(SAMPLE_USER_ID)

    async def test_login_with_wrong_password(self, client: AsyncClient, sample_user: User):
        resp = await client.post(
            "/api/auth/login",
            json={"email": "founder@example.com", "password": "wrong-password"},
        )
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid credentials"

    async def test_me(self, client: AsyncClient, headers):
        resp = await client.get("/api/auth/me", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["firstName"] == "Ada"
        assert resp.json()["companyName"] == "Acme Analytics"

    async def test_garbage_token(self, client: AsyncClient, sample_user: User):
        resp = await client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid or expired token"

    async def test_token_for_unknown_user(self, client: AsyncClient):
        token = create_access_token(SAMPLE_USER_ID)
        resp = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401


class TestUserProfile:
    async def test_update_profile(self, client: AsyncClient, headers):
        resp = await client.put(
            "/api/users/profile",
            json={"firstName": "Adeline", "role": "cto"},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json()["firstName"] == "Adeline"
        assert resp.json()["lastName"] == "Founder"
        assert resp.json()["role"] == "cto"

        resp = await client.get("/api/users/profile", headers=headers)
        assert resp.json()["firstName"] == "Adeline"

    async def test_preferences_shallow_merge(self, client: AsyncClient, headers):
        resp = await client.get("/api/users/preferences", headers=headers)
        assert resp.json() == {"theme": "light", "notifications": {"email": True, "push": True}}

        resp = await client.put(
            "/api/users/preferences",
            json={"notifications": {"email": False}, "language": "en"},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json() == {
            "theme": "light",
            "notifications": {"email": False},
            "language": "en",
        }


class TestDeckTemplates:
    async def test_list(self, client: AsyncClient, headers):
        resp = await client.get("/api/templates", headers=headers)
        assert resp.status_code == 200
        assert [t["id"] for t in resp.json()] == ["default", "saas", "fintech"]

    async def test_get_one(self, client: AsyncClient, headers):
        resp = await client.get("/api/templates/saas", headers=headers)
        assert resp.status_code == 200
        assert "business-model" in resp.json()["slides"]

    async def test_unknown_template(self, client: AsyncClient, headers):
        resp = await client.get("/api/templates/nope", headers=headers)
        assert resp.status_code == 404
        assert resp.json()["message"] == "Template not found"


async def test_responses_carry_version_and_security_headers(client: AsyncClient):
    resp = await client.get("/api/decks/shared/missing")
    assert resp.headers["X-API-Version"] == "v1"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


async def test_health_reports_database_status(client: AsyncClient, monkeypatch):
    async def _healthy() -> dict[str, str]:
        return {"status": "healthy"}

    monkeypatch.setattr("pitchdeck.main.check_database", _healthy)
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {
        "status": "healthy",
        "service": "pitchdeck-api",
        "checks": {"database": {"status": "healthy"}},
    }


def test_sentry_scrubber_hides_share_tokens_and_credentials():
    from pitchdeck.core.sentry import _scrub_sensitive_data

    event = {
        "request": {
            "url": "http://api.test/api/decks/shared/abc123?x=1",
            "headers": {"Authorization": "Bearer t"},
        },
        "transaction": "/api/decks/shared/abc123",
    }
    scrubbed = _scrub_sensitive_data(event, {})
    assert scrubbed["request"]["url"] == "http://api.test/api/decks/shared/[REDACTED]?x=1"
    assert scrubbed["request"]["headers"]["Authorization"] == "[REDACTED]"
    assert scrubbed["transaction"] == "/api/decks/shared/[REDACTED]"

    login = {"request": {"url": "http://api.test/api/auth/login", "data": {"password": "x"}}}
    assert "data" not in _scrub_sensitive_data(login, {})["request"]


async def test_api_responses_are_not_cacheable(client: AsyncClient, headers):
    resp = await client.get("/api/templates", headers=headers)
    assert resp.headers["Cache-Control"] == "no-store"


async def test_oversized_tracking_beacon_is_rejected(client: AsyncClient):
    resp = await client.post(
        "/api/analytics/track",
        content=b"x" * 70_000,
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 413
    assert resp.json()["error"] == "payload_too_large"


def test_body_limit_picks_longest_matching_prefix():
    from pitchdeck.middleware.security import RequestBodySizeLimitMiddleware

    mw = RequestBodySizeLimitMiddleware(
        app=None, max_bytes=1000, path_limits={"/api/": 500, "/api/analytics/track": 10}
    )
    assert mw.limit_for("/api/analytics/track") == 10
    assert mw.limit_for("/api/decks") == 500
    assert mw.limit_for("/health") == 1000

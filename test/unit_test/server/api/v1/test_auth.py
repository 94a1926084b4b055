import json

import httpx
import pytest
from httpx import AsyncClient

from early_autism_detector.integrations.email import SendGridClient
from early_autism_detector.integrations.supabase_auth import SupabaseAuthClient
from early_autism_detector.server.core.config import settings
from early_autism_detector.server.services.clients import get_auth_client, get_mailer

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/auth"

USER = {"id": "user-1", "email": "parent@example.com", "identities": [{"provider": "email"}]}


def _auth_client(handler):
    return lambda: SupabaseAuthClient("http://mock-supabase", "anon-key", transport=httpx.MockTransport(handler))


def _mailer(handler):
    return lambda: SendGridClient("sg-key", "noreply@example.com", "http://mock-sendgrid/v3", httpx.MockTransport(handler))


class TestRegister:
    async def test_success(self, anon_client: AsyncClient, app):
        seen = {}

        def handler(request):
            seen["redirect_to"] = request.url.params.get("redirect_to")
            return httpx.Response(200, json=USER)

        app.dependency_overrides[get_auth_client] = _auth_client(handler)

        response = await anon_client.post(f"{BASE}/register", json={"email": "parent@example.com", "password": "pw123456"})

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["user"] == {"id": "user-1", "email": "parent@example.com"}
        assert seen["redirect_to"] == f"{settings.site_url}/auth/login?verified=true"

    async def test_existing_address(self, anon_client: AsyncClient, app):
        app.dependency_overrides[get_auth_client] = _auth_client(
            lambda request: httpx.Response(200, json={**USER, "identities": []})
        )
        response = await anon_client.post(f"{BASE}/register", json={"email": "parent@example.com", "password": "pw"})
        assert response.status_code == 400
        assert response.json() == {"error": "Email already registered"}

    async def test_rejected_by_auth_service(self, anon_client: AsyncClient, app):
        app.dependency_overrides[get_auth_client] = _auth_client(
            lambda request: httpx.Response(422, json={"msg": "Password should be at least 6 characters"})
        )
        response = await anon_client.post(f"{BASE}/register", json={"email": "parent@example.com", "password": "pw"})
        assert response.status_code == 400
        assert response.json() == {"error": "Password should be at least 6 characters"}


class TestLogin:
    async def test_success(self, anon_client: AsyncClient, app):
        app.dependency_overrides[get_auth_client] = _auth_client(
            lambda request: httpx.Response(200, json={"access_token": "tok", "expires_in": 3600, "user": USER})
        )
        response = await anon_client.post(f"{BASE}/login", json={"email": "parent@example.com", "password": "pw"})
        assert response.status_code == 200
        assert response.json()["session"]["access_token"] == "tok"

    async def test_invalid_credentials(self, anon_client: AsyncClient, app):
        app.dependency_overrides[get_auth_client] = _auth_client(
            lambda request: httpx.Response(400, json={"error_description": "Invalid login credentials"})
        )
        response = await anon_client.post(f"{BASE}/login", json={"email": "parent@example.com", "password": "bad"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid login credentials"}

    async def test_rate_limited(self, anon_client: AsyncClient, app, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_auth", 2)
        app.dependency_overrides[get_auth_client] = _auth_client(
            lambda request: httpx.Response(200, json={"access_token": "tok", "user": USER})
        )
        body = {"email": "parent@example.com", "password": "pw"}

        first = await anon_client.post(f"{BASE}/login", json=body)
        await anon_client.post(f"{BASE}/login", json=body)
        blocked = await anon_client.post(f"{BASE}/login", json=body)

        assert first.headers["X-RateLimit-Limit"] == "2"
        assert blocked.status_code == 429
        assert int(blocked.headers["Retry-After"]) >= 1
        assert blocked.headers["X-RateLimit-Remaining"] == "0"

    async def test_new_bearer_token_does_not_reset_limit(self, anon_client: AsyncClient, app, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_auth", 2)
        app.dependency_overrides[get_auth_client] = _auth_client(
            lambda request: httpx.Response(200, json={"access_token": "tok", "user": USER})
        )
        body = {"email": "parent@example.com", "password": "pw"}

        statuses = [
            (
                await anon_client.post(f"{BASE}/login", json=body, headers={"Authorization": f"Bearer junk-{attempt}"})
            ).status_code
            for attempt in range(4)
        ]

        assert statuses == [200, 200, 429, 429]


class TestVerify:
    async def test_missing_token(self, anon_client: AsyncClient):
        response = await anon_client.get(f"{BASE}/verify")
        assert response.status_code == 307
        assert response.headers["location"].endswith("/auth/login?error=invalid_token")

    async def test_verified(self, anon_client: AsyncClient, app):
        app.dependency_overrides[get_auth_client] = _auth_client(lambda request: httpx.Response(200, json=USER))
        response = await anon_client.get(f"{BASE}/verify", params={"token": "hash"})
        assert response.headers["location"].endswith("/auth/login?verified=true")

    async def test_verification_failed(self, anon_client: AsyncClient, app):
        app.dependency_overrides[get_auth_client] = _auth_client(
            lambda request: httpx.Response(403, json={"msg": "Token has expired or is invalid"})
        )
        response = await anon_client.get(f"{BASE}/verify", params={"token": "hash"})
        assert response.headers["location"].endswith("/auth/login?error=verification_failed")


class TestSendVerification:
    async def test_sent(self, anon_client: AsyncClient, app):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(202)

        app.dependency_overrides[get_mailer] = _mailer(handler)

        response = await anon_client.post(
            f"{BASE}/send-verification", json={"email": "parent@example.com", "token": "abc"}
        )

        assert response.status_code == 200
        assert f"{settings.site_url}/auth/verify?token=abc" in seen["body"]["content"][0]["value"]

    async def test_delivery_failure(self, anon_client: AsyncClient, app):
        app.dependency_overrides[get_mailer] = _mailer(lambda request: httpx.Response(500))
        response = await anon_client.post(
            f"{BASE}/send-verification", json={"email": "parent@example.com", "token": "abc"}
        )
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to send verification email"}


class TestCurrentUser:
    async def test_me_creates_profile(self, client: AsyncClient):
        response = await client.get(f"{BASE}/me")
        assert response.status_code == 200
        assert response.json()["profile"] == {"id": "parent-1", "email": "parent@example.com", "display_name": None}

    async def test_bearer_token_resolved_by_auth_service(self, anon_client: AsyncClient, app):
        def handler(request):
            if request.headers.get("Authorization") == "Bearer good":
                return httpx.Response(200, json=USER)
            return httpx.Response(401, json={"msg": "invalid JWT"})

        app.dependency_overrides[get_auth_client] = _auth_client(handler)

        ok = await anon_client.get(f"{BASE}/me", headers={"Authorization": "Bearer good"})
        rejected = await anon_client.get(f"{BASE}/me", headers={"Authorization": "Bearer bad"})

        assert ok.status_code == 200
        assert ok.json()["user"]["id"] == "user-1"
        assert rejected.status_code == 401
        assert rejected.json() == {"error": "Unauthorized"}

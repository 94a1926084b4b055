import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database.repositories import AutismCenterRepository
from early_autism_detector.server.core.constant import CENTER_SESSION_COOKIE

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/center-portal"

REGISTRATION = {
    "email": "Center@Example.com",
    "password": "secret123",
    "contactPerson": "Dana Lee",
    "centerName": "Sunrise Therapy",
    "centerType": "therapy",
    "address": "10 Main St, Springfield",
    "latitude": 40.1,
    "longitude": -89.6,
    "phone": "555-0100",
}


async def _register(client: AsyncClient, **overrides) -> dict:
    response = await client.post(f"{BASE}/register", json={**REGISTRATION, **overrides})
    assert response.status_code == 200, response.text
    return response.json()["user"]


async def _login(client: AsyncClient, email="center@example.com", password="secret123") -> str:
    response = await client.post(f"{BASE}/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.cookies[CENTER_SESSION_COOKIE]


def _cookie(token: str) -> dict:
    return {"Cookie": f"{CENTER_SESSION_COOKIE}={token}"}


class TestRegister:
    async def test_creates_account_and_listing(self, anon_client: AsyncClient, session: AsyncSession):
        user = await _register(anon_client)

        assert user["email"] == "center@example.com"
        assert user["centerName"] == "Sunrise Therapy"
        assert user["isVerified"] is False
        assert user["isActive"] is True
        assert "passwordHash" not in user

        center = await AutismCenterRepository(session).get_by_center_user(user["id"])
        assert center is not None
        assert center.verified is False
        assert center.type == "therapy"
        assert "ABA Therapy" in center.services
        assert center.age_groups == ["0-3", "4-7", "8-12", "13-18"]

    async def test_duplicate_email(self, anon_client: AsyncClient):
        await _register(anon_client)
        response = await anon_client.post(f"{BASE}/register", json={**REGISTRATION, "email": "center@example.com"})
        assert response.status_code == 400
        assert response.json() == {"error": "Email already registered"}

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"centerName": ""}, "Missing required fields"),
            ({"latitude": None}, "Missing required fields"),
            ({"latitude": "north"}, "Latitude and longitude must be valid numbers"),
            ({"latitude": 91}, "Latitude must be between -90 and 90"),
            ({"longitude": -181}, "Longitude must be between -180 and 180"),
            ({"email": "not-an-email"}, "Invalid email format"),
            ({"password": "123"}, "Password must be at least 6 characters long"),
            ({"centerType": "spa"}, "Invalid center type"),
        ],
    )
    async def test_validation(self, anon_client: AsyncClient, overrides, message):
        response = await anon_client.post(f"{BASE}/register", json={**REGISTRATION, **overrides})
        assert response.status_code == 400
        assert response.json() == {"error": message}


class TestSession:
    async def test_login_sets_http_only_cookie(self, anon_client: AsyncClient):
        await _register(anon_client)
        response = await anon_client.post(f"{BASE}/login", json={"email": "center@example.com", "password": "secret123"})

        assert response.status_code == 200
        set_cookie = response.headers["set-cookie"].lower()
        assert "httponly" in set_cookie
        assert "max-age=604800" in set_cookie
        assert "samesite=lax" in set_cookie
        assert response.json()["user"]["lastLogin"] is not None

    @pytest.mark.parametrize("password", ["wrong-password", "secret12"])
    async def test_login_rejects_bad_password(self, anon_client: AsyncClient, password):
        await _register(anon_client)
        response = await anon_client.post(f"{BASE}/login", json={"email": "center@example.com", "password": password})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}

    async def test_login_requires_fields(self, anon_client: AsyncClient):
        response = await anon_client.post(f"{BASE}/login", json={"email": "center@example.com"})
        assert response.status_code == 400
        assert response.json() == {"error": "Email and password are required"}

    async def test_verify_and_logout(self, anon_client: AsyncClient):
        await _register(anon_client)
        token = await _login(anon_client)
        anon_client.cookies.clear()

        verified = await anon_client.get(f"{BASE}/verify", headers=_cookie(token))
        assert verified.status_code == 200
        assert verified.json()["user"]["email"] == "center@example.com"

        logout = await anon_client.post(f"{BASE}/logout", headers=_cookie(token))
        assert logout.status_code == 200

        after = await anon_client.get(f"{BASE}/verify", headers=_cookie(token))
        assert after.status_code == 401
        assert after.json() == {"error": "Invalid or expired session"}

    async def test_verify_without_cookie(self, anon_client: AsyncClient):
        response = await anon_client.get(f"{BASE}/verify")
        assert response.status_code == 401
        assert response.json() == {"error": "No session token"}


class TestUpdate:
    async def test_updates_account_and_listing(self, anon_client: AsyncClient, session: AsyncSession):
        user = await _register(anon_client)
        token = await _login(anon_client)
        anon_client.cookies.clear()

        response = await anon_client.put(
            f"{BASE}/update",
            headers=_cookie(token),
            json={**REGISTRATION, "email": "center@example.com", "centerName": "Sunrise Center", "password": None},
        )

        assert response.status_code == 200, response.text
        assert response.json()["user"]["centerName"] == "Sunrise Center"
        session.expunge_all()
        center = await AutismCenterRepository(session).get_by_center_user(user["id"])
        assert center.name == "Sunrise Center"

    async def test_requires_phone(self, anon_client: AsyncClient):
        await _register(anon_client)
        token = await _login(anon_client)
        anon_client.cookies.clear()

        response = await anon_client.put(f"{BASE}/update", headers=_cookie(token), json={**REGISTRATION, "phone": ""})
        assert response.status_code == 400

    async def test_email_conflict(self, anon_client: AsyncClient):
        await _register(anon_client)
        await _register(anon_client, email="other@example.com")
        token = await _login(anon_client)
        anon_client.cookies.clear()

        response = await anon_client.put(
            f"{BASE}/update", headers=_cookie(token), json={**REGISTRATION, "email": "other@example.com"}
        )
        assert response.status_code == 409
        assert response.json() == {"error": "Email is already registered by another center"}

    async def test_requires_session(self, anon_client: AsyncClient):
        response = await anon_client.put(f"{BASE}/update", json=REGISTRATION)
        assert response.status_code == 401


class TestForceSync:
    async def test_recreates_missing_listing(self, anon_client: AsyncClient, session: AsyncSession):
        user = await _register(anon_client)
        token = await _login(anon_client)
        anon_client.cookies.clear()
        centers = AutismCenterRepository(session)
        await centers.delete((await centers.get_by_center_user(user["id"])).id)

        response = await anon_client.post(f"{BASE}/force-sync", headers=_cookie(token))

        assert response.status_code == 200, response.text
        body = response.json()
        assert body["success"] is True
        assert body["data"]["center_user_id"] == user["id"]
        assert body["data"]["name"] == "Sunrise Therapy"
        assert await centers.get_by_center_user(user["id"]) is not None

    async def test_requires_session(self, anon_client: AsyncClient):
        response = await anon_client.post(f"{BASE}/force-sync")
        assert response.status_code == 401
        assert response.json() == {"error": "No session token"}

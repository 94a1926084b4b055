"""Unit tests for admin token issuing and checking."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError, jwt

from early_autism_detector.server.core.config import settings
from early_autism_detector.server.services.admin_auth import (
    ALGORITHM,
    check_admin_credentials,
    create_admin_token,
    decode_admin_token,
    require_admin,
)


@pytest.fixture(autouse=True)
def admin_account(monkeypatch):
    monkeypatch.setattr(settings, "admin_email", "Admin@Example.com")
    monkeypatch.setattr(settings, "admin_password", "pw")
    monkeypatch.setattr(settings, "admin_jwt_secret", "secret")
    monkeypatch.setattr(settings, "admin_session_hours", 2)


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestCredentials:
    def test_email_is_case_insensitive(self):
        assert check_admin_credentials(" admin@example.com ", "pw")

    def test_password_is_exact(self):
        assert not check_admin_credentials("admin@example.com", "PW")


class TestTokens:
    def test_roundtrip(self):
        now = datetime.now(timezone.utc)
        token, expires_at = create_admin_token("admin@example.com", now=now)

        assert expires_at == now + timedelta(hours=2)
        assert decode_admin_token(token) == "admin@example.com"

    def test_expired(self):
        token, _ = create_admin_token("admin@example.com", now=datetime.now(timezone.utc) - timedelta(hours=3))
        with pytest.raises(JWTError):
            decode_admin_token(token)

    def test_wrong_scope(self):
        token = jwt.encode({"sub": "someone", "scope": "center"}, "secret", algorithm=ALGORITHM)
        with pytest.raises(JWTError, match="Not an admin token"):
            decode_admin_token(token)

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "admin@example.com", "scope": "admin"}, "other", algorithm=ALGORITHM)
        with pytest.raises(JWTError):
            decode_admin_token(token)


@pytest.mark.asyncio
class TestRequireAdmin:
    async def test_accepts_valid_token(self):
        token, _ = create_admin_token("admin@example.com")
        assert await require_admin(_bearer(token)) == "admin@example.com"

    @pytest.mark.parametrize("credentials", [None, _bearer("garbage")])
    async def test_rejects(self, credentials):
        with pytest.raises(HTTPException) as exc_info:
            await require_admin(credentials)
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Unauthorized - Admin access required"

"""
Hosted authentication client.

A thin async wrapper over the Supabase GoTrue REST API covering sign-up,
password sign-in, access-token lookup, e-mail OTP verification and the
admin user listing.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from early_autism_detector.core.logging_config import get_logger

logger = get_logger(__name__)


class SupabaseAuthError(Exception):
    """Raised when the auth service rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SupabaseUser(BaseModel):
    """Subset of the auth user object used by the backend."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    email_confirmed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None
    identities: List[Dict[str, Any]] = Field(default_factory=list)
    user_metadata: Dict[str, Any] = Field(default_factory=dict)


class SupabaseSession(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"
    user: SupabaseUser


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Auth service returned {response.status_code}"
    for key in ("msg", "error_description", "message", "error"):
        if isinstance(body, dict) and body.get(key):
            return str(body[key])
    return f"Auth service returned {response.status_code}"


class SupabaseAuthClient:
    """Async client for the hosted auth REST API."""

    def __init__(
        self,
        base_url: Optional[str],
        anon_key: Optional[str],
        service_role_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        """
        Args:
            base_url: Project URL (``https://<ref>.supabase.co``)
            anon_key: Public anon key
            service_role_key: Service role key, required for admin calls
            transport: Optional httpx transport (used by tests)
            timeout: Request timeout in seconds
        """
        self.base_url = (base_url or "").rstrip("/")
        self.anon_key = anon_key
        self.service_role_key = service_role_key
        self._transport = transport
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.anon_key)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        bearer: Optional[str] = None,
        api_key: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        if not self.configured:
            raise SupabaseAuthError("Auth service is not configured", status_code=503)

        headers = {"apikey": api_key or self.anon_key or ""}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"

        try:
            async with httpx.AsyncClient(
                base_url=f"{self.base_url}/auth/v1", transport=self._transport, timeout=self._timeout
            ) as client:
                response = await client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Auth service request failed: {method} {path}: {e}")
            raise SupabaseAuthError("Auth service is unavailable", status_code=503) from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.debug(f"Auth service rejected {method} {path}: {response.status_code} {message}")
            raise SupabaseAuthError(message, status_code=response.status_code)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Auth service returned an unreadable body: {method} {path}")
            raise SupabaseAuthError("Auth service is unavailable", status_code=502) from e

    async def sign_up(self, email: str, password: str, redirect_to: Optional[str] = None) -> SupabaseUser:
        """Register a new account.

        The auth service answers a repeated sign-up for an existing address with a
        user that has no identities; callers treat that as "already registered".
        """
        params = {"redirect_to": redirect_to} if redirect_to else None
        data = await self._request("POST", "/signup", params=params, json={"email": email, "password": password})
        return SupabaseUser.model_validate(data.get("user") or data)

    async def sign_in_with_password(self, email: str, password: str) -> SupabaseSession:
        data = await self._request(
            "POST", "/token", params={"grant_type": "password"}, json={"email": email, "password": password}
        )
        return SupabaseSession.model_validate(data)

    async def get_user(self, access_token: str) -> SupabaseUser:
        """Resolve an access token to its user."""
        data = await self._request("GET", "/user", bearer=access_token)
        return SupabaseUser.model_validate(data)

    async def verify_email(self, token_hash: str) -> SupabaseUser:
        data = await self._request("POST", "/verify", json={"type": "email", "token_hash": token_hash})
        return SupabaseUser.model_validate(data.get("user") or data)

    async def list_users(self, page: int = 1, per_page: int = 1000) -> List[SupabaseUser]:
        """List accounts through the admin API (service role key required)."""
        if not self.service_role_key:
            raise SupabaseAuthError("Service role key is not configured", status_code=503)
        data = await self._request(
            "GET",
            "/admin/users",
            bearer=self.service_role_key,
            api_key=self.service_role_key,
            params={"page": page, "per_page": per_page},
        )
        users = data.get("users", []) if isinstance(data, dict) else data
        return [SupabaseUser.model_validate(user) for user in users]

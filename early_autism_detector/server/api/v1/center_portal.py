"""
Center portal endpoints.

Treatment centers manage their own locator listing through a separate account
system: bcrypt passwords and opaque session tokens carried in an HTTP-only cookie.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database import get_session
from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.core.models.io.autism_centers import AutismCenterRead
from early_autism_detector.core.models.io.portal import (
    CenterLogin,
    CenterRegistration,
    CenterUserEnvelope,
    CenterUserRead,
)
from early_autism_detector.server.core.config import settings
from early_autism_detector.server.core.constant import CENTER_SESSION_COOKIE, CENTER_SESSION_DAYS
from early_autism_detector.server.services.center_auth import CenterAuthService, CenterPortalError
from early_autism_detector.server.services.rate_limit import rate_limit

router = APIRouter(tags=["center-portal"])
logger = get_logger(__name__)

SESSION_MAX_AGE = CENTER_SESSION_DAYS * 24 * 60 * 60


def _http_error(e: CenterPortalError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


def _envelope(user, message: Optional[str] = None) -> dict:
    return CenterUserEnvelope(message=message, user=CenterUserRead.model_validate(user)).model_dump(
        by_alias=True, mode="json"
    )


@router.post(
    "/register",
    dependencies=[Depends(rate_limit("auth"))],
    summary="Register Center",
    description="Create a center portal account and its (unverified) locator listing.",
    responses={400: {"description": "Validation failure or email already registered"}},
)
async def register(body: CenterRegistration, session: AsyncSession = Depends(get_session)):
    try:
        user = await CenterAuthService(session).register(body)
    except CenterPortalError as e:
        raise _http_error(e) from e
    return _envelope(user, "Registration successful. Your center is pending verification.")


@router.post(
    "/login",
    dependencies=[Depends(rate_limit("auth"))],
    summary="Center Login",
    description="Check credentials and set the session cookie.",
    responses={400: {"description": "Malformed input"}, 401: {"description": "Invalid email or password"}},
)
async def login(body: CenterLogin, response: Response, session: AsyncSession = Depends(get_session)):
    try:
        user, center_session = await CenterAuthService(session).login(body.email, body.password)
    except CenterPortalError as e:
        raise _http_error(e) from e

    response.set_cookie(
        key=CENTER_SESSION_COOKIE,
        value=center_session.session_token,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        secure=settings.environment == "production",
        samesite="lax",
        path="/",
    )
    return _envelope(user, "Login successful")


@router.get(
    "/verify",
    summary="Verify Center Session",
    responses={401: {"description": "No session token, or the session is invalid or expired"}},
)
async def verify(
    session_token: Optional[str] = Cookie(default=None, alias=CENTER_SESSION_COOKIE),
    session: AsyncSession = Depends(get_session),
):
    try:
        user = await CenterAuthService(session).authenticate(session_token)
    except CenterPortalError as e:
        raise _http_error(e) from e
    return _envelope(user)


@router.post("/logout", summary="Center Logout")
async def logout(
    response: Response,
    session_token: Optional[str] = Cookie(default=None, alias=CENTER_SESSION_COOKIE),
    session: AsyncSession = Depends(get_session),
):
    await CenterAuthService(session).logout(session_token)
    response.delete_cookie(CENTER_SESSION_COOKIE, path="/")
    return {"success": True, "message": "Logged out successfully"}


@router.put(
    "/update",
    summary="Update Center Profile",
    description="Update the account details and the linked locator listing.",
    responses={
        400: {"description": "Validation failure"},
        401: {"description": "No session token, or the session is invalid or expired"},
        409: {"description": "Email is already registered by another center"},
    },
)
async def update_profile(
    body: CenterRegistration,
    session_token: Optional[str] = Cookie(default=None, alias=CENTER_SESSION_COOKIE),
    session: AsyncSession = Depends(get_session),
):
    service = CenterAuthService(session)
    try:
        user = await service.authenticate(session_token)
        user = await service.update_profile(user, body)
    except CenterPortalError as e:
        raise _http_error(e) from e
    logger.info(f"Center user {user.id} updated their profile")
    return _envelope(user, "Profile updated successfully")


@router.post(
    "/force-sync",
    summary="Sync Locator Listing",
    description="Re-create or refresh the signed-in center's locator listing from its account details.",
    responses={
        400: {"description": "Account is missing name, type, address or coordinates"},
        401: {"description": "No session token, or the session is invalid or expired"},
    },
)
async def force_sync(
    session_token: Optional[str] = Cookie(default=None, alias=CENTER_SESSION_COOKIE),
    session: AsyncSession = Depends(get_session),
):
    service = CenterAuthService(session)
    try:
        user = await service.authenticate(session_token)
        center = await service.force_sync(user)
    except CenterPortalError as e:
        raise _http_error(e) from e
    return {
        "success": True,
        "message": "Center synced to locator",
        "data": AutismCenterRead.model_validate(center).model_dump(mode="json"),
    }

"""
Parent authentication endpoints.

Registration, login and e-mail verification are delegated to the hosted
auth service; verification e-mails are sent through SendGrid.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database import get_session
from early_autism_detector.core.database.repositories import ProfileRepository
from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.integrations.email import EmailDeliveryError, SendGridClient
from early_autism_detector.integrations.supabase_auth import SupabaseAuthClient, SupabaseAuthError
from early_autism_detector.server.core.config import settings
from early_autism_detector.server.services.auth import CurrentUserDep
from early_autism_detector.server.services.clients import get_auth_client, get_mailer

router = APIRouter()
logger = get_logger(__name__)


class Credentials(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class VerificationRequest(BaseModel):
    email: str
    token: str


@router.post(
    "/register",
    summary="Register Parent Account",
    description="Create a parent account with the hosted auth service. A confirmation e-mail is sent by the service.",
    responses={
        200: {"description": "Account created; e-mail confirmation pending"},
        400: {"description": "Email already registered or rejected by the auth service"},
    },
)
async def register(body: Credentials, auth_client: SupabaseAuthClient = Depends(get_auth_client)):
    """
    Register a parent account.

    The auth service answers a sign-up for an existing address with a user that
    has no identities; that case is reported as already registered.
    """
    try:
        user = await auth_client.sign_up(
            body.email, body.password, redirect_to=f"{settings.site_url}/auth/login?verified=true"
        )
    except SupabaseAuthError as e:
        if e.status_code and e.status_code >= 500:
            raise HTTPException(status_code=e.status_code, detail=e.message) from e
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e

    if not user.identities:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    logger.info(f"Parent account registered: {user.id}")
    return {
        "success": True,
        "message": "Registration successful! Please check your email to confirm your account.",
        "user": {"id": user.id, "email": user.email},
    }


@router.post(
    "/login",
    summary="Parent Login",
    description="Sign in with email and password; returns the hosted auth session.",
    responses={
        200: {"description": "Signed in"},
        401: {"description": "Invalid credentials"},
    },
)
async def login(body: Credentials, auth_client: SupabaseAuthClient = Depends(get_auth_client)):
    try:
        auth_session = await auth_client.sign_in_with_password(body.email, body.password)
    except SupabaseAuthError as e:
        if e.status_code and e.status_code >= 500:
            raise HTTPException(status_code=e.status_code, detail=e.message) from e
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e

    return {
        "success": True,
        "user": {"id": auth_session.user.id, "email": auth_session.user.email},
        "session": {
            "access_token": auth_session.access_token,
            "refresh_token": auth_session.refresh_token,
            "expires_in": auth_session.expires_in,
            "token_type": auth_session.token_type,
        },
    }


@router.get(
    "/verify",
    summary="Verify Email",
    description="Confirm an e-mail address from the link in the verification e-mail and redirect to the login page.",
    response_class=RedirectResponse,
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
)
async def verify(token: Optional[str] = None, auth_client: SupabaseAuthClient = Depends(get_auth_client)):
    if not token:
        return RedirectResponse(f"{settings.site_url}/auth/login?error=invalid_token")
    try:
        await auth_client.verify_email(token)
    except SupabaseAuthError as e:
        logger.info(f"Email verification failed: {e.message}")
        return RedirectResponse(f"{settings.site_url}/auth/login?error=verification_failed")
    return RedirectResponse(f"{settings.site_url}/auth/login?verified=true")


@router.post(
    "/send-verification",
    summary="Send Verification Email",
    description="Send an account verification e-mail containing a link back to the verify endpoint.",
    responses={
        200: {"description": "E-mail handed to the delivery service"},
        500: {"description": "E-mail could not be sent"},
    },
)
async def send_verification(body: VerificationRequest, mailer: SendGridClient = Depends(get_mailer)):
    verification_url = f"{settings.site_url}/auth/verify?token={quote(body.token)}"
    try:
        await mailer.send_verification(body.email, verification_url)
    except EmailDeliveryError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to send verification email"
        ) from e
    return {"success": True}


@router.get(
    "/me",
    summary="Current User",
    description="Return the signed-in parent and their profile, creating the profile on first access.",
    responses={401: {"description": "Missing or invalid access token"}},
)
async def me(user: CurrentUserDep, session: AsyncSession = Depends(get_session)):
    profile = await ProfileRepository(session).get_or_create(user.id, user.email)
    return {
        "user": {"id": user.id, "email": user.email, "email_confirmed_at": user.email_confirmed_at},
        "profile": {"id": profile.id, "email": profile.email, "display_name": profile.display_name},
    }

"""
Center portal account service.

Handles registration, password login with opaque session tokens, session
lookup, logout and profile updates. Each account owns one listing in
``autism_centers`` which is kept in step with the account's details.
"""

from __future__ import annotations

import re
import secrets
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

import bcrypt
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database.base import utc_now
from early_autism_detector.core.database.entities.autism_centers import AutismCenter, CenterType
from early_autism_detector.core.database.entities.center_users import CenterSession, CenterUser
from early_autism_detector.core.database.repositories import AutismCenterRepository, CenterUserRepository
from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.core.models.io.portal import (
    CenterListingStatus,
    CenterRegistration,
    CenterSyncReport,
    CenterSyncStats,
    CenterSyncStatus,
)
from early_autism_detector.server.core.constant import CENTER_SESSION_DAYS

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

DEFAULT_SERVICES: Dict[str, List[str]] = {
    CenterType.DIAGNOSTIC.value: ["ADOS-2 Assessment", "Developmental Evaluation", "Speech Assessment"],
    CenterType.THERAPY.value: ["ABA Therapy", "Speech Therapy", "Occupational Therapy"],
    CenterType.SUPPORT.value: ["Support Groups", "Family Counseling", "Resource Navigation"],
    CenterType.EDUCATION.value: ["Inclusive Classrooms", "Teacher Training", "Parent Education"],
}
DEFAULT_AGE_GROUPS = ["0-3", "4-7", "8-12", "13-18"]
DEFAULT_INSURANCE = ["Private Pay", "Insurance", "Medicaid"]

VALID_CENTER_TYPES = {center_type.value for center_type in CenterType}


class CenterPortalError(Exception):
    """A center portal request that cannot be fulfilled, with its HTTP status."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == value


def validate_center_details(payload: CenterRegistration, *, registering: bool) -> None:
    """
    Validate a registration or profile update body.

    Registration requires a password; an update requires a phone number instead.

    Raises:
        CenterPortalError: 400 with the first failing rule
    """
    required = [
        payload.email,
        payload.contact_person,
        payload.center_name,
        payload.center_type,
        payload.address,
        payload.password if registering else payload.phone,
    ]
    if not all(required) or payload.latitude is None or payload.longitude is None:
        raise CenterPortalError("Missing required fields")
    if not _is_number(payload.latitude) or not _is_number(payload.longitude):
        raise CenterPortalError("Latitude and longitude must be valid numbers")
    if not -90 <= payload.latitude <= 90:
        raise CenterPortalError("Latitude must be between -90 and 90")
    if not -180 <= payload.longitude <= 180:
        raise CenterPortalError("Longitude must be between -180 and 180")
    if not EMAIL_PATTERN.match(payload.email):
        raise CenterPortalError("Invalid email format")
    if registering and len(payload.password) < MIN_PASSWORD_LENGTH:
        raise CenterPortalError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if payload.center_type not in VALID_CENTER_TYPES:
        raise CenterPortalError("Invalid center type")


class CenterAuthService:
    """Service for center portal accounts over an AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.users = CenterUserRepository(session)
        self.centers = AutismCenterRepository(session)

    async def register(self, payload: CenterRegistration) -> CenterUser:
        """
        Create a center account and its locator listing.

        Raises:
            CenterPortalError: On validation failure or duplicate email
        """
        validate_center_details(payload, registering=True)
        email = payload.email.strip().lower()
        if await self.users.get_by_email(email) is not None:
            raise CenterPortalError("Email already registered")

        user = await self.users.create(
            CenterUser(
                email=email,
                password_hash=hash_password(payload.password),
                contact_person=payload.contact_person,
                center_name=payload.center_name,
                center_type=payload.center_type,
                address=payload.address,
                latitude=float(payload.latitude),
                longitude=float(payload.longitude),
                phone=payload.phone,
                description=payload.description,
                business_license=payload.business_license,
            )
        )
        logger.info(f"Center user registered: {user.id}")

        try:
            await self.sync_center(user)
        except Exception as e:
            await self.session.rollback()
            await self.session.refresh(user)
            logger.error(f"Failed to sync autism center for center user {user.id}: {e}", exc_info=True)
        return user

    async def sync_center(self, user: CenterUser) -> AutismCenter:
        """Create or refresh the locator listing owned by ``user``."""
        center = await self.centers.get_by_center_user(user.id)
        details = {
            "name": user.center_name,
            "type": user.center_type,
            "address": user.address,
            "latitude": user.latitude,
            "longitude": user.longitude,
            "phone": user.phone,
            "email": user.email,
            "description": user.description,
            "contact_person": user.contact_person,
            "verified": user.is_verified,
        }
        if center is not None:
            return await self.centers.update(center, details)
        return await self.centers.create(
            AutismCenter(
                center_user_id=user.id,
                services=list(DEFAULT_SERVICES.get(user.center_type, [])),
                age_groups=list(DEFAULT_AGE_GROUPS),
                insurance_accepted=list(DEFAULT_INSURANCE),
                **details,
            )
        )

    async def force_sync(self, user: CenterUser) -> AutismCenter:
        """
        Push an account's details to its listing on request.

        Raises:
            CenterPortalError: 400 when the account lacks the details a listing needs
        """
        if not user.center_name or not user.center_type or not user.address:
            raise CenterPortalError("Missing required center information (name, type, or address)")
        if user.latitude is None or user.longitude is None:
            raise CenterPortalError("Missing coordinates - please update your center location")
        center = await self.sync_center(user)
        logger.info(f"Center user {user.id} synced listing {center.id}")
        return center

    async def sync_all(self) -> CenterSyncReport:
        """Create or refresh the listing of every active account, collecting failures."""
        # A failed sync rolls back and expires loaded rows, so each account is re-read
        accounts = [(user.id, user.center_name) for user in await self.users.list() if user.is_active]
        stats = CenterSyncStats(total=len(accounts))
        errors: List[str] = []
        for user_id, center_name in accounts:
            user = await self.users.get_by_id(user_id)
            existed = await self.centers.get_by_center_user(user.id) is not None
            try:
                await self.sync_center(user)
            except Exception as e:
                await self.session.rollback()
                logger.error(f"Failed to sync autism center for center user {user_id}: {e}", exc_info=True)
                errors.append(f"Failed to sync {center_name}: {e}")
                continue
            stats.synced += 1
            if existed:
                stats.updated += 1
            else:
                stats.created += 1
        stats.errors = len(errors)
        logger.info(f"Center sync completed: {stats.synced}/{stats.total} synced, {stats.errors} failed")
        return CenterSyncReport(message=f"Sync completed: {stats.synced} centers synced", stats=stats, errors=errors)

    async def remove_listing(self, center_user_id: str) -> bool:
        center = await self.centers.get_by_center_user(center_user_id)
        if center is None:
            return False
        return await self.centers.delete(center.id)

    async def sync_status(self) -> CenterSyncStatus:
        accounts = []
        for user in await self.users.list():
            listing = await self.centers.get_by_center_user(user.id)
            accounts.append(
                CenterListingStatus(
                    center_user_id=user.id,
                    center_name=user.center_name,
                    is_active=user.is_active,
                    has_listing=listing is not None,
                )
            )
        listed = sum(1 for account in accounts if account.has_listing)
        return CenterSyncStatus(total=len(accounts), listed=listed, unlisted=len(accounts) - listed, accounts=accounts)

    async def login(self, email: Optional[str], password: Optional[str]) -> Tuple[CenterUser, CenterSession]:
        """
        Check credentials and open a session.

        Raises:
            CenterPortalError: 400 for malformed input, 401 for bad credentials
        """
        if not email or not password:
            raise CenterPortalError("Email and password are required")
        if not EMAIL_PATTERN.match(email):
            raise CenterPortalError("Invalid email format")

        user = await self.users.get_by_email(email.strip().lower())
        if user is None or not user.is_active or not verify_password(password, user.password_hash):
            raise CenterPortalError("Invalid email or password", status_code=401)

        purged = await self.users.purge_expired_sessions()
        if purged:
            logger.debug(f"Purged {purged} expired center sessions")
        center_session = await self.users.create_session(
            user.id, secrets.token_urlsafe(32), timedelta(days=CENTER_SESSION_DAYS)
        )
        user = await self.users.update(user, {"last_login": utc_now()})
        logger.info(f"Center user logged in: {user.id}")
        return user, center_session

    async def authenticate(self, token: Optional[str]) -> CenterUser:
        """
        Resolve a session token to its account.

        Raises:
            CenterPortalError: 401 when the token is missing, unknown or expired
        """
        if not token:
            raise CenterPortalError("No session token", status_code=401)
        resolved = await self.users.get_session_user(token)
        if resolved is None:
            raise CenterPortalError("Invalid or expired session", status_code=401)
        return resolved[1]

    async def logout(self, token: Optional[str]) -> None:
        if token:
            await self.users.delete_session(token)

    async def update_profile(self, user: CenterUser, payload: CenterRegistration) -> CenterUser:
        """
        Update account details and the owned listing.

        Raises:
            CenterPortalError: 400 on validation failure, 409 when the new email belongs to another account
        """
        validate_center_details(payload, registering=False)
        email = payload.email.strip().lower()
        if email != user.email:
            existing = await self.users.get_by_email(email)
            if existing is not None and existing.id != user.id:
                raise CenterPortalError("Email is already registered by another center", status_code=409)

        user = await self.users.update(
            user,
            {
                "email": email,
                "center_name": payload.center_name,
                "contact_person": payload.contact_person,
                "phone": payload.phone,
                "address": payload.address,
                "latitude": float(payload.latitude),
                "longitude": float(payload.longitude),
                "center_type": payload.center_type,
                "description": payload.description or None,
                "business_license": payload.business_license or None,
                "updated_at": utc_now(),
            },
        )
        try:
            await self.sync_center(user)
        except Exception as e:
            await self.session.rollback()
            await self.session.refresh(user)
            logger.error(f"Failed to sync autism center for center user {user.id}: {e}", exc_info=True)
        return user

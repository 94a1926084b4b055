"""Unit tests for the center portal account service."""

from datetime import timedelta

import pytest
from sqlmodel import select

from early_autism_detector.core.database.entities.center_users import CenterSession
from early_autism_detector.core.models.io.portal import CenterRegistration
from early_autism_detector.server.services.center_auth import (
    CenterAuthService,
    CenterPortalError,
    hash_password,
    validate_center_details,
    verify_password,
)

DETAILS = {
    "email": "center@example.com",
    "password": "secret123",
    "contact_person": "Dana",
    "center_name": "Sunrise",
    "center_type": "diagnostic",
    "address": "10 Main St",
    "latitude": 40.0,
    "longitude": -89.0,
    "phone": "555-0100",
}


class TestPasswords:
    def test_hash_roundtrip(self):
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    def test_malformed_hash(self):
        assert verify_password("secret123", "not-a-bcrypt-hash") is False


class TestValidateCenterDetails:
    def test_accepts_valid_registration(self):
        validate_center_details(CenterRegistration(**DETAILS), registering=True)

    def test_update_requires_phone_not_password(self):
        body = CenterRegistration(**{**DETAILS, "password": None})
        validate_center_details(body, registering=False)

        with pytest.raises(CenterPortalError, match="Missing required fields"):
            validate_center_details(CenterRegistration(**{**DETAILS, "phone": None}), registering=False)

    def test_boolean_is_not_a_coordinate(self):
        with pytest.raises(CenterPortalError, match="valid numbers"):
            validate_center_details(CenterRegistration(**{**DETAILS, "latitude": True}), registering=True)

    def test_boundaries_are_inclusive(self):
        validate_center_details(CenterRegistration(**{**DETAILS, "latitude": -90, "longitude": 180}), registering=True)


@pytest.mark.asyncio
class TestCenterAuthService:
    async def test_login_normalizes_email(self, session):
        service = CenterAuthService(session)
        await service.register(CenterRegistration(**{**DETAILS, "email": "Center@Example.com"}))

        user, center_session = await service.login("CENTER@example.com", "secret123")

        assert user.email == "center@example.com"
        assert user.last_login is not None
        assert (await service.authenticate(center_session.session_token)).id == user.id

    async def test_inactive_account_cannot_log_in(self, session):
        service = CenterAuthService(session)
        user = await service.register(CenterRegistration(**DETAILS))
        await service.users.update(user, {"is_active": False})

        with pytest.raises(CenterPortalError) as exc_info:
            await service.login("center@example.com", "secret123")
        assert exc_info.value.status_code == 401

    async def test_sync_center_updates_existing_listing(self, session):
        service = CenterAuthService(session)
        user = await service.register(CenterRegistration(**DETAILS))
        listing = await service.centers.get_by_center_user(user.id)
        assert listing.services == ["ADOS-2 Assessment", "Developmental Evaluation", "Speech Assessment"]

        user = await service.users.update(user, {"center_name": "Sunrise Clinic", "is_verified": True})
        synced = await service.sync_center(user)

        assert synced.id == listing.id
        assert synced.name == "Sunrise Clinic"
        assert synced.verified is True

    async def test_logout_ends_session(self, session):
        service = CenterAuthService(session)
        await service.register(CenterRegistration(**DETAILS))
        _, center_session = await service.login("center@example.com", "secret123")

        await service.logout(center_session.session_token)

        with pytest.raises(CenterPortalError, match="Invalid or expired session"):
            await service.authenticate(center_session.session_token)

    async def test_login_purges_expired_sessions(self, session):
        service = CenterAuthService(session)
        user = await service.register(CenterRegistration(**DETAILS))
        await service.users.create_session(user.id, "stale", timedelta(seconds=-1))

        _, fresh = await service.login("center@example.com", "secret123")

        tokens = (await session.execute(select(CenterSession.session_token))).scalars().all()
        assert tokens == [fresh.session_token]

    async def test_force_sync_requires_coordinates(self, session):
        service = CenterAuthService(session)
        user = await service.register(CenterRegistration(**DETAILS))
        user.latitude = None

        with pytest.raises(CenterPortalError, match="Missing coordinates"):
            await service.force_sync(user)

    async def test_sync_all_skips_inactive_accounts(self, session):
        service = CenterAuthService(session)
        active = await service.register(CenterRegistration(**DETAILS))
        inactive = await service.register(CenterRegistration(**{**DETAILS, "email": "closed@example.com"}))
        await service.users.update(inactive, {"is_active": False})
        await service.remove_listing(active.id)

        report = await service.sync_all()

        assert report.stats.total == 1
        assert report.stats.created == 1
        assert report.errors == []
        assert await service.centers.get_by_center_user(active.id) is not None
        assert await service.centers.get_by_center_user(inactive.id) is not None

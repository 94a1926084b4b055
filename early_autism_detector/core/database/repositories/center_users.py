"""
Center portal account and session repository.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import as_utc, utc_now
from ..entities.center_users import CenterSession, CenterUser
from .base import BaseRepository


class CenterUserRepository(BaseRepository[CenterUser]):
    """Repository for center portal accounts and their sessions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CenterUser)

    async def get_by_email(self, email: str) -> Optional[CenterUser]:
        stmt = select(CenterUser).where(CenterUser.email == email)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create_session(self, center_user_id: str, token: str, lifetime: timedelta) -> CenterSession:
        center_session = CenterSession(
            center_user_id=center_user_id,
            session_token=token,
            expires_at=utc_now() + lifetime,
        )
        self.session.add(center_session)
        await self.session.commit()
        await self.session.refresh(center_session)
        return center_session

    async def get_session_user(
        self, token: str, now: Optional[datetime] = None
    ) -> Optional[Tuple[CenterSession, CenterUser]]:
        """Resolve an unexpired session token to its session and active account.

        Expired sessions are deleted on lookup.
        """
        now = now or utc_now()
        stmt = (
            select(CenterSession, CenterUser)
            .join(CenterUser, CenterUser.id == CenterSession.center_user_id)  # type: ignore
            .where(CenterSession.session_token == token)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        if row is None:
            return None
        center_session, center_user = row
        if as_utc(center_session.expires_at) <= as_utc(now):
            await self.session.delete(center_session)
            await self.session.commit()
            return None
        if not center_user.is_active:
            return None
        return center_session, center_user

    async def delete_session(self, token: str) -> None:
        await self.session.execute(delete(CenterSession).where(CenterSession.session_token == token))
        await self.session.commit()

    async def purge_expired_sessions(self, now: Optional[datetime] = None) -> int:
        """Delete every expired session and return how many were removed."""
        result = await self.session.execute(
            delete(CenterSession).where(CenterSession.expires_at <= (now or utc_now()))
        )
        await self.session.commit()
        return result.rowcount or 0

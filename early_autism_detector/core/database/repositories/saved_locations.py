"""
Saved location repository, scoped per user.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.saved_locations import SavedLocation
from .base import BaseRepository


class SavedLocationRepository(BaseRepository[SavedLocation]):
    """Repository for saved locations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SavedLocation)

    async def list_for_user(self, user_id: str) -> List[SavedLocation]:
        stmt = (
            select(SavedLocation)
            .where(SavedLocation.user_id == user_id)
            .order_by(SavedLocation.created_at.desc())  # type: ignore
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_owned(self, location_id: str, user_id: str) -> Optional[SavedLocation]:
        stmt = select(SavedLocation).where(SavedLocation.id == location_id, SavedLocation.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

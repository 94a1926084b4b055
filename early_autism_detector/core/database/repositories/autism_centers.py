"""
Treatment center repository.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.autism_centers import AutismCenter, CenterType
from .base import BaseRepository


class AutismCenterRepository(BaseRepository[AutismCenter]):
    """Repository for treatment centers."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AutismCenter)

    async def list_by_type(self, center_type: Optional[str] = None) -> List[AutismCenter]:
        stmt = select(AutismCenter)
        if center_type:
            stmt = stmt.where(AutismCenter.type == center_type)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search(self, term: str, limit: int = 50) -> List[AutismCenter]:
        """Case-insensitive substring match on name, address and description."""
        pattern = f"%{term}%"
        stmt = (
            select(AutismCenter)
            .where(
                or_(
                    AutismCenter.name.ilike(pattern),  # type: ignore
                    AutismCenter.address.ilike(pattern),  # type: ignore
                    AutismCenter.description.ilike(pattern),  # type: ignore
                )
            )
            .order_by(AutismCenter.name)  # type: ignore
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_center_user(self, center_user_id: str) -> Optional[AutismCenter]:
        stmt = select(AutismCenter).where(AutismCenter.center_user_id == center_user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def stats(self) -> Dict[str, object]:
        """Totals overall, per type and by verification status."""
        rows = await self.session.execute(
            select(AutismCenter.type, AutismCenter.verified, func.count()).group_by(
                AutismCenter.type, AutismCenter.verified
            )
        )
        by_type = {center_type.value: 0 for center_type in CenterType}
        total = verified = 0
        for center_type, is_verified, count in rows.all():
            total += count
            if center_type in by_type:
                by_type[center_type] += count
            if is_verified:
                verified += count
        return {"total": total, "byType": by_type, "verified": verified, "unverified": total - verified}

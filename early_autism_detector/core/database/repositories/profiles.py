"""
Parent profile repository.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.assessments import Assessment
from ..entities.children import Child
from ..entities.profiles import Profile
from .base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """Repository for parent profiles."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Profile)

    async def get_or_create(self, user_id: str, email: Optional[str] = None) -> Profile:
        """Return the profile of ``user_id``, creating it on first access."""
        profile = await self.get_by_id(user_id)
        if profile is not None:
            return profile
        return await self.create(Profile(id=user_id, email=email))

    async def list_with_counts(self) -> List[Tuple[Profile, int, int]]:
        """Profiles, newest first, with their children and assessments counts.

        Returns:
            ``(profile, children_count, assessments_count)`` tuples
        """
        children = await self.session.execute(
            select(Child.parent_id, func.count()).group_by(Child.parent_id)
        )
        children_by_parent = dict(children.all())
        assessments = await self.session.execute(
            select(Child.parent_id, func.count())
            .select_from(Assessment)
            .join(Child, Child.id == Assessment.child_id)  # type: ignore
            .group_by(Child.parent_id)
        )
        assessments_by_parent = dict(assessments.all())

        result = await self.session.execute(select(Profile).order_by(Profile.created_at.desc()))  # type: ignore
        return [
            (profile, children_by_parent.get(profile.id, 0), assessments_by_parent.get(profile.id, 0))
            for profile in result.scalars().all()
        ]

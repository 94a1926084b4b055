"""
Child profile repository.

All lookups are scoped to the owning parent; deleting a child removes its
assessments and their responses first.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.assessments import Assessment, AssessmentResponse
from ..entities.children import Child
from .base import BaseRepository


class ChildRepository(BaseRepository[Child]):
    """Repository for child profiles."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Child)

    async def list_for_parent(self, parent_id: str) -> List[Child]:
        """Children of ``parent_id``, most recently created first."""
        stmt = select(Child).where(Child.parent_id == parent_id).order_by(Child.created_at.desc())  # type: ignore
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_owned(self, child_id: str, parent_id: str) -> Optional[Child]:
        """Return the child only when it belongs to ``parent_id``."""
        stmt = select(Child).where(Child.id == child_id, Child.parent_id == parent_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def delete_with_assessments(self, child: Child) -> None:
        """Delete a child together with its assessments and their responses.

        Args:
            child: The child to delete
        """
        assessment_ids = select(Assessment.id).where(Assessment.child_id == child.id)
        await self.session.execute(
            delete(AssessmentResponse).where(AssessmentResponse.assessment_id.in_(assessment_ids))  # type: ignore
        )
        await self.session.execute(delete(Assessment).where(Assessment.child_id == child.id))
        await self.session.delete(child)
        await self.session.commit()

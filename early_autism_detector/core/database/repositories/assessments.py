"""
Assessment repository.

Covers assessments, their responses and the aggregate views used by the
admin portal.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.assessments import Assessment, AssessmentResponse
from ..entities.children import Child
from .base import BaseRepository


class AssessmentRepository(BaseRepository[Assessment]):
    """Repository for assessments and their responses."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Assessment)

    async def get_owned(self, assessment_id: str, parent_id: str) -> Optional[Assessment]:
        """Return the assessment only when its child belongs to ``parent_id``."""
        stmt = (
            select(Assessment)
            .join(Child, Child.id == Assessment.child_id)  # type: ignore
            .where(Assessment.id == assessment_id, Child.parent_id == parent_id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_for_child(self, child_id: str) -> List[Assessment]:
        stmt = (
            select(Assessment)
            .where(Assessment.child_id == child_id)
            .order_by(Assessment.started_at.desc())  # type: ignore
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_responses(self, assessment_id: str) -> List[AssessmentResponse]:
        stmt = (
            select(AssessmentResponse)
            .where(AssessmentResponse.assessment_id == assessment_id)
            .order_by(AssessmentResponse.question_id)  # type: ignore
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def upsert_response(
        self, assessment_id: str, question_id: int, answer: str, notes: Optional[str] = None
    ) -> AssessmentResponse:
        """Store an answer, replacing any earlier answer to the same question.

        Args:
            assessment_id: Assessment being answered
            question_id: Question number
            answer: ``yes`` or ``no``
            notes: Optional parent notes

        Returns:
            The stored response
        """
        stmt = select(AssessmentResponse).where(
            AssessmentResponse.assessment_id == assessment_id,
            AssessmentResponse.question_id == question_id,
        )
        result = await self.session.execute(stmt)
        response = result.scalars().first()
        if response is None:
            response = AssessmentResponse(assessment_id=assessment_id, question_id=question_id, answer=answer)
        response.answer = answer
        response.notes = notes
        self.session.add(response)
        await self.session.commit()
        await self.session.refresh(response)
        return response

    async def list_with_children(self) -> List[Tuple[Assessment, Child]]:
        """All assessments joined with their child, most recent first."""
        stmt = (
            select(Assessment, Child)
            .join(Child, Child.id == Assessment.child_id)  # type: ignore
            .order_by(Assessment.started_at.desc())  # type: ignore
        )
        result = await self.session.execute(stmt)
        return [(assessment, child) for assessment, child in result.all()]

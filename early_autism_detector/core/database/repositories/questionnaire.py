"""
Questionnaire repository: screening questions and scoring ranges.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from early_autism_detector.core.scoring import DEFAULT_QUESTIONS, SCORING_RANGES, ScoringRange

from ..entities.questionnaire import QuestionnaireQuestion, ScoringRangeRecord
from .base import BaseRepository


class QuestionnaireRepository(BaseRepository[QuestionnaireQuestion]):
    """Repository for questionnaire questions and scoring ranges."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, QuestionnaireQuestion)

    async def list_questions(self, active_only: bool = True) -> List[QuestionnaireQuestion]:
        stmt = select(QuestionnaireQuestion).order_by(QuestionnaireQuestion.question_number)  # type: ignore
        if active_only:
            stmt = stmt.where(QuestionnaireQuestion.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_number(self, question_number: int) -> Optional[QuestionnaireQuestion]:
        stmt = select(QuestionnaireQuestion).where(QuestionnaireQuestion.question_number == question_number)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def next_question_number(self) -> int:
        result = await self.session.execute(select(func.max(QuestionnaireQuestion.question_number)))
        current = result.scalar()
        return (current or 0) + 1

    async def count_questions(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(QuestionnaireQuestion))
        return int(result.scalar() or 0)

    async def list_scoring_ranges(self) -> List[ScoringRange]:
        """Configured scoring ranges ordered by lower bound, or the defaults when none are stored."""
        stmt = select(ScoringRangeRecord).order_by(ScoringRangeRecord.min_score)  # type: ignore
        result = await self.session.execute(stmt)
        records = result.scalars().all()
        if not records:
            return list(SCORING_RANGES)
        return [ScoringRange.model_validate(record) for record in records]

    async def seed_defaults(self) -> int:
        """Insert the default questions and scoring ranges when the tables are empty.

        Returns:
            Number of questions inserted
        """
        inserted = 0
        if await self.count_questions() == 0:
            for question in DEFAULT_QUESTIONS:
                self.session.add(
                    QuestionnaireQuestion(
                        question_number=question.question_number,
                        text=question.text,
                        category=question.category.value,
                        risk_answer=question.risk_answer.value,
                    )
                )
            inserted = len(DEFAULT_QUESTIONS)

        ranges = await self.session.execute(select(func.count()).select_from(ScoringRangeRecord))
        if not ranges.scalar():
            for scoring_range in SCORING_RANGES:
                self.session.add(ScoringRangeRecord(**scoring_range.model_dump()))

        await self.session.commit()
        return inserted

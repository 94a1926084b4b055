"""
Questionnaire endpoints: the active questions, the scoring ranges and a
stateless scoring calculator.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database import get_session
from early_autism_detector.core.database.repositories import QuestionnaireRepository
from early_autism_detector.core.models.io.assessments import ScoreRequest
from early_autism_detector.core.models.io.questionnaire import QuestionRead
from early_autism_detector.core.scoring import ScoreResult, ScoringRange, score_assessment

router = APIRouter(tags=["questionnaire"])


@router.get(
    "/questions",
    response_model=list[QuestionRead],
    summary="List Questions",
    description="Active screening questions ordered by question number.",
)
async def list_questions(session: AsyncSession = Depends(get_session)) -> list[QuestionRead]:
    questions = await QuestionnaireRepository(session).list_questions()
    return [QuestionRead.model_validate(question) for question in questions]


@router.get(
    "/scoring-ranges",
    response_model=list[ScoringRange],
    summary="List Scoring Ranges",
    description="Configured score intervals, or the instrument defaults when none are configured.",
)
async def list_scoring_ranges(session: AsyncSession = Depends(get_session)) -> list[ScoringRange]:
    return await QuestionnaireRepository(session).list_scoring_ranges()


@router.post(
    "/score",
    response_model=ScoreResult,
    summary="Score Answers",
    description="Score a set of answers against the given questions without storing anything.",
)
async def score(body: ScoreRequest, session: AsyncSession = Depends(get_session)) -> ScoreResult:
    """
    Stateless scoring.

    Answers to questions that are not listed contribute nothing; a question
    answered twice counts with its last answer.
    """
    ranges = await QuestionnaireRepository(session).list_scoring_ranges()
    return score_assessment(body.questions, body.answers, ranges)

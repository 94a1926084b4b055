"""
Assessment workflow service.

Starts screenings for a parent's child, records answers and scores a
completed screening against the active questionnaire and the configured
scoring ranges.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database.base import utc_now
from early_autism_detector.core.database.entities.assessments import Assessment, AssessmentStatus
from early_autism_detector.core.database.repositories import (
    AssessmentRepository,
    ChildRepository,
    QuestionnaireRepository,
)
from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.core.models.io.assessments import AssessmentDetail, ResponseRead
from early_autism_detector.core.monitoring import log_assessment_scored
from early_autism_detector.core.scoring import Answer, ScoreResult, ScoringQuestion, score_assessment, stored_result

logger = get_logger(__name__)


class AssessmentError(Exception):
    """An assessment request that cannot be fulfilled, with its HTTP status."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AssessmentService:
    """Service for the screening workflow over an AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.assessments = AssessmentRepository(session)
        self.children = ChildRepository(session)
        self.questionnaire = QuestionnaireRepository(session)

    async def start(self, parent_id: str, child_id: str, notes: Optional[str] = None) -> Assessment:
        child = await self.children.get_owned(child_id, parent_id)
        if child is None:
            raise AssessmentError("Child profile not found or access denied", status_code=404)
        assessment = await self.assessments.create(Assessment(child_id=child.id, notes=notes))
        logger.info(f"Assessment {assessment.id} started for child {child.id}")
        return assessment

    async def get_owned(self, parent_id: str, assessment_id: str) -> Assessment:
        assessment = await self.assessments.get_owned(assessment_id, parent_id)
        if assessment is None:
            raise AssessmentError("Assessment not found", status_code=404)
        return assessment

    async def list_for_child(self, parent_id: str, child_id: str) -> List[Assessment]:
        if await self.children.get_owned(child_id, parent_id) is None:
            raise AssessmentError("Child profile not found or access denied", status_code=404)
        return await self.assessments.list_for_child(child_id)

    async def record_answer(
        self, parent_id: str, assessment_id: str, question_id: int, answer: str, notes: Optional[str] = None
    ) -> ResponseRead:
        """
        Store an answer for an in-progress assessment.

        Raises:
            AssessmentError: 404 for an unknown assessment, 409 once completed,
                400 for a question number that is not an active questionnaire item
        """
        assessment = await self.get_owned(parent_id, assessment_id)
        if assessment.status == AssessmentStatus.COMPLETED.value:
            raise AssessmentError("Assessment is already completed", status_code=409)
        question = await self.questionnaire.get_by_number(question_id)
        if question is None or not question.is_active:
            raise AssessmentError(f"Unknown question {question_id}")
        response = await self.assessments.upsert_response(assessment.id, question_id, answer, notes)
        return ResponseRead.model_validate(response)

    async def score(self, assessment: Assessment) -> ScoreResult:
        """Score the stored answers of ``assessment`` against the active questions."""
        questions = [
            ScoringQuestion(id=question.question_number, text=question.text)
            for question in await self.questionnaire.list_questions()
        ]
        answers = [
            Answer(question_id=response.question_id, answer=response.answer)
            for response in await self.assessments.get_responses(assessment.id)
        ]
        ranges = await self.questionnaire.list_scoring_ranges()
        return score_assessment(questions, answers, ranges)

    async def complete(self, parent_id: str, assessment_id: str) -> AssessmentDetail:
        """
        Score and close an assessment.

        Completing an already completed assessment returns its stored result.
        """
        assessment = await self.get_owned(parent_id, assessment_id)
        if assessment.status != AssessmentStatus.COMPLETED.value:
            result = await self.score(assessment)
            assessment = await self.assessments.update(
                assessment,
                {
                    "score": result.score,
                    "risk_level": result.risk_category,
                    "status": AssessmentStatus.COMPLETED.value,
                    "completed_at": utc_now(),
                },
            )
            log_assessment_scored(assessment.id, result.score, result.risk_category)
            logger.info(f"Assessment {assessment.id} completed: score={result.score} ({result.risk_category})")
        return await self.detail(assessment)

    async def detail(self, assessment: Assessment) -> AssessmentDetail:
        responses = await self.assessments.get_responses(assessment.id)
        detail = AssessmentDetail.model_validate(assessment)
        detail.responses = [ResponseRead.model_validate(response) for response in responses]
        if assessment.status == AssessmentStatus.COMPLETED.value and assessment.score is not None:
            detail.result = stored_result(
                assessment.score,
                assessment.risk_level or "",
                answered=len(responses),
                ranges=await self.questionnaire.list_scoring_ranges(),
            )
        return detail

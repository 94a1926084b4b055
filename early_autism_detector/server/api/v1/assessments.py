"""
API endpoints for the screening workflow.

An assessment is started for a child, answered one question at a time and
completed, at which point it is scored and interpreted.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database import get_session
from early_autism_detector.core.models.io.assessments import (
    AssessmentCreate,
    AssessmentDetail,
    AssessmentRead,
    ResponseRead,
    ResponseUpsert,
)
from early_autism_detector.server.services.assessments import AssessmentError, AssessmentService
from early_autism_detector.server.services.auth import CurrentUserDep

router = APIRouter(tags=["assessments"])


def _raise(e: AssessmentError) -> None:
    raise HTTPException(status_code=e.status_code, detail=e.message) from e


@router.post(
    "",
    response_model=AssessmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Start Assessment",
    responses={404: {"description": "Child not found or not owned by the caller"}},
)
async def start_assessment(
    body: AssessmentCreate, user: CurrentUserDep, session: AsyncSession = Depends(get_session)
) -> AssessmentRead:
    try:
        assessment = await AssessmentService(session).start(user.id, body.child_id, body.notes)
    except AssessmentError as e:
        _raise(e)
    return AssessmentRead.model_validate(assessment)


@router.get(
    "/{assessment_id}",
    response_model=AssessmentDetail,
    summary="Get Assessment",
    description="An assessment with its answers and, once completed, its interpretation.",
    responses={404: {"description": "Assessment not found"}},
)
async def get_assessment(
    assessment_id: str, user: CurrentUserDep, session: AsyncSession = Depends(get_session)
) -> AssessmentDetail:
    service = AssessmentService(session)
    try:
        assessment = await service.get_owned(user.id, assessment_id)
    except AssessmentError as e:
        _raise(e)
    return await service.detail(assessment)


@router.put(
    "/{assessment_id}/responses",
    response_model=ResponseRead,
    summary="Answer Question",
    description="Record (or replace) the answer to one question of an in-progress assessment.",
    responses={
        400: {"description": "Unknown question number"},
        404: {"description": "Assessment not found"},
        409: {"description": "Assessment already completed"},
    },
)
async def answer_question(
    assessment_id: str, body: ResponseUpsert, user: CurrentUserDep, session: AsyncSession = Depends(get_session)
) -> ResponseRead:
    try:
        return await AssessmentService(session).record_answer(
            user.id, assessment_id, body.question_id, body.answer, body.notes
        )
    except AssessmentError as e:
        _raise(e)


@router.post(
    "/{assessment_id}/complete",
    response_model=AssessmentDetail,
    summary="Complete Assessment",
    description="Score the recorded answers, store score and risk level, and close the assessment.",
    responses={404: {"description": "Assessment not found"}},
)
async def complete_assessment(
    assessment_id: str, user: CurrentUserDep, session: AsyncSession = Depends(get_session)
) -> AssessmentDetail:
    try:
        return await AssessmentService(session).complete(user.id, assessment_id)
    except AssessmentError as e:
        _raise(e)

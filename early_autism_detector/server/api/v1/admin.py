"""
Admin portal endpoints.

Every route except ``/login`` requires an admin bearer token.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database import get_session
from early_autism_detector.core.database.base import as_utc
from early_autism_detector.core.database.entities.assessments import AssessmentStatus
from early_autism_detector.core.database.entities.autism_centers import CenterType
from early_autism_detector.core.database.entities.questionnaire import QuestionnaireQuestion
from early_autism_detector.core.database.repositories import (
    AssessmentRepository,
    AutismCenterRepository,
    CenterUserRepository,
    ChildRepository,
    ProfileRepository,
    QuestionnaireRepository,
)
from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.core.models.io.autism_centers import AutismCenterRead, AutismCenterUpdate
from early_autism_detector.core.models.io.portal import (
    AdminAnalytics,
    AdminAssessment,
    AdminAssessmentList,
    AdminAssessmentStats,
    AdminLogin,
    AdminStats,
    AdminToken,
    AdminUser,
    CenterSyncReport,
    CenterSyncRequest,
    CenterSyncStatus,
    CenterUserModeration,
    CenterUserRead,
)
from early_autism_detector.core.models.io.questionnaire import (
    AdminQuestionEnvelope,
    AdminQuestionListEnvelope,
    AdminQuestionRead,
    AdminQuestionWrite,
)
from early_autism_detector.core.scoring import AnswerValue, QuestionCategory
from early_autism_detector.integrations.supabase_auth import SupabaseAuthClient, SupabaseAuthError
from early_autism_detector.server.services.admin_auth import AdminDep, check_admin_credentials, create_admin_token
from early_autism_detector.server.services.center_auth import CenterAuthService
from early_autism_detector.server.services.clients import get_auth_client

router = APIRouter(tags=["admin"])
logger = get_logger(__name__)

ACTIVE_WINDOW = timedelta(days=30)
VALID_CATEGORIES = {category.value for category in QuestionCategory}
VALID_RISK_ANSWERS = {answer.value for answer in AnswerValue}


class QuestionUpdate(BaseModel):
    question_id: Optional[str] = Field(default=None, alias="questionId")
    updates: AdminQuestionWrite = Field(default_factory=AdminQuestionWrite)


def _validate_question_fields(body: AdminQuestionWrite) -> None:
    if body.category and body.category not in VALID_CATEGORIES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid category. Must be social_communication or behavior_sensory",
        )
    if body.risk_answer and body.risk_answer not in VALID_RISK_ANSWERS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid riskAnswer. Must be yes or no")


@router.post(
    "/login",
    response_model=AdminToken,
    response_model_by_alias=True,
    summary="Admin Login",
    description="Exchange the configured admin credentials for a signed admin token.",
    responses={401: {"description": "Invalid admin credentials"}},
)
async def login(body: AdminLogin) -> AdminToken:
    if not check_admin_credentials(body.email, body.password):
        logger.warning("Rejected admin login attempt")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin credentials")
    token, expires_at = create_admin_token(body.email.strip().lower())
    return AdminToken(token=token, expires_at=expires_at)


@router.get(
    "/stats",
    response_model=AdminStats,
    response_model_by_alias=True,
    summary="Platform Statistics",
    responses={500: {"description": "Account listing failed"}},
)
async def stats(
    _admin: AdminDep,
    session: AsyncSession = Depends(get_session),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> AdminStats:
    """
    Platform totals.

    Account figures come from the hosted auth admin API: active users signed in
    within the last 30 days, new users were created in the current calendar month.
    """
    try:
        users = await auth_client.list_users()
    except SupabaseAuthError as e:
        logger.error(f"Failed to list auth users: {e.message}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message) from e

    now = datetime.now(timezone.utc)
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    active = sum(
        1 for user in users if user.last_sign_in_at and as_utc(user.last_sign_in_at) >= now - ACTIVE_WINDOW
    )
    new_this_month = sum(1 for user in users if user.created_at and as_utc(user.created_at) >= month_start)

    return AdminStats(
        total_users=len(users),
        active_users=active,
        new_this_month=new_this_month,
        total_assessments=await AssessmentRepository(session).count(),
        total_locations=await AutismCenterRepository(session).count(),
    )


@router.get(
    "/assessments",
    response_model=AdminAssessmentList,
    response_model_by_alias=True,
    summary="All Assessments",
)
async def list_assessments(_admin: AdminDep, session: AsyncSession = Depends(get_session)) -> AdminAssessmentList:
    rows = await AssessmentRepository(session).list_with_children()
    emails = {profile.id: profile.email for profile in await ProfileRepository(session).list()}

    summary = AdminAssessmentStats(total=len(rows))
    assessments: List[AdminAssessment] = []
    for assessment, child in rows:
        if assessment.status == AssessmentStatus.COMPLETED.value:
            summary.completed += 1
        else:
            summary.in_progress += 1
        risk = (assessment.risk_level or "").lower()
        if risk.startswith("low"):
            summary.low_risk += 1
        elif risk.startswith("medium"):
            summary.medium_risk += 1
        elif risk.startswith("high"):
            summary.high_risk += 1

        assessments.append(
            AdminAssessment(
                id=assessment.id,
                child_id=child.id,
                child_name=child.name,
                parent_email=emails.get(child.parent_id),
                status=assessment.status,
                score=assessment.score,
                risk_level=assessment.risk_level,
                started_at=assessment.started_at,
                completed_at=assessment.completed_at,
            )
        )
    return AdminAssessmentList(assessments=assessments, stats=summary)


@router.get(
    "/users",
    response_model=List[AdminUser],
    response_model_by_alias=True,
    summary="Parent Profiles",
)
async def list_users(_admin: AdminDep, session: AsyncSession = Depends(get_session)) -> List[AdminUser]:
    rows = await ProfileRepository(session).list_with_counts()
    return [
        AdminUser(
            id=profile.id,
            email=profile.email,
            display_name=profile.display_name,
            created_at=profile.created_at,
            children_count=children_count,
            assessments_count=assessments_count,
        )
        for profile, children_count, assessments_count in rows
    ]


@router.get(
    "/center-users",
    response_model=List[CenterUserRead],
    response_model_by_alias=True,
    summary="Center Portal Accounts",
)
async def list_center_users(_admin: AdminDep, session: AsyncSession = Depends(get_session)) -> List[CenterUserRead]:
    users = await CenterUserRepository(session).list()
    return [CenterUserRead.model_validate(user) for user in sorted(users, key=lambda u: u.created_at, reverse=True)]


@router.patch(
    "/center-users/{center_user_id}",
    response_model=CenterUserRead,
    response_model_by_alias=True,
    summary="Moderate Center Account",
    description="Verify or deactivate a center account. Verification is copied to its locator listing.",
    responses={404: {"description": "Center user not found"}},
)
async def moderate_center_user(
    center_user_id: str,
    body: CenterUserModeration,
    _admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> CenterUserRead:
    users = CenterUserRepository(session)
    user = await users.get_by_id(center_user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Center user not found")

    user = await users.update(user, body.model_dump(exclude_none=True))
    if body.is_verified is not None:
        centers = AutismCenterRepository(session)
        center = await centers.get_by_center_user(user.id)
        if center is not None:
            await centers.update(center, {"verified": body.is_verified})
    logger.info(f"Center user {user.id} moderated: {body.model_dump(exclude_none=True)}")
    return CenterUserRead.model_validate(user)


@router.get(
    "/sync-centers",
    response_model=CenterSyncStatus,
    response_model_by_alias=True,
    summary="Listing Sync Status",
    description="Which center portal accounts have a locator listing.",
)
async def sync_status(_admin: AdminDep, session: AsyncSession = Depends(get_session)) -> CenterSyncStatus:
    return await CenterAuthService(session).sync_status()


@router.post(
    "/sync-centers",
    summary="Sync Center Listings",
    description=(
        "Create or refresh the locator listing of one account (``centerUserId``), or of every active "
        "account when no id is given. ``action=delete`` removes one account's listing."
    ),
    responses={
        400: {"description": "Removal requested without an account id"},
        404: {"description": "Center user not found"},
    },
)
async def sync_centers(body: CenterSyncRequest, _admin: AdminDep, session: AsyncSession = Depends(get_session)):
    service = CenterAuthService(session)
    if body.center_user_id is None:
        if body.action == "delete":
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="centerUserId is required")
        report: CenterSyncReport = await service.sync_all()
        return report.model_dump(by_alias=True, mode="json")

    if body.action == "delete":
        removed = await service.remove_listing(body.center_user_id)
        logger.info(f"Listing removal for center user {body.center_user_id}: removed={removed}")
        message = "Center removed from locator" if removed else "Center had no locator listing"
        return {"success": True, "message": message}

    user = await CenterUserRepository(session).get_by_id(body.center_user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Center user not found")
    center = await service.sync_center(user)
    logger.info(f"Admin synced listing {center.id} for center user {user.id}")
    return {
        "success": True,
        "message": "Center synced to locator",
        "data": AutismCenterRead.model_validate(center).model_dump(mode="json"),
    }


@router.get(
    "/autism-centers",
    response_model=List[AutismCenterRead],
    summary="All Centers",
)
async def list_centers(_admin: AdminDep, session: AsyncSession = Depends(get_session)) -> List[AutismCenterRead]:
    centers = await AutismCenterRepository(session).list_by_type()
    return [AutismCenterRead.model_validate(center) for center in sorted(centers, key=lambda c: c.name)]


@router.patch(
    "/autism-centers/{center_id}",
    response_model=AutismCenterRead,
    summary="Update Center",
    responses={400: {"description": "Invalid type"}, 404: {"description": "Center not found"}},
)
async def update_center(
    center_id: str,
    body: AutismCenterUpdate,
    _admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> AutismCenterRead:
    changes = body.model_dump(exclude_unset=True)
    if "type" in changes and changes["type"] not in {center_type.value for center_type in CenterType}:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid type")

    centers = AutismCenterRepository(session)
    center = await centers.get_by_id(center_id)
    if center is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Center not found")
    return AutismCenterRead.model_validate(await centers.update(center, changes))


@router.delete(
    "/autism-centers/{center_id}",
    summary="Delete Center",
    responses={404: {"description": "Center not found"}},
)
async def delete_center(center_id: str, _admin: AdminDep, session: AsyncSession = Depends(get_session)):
    if not await AutismCenterRepository(session).delete(center_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Center not found")
    return {"success": True, "message": "Center deleted successfully"}


@router.get(
    "/questions",
    response_model=AdminQuestionListEnvelope,
    response_model_by_alias=True,
    summary="All Questions",
    description="Every questionnaire question, active or not, ordered by question number.",
)
async def list_questions(_admin: AdminDep, session: AsyncSession = Depends(get_session)) -> AdminQuestionListEnvelope:
    questions = await QuestionnaireRepository(session).list_questions(active_only=False)
    return AdminQuestionListEnvelope(questions=[AdminQuestionRead.model_validate(q) for q in questions])


@router.post(
    "/questions",
    response_model=AdminQuestionEnvelope,
    response_model_by_alias=True,
    summary="Add Question",
    description="Add a question with the next free question number.",
    responses={400: {"description": "Missing or invalid field"}},
)
async def create_question(
    body: AdminQuestionWrite, _admin: AdminDep, session: AsyncSession = Depends(get_session)
) -> AdminQuestionEnvelope:
    if not body.text or not body.category or not body.risk_answer:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields: text, category, riskAnswer"
        )
    _validate_question_fields(body)

    repository = QuestionnaireRepository(session)
    question = await repository.create(
        QuestionnaireQuestion(
            question_number=await repository.next_question_number(),
            text=body.text,
            category=body.category,
            risk_answer=body.risk_answer,
            is_active=True,
        )
    )
    logger.info(f"Question {question.question_number} added")
    return AdminQuestionEnvelope(question=AdminQuestionRead.model_validate(question))


@router.put(
    "/questions",
    response_model=AdminQuestionEnvelope,
    response_model_by_alias=True,
    summary="Update Question",
    description="Apply `updates` to the question identified by `questionId`.",
    responses={400: {"description": "Missing id or invalid field"}, 404: {"description": "Question not found"}},
)
async def update_question(
    body: QuestionUpdate, _admin: AdminDep, session: AsyncSession = Depends(get_session)
) -> AdminQuestionEnvelope:
    if not body.question_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Question ID is required")
    _validate_question_fields(body.updates)

    repository = QuestionnaireRepository(session)
    question = await repository.get_by_id(body.question_id)
    if question is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")

    changes: Dict[str, Any] = body.updates.model_dump(exclude_none=True)
    question = await repository.update(question, changes)
    return AdminQuestionEnvelope(question=AdminQuestionRead.model_validate(question))


@router.delete(
    "/questions",
    summary="Delete Question",
    responses={400: {"description": "Question ID is required"}, 404: {"description": "Question not found"}},
)
async def delete_question(_admin: AdminDep, id: Optional[str] = None, session: AsyncSession = Depends(get_session)):
    if not id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Question ID is required")
    if not await QuestionnaireRepository(session).delete(id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
    return {"success": True, "message": "Question deleted successfully"}


@router.post(
    "/init-questionnaire",
    summary="Seed Questionnaire",
    description="Insert the 20 default M-CHAT-R questions and the default scoring ranges when the tables are empty.",
)
async def init_questionnaire(_admin: AdminDep, session: AsyncSession = Depends(get_session)):
    inserted = await QuestionnaireRepository(session).seed_defaults()
    if inserted:
        logger.info(f"Seeded {inserted} questionnaire questions")
        return {"success": True, "message": f"Questionnaire initialized with {inserted} questions", "inserted": inserted}
    return {"success": True, "message": "Questionnaire already initialized", "inserted": 0}


@router.get(
    "/analytics",
    response_model=AdminAnalytics,
    response_model_by_alias=True,
    summary="Assessment Analytics",
)
async def analytics(_admin: AdminDep, session: AsyncSession = Depends(get_session)) -> AdminAnalytics:
    assessments = await AssessmentRepository(session).list()
    completed = [a for a in assessments if a.status == AssessmentStatus.COMPLETED.value]
    risk_distribution = Counter(a.risk_level for a in completed if a.risk_level)
    by_month = Counter(a.started_at.strftime("%Y-%m") for a in assessments)
    center_stats = await AutismCenterRepository(session).stats()

    return AdminAnalytics(
        total_children=await ChildRepository(session).count(),
        total_profiles=await ProfileRepository(session).count(),
        total_assessments=len(assessments),
        completed_assessments=len(completed),
        risk_distribution=dict(risk_distribution),
        assessments_by_month=dict(sorted(by_month.items())),
        centers_by_type=center_stats["byType"],
    )

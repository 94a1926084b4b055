"""
API endpoints for managing child profiles.

Children belong to the signed-in parent; every lookup is scoped to that
parent, and a child that belongs to someone else is reported as not found.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database import get_session
from early_autism_detector.core.database.base import utc_now
from early_autism_detector.core.database.entities.children import Child
from early_autism_detector.core.database.repositories import ChildRepository
from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.core.models.io.assessments import AssessmentRead
from early_autism_detector.core.models.io.children import ChildCreate, ChildDeleteResult, ChildRead, ChildUpdate
from early_autism_detector.server.services.assessments import AssessmentError, AssessmentService
from early_autism_detector.server.services.auth import CurrentUserDep

router = APIRouter(tags=["children"])
logger = get_logger(__name__)

NOT_FOUND = "Child profile not found or access denied"


@router.get(
    "",
    response_model=list[ChildRead],
    summary="List Children",
    description="List the signed-in parent's children, most recently added first.",
)
async def list_children(user: CurrentUserDep, session: AsyncSession = Depends(get_session)) -> list[ChildRead]:
    children = await ChildRepository(session).list_for_parent(user.id)
    return [ChildRead.model_validate(child) for child in children]


@router.post(
    "",
    response_model=ChildRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Child",
    description="Register a child under the signed-in parent.",
    responses={
        201: {"description": "Child created"},
        400: {"description": "Name and date of birth are required"},
    },
)
async def create_child(
    body: ChildCreate, user: CurrentUserDep, session: AsyncSession = Depends(get_session)
) -> ChildRead:
    """
    Add a child profile.

    - **name**: Child's name (required)
    - **date_of_birth**: ISO date (required)
    - **gender**: male, female or other
    - **additional_notes**: Free text
    """
    if not (body.name or "").strip() or body.date_of_birth is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name and date of birth are required")

    child = await ChildRepository(session).create(
        Child(
            parent_id=user.id,
            name=body.name.strip(),
            date_of_birth=body.date_of_birth,
            gender=body.gender,
            additional_notes=body.additional_notes,
        )
    )
    logger.info(f"Child {child.id} created for parent {user.id}")
    return ChildRead.model_validate(child)


@router.get(
    "/{child_id}",
    response_model=ChildRead,
    summary="Get Child",
    responses={404: {"description": NOT_FOUND}},
)
async def get_child(child_id: str, user: CurrentUserDep, session: AsyncSession = Depends(get_session)) -> ChildRead:
    child = await ChildRepository(session).get_owned(child_id, user.id)
    if child is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return ChildRead.model_validate(child)


@router.patch(
    "/{child_id}",
    response_model=ChildRead,
    summary="Update Child",
    responses={404: {"description": NOT_FOUND}},
)
async def update_child(
    child_id: str, body: ChildUpdate, user: CurrentUserDep, session: AsyncSession = Depends(get_session)
) -> ChildRead:
    repository = ChildRepository(session)
    child = await repository.get_owned(child_id, user.id)
    if child is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    changes = body.model_dump(exclude_unset=True)
    changes["updated_at"] = utc_now()
    child = await repository.update(child, changes)
    return ChildRead.model_validate(child)


@router.delete(
    "/{child_id}",
    response_model=ChildDeleteResult,
    summary="Delete Child",
    description="Permanently delete a child profile together with all of its assessments and answers.",
    responses={404: {"description": NOT_FOUND}},
)
async def delete_child(
    child_id: str, user: CurrentUserDep, session: AsyncSession = Depends(get_session)
) -> ChildDeleteResult:
    repository = ChildRepository(session)
    child = await repository.get_owned(child_id, user.id)
    if child is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    name = child.name
    await repository.delete_with_assessments(child)
    logger.info(f"Child {child_id} deleted by parent {user.id}")
    return ChildDeleteResult(success=True, message=f"{name}'s profile has been permanently deleted.")


@router.get(
    "/{child_id}/assessments",
    response_model=list[AssessmentRead],
    summary="List Child Assessments",
    description="Assessment history of a child, most recent first.",
    responses={404: {"description": NOT_FOUND}},
)
async def list_child_assessments(
    child_id: str, user: CurrentUserDep, session: AsyncSession = Depends(get_session)
) -> list[AssessmentRead]:
    try:
        assessments = await AssessmentService(session).list_for_child(user.id, child_id)
    except AssessmentError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    return [AssessmentRead.model_validate(assessment) for assessment in assessments]

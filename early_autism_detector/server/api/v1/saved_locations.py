"""
API endpoints for the signed-in parent's saved locations.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database import get_session
from early_autism_detector.core.database.entities.saved_locations import SavedLocation
from early_autism_detector.core.database.repositories import SavedLocationRepository
from early_autism_detector.core.models.io.saved_locations import (
    SavedLocationCreate,
    SavedLocationRead,
    SavedLocationUpdate,
)
from early_autism_detector.server.services.auth import CurrentUserDep

router = APIRouter(tags=["saved-locations"])

NOT_FOUND = "Location not found"


@router.get("", response_model=list[SavedLocationRead], summary="List Saved Locations")
async def list_locations(
    user: CurrentUserDep, session: AsyncSession = Depends(get_session)
) -> list[SavedLocationRead]:
    locations = await SavedLocationRepository(session).list_for_user(user.id)
    return [SavedLocationRead.model_validate(location) for location in locations]


@router.post(
    "",
    response_model=SavedLocationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Save Location",
)
async def create_location(
    body: SavedLocationCreate, user: CurrentUserDep, session: AsyncSession = Depends(get_session)
) -> SavedLocationRead:
    location = await SavedLocationRepository(session).create(SavedLocation(user_id=user.id, **body.model_dump()))
    return SavedLocationRead.model_validate(location)


@router.patch(
    "/{location_id}",
    response_model=SavedLocationRead,
    summary="Update Saved Location",
    responses={404: {"description": NOT_FOUND}},
)
async def update_location(
    location_id: str, body: SavedLocationUpdate, user: CurrentUserDep, session: AsyncSession = Depends(get_session)
) -> SavedLocationRead:
    repository = SavedLocationRepository(session)
    location = await repository.get_owned(location_id, user.id)
    if location is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    location = await repository.update(location, body.model_dump(exclude_unset=True))
    return SavedLocationRead.model_validate(location)


@router.delete(
    "/{location_id}",
    summary="Delete Saved Location",
    responses={404: {"description": NOT_FOUND}},
)
async def delete_location(location_id: str, user: CurrentUserDep, session: AsyncSession = Depends(get_session)):
    repository = SavedLocationRepository(session)
    location = await repository.get_owned(location_id, user.id)
    if location is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    await repository.delete(location.id)
    return {"success": True}

"""
Treatment-center locator endpoints.

Nearby search ranks centers by great-circle distance from the caller's
position; text search and statistics cover the whole directory.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from early_autism_detector.core.database import get_session
from early_autism_detector.core.database.entities.autism_centers import AutismCenter, CenterType
from early_autism_detector.core.database.repositories import AutismCenterRepository
from early_autism_detector.core.geo import find_nearest
from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.core.models.io.autism_centers import (
    AutismCenterCreate,
    AutismCenterRead,
    CenterStats,
    NearbyCenter,
)
from early_autism_detector.server.services.auth import CurrentUserDep

router = APIRouter(tags=["autism-centers"])
logger = get_logger(__name__)

VALID_TYPES = {center_type.value for center_type in CenterType}
REQUIRED_FIELDS = ("name", "type", "address", "latitude", "longitude")


@router.get(
    "",
    response_model=list[NearbyCenter],
    summary="Find Nearby Centers",
    description="Centers within `radius` km of (`lat`, `lng`), nearest first, each annotated with its distance.",
    responses={400: {"description": "Latitude and longitude are required"}},
)
async def nearby_centers(
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius: float = Query(default=25, gt=0, description="Search radius in km"),
    type: Optional[str] = Query(default=None, description="diagnostic, therapy, support or education"),
    limit: int = Query(default=20, ge=1, le=200),
    session: AsyncSession = Depends(get_session),
) -> list[NearbyCenter]:
    """
    Find centers near a position.

    An unrecognized ``type`` is ignored rather than rejected.
    """
    if not lat or not lng:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Latitude and longitude are required")

    center_type = type if type in VALID_TYPES else None
    centers = await AutismCenterRepository(session).list_by_type(center_type)
    nearest = find_nearest(
        centers, lat, lng, position=lambda center: (center.latitude, center.longitude), radius_km=radius, limit=limit
    )
    return [
        NearbyCenter(**AutismCenterRead.model_validate(center).model_dump(), distance=distance)
        for center, distance in nearest
    ]


@router.get(
    "/search",
    response_model=list[AutismCenterRead],
    summary="Search Centers",
    description="Case-insensitive search over center name, address and description.",
    responses={400: {"description": "Search term (q) is required"}},
)
async def search_centers(
    q: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=200),
    session: AsyncSession = Depends(get_session),
) -> list[AutismCenterRead]:
    if not q or not q.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Search term (q) is required")
    centers = await AutismCenterRepository(session).search(q.strip(), limit=limit)
    return [AutismCenterRead.model_validate(center) for center in centers]


@router.get(
    "/stats",
    response_model=CenterStats,
    summary="Center Statistics",
    description="Directory totals overall, per center type and by verification status.",
)
async def center_stats(session: AsyncSession = Depends(get_session)) -> CenterStats:
    return CenterStats(**await AutismCenterRepository(session).stats())


@router.get(
    "/{center_id}",
    response_model=AutismCenterRead,
    summary="Get Center",
    responses={404: {"description": "Center not found"}},
)
async def get_center(center_id: str, session: AsyncSession = Depends(get_session)) -> AutismCenterRead:
    center = await AutismCenterRepository(session).get_by_id(center_id)
    if center is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Center not found")
    return AutismCenterRead.model_validate(center)


@router.post(
    "",
    response_model=AutismCenterRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Center",
    description="Add a center to the directory. New centers are unverified.",
    responses={
        400: {"description": "A required field is missing or the type is invalid"},
        401: {"description": "Unauthorized"},
    },
)
async def create_center(
    body: AutismCenterCreate, user: CurrentUserDep, session: AsyncSession = Depends(get_session)
) -> AutismCenterRead:
    for field in REQUIRED_FIELDS:
        if getattr(body, field) in (None, ""):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{field} is required")
    if body.type not in VALID_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid type")

    center = await AutismCenterRepository(session).create(AutismCenter(**body.model_dump(), verified=False))
    logger.info(f"Center {center.id} added by user {user.id}")
    return AutismCenterRead.model_validate(center)

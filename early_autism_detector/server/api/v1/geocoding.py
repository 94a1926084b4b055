"""
Geocoding proxy endpoints.

Calls Geoapify with the server-side key so that the key never reaches the browser.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from early_autism_detector.integrations.geoapify import GeoapifyClient, GeocodeResult, GeocodingError
from early_autism_detector.server.services.clients import get_geocoder

router = APIRouter(tags=["geocoding"])


def _raise(e: GeocodingError) -> None:
    raise HTTPException(status_code=e.status_code, detail=e.message) from e


@router.get(
    "/search",
    response_model=list[GeocodeResult],
    summary="Geocode Address",
    responses={502: {"description": "Upstream failure"}, 503: {"description": "Geocoding not configured"}},
)
async def geocode(
    text: str = Query(min_length=1),
    limit: int = Query(default=5, ge=1, le=20),
    geocoder: GeoapifyClient = Depends(get_geocoder),
) -> list[GeocodeResult]:
    try:
        return await geocoder.search(text, limit=limit)
    except GeocodingError as e:
        _raise(e)


@router.get(
    "/reverse",
    response_model=list[GeocodeResult],
    summary="Reverse Geocode",
    responses={502: {"description": "Upstream failure"}, 503: {"description": "Geocoding not configured"}},
)
async def reverse_geocode(
    lat: float = Query(ge=-90, le=90),
    lon: float = Query(ge=-180, le=180),
    geocoder: GeoapifyClient = Depends(get_geocoder),
) -> list[GeocodeResult]:
    try:
        return await geocoder.reverse(lat, lon)
    except GeocodingError as e:
        _raise(e)


@router.get(
    "/autocomplete",
    response_model=list[GeocodeResult],
    summary="Address Autocomplete",
    responses={502: {"description": "Upstream failure"}, 503: {"description": "Geocoding not configured"}},
)
async def autocomplete(
    text: str = Query(min_length=1),
    limit: int = Query(default=5, ge=1, le=20),
    geocoder: GeoapifyClient = Depends(get_geocoder),
) -> list[GeocodeResult]:
    try:
        return await geocoder.autocomplete(text, limit=limit)
    except GeocodingError as e:
        _raise(e)

"""
Geoapify geocoding client.

Forward geocoding, reverse geocoding and address autocomplete, normalized
to a flat result shape.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel

from early_autism_detector.core.logging_config import get_logger

logger = get_logger(__name__)


class GeocodingError(Exception):
    """Raised when geocoding is not configured or the upstream call fails."""

    def __init__(self, message: str, status_code: int = 502) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GeocodeResult(BaseModel):
    lat: float
    lon: float
    formatted: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postcode: Optional[str] = None
    confidence: Optional[float] = None


def _parse_feature(feature: Dict[str, Any]) -> Optional[GeocodeResult]:
    props = feature.get("properties") or {}
    if props.get("lat") is None or props.get("lon") is None:
        return None
    return GeocodeResult(
        lat=props["lat"],
        lon=props["lon"],
        formatted=props.get("formatted"),
        city=props.get("city"),
        state=props.get("state"),
        country=props.get("country"),
        postcode=props.get("postcode"),
        confidence=(props.get("rank") or {}).get("confidence"),
    )


class GeoapifyClient:
    """Async client for the Geoapify geocoding API."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.geoapify.com/v1/geocode",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._transport = transport
        self._timeout = timeout

    async def _get(self, path: str, params: Dict[str, Any]) -> List[GeocodeResult]:
        if not self.api_key:
            raise GeocodingError("Geocoding service is not configured", status_code=503)

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.get(f"{self.base_url}{path}", params={**params, "apiKey": self.api_key})
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Geocoding request failed: {path}: {e}")
            raise GeocodingError("Geocoding request failed") from e

        try:
            features = response.json().get("features", [])
        except (ValueError, AttributeError) as e:
            logger.error(f"Geocoding returned an unreadable body: {path}: {e}")
            raise GeocodingError("Geocoding request failed") from e
        return [result for result in (_parse_feature(feature) for feature in features) if result is not None]

    async def search(self, text: str, limit: int = 5) -> List[GeocodeResult]:
        return await self._get("/search", {"text": text, "limit": limit})

    async def reverse(self, lat: float, lon: float) -> List[GeocodeResult]:
        return await self._get("/reverse", {"lat": lat, "lon": lon})

    async def autocomplete(self, text: str, limit: int = 5) -> List[GeocodeResult]:
        return await self._get("/autocomplete", {"text": text, "limit": limit})

"""
Great-circle distance helpers for the treatment-center locator.
"""

from __future__ import annotations

import math
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

EARTH_RADIUS_KM = 6371.0

T = TypeVar("T")


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in kilometres between two WGS84 coordinates."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def is_valid_coordinate(lat: float, lng: float) -> bool:
    return -90 <= lat <= 90 and -180 <= lng <= 180


def with_distance(
    items: Iterable[T],
    lat: float,
    lng: float,
    position: Callable[[T], Tuple[float, float]],
) -> List[Tuple[T, float]]:
    """Pair each item with its distance (km, 2 dp) from ``(lat, lng)``."""
    result = []
    for item in items:
        item_lat, item_lng = position(item)
        result.append((item, round(haversine_km(lat, lng, item_lat, item_lng), 2)))
    return result


def filter_within_radius(pairs: Iterable[Tuple[T, float]], radius_km: float) -> List[Tuple[T, float]]:
    return [pair for pair in pairs if pair[1] <= radius_km]


def sort_by_distance(pairs: Iterable[Tuple[T, float]]) -> List[Tuple[T, float]]:
    return sorted(pairs, key=lambda pair: pair[1])


def find_nearest(
    items: Iterable[T],
    lat: float,
    lng: float,
    position: Callable[[T], Tuple[float, float]],
    radius_km: Optional[float] = None,
    limit: Optional[int] = None,
) -> List[Tuple[T, float]]:
    """
    Nearest items first, optionally bounded by radius and count.

    Args:
        items: Candidate items
        lat: Origin latitude
        lng: Origin longitude
        position: Extracts ``(lat, lng)`` from an item
        radius_km: Drop items farther than this
        limit: Maximum number of items returned

    Returns:
        ``(item, distance_km)`` pairs sorted by ascending distance
    """
    pairs = with_distance(items, lat, lng, position)
    if radius_km is not None:
        pairs = filter_within_radius(pairs, radius_km)
    pairs = sort_by_distance(pairs)
    if limit is not None:
        pairs = pairs[:limit]
    return pairs

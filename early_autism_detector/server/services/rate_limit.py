"""
In-process request rate limiting.

A sliding-window counter per (tier, client address) pair. The limit runs
before any token is verified, so callers are identified by IP address only.
Limiter failures never block a request.
"""

from __future__ import annotations

import asyncio
import math
import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Optional, Tuple

from fastapi import HTTPException, Request, Response, status

from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.server.core.config import settings

logger = get_logger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_after: float


class SlidingWindowRateLimiter:
    """Counts requests per key over a sliding time window."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._hits: Dict[Tuple[str, str], Deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._last_sweep = clock()

    async def hit(self, tier: str, key: str, limit: int, window_seconds: float) -> RateLimitResult:
        """Record one request and report whether it is within ``limit``."""
        async with self._lock:
            now = self._clock()
            if now - self._last_sweep >= window_seconds:
                self._sweep(now - window_seconds)
                self._last_sweep = now
            hits = self._hits[(tier, key)]
            _drop_before(hits, now - window_seconds)
            if len(hits) >= limit:
                return RateLimitResult(False, limit, 0, hits[0] + window_seconds - now)
            hits.append(now)
            return RateLimitResult(True, limit, limit - len(hits), hits[0] + window_seconds - now)

    def _sweep(self, cutoff: float) -> None:
        for key in list(self._hits):
            _drop_before(self._hits[key], cutoff)
            if not self._hits[key]:
                del self._hits[key]

    def __len__(self) -> int:
        return len(self._hits)

    def reset(self) -> None:
        self._hits.clear()
        self._last_sweep = self._clock()


def _drop_before(hits: Deque[float], cutoff: float) -> None:
    while hits and hits[0] <= cutoff:
        hits.popleft()


limiter = SlidingWindowRateLimiter()


def client_identifier(request: Request, trust_forwarded: bool = True) -> str:
    """Client address, taking the first ``X-Forwarded-For`` hop when behind a trusted proxy."""
    forwarded = request.headers.get("x-forwarded-for") if trust_forwarded else None
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


def _tier_limit(tier: str) -> Optional[int]:
    return getattr(settings.rate_limit, tier, None)


def rate_limit(tier: str) -> Callable:
    """
    Build a dependency enforcing the ``tier`` limit (auth, chat, data, api, external).

    Responses carry ``X-RateLimit-*`` headers; rejected requests get 429 with ``Retry-After``.
    """

    async def dependency(request: Request, response: Response) -> None:
        config = settings.rate_limit
        limit = _tier_limit(tier)
        if not config.enabled or not limit:
            return
        try:
            result = await limiter.hit(
                tier, client_identifier(request, config.trust_forwarded), limit, config.window_seconds
            )
        except Exception as e:
            logger.warning(f"Rate limiter failed, allowing request: {e}")
            return

        headers = {
            "X-RateLimit-Limit": str(result.limit),
            "X-RateLimit-Remaining": str(result.remaining),
            "X-RateLimit-Reset": str(math.ceil(result.reset_after)),
        }
        if not result.allowed:
            logger.info(f"Rate limit exceeded for tier={tier}")
            headers["Retry-After"] = str(max(1, math.ceil(result.reset_after)))
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests, please try again later.",
                headers=headers,
            )
        response.headers.update(headers)

    return dependency

"""
Sliding-window request limits

Unauthenticated traffic is counted per client address by the middleware.
Callers are counted again per user id once the identity header has been
resolved to a known user, so the raw header never selects a bucket.
"""
import math
import time
import logging
from bisect import bisect_right
from typing import Callable, Dict, List

from fastapi import Request, HTTPException

from quiz_platform.config import settings

logger = logging.getLogger(__name__)

LONGEST_WINDOW = 3600


class RateLimiter:
    """
    In-memory limiter over per-minute and per-hour windows

    Each key holds the sorted timestamps of its accepted requests within the
    last hour. Keys with no recent requests are swept, so memory tracks the
    number of active clients rather than every value ever seen.
    Production: back this with Redis when running more than one worker.
    """

    def __init__(
        self,
        requests_per_minute: int = 60,
        requests_per_hour: int = 1000,
        clock: Callable[[], float] = time.monotonic
    ):
        self.windows = ((60, requests_per_minute), (LONGEST_WINDOW, requests_per_hour))
        self.clock = clock
        self.hits: Dict[str, List[float]] = {}
        self._last_sweep = clock()

    @staticmethod
    def client_key(request: Request) -> str:
        host = request.client.host if request.client else "unknown"
        return f"ip:{host}"

    def _sweep(self, now: float) -> None:
        """Drop keys whose newest request fell out of every window"""
        if now - self._last_sweep < 60:
            return
        self._last_sweep = now
        cutoff = now - LONGEST_WINDOW
        for key in [k for k, stamps in self.hits.items() if stamps[-1] <= cutoff]:
            del self.hits[key]

    def hit(self, key: str) -> None:
        """
        Record one request for key

        Raises:
            HTTPException: 429 when any window is already full
        """
        now = self.clock()
        self._sweep(now)

        stamps = self.hits.get(key, [])
        del stamps[:bisect_right(stamps, now - LONGEST_WINDOW)]

        for window, limit in self.windows:
            recent = len(stamps) - bisect_right(stamps, now - window)
            if recent >= limit:
                # The request that has to age out before another is accepted
                blocking = stamps[len(stamps) - limit] if limit > 0 else now
                retry_after = max(1, math.ceil(blocking + window - now))
                logger.warning(f"Rate limit exceeded ({window}s window): {key}")
                raise HTTPException(
                    status_code=429,
                    detail={
                        "error": "rate_limit_exceeded",
                        "message": f"Too many requests. Limit: {limit} requests per {window} seconds",
                        "retry_after": retry_after
                    }
                )

        stamps.append(now)
        self.hits[key] = stamps
        logger.debug(f"Rate limit check passed: {key} ({len(stamps)} in the last hour)")

    async def check_request(self, request: Request) -> None:
        """Count a request against its client address"""
        self.hit(self.client_key(request))

    def check_caller(self, user_id: int) -> None:
        """Count a request against an authenticated user"""
        self.hit(f"user:{user_id}")

    def reset(self) -> None:
        """Forget all recorded requests"""
        self.hits.clear()
        self._last_sweep = self.clock()


# Global instance
rate_limiter = RateLimiter(
    requests_per_minute=settings.RATE_LIMIT_PER_MINUTE,
    requests_per_hour=settings.RATE_LIMIT_PER_HOUR
)

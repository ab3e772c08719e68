"""
Rate Limiter Module

Fixed-window request counter keyed by (identifier, action). The counter state
lives behind a RateLimitStore so the same limiter contract holds whether the
counters are process-local (InMemoryRateLimitStore) or kept in a shared store
for multi-instance deployments.

Window semantics:
- The first call for a key opens a window of window_ms and is accepted (count 1).
- Later calls inside the window are accepted until count reaches max_requests.
- Once the limit is reached every call is rejected until now > reset_time,
  at which point the window restarts with count 1.

The in-memory store is only safe inside a single process with one event loop;
it gives no cross-process or cross-instance guarantee and is best-effort
throttling, not an access-control mechanism.

Dependencies:
- app.schemas.rate_limit: For the record and result models.
- loguru: For logging rejections.
- asyncio: For the background cleanup loop.

Author: @kcaparas1630
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional
from loguru import logger
from app.schemas.rate_limit import RateLimitRecord, RateLimitResult


def current_time_ms() -> int:
    return int(time.time() * 1000)


class RateLimitStore(ABC):
    """Storage boundary for rate limit counters."""

    @abstractmethod
    def get(self, key: str) -> Optional[RateLimitRecord]:
        ...

    @abstractmethod
    def set(self, key: str, record: RateLimitRecord) -> None:
        ...

    @abstractmethod
    def purge_expired(self, now_ms: int) -> int:
        """Delete records whose window has expired. Returns the number removed."""
        ...


class InMemoryRateLimitStore(RateLimitStore):
    """Dict-backed store for a single process."""

    def __init__(self):
        self._records: Dict[str, RateLimitRecord] = {}

    def get(self, key: str) -> Optional[RateLimitRecord]:
        return self._records.get(key)

    def set(self, key: str, record: RateLimitRecord) -> None:
        self._records[key] = record

    def purge_expired(self, now_ms: int) -> int:
        expired = [key for key, record in self._records.items() if now_ms > record.reset_time]
        for key in expired:
            del self._records[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._records)


class RateLimiter:
    """
    Fixed-window rate limiter over a pluggable store.

    Attributes:
        store (RateLimitStore): Where counters are kept.
        clock (Callable[[], int]): Returns the current time in epoch milliseconds.

    Example:
        >>> limiter = RateLimiter()
        >>> result = limiter.check_rate_limit("generate-questions", "203.0.113.7", 3, 600_000)
        >>> result.success
        True
    """

    def __init__(self, store: Optional[RateLimitStore] = None, clock: Callable[[], int] = current_time_ms):
        self.store = store if store is not None else InMemoryRateLimitStore()
        self.clock = clock

    @staticmethod
    def build_key(key: str, identifier: str) -> str:
        return f"{identifier}_{key}"

    def check_rate_limit(self, key: str, identifier: str, max_requests: int, window_ms: int) -> RateLimitResult:
        """
        Count one request for (identifier, key) and decide whether it is allowed.

        Args:
            key (str): The protected action, e.g. "generate-questions".
            identifier (str): Who is calling, typically the client IP.
            max_requests (int): Requests allowed per window.
            window_ms (int): Window length in milliseconds.

        Returns:
            RateLimitResult: success flag, remaining quota and the window reset time.
        """
        store_key = self.build_key(key, identifier)
        now = self.clock()
        record = self.store.get(store_key)

        if record is None or now > record.reset_time:
            record = RateLimitRecord(count=1, reset_time=now + window_ms)
            self.store.set(store_key, record)
            return RateLimitResult(success=True, remaining=max(max_requests - 1, 0), reset_time=record.reset_time)

        if record.count >= max_requests:
            logger.warning(f"Rate limit exceeded for {identifier} on {key}")
            return RateLimitResult(success=False, remaining=0, reset_time=record.reset_time)

        record = RateLimitRecord(count=record.count + 1, reset_time=record.reset_time)
        self.store.set(store_key, record)
        return RateLimitResult(success=True, remaining=max(max_requests - record.count, 0), reset_time=record.reset_time)

    def get_current_usage(self, key: str, identifier: str) -> Optional[RateLimitRecord]:
        """Current window counter, or None when there is no live window."""
        record = self.store.get(self.build_key(key, identifier))
        if record is None or self.clock() > record.reset_time:
            return None
        return record

    def cleanup(self) -> int:
        removed = self.store.purge_expired(self.clock())
        if removed:
            logger.debug(f"Removed {removed} expired rate limit records")
        return removed


async def run_periodic_cleanup(rate_limiter: RateLimiter, interval_seconds: float) -> None:
    """Purge expired records every interval_seconds until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        rate_limiter.cleanup()

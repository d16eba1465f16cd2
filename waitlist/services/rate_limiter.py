"""
Fixed-window rate limiting on top of the key-value store.
"""
from dataclasses import dataclass
from typing import Optional

from database.kv_store import KeyValueStore
import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    retry_after: Optional[int] = None


class RateLimiter:
    """
    Allow max_attempts per identifier within window_seconds.
    The window starts with the first attempt.
    """
    
    def __init__(self, store: KeyValueStore, name: str, max_attempts: int, window_seconds: int):
        self._store = store
        self.name = name
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
    
    def _key(self, identifier: str) -> str:
        return f"ratelimit:{self.name}:{identifier}"
    
    async def check(self, identifier: str) -> RateLimitResult:
        """Count one attempt and tell whether it is allowed."""
        key = self._key(identifier)
        attempts = await self._store.incr(key, ttl=self.window_seconds)
        
        if attempts > self.max_attempts:
            retry_after = await self._store.ttl(key)
            logger.debug(
                "Rate limit exceeded",
                limiter=self.name,
                attempts=attempts,
                retry_after=retry_after
            )
            return RateLimitResult(allowed=False, remaining=0, retry_after=retry_after)
        
        return RateLimitResult(allowed=True, remaining=self.max_attempts - attempts)
    
    async def reset(self, identifier: str) -> None:
        await self._store.delete(self._key(identifier))

"""
Redis client for temporary state shared between processes.
"""
from typing import Optional
import redis.asyncio as redis

from config import settings
from database.kv_store import KeyValueStore


class RedisClient(KeyValueStore):
    """
    Async Redis client wrapper.
    Implements the KeyValueStore interface.
    """
    
    def __init__(self, url: Optional[str] = None, prefix: str = "glowlist:"):
        self._url = url or settings.redis_url
        self._prefix = prefix
        self._pool: Optional[redis.ConnectionPool] = None
        self._client: Optional[redis.Redis] = None
    
    async def connect(self) -> None:
        """Initialize Redis connection pool."""
        self._pool = redis.ConnectionPool.from_url(
            self._url,
            encoding="utf-8",
            decode_responses=True
        )
        self._client = redis.Redis(connection_pool=self._pool)
    
    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
        if self._pool:
            await self._pool.disconnect()
    
    @property
    def client(self) -> redis.Redis:
        """Get Redis client instance."""
        if not self._client:
            raise RuntimeError("Redis client not initialized. Call connect() first.")
        return self._client
    
    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"
    
    async def get(self, key: str) -> Optional[str]:
        return await self.client.get(self._key(key))
    
    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        await self.client.set(self._key(key), value, ex=ttl)
    
    async def set_if_absent(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        return bool(await self.client.set(self._key(key), value, ex=ttl, nx=True))
    
    async def delete(self, key: str) -> None:
        await self.client.delete(self._key(key))
    
    async def incr(self, key: str, ttl: Optional[int] = None) -> int:
        """Increment counter; expiry is set only on creation."""
        full_key = self._key(key)
        pipe = self.client.pipeline()
        pipe.incr(full_key)
        if ttl:
            pipe.expire(full_key, ttl, nx=True)
        results = await pipe.execute()
        return int(results[0])
    
    async def ttl(self, key: str) -> Optional[int]:
        remaining = await self.client.ttl(self._key(key))
        # -2: missing key, -1: no expiry
        if remaining is None or remaining < 0:
            return None
        return remaining

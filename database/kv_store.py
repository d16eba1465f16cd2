"""
Key-value store with TTL semantics for short-lived state.

One-time codes, rate-limit windows and the ranking lock live here.
MemoryStore is scoped to a single process; use the Redis backend when
several API instances run side by side.
"""
import asyncio
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Tuple


class KeyValueStore(ABC):
    """Interface shared by the memory and Redis backends."""
    
    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get value, None if missing or expired."""
    
    @abstractmethod
    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Set value, expiring after ttl seconds when given."""
    
    @abstractmethod
    async def set_if_absent(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        """Set value only if the key does not exist. Returns True if set."""
    
    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete key."""
    
    @abstractmethod
    async def incr(self, key: str, ttl: Optional[int] = None) -> int:
        """
        Increment an integer counter.
        ttl is applied only when the counter is created.
        """
    
    @abstractmethod
    async def ttl(self, key: str) -> Optional[int]:
        """Remaining lifetime in seconds, None for missing or persistent keys."""


class MemoryStore(KeyValueStore):
    """
    In-process store.
    Entries expire lazily on access and during periodic sweeps.
    """
    
    def __init__(self, clock: Callable[[], float] = time.monotonic, max_entries: int = 10000):
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock
        self._max_entries = max_entries
    
    def _expires_at(self, ttl: Optional[int]) -> Optional[float]:
        return self._clock() + ttl if ttl else None
    
    def _live(self, key: str) -> Optional[Tuple[str, Optional[float]]]:
        entry = self._data.get(key)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return entry
    
    def _sweep(self) -> None:
        if len(self._data) <= self._max_entries:
            return
        now = self._clock()
        for key in [k for k, (_, exp) in self._data.items() if exp is not None and now >= exp]:
            del self._data[key]
    
    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            entry = self._live(key)
            return entry[0] if entry else None
    
    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        async with self._lock:
            self._sweep()
            self._data[key] = (value, self._expires_at(ttl))
    
    async def set_if_absent(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        async with self._lock:
            if self._live(key) is not None:
                return False
            self._sweep()
            self._data[key] = (value, self._expires_at(ttl))
            return True
    
    async def delete(self, key: str) -> None:
        async with self._lock:
            self._data.pop(key, None)
    
    async def incr(self, key: str, ttl: Optional[int] = None) -> int:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                self._sweep()
                self._data[key] = ("1", self._expires_at(ttl))
                return 1
            value, expires_at = entry
            new_value = int(value) + 1
            self._data[key] = (str(new_value), expires_at)
            return new_value
    
    async def ttl(self, key: str) -> Optional[int]:
        async with self._lock:
            entry = self._live(key)
            if entry is None or entry[1] is None:
                return None
            return max(int(entry[1] - self._clock() + 0.999), 0)
    
    def __len__(self) -> int:
        return len(self._data)


def create_store(backend: str, url: Optional[str] = None) -> KeyValueStore:
    """
    Build the configured store backend.
    The Redis client still needs connect() before use.
    """
    if backend == "memory":
        return MemoryStore()
    if backend == "redis":
        from database.redis_client import RedisClient
        return RedisClient(url)
    raise ValueError(f"Unknown store backend: {backend}")

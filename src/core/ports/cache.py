"""Port for the cache/counter collaborator"""
from typing import Any, Optional, Protocol


class Cache(Protocol):
    """
    Interface for a key/value cache with atomic counters

    Used for rate-limit counters, the credential blacklist and refresh tokens
    """

    async def get(self, key: str) -> Optional[Any]:
        ...

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ...

    async def delete(self, key: str) -> bool:
        ...

    async def exists(self, key: str) -> bool:
        ...

    async def incr(self, key: str) -> int:
        """Atomically increment an integer counter, creating it at 1"""
        ...

    async def expire(self, key: str, ttl_seconds: int) -> bool:
        ...

    async def ttl(self, key: str) -> int:
        """Seconds left before expiry; -1 without expiry, -2 if the key is missing"""
        ...

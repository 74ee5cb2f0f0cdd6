from __future__ import annotations

import redis.asyncio as aioredis

from nonceq.config import Settings


class RedisPool:
    def __init__(self, url: str = "redis://localhost:6379/0", max_connections: int = 20) -> None:
        self._url = url
        self._max_connections = max_connections
        self._pool: aioredis.Redis | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> RedisPool:
        return cls(settings.redis_url, settings.redis_max_connections)

    @property
    def client(self) -> aioredis.Redis:
        if self._pool is None:
            # Auto-initialize on first access (from_url is synchronous)
            self._pool = aioredis.from_url(
                self._url,
                decode_responses=False,
                max_connections=self._max_connections,
            )
        return self._pool

    async def close(self) -> None:
        if self._pool:
            await self._pool.aclose()
            self._pool = None

    async def ping(self) -> bool:
        """Ping the Redis server to check connectivity."""
        return await self.client.ping()

    # --- String helpers (queue cursors) ---

    async def get(self, key: str) -> bytes | None:
        return await self.client.get(key)

    async def set(self, key: str, value, **kwargs):
        """Set a key-value pair with optional kwargs (ex, px, etc.)."""
        return await self.client.set(key, value, **kwargs)

    # --- Hash helpers (queue records) ---

    async def hget(self, key: str, field: str) -> bytes | None:
        return await self.client.hget(key, field)

    async def hset(self, key: str, field: str, value) -> int:
        return await self.client.hset(key, field, value)

    async def hdel(self, key: str, *fields) -> int:
        return await self.client.hdel(key, *fields)

    async def hlen(self, key: str) -> int:
        """Return the number of fields in a hash."""
        return await self.client.hlen(key)

    def pipeline(self):
        """Create a Redis pipeline for atomic multi-command execution."""
        return self.client.pipeline()

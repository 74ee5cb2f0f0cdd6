"""Tests for nonceq.redis_client.RedisPool against a mocked redis client."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

from nonceq.config import Settings
from nonceq.redis_client import RedisPool


def _pool_with_client() -> tuple[RedisPool, MagicMock]:
    client = MagicMock()
    client.get = AsyncMock(return_value=b"667")
    client.set = AsyncMock(return_value=True)
    client.hget = AsyncMock(return_value=b"666:false:1")
    client.hset = AsyncMock(return_value=1)
    client.hdel = AsyncMock(return_value=1)
    client.hlen = AsyncMock(return_value=3)
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    pool = RedisPool()
    pool._pool = client
    return pool, client


class TestRedisPool:
    async def test_string_helpers_pass_through(self):
        pool, client = _pool_with_client()

        assert await pool.get("nonceq:0xabc:head") == b"667"
        await pool.set("nonceq:0xabc:head", "668")

        client.get.assert_awaited_once_with("nonceq:0xabc:head")
        client.set.assert_awaited_once_with("nonceq:0xabc:head", "668")

    async def test_hash_helpers_pass_through(self):
        pool, client = _pool_with_client()

        assert await pool.hget("nonceq:0xabc:queue", "666") == b"666:false:1"
        assert await pool.hset("nonceq:0xabc:queue", "666", "666:true:1") == 1
        assert await pool.hdel("nonceq:0xabc:queue", "666") == 1
        assert await pool.hlen("nonceq:0xabc:queue") == 3

        client.hget.assert_awaited_once_with("nonceq:0xabc:queue", "666")
        client.hset.assert_awaited_once_with("nonceq:0xabc:queue", "666", "666:true:1")
        client.hdel.assert_awaited_once_with("nonceq:0xabc:queue", "666")
        client.hlen.assert_awaited_once_with("nonceq:0xabc:queue")

    async def test_pipeline_and_ping(self):
        pool, client = _pool_with_client()

        assert pool.pipeline() is client.pipeline.return_value
        assert await pool.ping() is True

    async def test_close_drops_client(self):
        pool, client = _pool_with_client()

        await pool.close()

        client.aclose.assert_awaited_once()
        assert pool._pool is None
        # Closing twice is harmless
        await pool.close()
        client.aclose.assert_awaited_once()

    def test_client_created_lazily_from_settings(self):
        pool = RedisPool.from_settings(
            Settings(_env_file=None, redis_url="redis://cache:6379/2", redis_max_connections=5)
        )
        with patch("nonceq.redis_client.aioredis.from_url") as from_url:
            client = pool.client
            assert pool.client is client

        from_url.assert_called_once_with(
            "redis://cache:6379/2", decode_responses=False, max_connections=5
        )

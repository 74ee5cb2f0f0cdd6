"""Nonce queue storage backed by Redis.

Per address, head and tail live in plain string keys and records in one
hash keyed by the decimal nonce value::

    {prefix}:{address}:head   -> "667"
    {prefix}:{address}:tail   -> "666"
    {prefix}:{address}:queue  -> {"666": "666:true:1700000000000", ...}

Records use the ``value:used:insertedAt`` encoding from ``Nonce.serialize``
so existing deployments sharing the same keys keep working.
"""
from __future__ import annotations

import logging

from nonceq.queue.nonce import Nonce
from nonceq.queue.repository import NonceQueueRepository
from nonceq.redis_client import RedisPool

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "nonceq"


class RedisNonceQueueRepository(NonceQueueRepository):
    def __init__(self, redis_pool: RedisPool, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        self._redis = redis_pool
        self._key_prefix = key_prefix

    def _head_key(self, address: str) -> str:
        return f"{self._key_prefix}:{address}:head"

    def _tail_key(self, address: str) -> str:
        return f"{self._key_prefix}:{address}:tail"

    def _queue_key(self, address: str) -> str:
        return f"{self._key_prefix}:{address}:queue"

    async def _get_int(self, key: str) -> int:
        raw = await self._redis.get(key)
        if raw is None:
            return 0
        return int(raw if isinstance(raw, str) else raw.decode())

    async def get_head(self, address: str) -> int:
        return await self._get_int(self._head_key(address))

    async def set_head(self, address: str, value: int) -> None:
        await self._redis.set(self._head_key(address), str(value))

    async def get_tail(self, address: str) -> int:
        return await self._get_int(self._tail_key(address))

    async def set_tail(self, address: str, value: int) -> None:
        await self._redis.set(self._tail_key(address), str(value))

    async def get_nonce(self, address: str, value: int) -> Nonce | None:
        raw = await self._redis.hget(self._queue_key(address), str(value))
        if raw is None:
            return None
        return Nonce.parse(raw)

    async def put_nonce(self, address: str, value: int, nonce: Nonce) -> None:
        await self._redis.hset(self._queue_key(address), str(value), nonce.serialize())

    async def delete_nonce(self, address: str, value: int) -> None:
        await self._redis.hdel(self._queue_key(address), str(value))

    async def size(self, address: str) -> int:
        return await self._redis.hlen(self._queue_key(address))

    async def clear(self, address: str) -> None:
        pipe = self._redis.pipeline()
        pipe.delete(self._head_key(address))
        pipe.delete(self._tail_key(address))
        pipe.delete(self._queue_key(address))
        await pipe.execute()
        logger.debug("Cleared redis nonce queue", extra={"address": address})

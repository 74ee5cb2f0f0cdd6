"""Shared fixtures.

Queue tests run against both storage backends. The Redis backend talks to
an in-memory fake of ``RedisPool`` so no server is needed.
"""
from __future__ import annotations

import secrets
from unittest.mock import MagicMock

import pytest

from nonceq.evm.nonce_provider import BlockNonceProvider
from nonceq.queue.inmemory import InMemoryNonceQueueRepository
from nonceq.queue.manager import NonceQueueManager
from nonceq.queue.nonce_queue import NonceQueue
from nonceq.queue.redis_repository import RedisNonceQueueRepository

CAPACITY = 5
EXPIRY_MS = 250


def generate_address() -> str:
    """Random Ethereum-like address."""
    return "0x" + secrets.token_hex(20)


class MockBlockNonceProvider(BlockNonceProvider):
    def __init__(self, next_nonce: int = 0) -> None:
        self.next_nonce = next_nonce
        self.error: Exception | None = None
        self.calls: list[str] = []

    async def get_block_nonce(self, address: str) -> int:
        self.calls.append(address)
        if self.error is not None:
            raise self.error
        return self.next_nonce


# ---------------------------------------------------------------------------
# Redis fake
# ---------------------------------------------------------------------------

def make_fake_redis() -> MagicMock:
    """MagicMock standing in for RedisPool, storing bytes like a real server."""
    store: dict[str, bytes] = {}
    hashes: dict[str, dict[str, bytes]] = {}

    def _b(value) -> bytes:
        return value if isinstance(value, bytes) else str(value).encode()

    mock = MagicMock()

    async def _get(key):
        return store.get(key)

    async def _set(key, value, **kwargs):
        store[key] = _b(value)

    async def _delete(*keys):
        removed = 0
        for k in keys:
            removed += int(store.pop(k, None) is not None)
            removed += int(hashes.pop(k, None) is not None)
        return removed

    async def _hget(key, field):
        return hashes.get(key, {}).get(field)

    async def _hset(key, field, value):
        h = hashes.setdefault(key, {})
        added = int(field not in h)
        h[field] = _b(value)
        return added

    async def _hdel(key, *fields):
        h = hashes.get(key, {})
        removed = sum(int(h.pop(f, None) is not None) for f in fields)
        if key in hashes and not h:
            del hashes[key]
        return removed

    async def _hlen(key):
        return len(hashes.get(key, {}))

    async def _ping():
        return True

    def _pipeline():
        pipe = MagicMock()
        _pipe_ops = []

        def _pipe_delete(*keys):
            _pipe_ops.append(keys)

        async def _pipe_execute():
            results = [await _delete(*keys) for keys in _pipe_ops]
            _pipe_ops.clear()
            return results

        pipe.delete = _pipe_delete
        pipe.execute = _pipe_execute
        return pipe

    mock.get = _get
    mock.set = _set
    mock.hget = _hget
    mock.hset = _hset
    mock.hdel = _hdel
    mock.hlen = _hlen
    mock.ping = _ping
    mock.pipeline = _pipeline
    mock._store = store
    mock._hashes = hashes
    return mock


@pytest.fixture
def fake_redis() -> MagicMock:
    return make_fake_redis()


# ---------------------------------------------------------------------------
# Queue + manager
# ---------------------------------------------------------------------------

@pytest.fixture(params=["memory", "redis"])
def repository(request):
    if request.param == "redis":
        return RedisNonceQueueRepository(make_fake_redis())
    return InMemoryNonceQueueRepository()


@pytest.fixture
def queue(repository) -> NonceQueue:
    return NonceQueue(repository, CAPACITY, EXPIRY_MS)


@pytest.fixture
def block_nonce_provider() -> MockBlockNonceProvider:
    return MockBlockNonceProvider()


@pytest.fixture
def manager_repository() -> InMemoryNonceQueueRepository:
    return InMemoryNonceQueueRepository()


@pytest.fixture
def manager(block_nonce_provider, manager_repository) -> NonceQueueManager:
    return NonceQueueManager(
        block_nonce_provider, NonceQueue(manager_repository, 10, 10_000)
    )

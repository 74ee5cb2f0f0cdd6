"""Entry point for assembling a NonceManager.

Example::

    manager = (
        NonceQ.builder()
        .with_in_memory_repository()
        .with_web3_block_nonce_provider(w3)
        .build()
    )

    nonce = await manager.get_next_valid_nonce("0x1234...")
    await manager.use_nonce("0x1234...", nonce, tx_hash)
"""
from __future__ import annotations

from web3 import AsyncWeb3

from nonceq.config import Settings
from nonceq.errors import ConfigurationIncompleteError
from nonceq.evm.nonce_provider import BlockNonceProvider, Web3BlockNonceProvider
from nonceq.queue.inmemory import InMemoryNonceQueueRepository
from nonceq.queue.manager import NonceQueueManager
from nonceq.queue.nonce_queue import DEFAULT_CAPACITY, DEFAULT_EXPIRY_MS, NonceQueue
from nonceq.queue.redis_repository import DEFAULT_KEY_PREFIX, RedisNonceQueueRepository
from nonceq.queue.repository import NonceQueueRepository
from nonceq.redis_client import RedisPool


class NonceQBuilder:
    def __init__(self) -> None:
        self._repository: NonceQueueRepository | None = None
        self._block_nonce_provider: BlockNonceProvider | None = None
        self._queue_capacity = DEFAULT_CAPACITY
        self._nonce_expiry_ms = DEFAULT_EXPIRY_MS

    def with_in_memory_repository(self) -> NonceQBuilder:
        self._repository = InMemoryNonceQueueRepository()
        return self

    def with_redis_repository(
        self, redis_pool: RedisPool, key_prefix: str = DEFAULT_KEY_PREFIX
    ) -> NonceQBuilder:
        self._repository = RedisNonceQueueRepository(redis_pool, key_prefix)
        return self

    def with_repository(self, repository: NonceQueueRepository) -> NonceQBuilder:
        self._repository = repository
        return self

    def with_block_nonce_provider(self, provider: BlockNonceProvider) -> NonceQBuilder:
        self._block_nonce_provider = provider
        return self

    def with_web3_block_nonce_provider(self, w3: AsyncWeb3) -> NonceQBuilder:
        self._block_nonce_provider = Web3BlockNonceProvider(w3)
        return self

    def with_queue_capacity(self, capacity: int) -> NonceQBuilder:
        """Maximum live records per address. Default: 100."""
        if capacity <= 0:
            raise ValueError(f"queue capacity must be positive, got {capacity}")
        self._queue_capacity = capacity
        return self

    def with_nonce_expiry(self, expiry_ms: int) -> NonceQBuilder:
        """Milliseconds before an unconfirmed nonce may be reused. Default: 10,000."""
        if expiry_ms < 0:
            raise ValueError(f"nonce expiry must not be negative, got {expiry_ms}")
        self._nonce_expiry_ms = expiry_ms
        return self

    def with_settings(self, settings: Settings) -> NonceQBuilder:
        """Apply capacity, expiry, backend and (if ``rpc_url`` is set) provider from settings.

        Components configured explicitly before this call are kept.
        """
        self.with_queue_capacity(settings.queue_capacity)
        self.with_nonce_expiry(settings.nonce_expiry_ms)
        if self._repository is None:
            if settings.repository == "redis":
                self.with_redis_repository(
                    RedisPool.from_settings(settings), settings.redis_key_prefix
                )
            else:
                self.with_in_memory_repository()
        if self._block_nonce_provider is None and settings.rpc_url:
            self._block_nonce_provider = Web3BlockNonceProvider.from_rpc_url(settings.rpc_url)
        return self

    def build(self) -> NonceQueueManager:
        if self._repository is None:
            raise ConfigurationIncompleteError("Repository")
        if self._block_nonce_provider is None:
            raise ConfigurationIncompleteError("BlockNonceProvider")

        queue = NonceQueue(self._repository, self._queue_capacity, self._nonce_expiry_ms)
        return NonceQueueManager(self._block_nonce_provider, queue)


class NonceQ:
    @staticmethod
    def builder() -> NonceQBuilder:
        return NonceQBuilder()

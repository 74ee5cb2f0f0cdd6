from __future__ import annotations

from nonceq.builder import NonceQ, NonceQBuilder
from nonceq.config import Settings
from nonceq.errors import ConfigurationIncompleteError, NonceQError, QueueOverflowError
from nonceq.evm.nonce_provider import BlockNonceProvider, Web3BlockNonceProvider
from nonceq.queue import (
    InMemoryNonceQueueRepository,
    Nonce,
    NonceManager,
    NonceQueue,
    NonceQueueManager,
    NonceQueueRepository,
    RedisNonceQueueRepository,
)
from nonceq.redis_client import RedisPool

__all__ = [
    "BlockNonceProvider",
    "ConfigurationIncompleteError",
    "InMemoryNonceQueueRepository",
    "Nonce",
    "NonceManager",
    "NonceQ",
    "NonceQBuilder",
    "NonceQError",
    "NonceQueue",
    "NonceQueueManager",
    "NonceQueueRepository",
    "QueueOverflowError",
    "RedisNonceQueueRepository",
    "RedisPool",
    "Settings",
    "Web3BlockNonceProvider",
]

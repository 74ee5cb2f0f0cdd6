from __future__ import annotations

from nonceq.queue.inmemory import InMemoryNonceQueueRepository
from nonceq.queue.manager import NonceManager, NonceQueueManager
from nonceq.queue.nonce import Nonce
from nonceq.queue.nonce_queue import NonceQueue
from nonceq.queue.redis_repository import RedisNonceQueueRepository
from nonceq.queue.repository import NonceQueueRepository

__all__ = [
    "InMemoryNonceQueueRepository",
    "Nonce",
    "NonceManager",
    "NonceQueue",
    "NonceQueueManager",
    "NonceQueueRepository",
    "RedisNonceQueueRepository",
]

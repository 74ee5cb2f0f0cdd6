"""Lock-guarded nonce manager on top of NonceQueue.

Every public coroutine runs under one asyncio.Lock shared by all addresses,
including the call out to the block nonce provider. A slow RPC node
therefore stalls every address until it answers.

A manager belongs to the event loop that first waits on its lock. Other
threads must not call it from loops of their own; they submit their calls
to the owning loop with ``asyncio.run_coroutine_threadsafe``.

The lock only serialises tasks inside this process. Two processes sharing
one Redis backend can hand out the same nonce; run a single allocator per
backend.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from nonceq.evm.nonce_provider import BlockNonceProvider
from nonceq.monitoring.metrics import (
    nonces_allocated_total,
    nonces_discarded_total,
    nonces_used_total,
    queue_resets_total,
)
from nonceq.queue.nonce_queue import NonceQueue

logger = logging.getLogger(__name__)

NONCE_TOO_LOW = "nonce too low"


class NonceManager(ABC):
    @abstractmethod
    async def get_next_valid_nonce(self, address: str) -> int: ...

    @abstractmethod
    async def use_nonce(self, address: str, nonce: int, tx_id: str | None = None) -> None: ...

    @abstractmethod
    async def discard_nonce(self, address: str, nonce: int, error_message: str | None = None) -> None: ...


class NonceQueueManager(NonceManager):
    def __init__(self, block_nonce_provider: BlockNonceProvider, nonce_queue: NonceQueue):
        self._block_nonce_provider = block_nonce_provider
        self._queue = nonce_queue
        self._lock = asyncio.Lock()

    @property
    def queue(self) -> NonceQueue:
        return self._queue

    async def get_next_valid_nonce(self, address: str) -> int:
        """Return a nonce reserved for ``address``.

        The first call for an address (or the first after a reset) takes the
        nonce from the chain and seeds the queue with it.
        """
        async with self._lock:
            address = address.lower()

            if await self._queue.is_empty(address):
                block_nonce = await self._block_nonce_provider.get_block_nonce(address)
                await self._queue.insert(address, block_nonce)
                nonces_allocated_total.labels(source="block").inc()
                return block_nonce

            nonce = await self._queue.next(address)
            nonces_allocated_total.labels(source="queue").inc()
            return nonce

    async def use_nonce(self, address: str, nonce: int, tx_id: str | None = None) -> None:
        """Confirm ``nonce`` was consumed. ``tx_id`` is only logged."""
        async with self._lock:
            if await self._queue.mark_used(address.lower(), nonce):
                nonces_used_total.inc()
            logger.debug(
                "Nonce used",
                extra={"address": address.lower(), "nonce": nonce, "tx_id": tx_id},
            )

    async def discard_nonce(self, address: str, nonce: int, error_message: str | None = None) -> None:
        """Give ``nonce`` back, or wipe the address if the chain says we're behind."""
        async with self._lock:
            address = address.lower()
            # Fallen behind the chain: start over from the block nonce
            # on the next request.
            if (
                error_message is not None
                and NONCE_TOO_LOW in error_message.lower()
                and not await self._queue.is_empty(address)
            ):
                logger.info(
                    "Resetting nonce queue after rejection",
                    extra={"address": address, "nonce": nonce, "error": error_message},
                )
                await self._queue.reset(address)
                queue_resets_total.labels(reason="nonce_too_low").inc()
            else:
                if await self._queue.remove(address, nonce):
                    nonces_discarded_total.inc()

    async def reset(self, address: str) -> None:
        async with self._lock:
            await self._queue.reset(address.lower())
            queue_resets_total.labels(reason="manual").inc()

"""Circular nonce queue, one per address.

Each address owns three pieces of state, all kept in the repository:

- ``head``: the most recent value handed out
- ``tail``: the oldest value still tracked
- ``queue``: value -> ``Nonce`` record

::

    queue with capacity n
    __________________________________
    |  k  | k+1 | .. | .. | .. |k+n-1|
    __________________________________
      ^                           ^
     tail                        head

Used records are reclaimed from the tail, expired unused records are
emptied at the tail for reuse, and removed values rewind the head so the
lowest free value is always handed out next.
"""
from __future__ import annotations

import logging

from nonceq.errors import QueueOverflowError
from nonceq.monitoring.metrics import queue_overflow_total
from nonceq.queue.nonce import Nonce, utc_ms
from nonceq.queue.repository import NonceQueueRepository

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100
DEFAULT_EXPIRY_MS = 10_000


class NonceQueue:
    def __init__(
        self,
        repository: NonceQueueRepository,
        capacity: int = DEFAULT_CAPACITY,
        expiry_ms: int = DEFAULT_EXPIRY_MS,
    ):
        self._repository = repository
        self._capacity = capacity
        self._expiry_ms = expiry_ms

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def expiry_ms(self) -> int:
        return self._expiry_ms

    async def insert(self, address: str, value: int) -> None:
        """Seed ``address`` with ``value``, setting head and tail to it.

        Only meant for initialization. No-op when ``value`` already has a record.
        """
        if await self.has(address, value):
            return

        await self._repository.set_head(address, value)
        await self._repository.set_tail(address, value)
        await self._repository.put_nonce(address, value, Nonce(value, False, utc_ms()))
        logger.info("Inserted initial nonce", extra={"address": address, "nonce": value})

    async def next(self, address: str) -> int:
        """Return the lowest free value after head and move head onto it.

        Say k+2 and k+4 were removed and head sits at k+1::

            |  k  | k+1 | empty | k+3 | empty | .. |
              ^      ^
             tail   head

        The next call hands out k+2. The call after that steps over k+3,
        which is still reserved, and hands out k+4. A slot whose record has
        expired counts as free.

        Raises QueueOverflowError once the number of live records reaches
        the capacity, so the search never runs past it.
        """
        while not await self._is_full(address):
            # Reclaim used (or expired) records at the tail so the queue
            # doesn't grow without bound.
            await self._remove_tail(address)

            head = await self._repository.get_head(address) + 1
            await self._repository.set_head(address, head)

            current = await self._repository.get_nonce(address, head)
            if current is None or current.is_expired(self._expiry_ms):
                await self._repository.put_nonce(address, head, Nonce(head, False, utc_ms()))
                logger.debug("Next nonce", extra={"address": address, "nonce": head})
                return head

            # Still reserved; keep walking.

        queue_overflow_total.inc()
        logger.warning(
            "Nonce queue is full",
            extra={"address": address, "capacity": self._capacity},
        )
        raise QueueOverflowError(address, self._capacity)

    async def remove(self, address: str, value: int) -> bool:
        """Drop ``value`` so it is handed out again. Returns False if it had no record.

        Head moves to ``value - 1`` unless it is already below ``value``.
        With k+2 removed earlier and head at k+1, removing k+4 leaves head
        at k+1 so k+2 still goes out first::

            |  k  | k+1 | empty | k+3 | empty | .. |
              ^      ^
             tail   head
        """
        if not await self.has(address, value):
            return False

        logger.debug("Discarding nonce", extra={"address": address, "nonce": value})
        await self._repository.delete_nonce(address, value)

        head = await self._repository.get_head(address)
        if head >= value:
            head = value - 1
            await self._repository.set_head(address, head)
            logger.debug("Moved head", extra={"address": address, "head": head})
        return True

    async def mark_used(self, address: str, value: int) -> bool:
        """Flag ``value`` as used so the tail can reclaim it later. Returns False if it had no record."""
        nonce = await self._repository.get_nonce(address, value)
        if nonce is None:
            return False
        nonce.used = True
        await self._repository.put_nonce(address, value, nonce)
        return True

    async def is_empty(self, address: str) -> bool:
        """True when there are no records and head is still at 0.

        A queue with no records is not necessarily empty: after a value is
        handed out and removed, head may point just below it while the
        record map is empty.
        """
        head = await self._repository.get_head(address)
        return await self._repository.size(address) == 0 and head == 0

    async def reset(self, address: str) -> None:
        """Remove every record and put head and tail back to 0."""
        await self._repository.clear(address)
        logger.info("Reset nonce queue", extra={"address": address})

    async def has(self, address: str, value: int) -> bool:
        return await self._repository.get_nonce(address, value) is not None

    async def _remove_tail(self, address: str) -> None:
        """Reclaim used records at the tail up to head, or empty one expired tail slot."""
        while True:
            tail = await self._repository.get_tail(address)
            nonce = await self._repository.get_nonce(address, tail)
            if nonce is None:
                return

            if nonce.used:
                logger.debug("Removing used tail nonce", extra={"address": address, "nonce": tail})
                await self._repository.delete_nonce(address, tail)
                await self._repository.set_tail(address, tail + 1)
                if tail < await self._repository.get_head(address):
                    continue
            elif nonce.is_expired(self._expiry_ms):
                # Never confirmed nor discarded in time: assume it was not
                # broadcast and free the slot. Tail stays where it is.
                logger.debug("Expired tail nonce", extra={"address": address, "nonce": tail})
                await self.remove(address, tail)
            return

    async def _is_full(self, address: str) -> bool:
        return await self._repository.size(address) >= self._capacity

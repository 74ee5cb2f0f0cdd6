"""In-process nonce queue storage. Nothing survives a restart."""
from __future__ import annotations

from dataclasses import dataclass, field

from nonceq.queue.nonce import Nonce
from nonceq.queue.repository import NonceQueueRepository


@dataclass
class _Queue:
    head: int = 0
    tail: int = 0
    records: dict[int, Nonce] = field(default_factory=dict)


class InMemoryNonceQueueRepository(NonceQueueRepository):
    def __init__(self) -> None:
        self._queues: dict[str, _Queue] = {}

    def _queue(self, address: str) -> _Queue:
        if address not in self._queues:
            self._queues[address] = _Queue()
        return self._queues[address]

    async def get_head(self, address: str) -> int:
        q = self._queues.get(address)
        return q.head if q else 0

    async def set_head(self, address: str, value: int) -> None:
        self._queue(address).head = value

    async def get_tail(self, address: str) -> int:
        q = self._queues.get(address)
        return q.tail if q else 0

    async def set_tail(self, address: str, value: int) -> None:
        self._queue(address).tail = value

    async def get_nonce(self, address: str, value: int) -> Nonce | None:
        q = self._queues.get(address)
        return q.records.get(value) if q else None

    async def put_nonce(self, address: str, value: int, nonce: Nonce) -> None:
        self._queue(address).records[value] = nonce

    async def delete_nonce(self, address: str, value: int) -> None:
        q = self._queues.get(address)
        if q:
            q.records.pop(value, None)

    async def size(self, address: str) -> int:
        q = self._queues.get(address)
        return len(q.records) if q else 0

    async def clear(self, address: str) -> None:
        self._queues.pop(address, None)

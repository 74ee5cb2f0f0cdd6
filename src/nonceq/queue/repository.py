from __future__ import annotations

from abc import ABC, abstractmethod

from nonceq.queue.nonce import Nonce


class NonceQueueRepository(ABC):
    """Address-scoped storage for nonce queue cursors and records.

    Unset cursors read as 0. The queue holds no state of its own, so every
    implementation is the system of record for the addresses it serves.
    Multi-step sequences are only safe under the manager's lock.
    """

    @abstractmethod
    async def get_head(self, address: str) -> int: ...

    @abstractmethod
    async def set_head(self, address: str, value: int) -> None: ...

    @abstractmethod
    async def get_tail(self, address: str) -> int: ...

    @abstractmethod
    async def set_tail(self, address: str, value: int) -> None: ...

    @abstractmethod
    async def get_nonce(self, address: str, value: int) -> Nonce | None: ...

    @abstractmethod
    async def put_nonce(self, address: str, value: int, nonce: Nonce) -> None: ...

    @abstractmethod
    async def delete_nonce(self, address: str, value: int) -> None: ...

    @abstractmethod
    async def size(self, address: str) -> int:
        """Number of live records for ``address``."""
        ...

    @abstractmethod
    async def clear(self, address: str) -> None:
        """Drop head, tail and every record of ``address``."""
        ...

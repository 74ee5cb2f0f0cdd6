from __future__ import annotations


class NonceQError(Exception):
    """Base class for errors raised by nonceq itself."""


class QueueOverflowError(NonceQError):
    """Raised when an address has no free slot left below the queue capacity."""

    def __init__(self, address: str, capacity: int) -> None:
        self.address = address
        self.capacity = capacity
        super().__init__(
            f"nonce queue is full for address: {address} with capacity: {capacity}"
        )


class ConfigurationIncompleteError(NonceQError):
    """Raised by the builder when a required component was never configured."""

    def __init__(self, component: str) -> None:
        self.component = component
        super().__init__(f"{component} must be configured")

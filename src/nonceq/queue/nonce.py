"""Nonce record stored per (address, value) slot of a nonce queue."""
from __future__ import annotations

import time
from dataclasses import dataclass


def utc_ms() -> int:
    """Current UTC time in milliseconds."""
    return int(time.time() * 1000)


@dataclass
class Nonce:
    value: int
    used: bool = False
    inserted_at: int = 0  # UTC ms

    def is_expired(self, expiry_ms: int) -> bool:
        """Unused records expire ``expiry_ms`` after insertion. Used ones never do."""
        return not self.used and utc_ms() - self.inserted_at >= expiry_ms

    # ── Wire format: value:used:insertedAt ──

    def serialize(self) -> str:
        return f"{self.value}:{'true' if self.used else 'false'}:{self.inserted_at}"

    @classmethod
    def parse(cls, raw: str | bytes) -> Nonce:
        if isinstance(raw, bytes):
            raw = raw.decode()
        value, used, inserted_at = raw.split(":")
        return cls(int(value), used.lower() == "true", int(inserted_at))

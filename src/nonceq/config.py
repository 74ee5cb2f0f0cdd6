from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "NONCEQ_", "env_file": ".env", "env_file_encoding": "utf-8"}

    # Storage backend
    repository: Literal["memory", "redis"] = "memory"

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "nonceq"
    redis_max_connections: int = 20

    # Block nonce provider (JSON-RPC endpoint of an EVM node)
    rpc_url: str = ""

    # Queue
    queue_capacity: int = 100
    nonce_expiry_ms: int = 10_000

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"


settings = Settings()

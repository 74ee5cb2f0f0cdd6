from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from web3 import AsyncWeb3

from nonceq.redis_client import RedisPool

logger = logging.getLogger(__name__)


@dataclass
class HealthStatus:
    component: str
    healthy: bool
    latency_ms: float | None = None
    message: str | None = None


async def check_redis(redis_pool: RedisPool) -> HealthStatus:
    start = time.monotonic()
    try:
        await redis_pool.ping()
        return HealthStatus("redis", True, latency_ms=(time.monotonic() - start) * 1000)
    except Exception as e:
        logger.warning("Redis health check failed", extra={"error": str(e)})
        return HealthStatus("redis", False, message=str(e))


async def check_rpc(w3: AsyncWeb3) -> HealthStatus:
    """Check if the RPC node the block nonce provider reads from is reachable."""
    start = time.monotonic()
    try:
        connected = await w3.is_connected()
        if not connected:
            return HealthStatus("rpc", False, message="not connected")
        return HealthStatus("rpc", True, latency_ms=(time.monotonic() - start) * 1000)
    except Exception as e:
        logger.warning("RPC health check failed", extra={"error": str(e)})
        return HealthStatus("rpc", False, message=str(e))

from __future__ import annotations

from prometheus_client import Counter

# Allocation metrics
nonces_allocated_total = Counter(
    "nonceq_nonces_allocated_total", "Nonces handed out to callers", ["source"],
)
nonces_used_total = Counter("nonceq_nonces_used_total", "Nonces confirmed as used")
nonces_discarded_total = Counter("nonceq_nonces_discarded_total", "Nonces released for reuse")

# Queue health
queue_resets_total = Counter("nonceq_queue_resets_total", "Whole-address queue resets", ["reason"])
queue_overflow_total = Counter(
    "nonceq_queue_overflow_total", "next() calls rejected because the queue was full",
)

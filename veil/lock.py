from __future__ import annotations

from contextlib import contextmanager

import redis

from veil.errors import PlayerBusy


@contextmanager
def player_lock(*, r: redis.Redis, identity: str, ttl_ms: int = 5_000):
    """Best-effort per-identity admission lock.

    The ledger is expected to serialize calls already; this only refuses a
    second in-flight call for the same identity within one deployment.
    """

    key = f"lock:player:{identity}"
    acquired = r.set(key, "1", nx=True, px=ttl_ms)
    if not acquired:
        raise PlayerBusy("Player has a call in flight")
    try:
        yield
    finally:
        r.delete(key)

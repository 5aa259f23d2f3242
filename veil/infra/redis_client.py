from __future__ import annotations

import redis

from veil.settings import EngineSettings, settings_from_env


def create_redis(settings: EngineSettings | None = None) -> redis.Redis:
    s = settings or settings_from_env()
    # decode_responses=True => strings in/out instead of bytes
    return redis.Redis.from_url(s.redis_url, decode_responses=True)

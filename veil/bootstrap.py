from __future__ import annotations

import logging

import redis

from veil.fhe.mock import MockCiphertextProvider
from veil.infra.redis_client import create_redis
from veil.logging_utils import configure_logging
from veil.registry import PlayerRegistry
from veil.settings import EngineSettings, settings_from_env

logger = logging.getLogger(__name__)


def build_registry(*, settings: EngineSettings | None = None, r: redis.Redis | None = None) -> PlayerRegistry:
    """Wire settings, logging, redis and the mock coprocessor into a registry.

    Hosts with a real coprocessor construct `PlayerRegistry` themselves.
    """

    s = settings or settings_from_env()
    configure_logging(level=s.log_level)
    client = r if r is not None else create_redis(s)
    provider = MockCiphertextProvider(r=client, engine_id=s.engine_id, proof_key=s.input_proof_key)
    logger.info("veil engine ready: engine_id=%s", s.engine_id)
    return PlayerRegistry(r=client, provider=provider, engine_id=s.engine_id)

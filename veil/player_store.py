from __future__ import annotations

from collections.abc import Sequence

import redis

from veil.api.models import PlayerRecord
from veil.core.events import Notification
from veil.errors import AlreadyJoined, NotJoined, PlayerBusy
from veil.streams import stage_notifications


PLAYERS_SET_KEY = "veil:players"
PLAYER_KEY_PREFIX = "veil:player:"  # + {identity}


def _player_key(identity: str) -> str:
    return f"{PLAYER_KEY_PREFIX}{identity}"


def get_player(*, r: redis.Redis, identity: str) -> PlayerRecord | None:
    raw = r.get(_player_key(identity))
    if not raw:
        return None
    return PlayerRecord.model_validate_json(raw)


def list_player_ids(*, r: redis.Redis) -> list[str]:
    return sorted(r.smembers(PLAYERS_SET_KEY))


def _write(
    *,
    r: redis.Redis,
    identity: str,
    record: PlayerRecord,
    notifications: Sequence[Notification],
    must_exist: bool,
) -> list[str]:
    """Write a record plus its notifications in one MULTI/EXEC.

    WATCH makes the existence check and the write a single unit: a concurrent
    writer aborts this transaction instead of being overwritten.
    """

    key = _player_key(identity)
    with r.pipeline() as pipe:
        try:
            pipe.watch(key)
            exists = bool(pipe.exists(key))
            if must_exist and not exists:
                raise NotJoined("Player has not joined")
            if not must_exist and exists:
                raise AlreadyJoined("Player has already joined")
            pipe.multi()
            pipe.set(key, record.model_dump_json())
            pipe.sadd(PLAYERS_SET_KEY, identity)
            n = stage_notifications(pipe=pipe, notifications=notifications)
            results = pipe.execute()
        except redis.WatchError as e:
            raise PlayerBusy(f"Concurrent write to player {identity}") from e
    return [str(x) for x in results[len(results) - n :]] if n else []


def insert_player(
    *,
    r: redis.Redis,
    identity: str,
    record: PlayerRecord,
    notifications: Sequence[Notification] = (),
) -> list[str]:
    return _write(r=r, identity=identity, record=record, notifications=notifications, must_exist=False)


def update_player(
    *,
    r: redis.Redis,
    identity: str,
    record: PlayerRecord,
    notifications: Sequence[Notification] = (),
) -> list[str]:
    return _write(r=r, identity=identity, record=record, notifications=notifications, must_exist=True)

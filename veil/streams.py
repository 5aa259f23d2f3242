from __future__ import annotations

from collections.abc import Sequence
from typing import Any, cast

import redis

from veil.core.events import Notification


EVENTS_STREAM_KEY = "veil:events"


def stage_notifications(*, pipe: Any, notifications: Sequence[Notification]) -> int:
    """Queue notifications on a redis pipeline; returns how many were queued."""

    for n in notifications:
        pipe.xadd(EVENTS_STREAM_KEY, {str(k): str(v) for k, v in n.as_fields().items()})
    return len(notifications)


def read_notifications(*, r: redis.Redis, count: int = 100) -> list[tuple[str, dict[str, str]]]:
    """Oldest-first notifications from the event stream."""

    entries = r.xrange(EVENTS_STREAM_KEY, count=count)
    return [(cast(str, entry_id), cast(dict[str, str], fields)) for entry_id, fields in entries]

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

NotificationType = Literal[
    "player_joined",
    "item_placed",
]


@dataclass(frozen=True, slots=True)
class Notification:
    """Public event for external observers.

    Carries only information the caller already disclosed in clear: the
    identity and, for placements, the cell index. Never a hint of the outcome.
    """

    type: NotificationType
    player: str
    ts: datetime
    payload: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def now(*, type: NotificationType, player: str, payload: dict[str, str] | None = None) -> "Notification":
        return Notification(type=type, player=player, ts=datetime.now(timezone.utc), payload=dict(payload or {}))

    def as_fields(self) -> dict[str, str]:
        return {"type": self.type, "player": self.player, "ts": self.ts.isoformat(), **self.payload}

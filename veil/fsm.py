from __future__ import annotations

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from veil.api.models import PlayerPhase, PlayerRecord
from veil.errors import AlreadyJoined, NotJoined


class PlayerLifecycle(StateMachine):
    """Join-once lifecycle of a player record.

    A missing record is `unjoined`; `join` is the only transition and `joined`
    is final, so a second join is rejected by the machine itself.
    """

    unjoined = State(PlayerPhase.unjoined.value, value=PlayerPhase.unjoined.value, initial=True)
    joined = State(PlayerPhase.joined.value, value=PlayerPhase.joined.value, final=True)

    join = unjoined.to(joined)

    def __init__(self, record: PlayerRecord | None):
        self.record = record
        phase = record.phase if record is not None else PlayerPhase.unjoined
        super().__init__(start_value=phase.value)

    @property
    def has_joined(self) -> bool:
        return self.current_state == self.joined

    def admit_join(self) -> None:
        try:
            self.join()
        except TransitionNotAllowed as e:
            raise AlreadyJoined("Player has already joined") from e

    def require_joined(self) -> None:
        if not self.has_joined:
            raise NotJoined("Player has not joined")

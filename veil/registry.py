from __future__ import annotations

import logging
from dataclasses import dataclass

import redis

from veil.api.models import PlayerRecord
from veil.catalogue import COST_TABLE, EMPTY_CELL, GRID_SIZE, STARTING_BALANCE
from veil.core.events import Notification
from veil.errors import NotJoined
from veil.fhe.provider import CiphertextProvider
from veil.fhe.types import Ciphertext, CipherType
from veil.player_store import get_player, insert_player, list_player_ids, update_player
from veil.transition.committer import commit_transition
from veil.transition.costs import evaluate_cost
from veil.transition.gates import GateContext, gates_for_operation
from veil.transition.grants import AccessGrantManager, Grant
from veil.transition.validator import validate_transition

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class JoinOutcome:
    record: PlayerRecord
    grants: tuple[Grant, ...]
    notifications: tuple[Notification, ...]
    stream_ids: list[str]


@dataclass(frozen=True, slots=True)
class PlacementOutcome:
    """Result of a placement.

    Identical in shape whether or not the placement was applied: two fresh
    handles, four grants, one notification.
    """

    record: PlayerRecord
    balance: Ciphertext
    cell: Ciphertext
    grants: tuple[Grant, ...]
    notifications: tuple[Notification, ...]
    stream_ids: list[str]


@dataclass(slots=True)
class PlayerRegistry:
    """One confidential state record per identity.

    Boundary checks (join-once, joined, cell index) run on clear inputs before
    any ciphertext is produced. After that, every step is oblivious.
    """

    r: redis.Redis
    provider: CiphertextProvider
    engine_id: str
    cost_table: tuple[tuple[int, int], ...] = COST_TABLE

    @property
    def grants(self) -> AccessGrantManager:
        return AccessGrantManager(provider=self.provider, engine_id=self.engine_id)

    def _gate(self, operation: str, identity: str, *, index: int | None = None) -> PlayerRecord | None:
        record = get_player(r=self.r, identity=identity)
        ctx = GateContext(identity=identity, operation=operation, index=index)
        gates_for_operation(operation).check(ctx=ctx, record=record)
        return record

    def _require(self, operation: str, identity: str, *, index: int | None = None) -> PlayerRecord:
        record = self._gate(operation, identity, index=index)
        if record is None:
            raise NotJoined("Player has not joined")
        return record

    # --- mutations ---------------------------------------------------------

    def join(self, identity: str) -> JoinOutcome:
        self._gate("join", identity)

        balance = self.provider.encrypt(STARTING_BALANCE, CipherType.euint32)
        cells = [self.provider.encrypt(EMPTY_CELL, CipherType.euint8) for _ in range(GRID_SIZE)]
        grants = self.grants.grant_all(identity, [balance, *cells])

        record = PlayerRecord(joined=True, balance=balance.handle, cells=[c.handle for c in cells])
        notifications = (Notification.now(type="player_joined", player=identity),)
        stream_ids = insert_player(r=self.r, identity=identity, record=record, notifications=notifications)

        logger.info("player joined: %s", identity)
        return JoinOutcome(record=record, grants=grants, notifications=notifications, stream_ids=stream_ids)

    def place_item(self, identity: str, index: int, encrypted_input: str, proof: str) -> PlacementOutcome:
        record = self._require("place_item", identity, index=index)

        # InvalidProof propagates: the call fails before any state is touched.
        chosen = self.provider.decode(encrypted_input, proof, identity=identity, ctype=CipherType.euint8)

        balance = Ciphertext.from_handle(record.balance)
        old_cell = Ciphertext.from_handle(record.cells[index])

        cost = evaluate_cost(self.provider, chosen, self.cost_table)
        verdict = validate_transition(self.provider, balance=balance, cost=cost)
        committed = commit_transition(
            self.provider,
            verdict,
            balance=balance,
            cost=cost,
            chosen_type=chosen,
            old_cell=old_cell,
        )
        grants = self.grants.grant_all(identity, [committed.balance, committed.cell])

        cells = list(record.cells)
        cells[index] = committed.cell.handle
        updated = PlayerRecord(joined=True, balance=committed.balance.handle, cells=cells)
        notifications = (Notification.now(type="item_placed", player=identity, payload={"index": str(index)}),)
        stream_ids = update_player(r=self.r, identity=identity, record=updated, notifications=notifications)

        logger.info("placement processed: player=%s cell=%d", identity, index)
        return PlacementOutcome(
            record=updated,
            balance=committed.balance,
            cell=committed.cell,
            grants=grants,
            notifications=notifications,
            stream_ids=stream_ids,
        )

    # --- reads (handles only, never decrypt) -------------------------------

    def is_joined(self, identity: str) -> bool:
        record = get_player(r=self.r, identity=identity)
        return record is not None and record.joined

    def get_balance_handle(self, identity: str) -> Ciphertext:
        record = self._require("get_balance", identity)
        return Ciphertext.from_handle(record.balance)

    def get_cell_handle(self, identity: str, index: int) -> Ciphertext:
        record = self._require("get_cell", identity, index=index)
        return Ciphertext.from_handle(record.cells[index])

    def get_cell_handles(self, identity: str) -> tuple[Ciphertext, ...]:
        record = self._require("get_cells", identity)
        return tuple(Ciphertext.from_handle(h) for h in record.cells)

    def list_players(self) -> list[str]:
        return list_player_ids(r=self.r)

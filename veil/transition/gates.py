from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from veil.api.models import PlayerRecord
from veil.catalogue import GRID_SIZE
from veil.errors import IndexOutOfRange, UnknownOperation
from veil.fsm import PlayerLifecycle


@dataclass(frozen=True, slots=True)
class GateContext:
    """Clear inputs available to gate checks. Safe to log."""

    identity: str
    operation: str
    index: int | None = None


class Gate(ABC):
    """A small, composable boundary check run before any ciphertext work."""

    @abstractmethod
    def check(self, *, ctx: GateContext, record: PlayerRecord | None) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class NotYetJoinedGate(Gate):
    def check(self, *, ctx: GateContext, record: PlayerRecord | None) -> None:
        PlayerLifecycle(record).admit_join()


@dataclass(frozen=True, slots=True)
class JoinedGate(Gate):
    def check(self, *, ctx: GateContext, record: PlayerRecord | None) -> None:
        PlayerLifecycle(record).require_joined()


@dataclass(frozen=True, slots=True)
class CellIndexGate(Gate):
    size: int = GRID_SIZE

    def check(self, *, ctx: GateContext, record: PlayerRecord | None) -> None:
        index = ctx.index
        # bool is an int subclass; a True index is a caller bug, not cell 1.
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < self.size:
            raise IndexOutOfRange(f"Cell index must be 0..{self.size - 1}, got {index!r}")


@dataclass(frozen=True, slots=True)
class GatePipeline:
    gates: tuple[Gate, ...]

    def check(self, *, ctx: GateContext, record: PlayerRecord | None) -> None:
        for g in self.gates:
            g.check(ctx=ctx, record=record)


# Order matters: it fixes which error a caller sees when several apply.
DEFAULT_OPERATION_GATES: dict[str, GatePipeline] = {
    "join": GatePipeline(gates=(NotYetJoinedGate(),)),
    "place_item": GatePipeline(gates=(JoinedGate(), CellIndexGate())),
    "get_balance": GatePipeline(gates=(JoinedGate(),)),
    "get_cell": GatePipeline(gates=(CellIndexGate(), JoinedGate())),
    "get_cells": GatePipeline(gates=(JoinedGate(),)),
}


def gates_for_operation(operation: str) -> GatePipeline:
    pipe = DEFAULT_OPERATION_GATES.get(operation)
    if pipe is None:
        raise UnknownOperation(f"Unknown operation: {operation}")
    return pipe

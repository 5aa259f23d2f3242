from __future__ import annotations

import pytest
from pydantic import ValidationError

from veil.api.models import PlayerPhase, PlayerRecord
from veil.errors import AlreadyJoined, IndexOutOfRange, NotJoined, UnknownOperation
from veil.fhe.types import CipherType, new_handle
from veil.fsm import PlayerLifecycle
from veil.transition.gates import CellIndexGate, GateContext, gates_for_operation


def _record() -> PlayerRecord:
    return PlayerRecord(
        joined=True,
        balance=new_handle(CipherType.euint32),
        cells=[new_handle(CipherType.euint8) for _ in range(9)],
    )


def test_lifecycle_starts_unjoined_without_record() -> None:
    fsm = PlayerLifecycle(None)
    assert not fsm.has_joined

    fsm.admit_join()

    assert fsm.has_joined
    assert fsm.current_state.value == PlayerPhase.joined.value


def test_lifecycle_refuses_second_join() -> None:
    fsm = PlayerLifecycle(_record())

    with pytest.raises(AlreadyJoined):
        fsm.admit_join()


def test_lifecycle_require_joined() -> None:
    with pytest.raises(NotJoined):
        PlayerLifecycle(None).require_joined()
    PlayerLifecycle(_record()).require_joined()


@pytest.mark.parametrize("index", [0, 4, 8])
def test_cell_index_gate_accepts_grid(index: int) -> None:
    CellIndexGate().check(ctx=GateContext(identity="p", operation="place_item", index=index), record=None)


@pytest.mark.parametrize("index", [-1, 9, None, True, 2.0])
def test_cell_index_gate_refuses_everything_else(index) -> None:
    with pytest.raises(IndexOutOfRange):
        CellIndexGate().check(ctx=GateContext(identity="p", operation="place_item", index=index), record=None)


def test_place_pipeline_checks_join_before_index() -> None:
    ctx = GateContext(identity="p", operation="place_item", index=99)
    with pytest.raises(NotJoined):
        gates_for_operation("place_item").check(ctx=ctx, record=None)
    with pytest.raises(IndexOutOfRange):
        gates_for_operation("place_item").check(ctx=ctx, record=_record())


def test_unknown_operation_pipeline_raises() -> None:
    with pytest.raises(UnknownOperation) as e:
        gates_for_operation("withdraw")
    assert "Unknown operation" in str(e.value)


def test_record_requires_exactly_nine_cells() -> None:
    with pytest.raises(ValidationError):
        PlayerRecord(balance=new_handle(CipherType.euint32), cells=[new_handle(CipherType.euint8)] * 8)
    with pytest.raises(ValidationError):
        PlayerRecord(balance=new_handle(CipherType.euint32), cells=[new_handle(CipherType.euint8)] * 10)


def test_record_checks_handle_types() -> None:
    with pytest.raises(ValidationError):
        PlayerRecord(balance=new_handle(CipherType.euint8), cells=[new_handle(CipherType.euint8)] * 9)
    with pytest.raises(ValidationError):
        PlayerRecord(balance=new_handle(CipherType.euint32), cells=[new_handle(CipherType.ebool)] * 9)

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal, cast, get_args

from pydantic import BaseModel, ValidationError

from veil.api.models import JoinArgs, PlaceItemArgs, PlayerArgs, PlayerCellArgs
from veil.core.events import Notification
from veil.errors import InvalidArguments, UnknownOperation, VeilError
from veil.lock import player_lock
from veil.registry import PlayerRegistry

logger = logging.getLogger(__name__)


OperationName = Literal["join", "place_item", "is_joined", "get_balance", "get_cell", "get_cells"]

_MUTATIONS: frozenset[str] = frozenset({"join", "place_item"})

_ARG_MODELS: dict[str, type[BaseModel]] = {
    "join": JoinArgs,
    "place_item": PlaceItemArgs,
    "is_joined": PlayerArgs,
    "get_balance": PlayerArgs,
    "get_cell": PlayerCellArgs,
    "get_cells": PlayerArgs,
}


@dataclass(frozen=True, slots=True)
class OperationResult:
    """What goes back to the ledger.

    `ok` only says the call passed validation. A placement that was
    unaffordable or named an unknown item is still `ok`.
    """

    ok: bool
    operation: str
    error: str | None = None
    detail: str | None = None
    value: Any = None
    notifications: list[Notification] = field(default_factory=list)
    stream_ids: list[str] = field(default_factory=list)


def _parse_args(operation: str, args: dict[str, Any] | None) -> BaseModel:
    model = _ARG_MODELS.get(operation)
    if model is None:
        raise UnknownOperation(f"Unknown operation: {operation}")
    try:
        return model.model_validate(args or {})
    except ValidationError as e:
        raise InvalidArguments(f"Invalid arguments for {operation}: {e.error_count()} error(s)") from e


def _run(registry: PlayerRegistry, caller: str, operation: str, parsed: BaseModel) -> OperationResult:
    if operation == "join":
        joined = registry.join(caller)
        return OperationResult(
            ok=True,
            operation=operation,
            notifications=list(joined.notifications),
            stream_ids=joined.stream_ids,
        )

    if operation == "place_item":
        place = cast(PlaceItemArgs, parsed)
        placed = registry.place_item(caller, place.index, place.handle, place.proof)
        return OperationResult(
            ok=True,
            operation=operation,
            notifications=list(placed.notifications),
            stream_ids=placed.stream_ids,
        )

    target = cast(PlayerArgs, parsed).player or caller

    if operation == "is_joined":
        return OperationResult(ok=True, operation=operation, value=registry.is_joined(target))
    if operation == "get_balance":
        return OperationResult(ok=True, operation=operation, value=registry.get_balance_handle(target).handle)
    if operation == "get_cell":
        index = cast(PlayerCellArgs, parsed).index
        return OperationResult(ok=True, operation=operation, value=registry.get_cell_handle(target, index).handle)
    if operation == "get_cells":
        return OperationResult(ok=True, operation=operation, value=[c.handle for c in registry.get_cell_handles(target)])

    raise UnknownOperation(f"Unknown operation: {operation}")


def dispatch_operation(
    *,
    registry: PlayerRegistry,
    caller: str,
    operation: str,
    args: dict[str, Any] | None = None,
) -> OperationResult:
    """Entry point for the ledger/transport layer.

    Validates arguments, admits mutations under a per-identity lock, runs the
    registry operation and folds engine rejections into a failed result.
    Anything that is not a `VeilError` propagates.
    """

    try:
        parsed = _parse_args(operation, args)
        if operation in _MUTATIONS:
            with player_lock(r=registry.r, identity=caller):
                return _run(registry, caller, operation, parsed)
        return _run(registry, caller, operation, parsed)
    except VeilError as e:
        logger.info("rejected %s from %s: %s", operation, caller, e.code)
        return OperationResult(ok=False, operation=operation, error=e.code, detail=str(e))


def known_operations() -> tuple[str, ...]:
    return get_args(OperationName)

from __future__ import annotations

from dataclasses import dataclass

from veil.fhe.types import CipherType, modulus_for


GRID_SIZE = 9
STARTING_BALANCE = 10_000
EMPTY_CELL = 0


class CatalogueError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class ItemType:
    code: int
    name: str
    cost: int
    detail: str = ""


# Ordered; the evaluator walks every entry on every call.
ITEM_TYPES: tuple[ItemType, ...] = (
    ItemType(code=1, name="Lookout Post", cost=100, detail="Low cost scout tower for early control."),
    ItemType(code=2, name="Workshop", cost=200, detail="Boosts crafting and supply pacing."),
    ItemType(code=3, name="Barracks", cost=400, detail="Trains units and reinforces territory."),
    ItemType(code=4, name="Citadel", cost=1000, detail="Heavy defense and late game anchor."),
)


def validate_cost_table(items: tuple[ItemType, ...]) -> tuple[tuple[int, int], ...]:
    """Check catalogue entries and return the (type-code, cost) pairs.

    Codes must be distinct, non-zero (zero is an empty cell) and fit a cell;
    costs must be non-zero (zero means "unrecognized") and fit a balance.
    """

    seen: set[int] = set()
    pairs: list[tuple[int, int]] = []
    for item in items:
        if item.code in seen:
            raise CatalogueError(f"Duplicate item type code: {item.code}")
        if not 0 < item.code < modulus_for(CipherType.euint8):
            raise CatalogueError(f"Item type code out of range: {item.code}")
        if not 0 < item.cost < modulus_for(CipherType.euint32):
            raise CatalogueError(f"Item cost out of range for {item.name}: {item.cost}")
        seen.add(item.code)
        pairs.append((item.code, item.cost))
    return tuple(pairs)


COST_TABLE: tuple[tuple[int, int], ...] = validate_cost_table(ITEM_TYPES)


def item_by_code(code: int) -> ItemType | None:
    return next((i for i in ITEM_TYPES if i.code == code), None)

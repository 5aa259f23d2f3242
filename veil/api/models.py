from __future__ import annotations

from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, Field, StrictInt, field_validator

from veil.catalogue import GRID_SIZE
from veil.fhe.types import CipherType, cipher_type_of


Handle = Annotated[str, Field(min_length=1)]


class PlayerPhase(StrEnum):
    unjoined = "unjoined"
    joined = "joined"


class PlayerRecord(BaseModel):
    """Persisted per-identity state: handles only, never clear values."""

    joined: bool = True
    balance: Handle
    cells: list[Handle] = Field(..., min_length=GRID_SIZE, max_length=GRID_SIZE)

    @field_validator("balance")
    @classmethod
    def _balance_is_euint32(cls, v: str) -> str:
        if cipher_type_of(v) != CipherType.euint32:
            raise ValueError("balance handle must be euint32")
        return v

    @field_validator("cells")
    @classmethod
    def _cells_are_euint8(cls, v: list[str]) -> list[str]:
        for h in v:
            if cipher_type_of(h) != CipherType.euint8:
                raise ValueError("cell handles must be euint8")
        return v

    @property
    def phase(self) -> PlayerPhase:
        return PlayerPhase.joined if self.joined else PlayerPhase.unjoined


# Ledger call arguments.


class JoinArgs(BaseModel):
    pass


class PlaceItemArgs(BaseModel):
    index: StrictInt
    handle: Handle
    proof: str


class CellArgs(BaseModel):
    index: StrictInt


class PlayerArgs(BaseModel):
    # Reads may target any identity; defaults to the caller.
    player: str | None = None


class PlayerCellArgs(PlayerArgs):
    index: StrictInt

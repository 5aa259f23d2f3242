from __future__ import annotations

from veil.catalogue import COST_TABLE
from veil.fhe.provider import CiphertextProvider
from veil.fhe.types import Ciphertext, CipherType


def evaluate_cost(
    provider: CiphertextProvider,
    item_type: Ciphertext,
    table: tuple[tuple[int, int], ...] = COST_TABLE,
) -> Ciphertext:
    """Map an encrypted item type to its encrypted cost.

    Every table entry is evaluated on every call, in order, last match wins.
    Unknown codes leave the accumulator at zero.
    """

    acc = provider.encrypt(0, CipherType.euint32)
    for code, cost in table:
        hit = provider.eq(item_type, code)
        acc = provider.select(hit, provider.encrypt(cost, CipherType.euint32), acc)
    return acc

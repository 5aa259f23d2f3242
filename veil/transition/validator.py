from __future__ import annotations

from dataclasses import dataclass

from veil.fhe.provider import CiphertextProvider
from veil.fhe.types import Ciphertext


@dataclass(frozen=True, slots=True)
class TransitionVerdict:
    """Encrypted predicates for one placement. Never decrypted by the engine."""

    recognized: Ciphertext
    affordable: Ciphertext
    commit: Ciphertext


def validate_transition(provider: CiphertextProvider, *, balance: Ciphertext, cost: Ciphertext) -> TransitionVerdict:
    recognized = provider.ne(cost, 0)
    affordable = provider.ge(balance, cost)
    commit = provider.and_(recognized, affordable)
    return TransitionVerdict(recognized=recognized, affordable=affordable, commit=commit)

from __future__ import annotations

from dataclasses import dataclass

from veil.fhe.provider import CiphertextProvider
from veil.fhe.types import Ciphertext
from veil.transition.validator import TransitionVerdict


@dataclass(frozen=True, slots=True)
class CommittedState:
    balance: Ciphertext
    cell: Ciphertext


def commit_transition(
    provider: CiphertextProvider,
    verdict: TransitionVerdict,
    *,
    balance: Ciphertext,
    cost: Ciphertext,
    chosen_type: Ciphertext,
    old_cell: Ciphertext,
) -> CommittedState:
    """Apply or discard the placement under `verdict.commit`.

    Both selects always run and both outputs are always fresh ciphertexts.
    The subtraction may wrap when the balance is short; the select drops it then.
    """

    debited = provider.sub(balance, cost)
    new_balance = provider.select(verdict.commit, debited, balance)
    new_cell = provider.select(verdict.commit, chosen_type, old_cell)
    return CommittedState(balance=new_balance, cell=new_cell)

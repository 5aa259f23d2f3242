from __future__ import annotations

from typing import Protocol

from veil.fhe.types import Ciphertext, CipherType

# Right-hand operand of a comparison: another ciphertext or a clear scalar.
Operand = Ciphertext | int


class CiphertextProvider(Protocol):
    """Oblivious primitives the engine composes.

    Implementations are trusted. Every operation returns a fresh ciphertext and
    must take the same path whatever the encrypted values are.
    """

    def encrypt(self, value: int, ctype: CipherType) -> Ciphertext:  # pragma: no cover
        ...

    def decode(self, handle: str, proof: str, *, identity: str, ctype: CipherType) -> Ciphertext:  # pragma: no cover
        """Accept a client-submitted input. Raises `InvalidProof`."""
        ...

    def eq(self, a: Ciphertext, b: Operand) -> Ciphertext:  # pragma: no cover
        ...

    def ne(self, a: Ciphertext, b: Operand) -> Ciphertext:  # pragma: no cover
        ...

    def ge(self, a: Ciphertext, b: Operand) -> Ciphertext:  # pragma: no cover
        ...

    def and_(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:  # pragma: no cover
        ...

    def sub(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:  # pragma: no cover
        ...

    def select(self, cond: Ciphertext, if_true: Ciphertext, if_false: Ciphertext) -> Ciphertext:  # pragma: no cover
        ...

    def authorize(self, identity: str, ct: Ciphertext) -> None:  # pragma: no cover
        """Idempotently allow `identity` to decrypt `ct`."""
        ...

    def is_authorized(self, identity: str, ct: Ciphertext) -> bool:  # pragma: no cover
        ...

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from veil.fhe.provider import CiphertextProvider
from veil.fhe.types import Ciphertext

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Grant:
    """One decryption authorization: `identity` may decrypt `handle`."""

    identity: str
    handle: str


@dataclass(frozen=True, slots=True)
class AccessGrantManager:
    """Issues decryption rights on freshly written ciphertexts.

    Each ciphertext goes to exactly two identities: the owner and the engine.
    A ciphertext persisted without its owner grant can never be read by that
    owner again, so callers grant before they persist.
    """

    provider: CiphertextProvider
    engine_id: str

    def grant(self, identity: str, ct: Ciphertext) -> tuple[Grant, ...]:
        issued: list[Grant] = []
        for who in (self.engine_id, identity):
            self.provider.authorize(who, ct)
            issued.append(Grant(identity=who, handle=ct.handle))
        return tuple(issued)

    def grant_all(self, identity: str, cts: Iterable[Ciphertext]) -> tuple[Grant, ...]:
        issued: list[Grant] = []
        for ct in cts:
            issued.extend(self.grant(identity, ct))
        logger.debug("granted %d handle(s) to %s and engine", len(issued) // 2, identity)
        return tuple(issued)

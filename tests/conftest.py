from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import fakeredis
import pytest

from veil.fhe.mock import MockCiphertextProvider
from veil.fhe.types import Ciphertext, CipherType
from veil.registry import PlacementOutcome, PlayerRegistry


ENGINE_ID = "engine-under-test"
PROOF_KEY = "test-proof-key"
ALICE = "0xa11ce"
BOB = "0xb0b"


class RecordingProvider:
    """Wraps a provider and records every call, without looking at values.

    Used to assert that the sequence of oblivious operations does not depend
    on the encrypted inputs.
    """

    def __init__(self, inner: MockCiphertextProvider) -> None:
        self.inner = inner
        self.calls: list[tuple[Any, ...]] = []

    def _shape(self, v: Any) -> Any:
        if isinstance(v, Ciphertext):
            return v.ctype.value
        if isinstance(v, CipherType):
            return v.value
        if isinstance(v, int):
            return v
        return type(v).__name__

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self.inner, name)
        if not callable(attr):
            return attr

        def _wrapped(*args: Any, **kwargs: Any) -> Any:
            shape = tuple(self._shape(a) for a in args)
            if name not in {"authorize", "is_authorized"}:
                self.calls.append((name, *shape))
            else:
                # identity strings are public; keep them so missing grants show up
                self.calls.append((name, args[0], self._shape(args[1])))
            return attr(*args, **kwargs)

        return _wrapped


@pytest.fixture()
def r() -> Generator[fakeredis.FakeRedis, None, None]:
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture()
def provider(r: fakeredis.FakeRedis) -> MockCiphertextProvider:
    return MockCiphertextProvider(r=r, engine_id=ENGINE_ID, proof_key=PROOF_KEY)


@pytest.fixture()
def registry(r: fakeredis.FakeRedis, provider: MockCiphertextProvider) -> PlayerRegistry:
    return PlayerRegistry(r=r, provider=provider, engine_id=ENGINE_ID)


@pytest.fixture()
def joined_registry(registry: PlayerRegistry) -> PlayerRegistry:
    registry.join(ALICE)
    return registry


@pytest.fixture()
def place(registry: PlayerRegistry, provider: MockCiphertextProvider) -> Callable[..., PlacementOutcome]:
    """Encrypt `item_type` client-side as `identity` and submit it."""

    def _place(identity: str, index: int, item_type: int) -> PlacementOutcome:
        enc = provider.encrypt_input(identity, item_type)
        return registry.place_item(identity, index, enc.handle, enc.proof)

    return _place


@pytest.fixture()
def balance_of(registry: PlayerRegistry, provider: MockCiphertextProvider) -> Callable[[str], int]:
    def _balance(identity: str) -> int:
        return provider.user_decrypt(identity, registry.get_balance_handle(identity))

    return _balance


@pytest.fixture()
def cell_of(registry: PlayerRegistry, provider: MockCiphertextProvider) -> Callable[[str, int], int]:
    def _cell(identity: str, index: int) -> int:
        return provider.user_decrypt(identity, registry.get_cell_handle(identity, index))

    return _cell


@pytest.fixture()
def engine_id() -> str:
    return ENGINE_ID


@pytest.fixture()
def recorder(r: fakeredis.FakeRedis, provider: MockCiphertextProvider) -> tuple[PlayerRegistry, RecordingProvider]:
    rec = RecordingProvider(provider)
    return PlayerRegistry(r=r, provider=rec, engine_id=ENGINE_ID), rec  # type: ignore[arg-type]

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass

import redis

from veil.errors import DecryptionNotAllowed, InvalidProof
from veil.fhe.provider import Operand
from veil.fhe.types import Ciphertext, CipherType, cipher_type_of, modulus_for, new_handle


VALUES_KEY = "veil:fhe:values"
ACL_KEY_PREFIX = "veil:fhe:acl:"  # + {handle}


def _acl_key(handle: str) -> str:
    return f"{ACL_KEY_PREFIX}{handle}"


@dataclass(frozen=True, slots=True)
class EncryptedInput:
    """What a client submits alongside a call: an input handle and its proof."""

    handle: str
    proof: str


@dataclass(slots=True)
class MockCiphertextProvider:
    """In-process stand-in for an FHE coprocessor.

    Clear values live in a redis hash keyed by handle and ACLs in one redis set
    per handle. Operations combine values arithmetically, so there is no
    value-dependent branch here either. Intended for tests and local
    development; it offers no confidentiality against whoever can read redis.
    """

    r: redis.Redis
    engine_id: str
    proof_key: str

    # --- storage -----------------------------------------------------------

    def _store(self, value: int, ctype: CipherType) -> Ciphertext:
        ct = Ciphertext(handle=new_handle(ctype), ctype=ctype)
        self.r.hset(VALUES_KEY, ct.handle, str(value % modulus_for(ctype)))
        return ct

    def _load(self, ct: Ciphertext) -> int:
        raw = self.r.hget(VALUES_KEY, ct.handle)
        if raw is None:
            raise KeyError(f"Unknown ciphertext handle: {ct.handle}")
        return int(raw)

    def _scalar(self, b: Operand, ctype: CipherType) -> int:
        if isinstance(b, Ciphertext):
            if b.ctype != ctype:
                raise TypeError(f"Operand type mismatch: {ctype} vs {b.ctype}")
            return self._load(b)
        return int(b) % modulus_for(ctype)

    @staticmethod
    def _require(ct: Ciphertext, ctype: CipherType) -> None:
        if ct.ctype != ctype:
            raise TypeError(f"Expected {ctype}, got {ct.ctype}")

    def ciphertext_count(self) -> int:
        return int(self.r.hlen(VALUES_KEY))

    # --- input proofs ------------------------------------------------------

    def _proof_for(self, handle: str, identity: str) -> str:
        msg = f"{handle}|{self.engine_id}|{identity}".encode("utf-8")
        return hmac.new(self.proof_key.encode("utf-8"), msg, hashlib.sha256).hexdigest()

    def encrypt_input(self, identity: str, value: int, ctype: CipherType = CipherType.euint8) -> EncryptedInput:
        """Client side: encrypt `value` for submission by `identity`."""

        ct = self._store(value, ctype)
        return EncryptedInput(handle=ct.handle, proof=self._proof_for(ct.handle, identity))

    def decode(self, handle: str, proof: str, *, identity: str, ctype: CipherType) -> Ciphertext:
        try:
            actual = cipher_type_of(handle)
        except ValueError as e:
            raise InvalidProof("Malformed input handle") from e
        if actual != ctype:
            raise InvalidProof(f"Input is {actual}, expected {ctype}")
        if not isinstance(proof, str) or not hmac.compare_digest(proof, self._proof_for(handle, identity)):
            raise InvalidProof("Input proof does not match handle and sender")
        if not self.r.hexists(VALUES_KEY, handle):
            raise InvalidProof("Input handle is unknown to the coprocessor")
        return Ciphertext(handle=handle, ctype=ctype)

    # --- oblivious operations ---------------------------------------------

    def encrypt(self, value: int, ctype: CipherType) -> Ciphertext:
        return self._store(int(value), ctype)

    def eq(self, a: Ciphertext, b: Operand) -> Ciphertext:
        return self._store(int(self._load(a) == self._scalar(b, a.ctype)), CipherType.ebool)

    def ne(self, a: Ciphertext, b: Operand) -> Ciphertext:
        return self._store(int(self._load(a) != self._scalar(b, a.ctype)), CipherType.ebool)

    def ge(self, a: Ciphertext, b: Operand) -> Ciphertext:
        return self._store(int(self._load(a) >= self._scalar(b, a.ctype)), CipherType.ebool)

    def and_(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:
        self._require(a, CipherType.ebool)
        self._require(b, CipherType.ebool)
        return self._store(self._load(a) * self._load(b), CipherType.ebool)

    def sub(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:
        # Wraps modulo 2**bits like the coprocessor; callers select away underflows.
        return self._store(self._load(a) - self._scalar(b, a.ctype), a.ctype)

    def select(self, cond: Ciphertext, if_true: Ciphertext, if_false: Ciphertext) -> Ciphertext:
        self._require(cond, CipherType.ebool)
        if if_true.ctype != if_false.ctype:
            raise TypeError(f"select branches differ: {if_true.ctype} vs {if_false.ctype}")
        c = self._load(cond)
        value = c * self._load(if_true) + (1 - c) * self._load(if_false)
        return self._store(value, if_true.ctype)

    # --- access control ----------------------------------------------------

    def authorize(self, identity: str, ct: Ciphertext) -> None:
        self.r.sadd(_acl_key(ct.handle), identity)

    def is_authorized(self, identity: str, ct: Ciphertext) -> bool:
        return bool(self.r.sismember(_acl_key(ct.handle), identity))

    def authorized_identities(self, ct: Ciphertext) -> set[str]:
        return set(self.r.smembers(_acl_key(ct.handle)))

    def user_decrypt(self, identity: str, ct: Ciphertext) -> int:
        """Client side decryption on behalf of `identity`."""

        if not self.is_authorized(identity, ct):
            raise DecryptionNotAllowed(f"{identity} is not authorized for {ct.handle}")
        return self._load(ct)

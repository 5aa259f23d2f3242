from __future__ import annotations

import secrets
from dataclasses import dataclass
from enum import StrEnum


class CipherType(StrEnum):
    ebool = "ebool"
    euint8 = "euint8"
    euint32 = "euint32"


# Type byte carried in the last byte of every handle (fhEVM numbering).
_TYPE_CODES: dict[CipherType, int] = {
    CipherType.ebool: 0,
    CipherType.euint8: 2,
    CipherType.euint32: 4,
}
_CODE_TO_TYPE: dict[int, CipherType] = {v: k for k, v in _TYPE_CODES.items()}

BIT_WIDTHS: dict[CipherType, int] = {
    CipherType.ebool: 1,
    CipherType.euint8: 8,
    CipherType.euint32: 32,
}

HANDLE_BYTES = 32


def modulus_for(ctype: CipherType) -> int:
    return 1 << BIT_WIDTHS[ctype]


@dataclass(frozen=True, slots=True)
class Ciphertext:
    """Opaque reference to an encrypted scalar held by the ciphertext provider."""

    handle: str
    ctype: CipherType

    @staticmethod
    def from_handle(handle: str) -> "Ciphertext":
        return Ciphertext(handle=handle, ctype=cipher_type_of(handle))

    def __str__(self) -> str:
        return self.handle


def new_handle(ctype: CipherType) -> str:
    body = secrets.token_hex(HANDLE_BYTES - 1)
    return f"0x{body}{_TYPE_CODES[ctype]:02x}"


def cipher_type_of(handle: str) -> CipherType:
    if not isinstance(handle, str) or not handle.startswith("0x") or len(handle) != 2 + HANDLE_BYTES * 2:
        raise ValueError(f"Malformed ciphertext handle: {handle!r}")
    try:
        code = int(handle[-2:], 16)
        int(handle[2:], 16)
    except ValueError as e:
        raise ValueError(f"Malformed ciphertext handle: {handle!r}") from e
    ctype = _CODE_TO_TYPE.get(code)
    if ctype is None:
        raise ValueError(f"Unknown ciphertext type byte {code:#04x} in handle")
    return ctype

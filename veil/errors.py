from __future__ import annotations


class VeilError(ValueError):
    """Base class for rejected engine calls.

    Every subclass is a fail-closed rejection: the call mutated nothing.
    `code` is the stable name reported back across the ledger boundary.
    """

    code = "VeilError"


class AlreadyJoined(VeilError):
    code = "AlreadyJoined"


class NotJoined(VeilError):
    code = "NotJoined"


class IndexOutOfRange(VeilError):
    code = "IndexOutOfRange"


class InvalidProof(VeilError):
    code = "InvalidProof"


class UnknownOperation(VeilError):
    code = "UnknownOperation"


class InvalidArguments(VeilError):
    code = "InvalidArguments"


class PlayerBusy(VeilError):
    code = "PlayerBusy"


class DecryptionNotAllowed(PermissionError):
    """Raised by the client-side decryptor, never by the engine."""

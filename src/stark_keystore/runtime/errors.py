"""
StarkNet Keystore Error Model

This module provides the error handling framework for the StarkNet key store
and signature bridge. Every failure surfaced by the key store, the signature
codec, and the signer adapters is a typed ``StarkKeystoreError`` carrying the
operation context (identifier, length, address) needed to diagnose it.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Key store error codes."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2
    UNIMPLEMENTED = 3

    # Encoding errors (100-199)
    ENCODING_ERROR = 100
    MALFORMED_SIGNATURE = 101

    # Signing errors (300-399)
    SIGNING_FAILED = 300

    # Key errors (700-799)
    LOCKED = 700
    KEY_NOT_FOUND = 701
    KEY_EXISTS = 702
    DECRYPTION_FAILED = 703


class StarkKeystoreError(Exception):
    """
    Base class for all key store errors.

    Each subclass pins its ``code``. Instances carry a message, a details
    mapping with the operation context and, when wrapping, the cause.
    """

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details) if details else {}
        self.cause = cause

    def __str__(self) -> str:
        text = f"{self.code.name}: {self.message}"
        if self.details:
            context = ", ".join(f"{k}={v}" for k, v in self.details.items())
            text += f" ({context})"
        if self.cause is not None:
            text += f"; caused by {type(self.cause).__name__}: {self.cause}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view for logs and RPC error payloads."""
        return {
            "code": int(self.code),
            "name": self.code.name,
            "message": self.message,
            "details": dict(self.details),
            "cause": None if self.cause is None else str(self.cause),
        }


class KeyStoreError(StarkKeystoreError):
    """Key ring bookkeeping and persistence errors."""

    code = ErrorCode.INTERNAL


class LockedError(KeyStoreError):
    """The key store is sealed; unlock it before accessing keys."""

    code = ErrorCode.LOCKED

    def __init__(self, operation: str = ""):
        super().__init__("Keystore is locked", details={"operation": operation} if operation else None)
        self.operation = operation


class KeyNotFoundError(KeyStoreError):
    """No key with the requested identifier is present."""

    code = ErrorCode.KEY_NOT_FOUND

    def __init__(self, key_id: str, key_type: str = "StarkNet"):
        super().__init__(
            f"unable to find {key_type} key with id {key_id}",
            details={"id": key_id, "key_type": key_type},
        )
        self.key_id = key_id
        self.key_type = key_type


class KeyAlreadyExistsError(KeyStoreError):
    """A key with the same identifier is already in the ring."""

    code = ErrorCode.KEY_EXISTS

    def __init__(self, key_id: str):
        super().__init__(f"key with ID {key_id} already exists", details={"id": key_id})
        self.key_id = key_id


class DecryptionFailedError(KeyStoreError):
    """Bad password or corrupt encrypted key blob."""

    code = ErrorCode.DECRYPTION_FAILED

    def __init__(self, message: str = "failed to decrypt StarkNet key", **kwargs: Any):
        super().__init__(message, **kwargs)


class EncodingError(StarkKeystoreError):
    """A value cannot be represented in the fixed field width."""

    code = ErrorCode.ENCODING_ERROR


class MalformedSignatureError(StarkKeystoreError):
    """Signature bytes have the wrong length or do not parse."""

    code = ErrorCode.MALFORMED_SIGNATURE

    def __init__(self, message: str = "Malformed signature", **kwargs: Any):
        super().__init__(message, **kwargs)


class SigningFailedError(StarkKeystoreError):
    """The curve primitive or a wrapped signer failed to produce a signature."""

    code = ErrorCode.SIGNING_FAILED

    def __init__(self, message: str = "Signing failed", **kwargs: Any):
        super().__init__(message, **kwargs)


class UnimplementedError(StarkKeystoreError):
    """The operation is not supported for this curve family."""

    code = ErrorCode.UNIMPLEMENTED

    def __init__(self, operation: str):
        super().__init__(f"{operation}: unimplemented", details={"operation": operation})
        self.operation = operation


__all__ = [
    "ErrorCode",
    "StarkKeystoreError",
    "KeyStoreError",
    "LockedError",
    "KeyNotFoundError",
    "KeyAlreadyExistsError",
    "DecryptionFailedError",
    "EncodingError",
    "MalformedSignatureError",
    "SigningFailedError",
    "UnimplementedError",
]

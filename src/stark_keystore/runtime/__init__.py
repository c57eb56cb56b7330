"""Runtime helpers for the StarkNet key store"""

from .errors import (
    ErrorCode,
    StarkKeystoreError,
    KeyStoreError,
    LockedError,
    KeyNotFoundError,
    KeyAlreadyExistsError,
    DecryptionFailedError,
    EncodingError,
    MalformedSignatureError,
    SigningFailedError,
    UnimplementedError,
)
from .rwlock import RWLock

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
    "RWLock",
]

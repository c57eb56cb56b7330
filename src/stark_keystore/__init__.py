"""
StarkNet key store

Manages StarkNet key material and bridges the curve-native ``(r, s)``
signing interface to the generic byte-oriented remote-signing contract.
"""

from .config import KeystoreConfig, ScryptParams, DEFAULT_SCRYPT_PARAMS, FAST_SCRYPT_PARAMS
from .runtime.errors import *
from .keys import (
    Key,
    KeyManager,
    KeyRingPersister,
    FileKeyRingPersister,
    StarkNet,
    StarkNetKeyStore,
)
from .signers import (
    LoopKeystore,
    CurveKeystore,
    StarkSignature,
    SignatureCodec,
    KeystoreAdapter,
    RemoteSigner,
    Probe,
    SignRequest,
)

__version__ = "0.1.0"
__all__ = [
    "KeystoreConfig",
    "ScryptParams",
    "DEFAULT_SCRYPT_PARAMS",
    "FAST_SCRYPT_PARAMS",
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
    "Key",
    "KeyManager",
    "KeyRingPersister",
    "FileKeyRingPersister",
    "StarkNet",
    "StarkNetKeyStore",
    "LoopKeystore",
    "CurveKeystore",
    "StarkSignature",
    "SignatureCodec",
    "KeystoreAdapter",
    "RemoteSigner",
    "Probe",
    "SignRequest",
]

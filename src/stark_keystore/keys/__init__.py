"""
Key management for the StarkNet key store.

Provides the key type, the encrypted export format, the shared key manager
and the key lifecycle store.
"""

from .starkkey import Key, KEY_TYPE
from .export import to_encrypted_json, from_encrypted_json
from .key_manager import KeyManager, KeyRingPersister, FileKeyRingPersister
from .keystore import StarkNet, StarkNetKeyStore

__all__ = [
    "Key",
    "KEY_TYPE",
    "to_encrypted_json",
    "from_encrypted_json",
    "KeyManager",
    "KeyRingPersister",
    "FileKeyRingPersister",
    "StarkNet",
    "StarkNetKeyStore",
]

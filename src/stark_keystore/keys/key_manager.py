"""
Key manager shared by the key store.

Owns the key ring, the reader/writer lock that guards it, the locked flag
and the scrypt parameters used for exports. Ring mutations go through
``safe_add_key``/``safe_remove_key`` which persist the ring when a persister
is configured and roll the mutation back if persisting fails.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union
import json
import logging
import os
from pathlib import Path

from ..config import KeystoreConfig, ScryptParams
from ..runtime.errors import DecryptionFailedError, KeyStoreError, LockedError
from ..runtime.rwlock import RWLock
from .export import from_encrypted_json, to_encrypted_json
from .starkkey import Key

logger = logging.getLogger(__name__)


class KeyRingPersister(ABC):
    """
    Storage backend for the encrypted key ring.

    Implementations receive the full ring on every change.
    """

    @abstractmethod
    def save(self, keys: List[Key], password: str) -> None:
        """
        Persist the whole ring.

        Args:
            keys: Every key currently in the ring
            password: Password protecting the stored keys
        """
        pass

    @abstractmethod
    def load(self, password: str) -> List[Key]:
        """
        Load a previously persisted ring.

        Args:
            password: Password protecting the stored keys

        Returns:
            Stored keys, empty if nothing has been persisted

        Raises:
            DecryptionFailedError: If the password is wrong or the data corrupt
        """
        pass


class FileKeyRingPersister(KeyRingPersister):
    """
    File-based key ring storage.

    Stores the ring as one JSON document holding an encrypted export per key.
    Writes go to a temporary file that is then renamed over the target.
    """

    VERSION = 1

    def __init__(self, path: Union[str, Path], scrypt_params: ScryptParams):
        """
        Initialize file persister.

        Args:
            path: File holding the key ring
            scrypt_params: Cost parameters for encrypting each key
        """
        self.path = Path(path)
        self.scrypt_params = scrypt_params

    def save(self, keys: List[Key], password: str) -> None:
        """Write the ring to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = {
            "version": self.VERSION,
            "starknet": [
                json.loads(to_encrypted_json(key, password, self.scrypt_params))
                for key in keys
            ],
        }
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w") as f:
            json.dump(document, f, indent=2)
        os.replace(tmp_path, self.path)
        logger.debug(f"Persisted {len(keys)} StarkNet keys to {self.path}")

    def load(self, password: str) -> List[Key]:
        """Read the ring from disk."""
        if not self.path.exists():
            return []

        try:
            with open(self.path, "rb") as f:
                document = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecryptionFailedError(f"corrupt key ring file {self.path}", cause=e) from e

        if not isinstance(document, dict):
            raise KeyStoreError(
                f"key ring file {self.path} must hold a JSON object",
                details={"type": type(document).__name__},
            )
        version = document.get("version")
        if version != self.VERSION:
            raise KeyStoreError(f"Incompatible key ring version: {version}")

        entries = document.get("starknet", [])
        if not isinstance(entries, list):
            raise KeyStoreError(f"key ring file {self.path} has no StarkNet key list")
        return [from_encrypted_json(json.dumps(entry), password) for entry in entries]

    def __repr__(self) -> str:
        return f"FileKeyRingPersister(path='{self.path}')"


class KeyManager:
    """
    Shared state behind the key store.

    The manager starts locked; ``unlock`` opens it (loading any persisted
    ring) and ``seal`` closes it again without discarding the ring.
    ``key_ring`` must only be touched while holding ``lock``.
    """

    def __init__(self, config: Optional[KeystoreConfig] = None,
                 persister: Optional[KeyRingPersister] = None):
        """
        Initialize key manager.

        Args:
            config: Key store settings; defaults to production scrypt cost
            persister: Optional ring storage; built from ``config.keyring_path`` if omitted
        """
        self.config = config or KeystoreConfig()
        if persister is None and self.config.keyring_path is not None:
            persister = FileKeyRingPersister(self.config.keyring_path, self.config.scrypt)
        self.persister = persister
        self.lock = RWLock()
        self.key_ring: Dict[str, Key] = {}
        self._password: Optional[str] = None

    @property
    def scrypt_params(self) -> ScryptParams:
        return self.config.scrypt

    def is_locked(self) -> bool:
        """True until ``unlock`` succeeds, and again after ``seal``."""
        return self._password is None

    def unlock(self, password: str) -> None:
        """
        Open the key manager.

        Args:
            password: Key ring password

        Raises:
            DecryptionFailedError: If a persisted ring cannot be opened with the password
        """
        with self.lock.write_locked():
            if self.persister is not None:
                keys = self.persister.load(password)
                self.key_ring = {key.id(): key for key in keys}
            self._password = password
            logger.info(f"Keystore unlocked with {len(self.key_ring)} StarkNet keys")

    def seal(self) -> None:
        """Deny all key access until the next ``unlock``."""
        with self.lock.write_locked():
            self._password = None
            logger.info("Keystore sealed")

    def safe_add_key(self, key: Key) -> None:
        """
        Insert a key and persist the ring. Caller holds the write lock.

        Raises:
            KeyStoreError: If persisting fails; the ring is left unchanged
        """
        self.key_ring[key.id()] = key
        try:
            self._persist()
        except Exception as e:
            del self.key_ring[key.id()]
            raise KeyStoreError(f"failed to persist after adding key {key.id()}", cause=e) from e
        logger.debug(f"Added StarkNet key {key.id()}")

    def safe_remove_key(self, key: Key) -> None:
        """
        Remove a key and persist the ring. Caller holds the write lock.

        Raises:
            KeyStoreError: If persisting fails; the key is restored
        """
        removed = self.key_ring.pop(key.id())
        try:
            self._persist()
        except Exception as e:
            self.key_ring[key.id()] = removed
            raise KeyStoreError(f"failed to persist after removing key {key.id()}", cause=e) from e
        logger.debug(f"Removed StarkNet key {key.id()}")

    def _persist(self) -> None:
        if self.persister is None:
            return
        if self._password is None:
            raise LockedError("persist")
        self.persister.save(list(self.key_ring.values()), self._password)

    def __repr__(self) -> str:
        state = "locked" if self.is_locked() else "unlocked"
        return f"KeyManager({state}, count={len(self.key_ring)})"


__all__ = [
    "KeyManager",
    "KeyRingPersister",
    "FileKeyRingPersister",
]

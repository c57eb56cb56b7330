"""
StarkNet key store.

Lifecycle management for StarkNet keys: create, add, import, export,
delete, enumerate and bootstrap. Every operation takes the key manager's
lock for its whole duration (shared for reads, exclusive for mutations) and
then refuses to run while the manager is locked.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Union
import logging

from ..runtime.errors import (
    DecryptionFailedError,
    KeyAlreadyExistsError,
    KeyNotFoundError,
    LockedError,
)
from .export import from_encrypted_json, to_encrypted_json
from .key_manager import KeyManager
from .starkkey import Key, KEY_TYPE

logger = logging.getLogger(__name__)


class StarkNet(ABC):
    """
    StarkNet key store interface.

    Defines the key lifecycle operations consumed by signers.
    """

    @abstractmethod
    def get(self, key_id: str) -> Key:
        """
        Retrieve a key by ID.

        Raises:
            LockedError: If the store is locked
            KeyNotFoundError: If no key has this ID
        """
        pass

    @abstractmethod
    def get_all(self) -> List[Key]:
        """Snapshot of every key in the ring."""
        pass

    @abstractmethod
    def create(self) -> Key:
        """Generate, store and return a new key."""
        pass

    @abstractmethod
    def add(self, key: Key) -> None:
        """
        Store an existing key.

        Raises:
            KeyAlreadyExistsError: If a key with the same ID is present
        """
        pass

    @abstractmethod
    def delete(self, key_id: str) -> Key:
        """Remove a key and return it."""
        pass

    @abstractmethod
    def import_key(self, key_json: Union[bytes, str], password: str) -> Key:
        """Decrypt an exported key and store it."""
        pass

    @abstractmethod
    def export(self, key_id: str, password: str) -> bytes:
        """Encrypt a stored key for transport."""
        pass

    @abstractmethod
    def ensure_key(self) -> None:
        """Create one key if the ring is empty."""
        pass


class StarkNetKeyStore(StarkNet):
    """Key store backed by a shared ``KeyManager``."""

    def __init__(self, key_manager: KeyManager):
        """
        Initialize key store.

        Args:
            key_manager: Manager owning the lock, ring and locked flag
        """
        self.km = key_manager

    def get(self, key_id: str) -> Key:
        with self.km.lock.read_locked():
            self._check_unlocked("get")
            return self._get_by_id(key_id)

    def get_all(self) -> List[Key]:
        with self.km.lock.read_locked():
            self._check_unlocked("get_all")
            return list(self.km.key_ring.values())

    def create(self) -> Key:
        with self.km.lock.write_locked():
            self._check_unlocked("create")
            key = Key.generate()
            self.km.safe_add_key(key)
            return key

    def add(self, key: Key) -> None:
        with self.km.lock.write_locked():
            self._check_unlocked("add")
            if key.id() in self.km.key_ring:
                raise KeyAlreadyExistsError(key.id())
            self.km.safe_add_key(key)

    def delete(self, key_id: str) -> Key:
        with self.km.lock.write_locked():
            self._check_unlocked("delete")
            key = self._get_by_id(key_id)
            self.km.safe_remove_key(key)
            return key

    def import_key(self, key_json: Union[bytes, str], password: str) -> Key:
        with self.km.lock.write_locked():
            self._check_unlocked("import")
            try:
                key = from_encrypted_json(key_json, password)
            except DecryptionFailedError as e:
                logger.warning(f"StarkNetKeyStore#import_key failed to decrypt key: {e.message}")
                raise
            if key.id() in self.km.key_ring:
                raise KeyAlreadyExistsError(key.id())
            self.km.safe_add_key(key)
            return key

    def export(self, key_id: str, password: str) -> bytes:
        with self.km.lock.read_locked():
            self._check_unlocked("export")
            key = self._get_by_id(key_id)
            return to_encrypted_json(key, password, self.km.scrypt_params)

    def ensure_key(self) -> None:
        with self.km.lock.write_locked():
            self._check_unlocked("ensure_key")
            if self.km.key_ring:
                return
            key = Key.generate()
            self.km.safe_add_key(key)
            logger.info(f"Created StarkNet key with ID {key.id()}")

    def _check_unlocked(self, operation: str) -> None:
        if self.km.is_locked():
            raise LockedError(operation)

    def _get_by_id(self, key_id: str) -> Key:
        key = self.km.key_ring.get(key_id)
        if key is None:
            raise KeyNotFoundError(key_id, KEY_TYPE)
        return key

    def __repr__(self) -> str:
        return f"StarkNetKeyStore({self.km!r})"


__all__ = [
    "StarkNet",
    "StarkNetKeyStore",
]

r"""
Signer interfaces for the StarkNet key store.

Two signing contracts meet here:

- ``LoopKeystore``: the generic, byte-oriented remote-signing contract.
  A signer receives a key identifier and digest bytes and returns opaque
  signature bytes. A missing or empty digest asks only whether the
  identifier exists.
- ``CurveKeystore``: the curve-native contract. A signer receives an
  address and an integer digest and returns the ``(r, s)`` components.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple


class LoopKeystore(ABC):
    """Generic byte-oriented signer."""

    @abstractmethod
    def sign(self, key_id: str, digest: Optional[bytes]) -> bytes:
        """
        Sign a digest with the identified key.

        Args:
            key_id: Key identifier
            digest: Digest bytes; ``None`` or empty only checks that the key exists

        Returns:
            Signature bytes, empty for an existence check

        Raises:
            StarkKeystoreError: If the key is missing or signing fails
        """
        pass

    @abstractmethod
    def accounts(self) -> List[str]:
        """
        List the identifiers this signer can sign for.

        Returns:
            Key identifiers
        """
        pass


class CurveKeystore(ABC):
    """Curve-native signer returning signature components."""

    @abstractmethod
    def sign(self, address: str, digest: int) -> Tuple[int, int]:
        """
        Sign an integer digest on behalf of an address.

        Args:
            address: Signer address (key identifier)
            digest: Message hash as an integer

        Returns:
            Signature components ``(r, s)``
        """
        pass


__all__ = ["LoopKeystore", "CurveKeystore"]

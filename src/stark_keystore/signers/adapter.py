"""
StarkNet keystore adapter.

Translates between the generic byte-oriented ``LoopKeystore`` and the
curve-native ``CurveKeystore``. The wrapped keystore must return signatures
in the encoding ``SignatureCodec`` decodes; callers are responsible for that
agreement, the adapter can only check length.
"""

from __future__ import annotations
import logging
from typing import Optional, Tuple

from ..runtime.errors import EncodingError, SigningFailedError
from .signature import SignatureCodec
from .signer import CurveKeystore, LoopKeystore

logger = logging.getLogger(__name__)


def digest_to_bytes(digest: int) -> bytes:
    """
    Canonical byte form of an integer digest.

    Minimal big-endian bytes; zero encodes as a single zero byte so it is
    never confused with an existence check.

    Raises:
        EncodingError: If the digest is not a non-negative integer
    """
    if not isinstance(digest, int) or isinstance(digest, bool):
        raise EncodingError(f"digest must be an integer, got {type(digest).__name__}")
    if digest < 0:
        raise EncodingError(f"invalid digest {digest}: negative value not allowed")
    return digest.to_bytes((digest.bit_length() + 7) // 8 or 1, "big")


class KeystoreAdapter(CurveKeystore):
    """
    Curve-native signer on top of a generic keystore.
    """

    def __init__(self, loopp_keystore: LoopKeystore, codec: Optional[SignatureCodec] = None):
        """
        Initialize adapter.

        Args:
            loopp_keystore: Generic keystore whose signatures ``codec`` can decode
            codec: Signature codec, defaults to the 64-byte StarkNet encoding
        """
        self._loopp = loopp_keystore
        self.codec = codec or SignatureCodec()

    def sign(self, address: str, digest: int) -> Tuple[int, int]:
        """
        Sign through the wrapped keystore and decode the result.

        Raises:
            EncodingError: If the digest cannot be converted to bytes
            SigningFailedError: If the wrapped keystore fails
            MalformedSignatureError: If the returned bytes do not decode
        """
        digest_bytes = digest_to_bytes(digest)
        try:
            raw = self._loopp.sign(address, digest_bytes)
        except Exception as e:
            raise SigningFailedError(
                "error computing loopp keystore signature",
                details={"address": address},
                cause=e,
            ) from e
        logger.debug(f"Decoding {len(raw) if raw is not None else 0}-byte signature for {address}")
        return self.decode(raw)

    def decode(self, raw_signature: bytes) -> Tuple[int, int]:
        """Translate a raw generic signature into ``(r, s)``."""
        return self.codec.decode(raw_signature)

    def loopp(self) -> LoopKeystore:
        """The wrapped generic keystore, unmodified."""
        return self._loopp

    @property
    def wrapped_keystore(self) -> LoopKeystore:
        return self._loopp

    def __repr__(self) -> str:
        return f"KeystoreAdapter({self._loopp!r})"


__all__ = ["KeystoreAdapter", "digest_to_bytes"]

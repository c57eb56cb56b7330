"""
Remote signer for StarkNet keys.

Implements the generic ``LoopKeystore`` contract on top of the StarkNet key
store and the Stark curve. Incoming digests are turned into an explicit
request: a ``Probe`` when no digest is given (the generic protocol's way of
asking whether a key exists) or a ``SignRequest`` carrying the digest.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from ..crypto import stark_curve
from ..crypto.stark_curve import StarkCurveError
from ..keys.keystore import StarkNet
from ..runtime.errors import SigningFailedError, UnimplementedError
from .signature import SignatureCodec
from .signer import LoopKeystore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Probe:
    """Existence check: succeeds with no signature if the key is present."""
    pass


@dataclass(frozen=True)
class SignRequest:
    """Request to sign ``digest``, the big-endian bytes of the message hash."""
    digest: bytes


SigningRequest = Union[Probe, SignRequest]


def request_from_digest(digest: Optional[bytes]) -> SigningRequest:
    """Map the generic protocol's digest argument to a request."""
    if not digest:
        return Probe()
    return SignRequest(bytes(digest))


class RemoteSigner(LoopKeystore):
    """
    Generic signer backed by a StarkNet key store.

    Signatures are encoded with ``SignatureCodec`` so ``KeystoreAdapter``
    can decode them on the other side.
    """

    def __init__(self, keystore: StarkNet, codec: Optional[SignatureCodec] = None):
        """
        Initialize remote signer.

        Args:
            keystore: Source of signing keys
            codec: Signature codec, defaults to the 64-byte StarkNet encoding
        """
        self.keystore = keystore
        self.codec = codec or SignatureCodec()

    def sign(self, key_id: str, digest: Optional[bytes]) -> bytes:
        """
        Sign ``digest`` with key ``key_id``.

        ``None`` or empty ``digest`` only checks that the key exists and
        returns empty bytes.

        Raises:
            LockedError: If the key store is locked
            KeyNotFoundError: If the key does not exist
            SigningFailedError: If the curve rejects the digest or key
            EncodingError: If the signature cannot be encoded
        """
        return self.handle(key_id, request_from_digest(digest))

    def handle(self, key_id: str, request: SigningRequest) -> bytes:
        """Serve an explicit probe or sign request."""
        key = self.keystore.get(key_id)

        if isinstance(request, Probe):
            return b""

        msg_hash = int.from_bytes(request.digest, "big")
        try:
            r, s = stark_curve.sign(msg_hash, key.to_priv_key())
        except StarkCurveError as e:
            raise SigningFailedError(
                "error signing data with curve",
                details={"id": key_id},
                cause=e,
            ) from e

        logger.debug(f"Signed {len(request.digest)}-byte digest with StarkNet key {key_id}")
        return self.codec.encode(r, s)

    def accounts(self) -> List[str]:
        # Enumeration has no defined meaning for StarkNet keys yet.
        raise UnimplementedError("accounts")

    def __repr__(self) -> str:
        return f"RemoteSigner({self.keystore!r})"


__all__ = [
    "Probe",
    "SignRequest",
    "SigningRequest",
    "request_from_digest",
    "RemoteSigner",
]

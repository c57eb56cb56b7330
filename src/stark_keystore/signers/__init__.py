"""
Signing bridge between the generic keystore contract and the Stark curve.

Provides the signature codec, the curve-native adapter and the remote signer.
"""

from .signer import LoopKeystore, CurveKeystore
from .signature import StarkSignature, SignatureCodec, SIGNATURE_LEN
from .adapter import KeystoreAdapter, digest_to_bytes
from .remote import RemoteSigner, Probe, SignRequest, request_from_digest

__all__ = [
    "LoopKeystore",
    "CurveKeystore",
    "StarkSignature",
    "SignatureCodec",
    "SIGNATURE_LEN",
    "KeystoreAdapter",
    "digest_to_bytes",
    "RemoteSigner",
    "Probe",
    "SignRequest",
    "request_from_digest",
]

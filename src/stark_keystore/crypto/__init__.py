"""
Cryptographic primitives for the StarkNet key store.

Provides the Stark curve constants and the StarkNet ECDSA signing routine.
"""

from .stark_curve import (
    EC_ORDER,
    FIELD_PRIME,
    FIELD_BYTES,
    MAX_ELEMENT,
    StarkCurveError,
    generate_private_key,
    private_to_public,
    private_to_stark_key,
    is_on_curve,
    sign,
    verify,
)

__all__ = [
    "EC_ORDER",
    "FIELD_PRIME",
    "FIELD_BYTES",
    "MAX_ELEMENT",
    "StarkCurveError",
    "generate_private_key",
    "private_to_public",
    "private_to_stark_key",
    "is_on_curve",
    "sign",
    "verify",
]

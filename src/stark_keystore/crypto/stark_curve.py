"""
Stark curve cryptographic operations.

Provides the StarkNet flavour of ECDSA on the Stark curve
``y^2 = x^3 + alpha*x + beta (mod P)``, built on the ``ecdsa`` library's
curve arithmetic and RFC 6979 nonce generation.

The Stark variant differs from textbook ECDSA in three ways:
- the message hash is used as-is and must be below 2**251 (no truncation)
- ``r`` is the x coordinate of ``k*G`` itself and must be below 2**251
- ``w = s^-1 mod N`` must also be below 2**251; otherwise a new nonce is drawn
"""

from __future__ import annotations
import hashlib
from typing import Optional, Tuple

from ecdsa import rfc6979
from ecdsa.ellipticcurve import CurveFp, PointJacobi
from ecdsa.numbertheory import inverse_mod
from ecdsa.util import randrange


# Field prime P = 2**251 + 17 * 2**192 + 1
FIELD_PRIME = 0x800000000000011000000000000000000000000000000000000000000000001
ALPHA = 1
BETA = 0x6F21413EFBE40DE150E596D72F7A8C5609AD26C15C915C1F4CDFCB99CEE9E89
EC_ORDER = 0x800000000000010FFFFFFFFFFFFFFFFB781126DCAE7B2321E66A241ADC64D2F
GEN_X = 0x1EF15C18599971B7BECED415A40F0C7DEACFD9B0D1819E03D723D8BC943CFCA
GEN_Y = 0x5668060AA49730B7BE4801DF46EC62DE53ECD11ABE43A32873000C36E8DC1F

# Upper bound (exclusive) for message hashes, r and w
N_ELEMENT_BITS_ECDSA = 251
MAX_ELEMENT = 2 ** N_ELEMENT_BITS_ECDSA

# Field elements fit in 32 bytes
FIELD_BYTES = 32

CURVE = CurveFp(FIELD_PRIME, ALPHA, BETA)
GENERATOR = PointJacobi(CURVE, GEN_X, GEN_Y, 1, EC_ORDER, generator=True)

Point = Tuple[int, int]


class StarkCurveError(Exception):
    """Base exception for Stark curve operations."""
    pass


def generate_private_key() -> int:
    """
    Generate a random private scalar.

    Returns:
        Integer ``d`` with ``1 <= d < EC_ORDER``
    """
    return randrange(EC_ORDER)


def validate_private_key(priv_key: int) -> None:
    """Raise StarkCurveError unless ``priv_key`` is a usable scalar."""
    if not isinstance(priv_key, int) or not (1 <= priv_key < EC_ORDER):
        raise StarkCurveError("private key out of range [1, EC_ORDER)")


def private_to_public(priv_key: int) -> Point:
    """
    Derive the public point ``d * G``.

    Args:
        priv_key: Private scalar

    Returns:
        Affine ``(x, y)`` of the public key
    """
    validate_private_key(priv_key)
    point = GENERATOR * priv_key
    return point.x(), point.y()


def private_to_stark_key(priv_key: int) -> int:
    """Public key x coordinate, the StarkNet "stark key"."""
    return private_to_public(priv_key)[0]


def is_on_curve(point: Point) -> bool:
    """Check whether an affine point satisfies the curve equation."""
    x, y = point
    return CURVE.contains_point(x, y)


def _generate_k(msg_hash: int, priv_key: int, seed: Optional[int]) -> int:
    # Hashes of 248..251 bits whose length is not byte aligned are shifted
    # left by a nibble so the RFC 6979 bits2octets step sees the same
    # value the reference signer sees.
    if 1 <= msg_hash.bit_length() % 8 <= 4 and msg_hash.bit_length() >= 248:
        msg_hash *= 16

    if seed is None:
        extra_entropy = b""
    else:
        extra_entropy = seed.to_bytes((seed.bit_length() + 7) // 8, "big")

    data = msg_hash.to_bytes((msg_hash.bit_length() + 7) // 8 or 1, "big")
    return rfc6979.generate_k(EC_ORDER, priv_key, hashlib.sha256, data, extra_entropy=extra_entropy)


def sign(msg_hash: int, priv_key: int, seed: Optional[int] = None) -> Tuple[int, int]:
    """
    Sign a message hash.

    Args:
        msg_hash: Hash to sign, ``0 <= msg_hash < 2**251``
        priv_key: Private scalar
        seed: Optional extra entropy for the deterministic nonce

    Returns:
        Signature components ``(r, s)``

    Raises:
        StarkCurveError: If the hash or key is out of range
    """
    if not isinstance(msg_hash, int) or not (0 <= msg_hash < MAX_ELEMENT):
        raise StarkCurveError("message hash out of range [0, 2**251)")
    validate_private_key(priv_key)

    while True:
        k = _generate_k(msg_hash, priv_key, seed)
        seed = 1 if seed is None else seed + 1

        r = (GENERATOR * k).x()
        if not (1 <= r < MAX_ELEMENT):
            continue

        agg = (msg_hash + r * priv_key) % EC_ORDER
        if agg == 0:
            continue

        w = (k * inverse_mod(agg, EC_ORDER)) % EC_ORDER
        if not (1 <= w < MAX_ELEMENT):
            continue

        return r, inverse_mod(w, EC_ORDER)


def verify(msg_hash: int, r: int, s: int, public_key: Point) -> bool:
    """
    Verify a signature against a public point.

    Args:
        msg_hash: Signed hash
        r: Signature r component
        s: Signature s component
        public_key: Affine ``(x, y)`` public key

    Returns:
        True if the signature is valid
    """
    if not (0 <= msg_hash < MAX_ELEMENT):
        return False
    if not (1 <= r < MAX_ELEMENT) or not (1 <= s < EC_ORDER):
        return False
    w = inverse_mod(s, EC_ORDER)
    if not (1 <= w < MAX_ELEMENT):
        return False
    if not is_on_curve(public_key):
        return False

    q = PointJacobi(CURVE, public_key[0], public_key[1], 1, EC_ORDER)
    combined = GENERATOR.mul_add((msg_hash * w) % EC_ORDER, q, (r * w) % EC_ORDER)
    return combined.x() == r


__all__ = [
    "FIELD_PRIME",
    "ALPHA",
    "BETA",
    "EC_ORDER",
    "GEN_X",
    "GEN_Y",
    "FIELD_BYTES",
    "MAX_ELEMENT",
    "N_ELEMENT_BITS_ECDSA",
    "StarkCurveError",
    "generate_private_key",
    "validate_private_key",
    "private_to_public",
    "private_to_stark_key",
    "is_on_curve",
    "sign",
    "verify",
]

"""
StarkNet signature byte encoding.

A signature travels as 64 bytes: ``r`` then ``s``, each an unsigned
big-endian integer left-padded to the 32-byte field width. Values that do
not fit are rejected rather than truncated, and buffers of any other length
are rejected rather than partially parsed.
"""

from __future__ import annotations
from typing import Tuple

from ..crypto.stark_curve import FIELD_BYTES
from ..runtime.errors import EncodingError, MalformedSignatureError

CHUNK_LEN = FIELD_BYTES
SIGNATURE_LEN = 2 * CHUNK_LEN


def pad_bytes(value: int, length: int = CHUNK_LEN) -> bytes:
    """
    Encode a non-negative integer as exactly ``length`` big-endian bytes.

    Raises:
        EncodingError: If the value is negative or too large
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise EncodingError(f"expected an integer, got {type(value).__name__}")
    if value < 0:
        raise EncodingError(f"invalid value {value}: negative value not allowed", details={"value": value})
    if value.bit_length() > length * 8:
        raise EncodingError(
            f"value {value:#x} does not fit in {length} bytes",
            details={"value": hex(value), "width": length},
        )
    return value.to_bytes(length, "big")


class StarkSignature:
    """StarkNet signature components with their byte encoding."""

    __slots__ = ("r", "s")

    def __init__(self, r: int, s: int):
        self.r = r
        self.s = s

    @classmethod
    def from_ints(cls, r: int, s: int) -> StarkSignature:
        """
        Build a signature from its components.

        Raises:
            EncodingError: If either component is not a non-negative integer
        """
        for name, value in (("r", r), ("s", s)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise EncodingError(f"invalid {name}: expected an integer")
            if value < 0:
                raise EncodingError(f"invalid {name} {value}: negative value not allowed")
        return cls(r, s)

    @classmethod
    def from_bytes(cls, data: bytes) -> StarkSignature:
        """
        Parse a 64-byte encoded signature.

        Raises:
            MalformedSignatureError: If ``data`` is not bytes of the expected length
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise MalformedSignatureError(
                f"invalid starknet signature type {type(data).__name__}. expected bytes"
            )
        data = bytes(data)
        if len(data) != SIGNATURE_LEN:
            raise MalformedSignatureError(
                f"invalid starknet signature length {len(data)}. expected {SIGNATURE_LEN}",
                details={"length": len(data), "expected": SIGNATURE_LEN},
            )
        r = int.from_bytes(data[:CHUNK_LEN], "big")
        s = int.from_bytes(data[CHUNK_LEN:], "big")
        return cls(r, s)

    def to_bytes(self) -> bytes:
        """
        Encode as 64 bytes.

        Raises:
            EncodingError: If a component does not fit in 32 bytes
        """
        return pad_bytes(self.r) + pad_bytes(self.s)

    def ints(self) -> Tuple[int, int]:
        return self.r, self.s

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StarkSignature):
            return NotImplemented
        return self.r == other.r and self.s == other.s

    def __hash__(self) -> int:
        return hash((self.r, self.s))

    def __repr__(self) -> str:
        return f"StarkSignature(r={self.r:#x}, s={self.s:#x})"


class SignatureCodec:
    """Stateless encoder/decoder between ``(r, s)`` and signature bytes."""

    signature_length = SIGNATURE_LEN

    @staticmethod
    def encode(r: int, s: int) -> bytes:
        """
        Encode signature components.

        Raises:
            EncodingError: If either component is negative or wider than 32 bytes
        """
        return StarkSignature.from_ints(r, s).to_bytes()

    @staticmethod
    def decode(data: bytes) -> Tuple[int, int]:
        """
        Decode signature bytes into ``(r, s)``.

        Raises:
            MalformedSignatureError: If the buffer is not exactly 64 bytes
        """
        return StarkSignature.from_bytes(data).ints()


__all__ = [
    "CHUNK_LEN",
    "SIGNATURE_LEN",
    "pad_bytes",
    "StarkSignature",
    "SignatureCodec",
]

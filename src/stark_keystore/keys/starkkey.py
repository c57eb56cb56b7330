"""
StarkNet key type.

A key is a private scalar on the Stark curve together with its public point.
Its identifier is the hex encoded x coordinate of the public point (the
"stark key"), padded to the field width.
"""

from __future__ import annotations
from typing import Any, Dict, Tuple

from ..crypto import stark_curve
from ..crypto.stark_curve import FIELD_BYTES, StarkCurveError

KEY_TYPE = "StarkNet"


class Key:
    """
    Immutable StarkNet key.

    Equality and hashing are by identifier. The private scalar is never part
    of ``str``/``repr`` output.
    """

    __slots__ = ("_private_scalar", "_public_point", "_id")

    def __init__(self, private_scalar: int):
        """
        Initialize a key from its private scalar.

        Args:
            private_scalar: Integer in ``[1, EC_ORDER)``

        Raises:
            StarkCurveError: If the scalar is out of range
        """
        public_point = stark_curve.private_to_public(private_scalar)
        object.__setattr__(self, "_private_scalar", private_scalar)
        object.__setattr__(self, "_public_point", public_point)
        object.__setattr__(self, "_id", stark_key_str(public_point[0]))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Key is immutable")

    @classmethod
    def generate(cls) -> Key:
        """Generate a new random key."""
        return cls(stark_curve.generate_private_key())

    @classmethod
    def from_raw(cls, raw: bytes) -> Key:
        """
        Recover a key from its raw private scalar bytes.

        Args:
            raw: Big-endian private scalar

        Returns:
            Key

        Raises:
            StarkCurveError: If the bytes do not encode a valid scalar
        """
        if not raw or len(raw) > FIELD_BYTES:
            raise StarkCurveError(f"raw key must be 1..{FIELD_BYTES} bytes, got {len(raw)}")
        return cls(int.from_bytes(raw, "big"))

    def id(self) -> str:
        """Identifier, ``0x`` followed by the padded public x coordinate."""
        return self._id

    @property
    def private_scalar(self) -> int:
        return self._private_scalar

    @property
    def public_point(self) -> Tuple[int, int]:
        return self._public_point

    def stark_key(self) -> int:
        """Public x coordinate as an integer."""
        return self._public_point[0]

    def to_priv_key(self) -> int:
        """Private scalar as consumed by the curve signing routine."""
        return self._private_scalar

    def raw(self) -> bytes:
        """Private scalar as 32 big-endian bytes."""
        return self._private_scalar.to_bytes(FIELD_BYTES, "big")

    def to_dict(self) -> Dict[str, Any]:
        """Public information only."""
        return {
            "id": self._id,
            "keyType": KEY_TYPE,
            "publicKeyX": hex(self._public_point[0]),
            "publicKeyY": hex(self._public_point[1]),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __str__(self) -> str:
        return f"StarkKey{{PrivateKey: <redacted>, StarkKey: {self._id}}}"

    def __repr__(self) -> str:
        return f"Key(id='{self._id}')"


def stark_key_str(x: int) -> str:
    """Format a public x coordinate as a key identifier."""
    return "0x" + x.to_bytes(FIELD_BYTES, "big").hex()


__all__ = ["Key", "KEY_TYPE", "stark_key_str"]

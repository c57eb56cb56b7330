"""
Key store configuration.

Scrypt cost parameters used when exporting keys and persisting the key
ring, plus the optional on-disk key ring location.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Optional, Mapping
from pydantic import BaseModel, Field, field_validator, model_validator

# Scrypt needs 128 * r * n bytes of working memory; the production preset
# sits exactly at this ceiling.
MAX_SCRYPT_MEMORY = 128 * 8 * 262144
MAX_SCRYPT_P = 16


def check_scrypt_cost(n: int, r: int, p: int = 1) -> None:
    """
    Reject scrypt parameters that are invalid or too expensive to run.

    Raises:
        ValueError: If ``n`` is not a power of two, or ``128 * r * n`` or ``p``
            is above its limit
    """
    if n < 2 or n & (n - 1):
        raise ValueError(f"scrypt n must be a power of two, got {n}")
    memory = 128 * r * n
    if memory > MAX_SCRYPT_MEMORY:
        raise ValueError(
            f"scrypt parameters need {memory} bytes of memory, limit is {MAX_SCRYPT_MEMORY}"
        )
    if p > MAX_SCRYPT_P:
        raise ValueError(f"scrypt p must be at most {MAX_SCRYPT_P}, got {p}")


class ScryptParams(BaseModel):
    """
    Scrypt key-derivation cost parameters.

    Matches the Web3 secret-storage ``kdfparams`` object.
    """
    n: int = Field(default=262144, ge=2, description="CPU/memory cost (power of two)")
    r: int = Field(default=8, ge=1, description="Block size")
    p: int = Field(default=1, ge=1, description="Parallelization")
    dklen: int = Field(default=32, ge=32, le=64, description="Derived key length in bytes")

    model_config = {"frozen": True}

    @field_validator("n")
    @classmethod
    def validate_n(cls, v: int) -> int:
        """Scrypt requires N to be a power of two."""
        if v & (v - 1):
            raise ValueError(f"scrypt n must be a power of two, got {v}")
        return v

    @model_validator(mode="after")
    def validate_cost(self) -> ScryptParams:
        check_scrypt_cost(self.n, self.r, self.p)
        return self


# Production cost, as used for keys at rest
DEFAULT_SCRYPT_PARAMS = ScryptParams(n=262144, p=1)

# Cheap cost for tests only
FAST_SCRYPT_PARAMS = ScryptParams(n=2, p=1)


class KeystoreConfig(BaseModel):
    """Settings for a ``KeyManager``."""
    scrypt: ScryptParams = Field(default=DEFAULT_SCRYPT_PARAMS)
    keyring_path: Optional[Path] = Field(default=None, description="File holding the encrypted key ring")

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> KeystoreConfig:
        """
        Build a config from ``STARK_KEYSTORE_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            KeystoreConfig with unset values left at their defaults
        """
        env = os.environ if environ is None else environ
        scrypt = ScryptParams(
            n=int(env.get("STARK_KEYSTORE_SCRYPT_N", DEFAULT_SCRYPT_PARAMS.n)),
            p=int(env.get("STARK_KEYSTORE_SCRYPT_P", DEFAULT_SCRYPT_PARAMS.p)),
        )
        path = env.get("STARK_KEYSTORE_PATH")
        return cls(scrypt=scrypt, keyring_path=Path(path) if path else None)


__all__ = [
    "ScryptParams",
    "KeystoreConfig",
    "MAX_SCRYPT_MEMORY",
    "MAX_SCRYPT_P",
    "check_scrypt_cost",
    "DEFAULT_SCRYPT_PARAMS",
    "FAST_SCRYPT_PARAMS",
]

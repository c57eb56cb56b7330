"""
Encrypted key export format.

Keys leave the process only as password-encrypted JSON documents:

    {
        "keyType": "StarkNet",
        "starkKey": "0x...",
        "crypto": { Web3 secret-storage v3 object }
    }

The ``crypto`` object uses scrypt for key derivation, AES-128-CTR for the
private scalar and ``keccak256(derived[16:32] + ciphertext)`` as MAC. The
password is prefixed with ``"starkkey"`` before derivation so a StarkNet
export cannot be opened with another key type's password.
"""

from __future__ import annotations
import hmac
import os
from typing import Union

from Crypto.Hash import keccak
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from pydantic import BaseModel, Field, ValidationError, model_validator

from ..config import ScryptParams, check_scrypt_cost
from ..crypto.stark_curve import StarkCurveError
from ..runtime.errors import DecryptionFailedError
from .starkkey import Key, KEY_TYPE

CIPHER_NAME = "aes-128-ctr"
KDF_NAME = "scrypt"
PASSWORD_PREFIX = "starkkey"
SALT_BYTES = 32
IV_BYTES = 16


class CipherParams(BaseModel):
    iv: str


class KdfParams(BaseModel):
    """Scrypt parameters read from an untrusted document; cost is bounded."""
    dklen: int = Field(ge=32, le=64)
    n: int = Field(ge=2)
    r: int = Field(ge=1)
    p: int = Field(ge=1)
    salt: str

    @model_validator(mode="after")
    def validate_cost(self) -> KdfParams:
        check_scrypt_cost(self.n, self.r, self.p)
        return self


class CryptoJSON(BaseModel):
    """Web3 secret-storage v3 ``crypto`` object."""
    cipher: str
    ciphertext: str
    cipherparams: CipherParams
    kdf: str
    kdfparams: KdfParams
    mac: str


class EncryptedStarkKeyExport(BaseModel):
    """Top-level export document."""
    key_type: str = Field(alias="keyType")
    stark_key: str = Field(alias="starkKey")
    crypto: CryptoJSON

    model_config = {"populate_by_name": True}


def _adulterated_password(password: str) -> bytes:
    return (PASSWORD_PREFIX + password).encode("utf-8")


def _derive(password: str, salt: bytes, n: int, r: int, p: int, dklen: int) -> bytes:
    kdf = Scrypt(salt=salt, length=dklen, n=n, r=r, p=p)
    return kdf.derive(_adulterated_password(password))


def _mac(derived: bytes, ciphertext: bytes) -> bytes:
    return keccak.new(digest_bits=256, data=derived[16:32] + ciphertext).digest()


def _aes_ctr(key: bytes, iv: bytes, data: bytes) -> bytes:
    # CTR mode is symmetric: the same transform encrypts and decrypts
    transform = Cipher(algorithms.AES(key), modes.CTR(iv)).encryptor()
    return transform.update(data) + transform.finalize()


def encrypt_data_v3(data: bytes, password: str, params: ScryptParams) -> CryptoJSON:
    """
    Encrypt bytes into a Web3 secret-storage v3 ``crypto`` object.

    Args:
        data: Plaintext
        password: Password (prefixed internally)
        params: Scrypt cost parameters

    Returns:
        CryptoJSON model
    """
    salt = os.urandom(SALT_BYTES)
    iv = os.urandom(IV_BYTES)
    derived = _derive(password, salt, params.n, params.r, params.p, params.dklen)
    ciphertext = _aes_ctr(derived[:16], iv, data)
    return CryptoJSON(
        cipher=CIPHER_NAME,
        ciphertext=ciphertext.hex(),
        cipherparams=CipherParams(iv=iv.hex()),
        kdf=KDF_NAME,
        kdfparams=KdfParams(dklen=params.dklen, n=params.n, r=params.r, p=params.p, salt=salt.hex()),
        mac=_mac(derived, ciphertext).hex(),
    )


def decrypt_data_v3(crypto: CryptoJSON, password: str) -> bytes:
    """
    Decrypt a Web3 secret-storage v3 ``crypto`` object.

    Raises:
        DecryptionFailedError: On unsupported cipher/kdf, bad encoding or MAC mismatch
    """
    if crypto.cipher != CIPHER_NAME:
        raise DecryptionFailedError(f"cipher not supported: {crypto.cipher}")
    if crypto.kdf != KDF_NAME:
        raise DecryptionFailedError(f"kdf not supported: {crypto.kdf}")

    try:
        salt = bytes.fromhex(crypto.kdfparams.salt)
        iv = bytes.fromhex(crypto.cipherparams.iv)
        ciphertext = bytes.fromhex(crypto.ciphertext)
        mac = bytes.fromhex(crypto.mac)
    except ValueError as e:
        raise DecryptionFailedError("invalid hex encoding in encrypted key", cause=e) from e

    kdf = crypto.kdfparams
    try:
        derived = _derive(password, salt, kdf.n, kdf.r, kdf.p, kdf.dklen)
    except (ValueError, MemoryError) as e:
        raise DecryptionFailedError("invalid scrypt parameters", cause=e) from e

    if not hmac.compare_digest(_mac(derived, ciphertext), mac):
        raise DecryptionFailedError("could not decrypt key with given password")

    try:
        return _aes_ctr(derived[:16], iv, ciphertext)
    except ValueError as e:
        raise DecryptionFailedError("invalid cipher parameters", cause=e) from e


def to_encrypted_json(key: Key, password: str, params: ScryptParams) -> bytes:
    """
    Serialize a key into an encrypted export document.

    Args:
        key: Key to export
        password: Export password
        params: Scrypt cost parameters

    Returns:
        UTF-8 JSON bytes
    """
    export = EncryptedStarkKeyExport(
        key_type=KEY_TYPE,
        stark_key=key.id(),
        crypto=encrypt_data_v3(key.raw(), password, params),
    )
    return export.model_dump_json(by_alias=True).encode("utf-8")


def from_encrypted_json(key_json: Union[bytes, str], password: str) -> Key:
    """
    Recover a key from an encrypted export document.

    Args:
        key_json: Export document
        password: Export password

    Returns:
        The decrypted Key

    Raises:
        DecryptionFailedError: On malformed JSON, wrong key type, bad password or corrupt data
    """
    try:
        export = EncryptedStarkKeyExport.model_validate_json(key_json)
    except ValidationError as e:
        raise DecryptionFailedError("malformed encrypted key JSON", cause=e) from e

    if export.key_type != KEY_TYPE:
        raise DecryptionFailedError(
            f"wrong key type: expected {KEY_TYPE}, got {export.key_type}",
            details={"keyType": export.key_type},
        )

    raw = decrypt_data_v3(export.crypto, password)
    try:
        key = Key.from_raw(raw)
    except StarkCurveError as e:
        raise DecryptionFailedError("decrypted data is not a valid StarkNet key", cause=e) from e

    if key.id() != export.stark_key:
        raise DecryptionFailedError(
            "decrypted key does not match exported stark key",
            details={"starkKey": export.stark_key},
        )
    return key


__all__ = [
    "CryptoJSON",
    "EncryptedStarkKeyExport",
    "encrypt_data_v3",
    "decrypt_data_v3",
    "to_encrypted_json",
    "from_encrypted_json",
]

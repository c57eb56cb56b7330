"""
Tests for the curve-native keystore adapter.
"""

from unittest.mock import Mock

import pytest

from stark_keystore.crypto import stark_curve
from stark_keystore.runtime.errors import (
    EncodingError,
    KeyNotFoundError,
    MalformedSignatureError,
    SigningFailedError,
)
from stark_keystore.signers.adapter import KeystoreAdapter, digest_to_bytes
from stark_keystore.signers.remote import RemoteSigner
from stark_keystore.signers.signature import SignatureCodec
from stark_keystore.signers.signer import LoopKeystore

ADDRESS = "0x" + "12" * 32
MSG_HASH = 0x397E76D1667C4454BFB83514E120583AF836F8E32A516765497823EB85E2B1D


@pytest.fixture
def mock_loopp():
    """Generic keystore returning a fixed encoded signature."""
    mock = Mock(spec=LoopKeystore)
    mock.sign.return_value = SignatureCodec.encode(111, 222)
    return mock


class TestDigestToBytes:
    """Canonical digest bytes."""

    def test_minimal_big_endian(self):
        assert digest_to_bytes(0x0102) == b"\x01\x02"
        assert digest_to_bytes(MSG_HASH) == MSG_HASH.to_bytes(32, "big")

    def test_zero_is_not_empty(self):
        assert digest_to_bytes(0) == b"\x00"

    def test_negative(self):
        with pytest.raises(EncodingError):
            digest_to_bytes(-1)

    def test_non_integer(self):
        with pytest.raises(EncodingError):
            digest_to_bytes("0x01")


class TestAdapter:
    """Adapter over a mocked generic keystore."""

    def test_sign_decodes(self, mock_loopp):
        adapter = KeystoreAdapter(mock_loopp)
        assert adapter.sign(ADDRESS, 0x0102) == (111, 222)
        mock_loopp.sign.assert_called_once_with(ADDRESS, b"\x01\x02")

    def test_wraps_keystore_error(self, mock_loopp):
        cause = KeyNotFoundError(ADDRESS)
        mock_loopp.sign.side_effect = cause
        adapter = KeystoreAdapter(mock_loopp)
        with pytest.raises(SigningFailedError) as exc_info:
            adapter.sign(ADDRESS, MSG_HASH)
        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.details["address"] == ADDRESS

    def test_wraps_transport_error(self, mock_loopp):
        mock_loopp.sign.side_effect = ConnectionError("remote signer unreachable")
        with pytest.raises(SigningFailedError):
            KeystoreAdapter(mock_loopp).sign(ADDRESS, MSG_HASH)

    @pytest.mark.parametrize("raw", [b"", b"\x00" * 63, b"\x00" * 65, None])
    def test_malformed_signature_propagates(self, mock_loopp, raw):
        mock_loopp.sign.return_value = raw
        with pytest.raises(MalformedSignatureError):
            KeystoreAdapter(mock_loopp).sign(ADDRESS, MSG_HASH)

    def test_negative_digest_never_reaches_keystore(self, mock_loopp):
        with pytest.raises(EncodingError):
            KeystoreAdapter(mock_loopp).sign(ADDRESS, -1)
        mock_loopp.sign.assert_not_called()

    def test_decode(self, mock_loopp):
        adapter = KeystoreAdapter(mock_loopp)
        assert adapter.decode(SignatureCodec.encode(5, 6)) == (5, 6)
        with pytest.raises(MalformedSignatureError):
            adapter.decode(b"\x00")

    def test_loopp_passthrough(self, mock_loopp):
        adapter = KeystoreAdapter(mock_loopp)
        assert adapter.loopp() is mock_loopp
        assert adapter.wrapped_keystore is mock_loopp


class TestAdapterOverRemoteSigner:
    """Full path: adapter -> remote signer -> key store -> curve."""

    def test_signature_verifies(self, keystore, stored_key):
        adapter = KeystoreAdapter(RemoteSigner(keystore))
        r, s = adapter.sign(stored_key.id(), MSG_HASH)
        assert stark_curve.verify(MSG_HASH, r, s, stored_key.public_point)
        assert (r, s) == stark_curve.sign(MSG_HASH, stored_key.to_priv_key())

    def test_zero_digest_signs(self, keystore, stored_key):
        adapter = KeystoreAdapter(RemoteSigner(keystore))
        r, s = adapter.sign(stored_key.id(), 0)
        assert stark_curve.verify(0, r, s, stored_key.public_point)

    def test_missing_key(self, keystore):
        adapter = KeystoreAdapter(RemoteSigner(keystore))
        with pytest.raises(SigningFailedError) as exc_info:
            adapter.sign(ADDRESS, MSG_HASH)
        assert isinstance(exc_info.value.cause, KeyNotFoundError)

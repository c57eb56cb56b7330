"""
Tests for Stark curve signing.

Covers curve constants, key derivation, deterministic signing and the
StarkNet range rules on message hashes and signature components.
"""

import pytest

from stark_keystore.crypto import stark_curve
from stark_keystore.crypto.stark_curve import (
    EC_ORDER,
    FIELD_PRIME,
    GEN_X,
    GEN_Y,
    MAX_ELEMENT,
    StarkCurveError,
)

PRIV_KEY = 0x3C1E9550E66958296D11B60F8E8E7A7AD990D07FA65D5F7652C4A6C87D4E3CC
MSG_HASH = 0x397E76D1667C4454BFB83514E120583AF836F8E32A516765497823EB85E2B1D


class TestCurveParameters:
    """Curve constants."""

    def test_generator_on_curve(self):
        assert stark_curve.is_on_curve((GEN_X, GEN_Y))

    def test_field_prime_layout(self):
        assert FIELD_PRIME == 2 ** 251 + 17 * 2 ** 192 + 1

    def test_order_exceeds_signature_bound(self):
        assert EC_ORDER > MAX_ELEMENT
        assert MAX_ELEMENT == 2 ** 251


class TestKeys:
    """Private and public key handling."""

    def test_generate_private_key_in_range(self):
        for _ in range(5):
            d = stark_curve.generate_private_key()
            assert 1 <= d < EC_ORDER

    def test_public_key_on_curve(self):
        pub = stark_curve.private_to_public(PRIV_KEY)
        assert stark_curve.is_on_curve(pub)

    def test_public_key_deterministic(self):
        assert stark_curve.private_to_public(PRIV_KEY) == stark_curve.private_to_public(PRIV_KEY)
        assert stark_curve.private_to_stark_key(PRIV_KEY) == stark_curve.private_to_public(PRIV_KEY)[0]

    @pytest.mark.parametrize("bad", [0, -1, EC_ORDER, EC_ORDER + 5])
    def test_private_key_out_of_range(self, bad):
        with pytest.raises(StarkCurveError):
            stark_curve.private_to_public(bad)


class TestSignVerify:
    """StarkNet ECDSA."""

    def test_sign_and_verify(self):
        pub = stark_curve.private_to_public(PRIV_KEY)
        r, s = stark_curve.sign(MSG_HASH, PRIV_KEY)
        assert stark_curve.verify(MSG_HASH, r, s, pub)

    def test_signature_ranges(self):
        r, s = stark_curve.sign(MSG_HASH, PRIV_KEY)
        assert 1 <= r < MAX_ELEMENT
        assert 1 <= s < EC_ORDER
        w = pow(s, -1, EC_ORDER)
        assert 1 <= w < MAX_ELEMENT

    def test_sign_is_deterministic(self):
        assert stark_curve.sign(MSG_HASH, PRIV_KEY) == stark_curve.sign(MSG_HASH, PRIV_KEY)

    def test_seed_changes_nonce(self):
        pub = stark_curve.private_to_public(PRIV_KEY)
        default = stark_curve.sign(MSG_HASH, PRIV_KEY)
        seeded = stark_curve.sign(MSG_HASH, PRIV_KEY, seed=42)
        assert default != seeded
        assert stark_curve.verify(MSG_HASH, seeded[0], seeded[1], pub)

    def test_small_hashes(self):
        pub = stark_curve.private_to_public(PRIV_KEY)
        for msg_hash in (0, 1, 0xFF):
            r, s = stark_curve.sign(msg_hash, PRIV_KEY)
            assert stark_curve.verify(msg_hash, r, s, pub)

    def test_largest_hash(self):
        pub = stark_curve.private_to_public(PRIV_KEY)
        msg_hash = MAX_ELEMENT - 1
        r, s = stark_curve.sign(msg_hash, PRIV_KEY)
        assert stark_curve.verify(msg_hash, r, s, pub)

    @pytest.mark.parametrize("bad_hash", [-1, MAX_ELEMENT, 2 ** 256])
    def test_hash_out_of_range(self, bad_hash):
        with pytest.raises(StarkCurveError):
            stark_curve.sign(bad_hash, PRIV_KEY)

    def test_sign_rejects_bad_key(self):
        with pytest.raises(StarkCurveError):
            stark_curve.sign(MSG_HASH, 0)

    def test_verify_rejects_wrong_hash(self):
        pub = stark_curve.private_to_public(PRIV_KEY)
        r, s = stark_curve.sign(MSG_HASH, PRIV_KEY)
        assert not stark_curve.verify(MSG_HASH + 1, r, s, pub)

    def test_verify_rejects_wrong_key(self):
        other = stark_curve.private_to_public(PRIV_KEY + 1)
        r, s = stark_curve.sign(MSG_HASH, PRIV_KEY)
        assert not stark_curve.verify(MSG_HASH, r, s, other)

    def test_verify_rejects_out_of_range_components(self):
        pub = stark_curve.private_to_public(PRIV_KEY)
        r, s = stark_curve.sign(MSG_HASH, PRIV_KEY)
        assert not stark_curve.verify(MSG_HASH, 0, s, pub)
        assert not stark_curve.verify(MSG_HASH, MAX_ELEMENT, s, pub)
        assert not stark_curve.verify(MSG_HASH, r, 0, pub)
        assert not stark_curve.verify(MSG_HASH, r, EC_ORDER, pub)

    def test_verify_rejects_off_curve_point(self):
        r, s = stark_curve.sign(MSG_HASH, PRIV_KEY)
        assert not stark_curve.verify(MSG_HASH, r, s, (1, 1))

"""
Shared fixtures:
- unlocked key managers using cheap scrypt parameters
- key stores and signers built on them
"""
import pytest

from stark_keystore.config import KeystoreConfig, FAST_SCRYPT_PARAMS
from stark_keystore.keys.key_manager import KeyManager
from stark_keystore.keys.keystore import StarkNetKeyStore
from stark_keystore.keys.starkkey import Key
from stark_keystore.signers.remote import RemoteSigner

TEST_PASSWORD = "p4SsW0rD1!@#_"


@pytest.fixture
def fast_config():
    """Config with test-only scrypt cost."""
    return KeystoreConfig(scrypt=FAST_SCRYPT_PARAMS)


@pytest.fixture
def key_manager(fast_config):
    """Unlocked in-memory key manager."""
    km = KeyManager(fast_config)
    km.unlock(TEST_PASSWORD)
    return km


@pytest.fixture
def keystore(key_manager):
    """Empty unlocked StarkNet key store."""
    return StarkNetKeyStore(key_manager)


@pytest.fixture
def fresh_keystore(fast_config):
    """A second, independent unlocked key store."""
    km = KeyManager(fast_config)
    km.unlock(TEST_PASSWORD)
    return StarkNetKeyStore(km)


@pytest.fixture
def stored_key(keystore):
    """A key already present in ``keystore``."""
    return keystore.create()


@pytest.fixture
def remote_signer(keystore):
    """Remote signer over ``keystore``."""
    return RemoteSigner(keystore)


@pytest.fixture
def deterministic_key():
    """Key with a fixed private scalar."""
    return Key(0x3C1E9550E66958296D11B60F8E8E7A7AD990D07FA65D5F7652C4A6C87D4E3CC)

"""
Tests for the reader/writer lock and the error model.
"""

import threading
import time

import pytest

from stark_keystore.runtime.errors import (
    DecryptionFailedError,
    EncodingError,
    ErrorCode,
    KeyAlreadyExistsError,
    KeyNotFoundError,
    LockedError,
    MalformedSignatureError,
    SigningFailedError,
    StarkKeystoreError,
    UnimplementedError,
)
from stark_keystore.runtime.rwlock import RWLock


class TestRWLock:
    """Shared and exclusive acquisition."""

    def test_multiple_readers(self):
        lock = RWLock()
        lock.acquire_read()
        lock.acquire_read()
        assert lock.readers == 2
        lock.release_read()
        lock.release_read()
        assert lock.readers == 0

    def test_writer_excludes_readers(self):
        lock = RWLock()
        acquired = threading.Event()

        def reader():
            with lock.read_locked():
                acquired.set()

        with lock.write_locked():
            assert lock.write_held
            t = threading.Thread(target=reader)
            t.start()
            assert not acquired.wait(0.1)
        t.join(timeout=2)
        assert acquired.is_set()

    def test_reader_blocks_writer(self):
        lock = RWLock()
        acquired = threading.Event()

        def writer():
            with lock.write_locked():
                acquired.set()

        with lock.read_locked():
            t = threading.Thread(target=writer)
            t.start()
            assert not acquired.wait(0.1)
        t.join(timeout=2)
        assert acquired.is_set()

    def test_waiting_writer_blocks_new_readers(self):
        lock = RWLock()
        order = []

        lock.acquire_read()

        def writer():
            with lock.write_locked():
                order.append("writer")

        def late_reader():
            with lock.read_locked():
                order.append("reader")

        w = threading.Thread(target=writer)
        w.start()
        time.sleep(0.05)
        r = threading.Thread(target=late_reader)
        r.start()
        time.sleep(0.05)
        lock.release_read()
        w.join(timeout=2)
        r.join(timeout=2)
        assert order == ["writer", "reader"]

    def test_release_without_acquire(self):
        lock = RWLock()
        with pytest.raises(RuntimeError):
            lock.release_read()
        with pytest.raises(RuntimeError):
            lock.release_write()

    def test_lock_released_on_exception(self):
        lock = RWLock()
        with pytest.raises(ValueError):
            with lock.write_locked():
                raise ValueError("boom")
        assert not lock.write_held


class TestErrors:
    """Error codes and context."""

    @pytest.mark.parametrize("error, code", [
        (LockedError("get"), ErrorCode.LOCKED),
        (KeyNotFoundError("0x01"), ErrorCode.KEY_NOT_FOUND),
        (KeyAlreadyExistsError("0x01"), ErrorCode.KEY_EXISTS),
        (DecryptionFailedError(), ErrorCode.DECRYPTION_FAILED),
        (MalformedSignatureError(), ErrorCode.MALFORMED_SIGNATURE),
        (EncodingError("too wide"), ErrorCode.ENCODING_ERROR),
        (SigningFailedError(), ErrorCode.SIGNING_FAILED),
        (UnimplementedError("accounts"), ErrorCode.UNIMPLEMENTED),
    ])
    def test_codes(self, error, code):
        assert isinstance(error, StarkKeystoreError)
        assert error.code == code
        assert error.to_dict()["code"] == code.value

    def test_malformed_is_not_encoding_error(self):
        assert not isinstance(MalformedSignatureError(), EncodingError)

    def test_not_found_context(self):
        error = KeyNotFoundError("0xabc")
        assert error.details == {"id": "0xabc", "key_type": "StarkNet"}
        assert "0xabc" in str(error)

    def test_cause_in_str_and_dict(self):
        error = SigningFailedError("curve failed", cause=ValueError("bad scalar"))
        assert "bad scalar" in str(error)
        assert error.to_dict()["cause"] == "bad scalar"

    def test_to_dict_shape(self):
        error = LockedError("export")
        assert error.to_dict() == {
            "code": int(ErrorCode.LOCKED),
            "name": "LOCKED",
            "message": "Keystore is locked",
            "details": {"operation": "export"},
            "cause": None,
        }

    def test_str_includes_code_and_context(self):
        assert str(KeyAlreadyExistsError("0x01")) == "KEY_EXISTS: key with ID 0x01 already exists (id=0x01)"

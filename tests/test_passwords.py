"""Unit tests for auth/passwords.py -- bcrypt hashing and verification.

Covers:
- Fresh salt per hash: same plaintext, different digests, both verify
- Wrong password and malformed digests return False instead of raising
- Passwords over 72 bytes never verify
- Library failures surface as HashingError
"""

import bcrypt
import pytest

from auth.passwords import equalize_timing, hash_password, verify_password
from core.errors import HashingError


def test_same_plaintext_hashes_differently_but_both_verify():
    first = hash_password("oolong")
    second = hash_password("oolong")
    assert first != second
    assert verify_password("oolong", first)
    assert verify_password("oolong", second)


def test_digest_does_not_contain_plaintext():
    assert "oolong-secret" not in hash_password("oolong-secret")


def test_wrong_password_is_rejected():
    digest = hash_password("oolong")
    assert verify_password("sencha", digest) is False


@pytest.mark.parametrize("bad_digest", ["", "not-a-bcrypt-hash", "$2b$04$short"])
def test_malformed_digest_returns_false(bad_digest):
    assert verify_password("oolong", bad_digest) is False


def test_library_failure_raises_hashing_error(monkeypatch):
    def broken_gensalt(*args, **kwargs):
        raise OSError("entropy source unavailable")

    monkeypatch.setattr(bcrypt, "gensalt", broken_gensalt)
    with pytest.raises(HashingError):
        hash_password("oolong")


def test_equalize_timing_never_raises():
    equalize_timing("anything")


def test_password_over_bcrypt_limit_never_verifies():
    """bcrypt compares only 72 bytes; a longer guess must not match on its prefix."""
    digest = hash_password("a" * 72)
    assert verify_password("a" * 72, digest)
    assert verify_password("a" * 73, digest) is False

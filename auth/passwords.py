"""
auth/passwords.py -- bcrypt password hashing and verification.

Security design decisions:
  bcrypt is used directly rather than through passlib. passlib's internal
  wrap-bug detection builds a password longer than 72 bytes, which bcrypt 4.x
  rejects with an explicit error. Direct usage has no compatibility shim.

  Every hash_password() call draws a new salt, so the same plaintext never
  produces the same digest twice. The salt and cost factor are embedded in
  the digest, which is all verify_password() needs.

  bcrypt.checkpw() compares digests in constant time.

  _DUMMY_HASH enables timing equalization at login: when the identity does
  not exist the service still pays for one bcrypt verification, so response
  time does not reveal which phone numbers are registered.

Layer rule: no imports from api/, inventory/, or services/. Import from core/
is allowed.
"""

from __future__ import annotations

import logging

import bcrypt

from core.config import get_settings
from core.errors import HashingError

logger = logging.getLogger("teashop.auth")

_settings = get_settings()

# bcrypt ignores (4.x) or rejects (5.x) everything past this many bytes.
# api/models.py validates request bodies against the same limit.
MAX_PASSWORD_BYTES = 72


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Raises HashingError if bcrypt fails (oversized input, exhausted entropy
    source). A failure here is never a verification result.
    """
    try:
        salt = bcrypt.gensalt(rounds=_settings.bcrypt_rounds)
        return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")
    except (ValueError, TypeError, OSError) as exc:
        logger.error("Password hashing failed: %s", exc.__class__.__name__)
        raise HashingError("Password could not be hashed.") from exc


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A malformed or empty hash is treated as a mismatch, not an error. So is a
    plaintext over MAX_PASSWORD_BYTES: no stored hash was made from one, and
    bcrypt would otherwise compare only its first 72 bytes.
    """
    encoded = plain.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("teashop_timing_dummy")


def equalize_timing(plain: str) -> None:
    """Spend one bcrypt verification without a real account to check against."""
    verify_password(plain, _DUMMY_HASH)

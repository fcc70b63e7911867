"""
core/errors.py -- Domain error taxonomy for Teashop.

Every failure a caller is expected to handle has a class here. Stores and the
auth helpers raise these; the service layer translates store-level errors into
caller-level ones; the API layer maps caller-level errors to HTTP responses.

  ConfigurationError   fatal, raised at startup only
  HashingError         password hashing library failed (not a mismatch)
  DuplicateIdentity    store-level unique constraint on identity_key fired
  AlreadyExists        signup conflict, as seen by the caller
  InvalidCredentials   login failed (unknown identity OR wrong password)
  InvalidToken         malformed, tampered, or expired token
  NotFoundOrForbidden  tea or account absent, or not owned by the caller

Messages are deliberately generic. InvalidToken in particular never says
which check failed.

Layer rule: core/ is the kernel. No imports from other project packages.
"""


class TeashopError(Exception):
    """Base class for every expected Teashop failure."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__doc__ or self.__class__.__name__)
        self.message = str(self)


class ConfigurationError(TeashopError):
    """The application configuration is missing or invalid."""


class HashingError(TeashopError):
    """The password could not be hashed."""


class DuplicateIdentity(TeashopError):
    """An account with this identity key already exists in the store."""


class AlreadyExists(TeashopError):
    """User already exists."""


class InvalidCredentials(TeashopError):
    """Invalid credentials."""


class InvalidToken(TeashopError):
    """Invalid token."""


class NotFoundOrForbidden(TeashopError):
    """Not found."""

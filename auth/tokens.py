"""
auth/tokens.py -- Signed access tokens (issue and verify).

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       the durable account id, the display id, and an absolute expiry. Nothing
       is stored server-side -- a token is valid exactly when its signature
       checks out and its expiry has not been reached.

  Expiry: python-jose's own exp check accepts a token at the exact expiry
       second. We disable it and compare against our own clock instead, so
       that now >= exp is expired. Callers may pass `now` to pin the clock.

  Failures: every rejection raises the same InvalidToken with the same
       message. The reason (malformed, bad signature, bad claims, expired) is
       logged here and nowhere else, so clients cannot probe which check a
       forged token tripped.

  SECRET_KEY: sourced from core.config.get_settings() at module load. A
       missing key outside debug mode raises ConfigurationError during import,
       i.e. at application startup.

Layer rule: no imports from api/, inventory/, or services/. Import from core/
is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from auth.models import IssuedToken, Principal
from core.config import get_settings
from core.errors import InvalidToken

logger = logging.getLogger("teashop.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Issue
# ---------------------------------------------------------------------------


def create_access_token(
    account_id: int,
    display_id: int | None = None,
    expire_seconds: int = 0,
    *,
    now: datetime | None = None,
) -> IssuedToken:
    """Encode a signed JWT for an account.

    Args:
        account_id:     Durable account id; becomes the principal on verify.
        display_id:     Optional 5-digit display id carried for convenience.
        expire_seconds: Token lifetime. If 0 (default), uses
                        Settings.token_expire_seconds.
        now:            Issue instant. Defaults to the current UTC time.

    Timestamps are whole seconds (JWT NumericDate); the issue instant is
    truncated so that expires_at is exactly the signed exp claim.
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    issued_at = int((now or _utcnow()).timestamp())
    expires_at = issued_at + duration
    payload: dict = {
        "sub": str(account_id),
        "account_id": account_id,
        "iat": issued_at,
        "exp": expires_at,
    }
    if display_id is not None:
        payload["display_id"] = display_id
    token = jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)
    return IssuedToken(
        token=token,
        account_id=account_id,
        display_id=display_id,
        expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        expires_in=duration,
    )


# ---------------------------------------------------------------------------
# Verify
# ---------------------------------------------------------------------------


def decode_access_token(token: str, *, now: datetime | None = None) -> Principal:
    """Verify a JWT and return the Principal it asserts.

    Raises InvalidToken on malformed encoding, signature mismatch, missing or
    mistyped claims, and expiry (verification at the expiry instant counts as
    expired).
    """
    try:
        payload = jwt.decode(
            token,
            _settings.secret_key,
            algorithms=[_ALGORITHM],
            options={"verify_exp": False},
        )
    except JWTError as exc:
        logger.info("Token rejected: malformed or bad signature (%s)", exc.__class__.__name__)
        raise InvalidToken() from exc

    account_id = payload.get("account_id")
    exp = payload.get("exp")
    display_id = payload.get("display_id")
    # bool is an int subclass; a forged True must not pass as account 1.
    if (
        not isinstance(account_id, int)
        or isinstance(account_id, bool)
        or not isinstance(exp, (int, float))
        or (display_id is not None and not isinstance(display_id, int))
    ):
        logger.info("Token rejected: missing or invalid claims")
        raise InvalidToken()

    current = (now or _utcnow()).timestamp()
    if current >= exp:
        logger.info("Token rejected: expired for account %s", account_id)
        raise InvalidToken()

    return Principal(
        account_id=account_id,
        display_id=display_id,
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
    )


def remaining_lifetime(principal: Principal, *, now: datetime | None = None) -> timedelta:
    """Return how long the principal's token stays valid (never negative)."""
    delta = principal.expires_at - (now or _utcnow())
    return max(delta, timedelta(0))

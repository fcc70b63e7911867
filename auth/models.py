"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in inventory/models.py -- dataclasses own domain shape; stores, token helpers
and the service do the work.

Layer rule: no imports from api/, inventory/, or services/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Account:
    """A registered identity.

    identity_key is the phone number the account signed up with. The store
    enforces at most one account per identity_key.

    display_id is a random 5-digit number shown to the user in place of the
    durable id. It is NOT unique -- two accounts may share one -- so nothing
    authorizes or looks up by it. Ownership and tokens always use id.

    credential_hash is the bcrypt digest. It must never be logged or returned
    by an API response.
    """

    identity_key: str
    credential_hash: str
    display_id: int
    id: int | None = None  # assigned by the store on insert, never reused
    created_at: str = ""  # ISO 8601, set by store on insert


@dataclass(frozen=True)
class Principal:
    """The authenticated identity behind a request.

    Built only by auth.tokens.decode_access_token() from a verified token and
    handed to route handlers explicitly by the auth dependency chain.
    """

    account_id: int
    expires_at: datetime
    display_id: int | None = None


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed access token plus the claims it was signed with."""

    token: str
    account_id: int
    display_id: int | None
    expires_at: datetime
    expires_in: int  # seconds from issue to expiry

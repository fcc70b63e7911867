"""
auth/dependencies.py -- FastAPI Depends() chain that authenticates a request.

The gate is two dependency steps. Each either hands a typed value to the next
step or short-circuits the request with HTTP 401:

  bearer_token()           Authorization header -> raw token string
  get_current_principal()  raw token            -> verified Principal

Handlers receive the Principal as an ordinary parameter:

    @router.get("/teas")
    def list_teas(principal: Principal = Depends(get_current_principal)): ...

Nothing is attached to the request object and no store is read or written:
tokens are self-contained, so verification needs only the signing key.

Every rejection carries the same body and a WWW-Authenticate: Bearer header.
Why a token was rejected is logged by auth/tokens.py, not returned.

Layer rule: no imports from api/, inventory/, or services/.
  auth/dependencies.py may import from fastapi (for Depends/HTTPException/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from auth.models import Principal
from auth.tokens import decode_access_token
from core.errors import InvalidToken


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=401,
        detail={"code": "unauthorized", "message": "Authentication required."},
        headers={"WWW-Authenticate": "Bearer"},
    )


def bearer_token(request: Request) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    Raises HTTP 401 before any verification is attempted when the header is
    missing, uses another scheme, or has no credentials after the scheme.
    The scheme name is matched case-insensitively.
    """
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    credentials = credentials.strip()
    if scheme.lower() != "bearer" or not credentials:
        raise _unauthorized()
    return credentials


def get_current_principal(token: str = Depends(bearer_token)) -> Principal:
    """Require a valid access token. Raises HTTP 401 on any verification failure."""
    try:
        return decode_access_token(token)
    except InvalidToken as exc:
        raise _unauthorized() from exc

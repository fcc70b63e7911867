"""
api/routes/v1/auth.py -- Account REST endpoints.

Routes:
  POST /api/v1/auth/signup   -- register a phone number + password; 201
  POST /api/v1/auth/login    -- exchange credentials for a bearer token
  GET  /api/v1/auth/me       -- caller's account and display id (requires auth)

Security:
  Signup conflicts answer 400 already_exists, including the case where a
  concurrent signup for the same phone number won the race.
  Login answers the same 401 invalid_credentials for an unknown phone number
  and a wrong password. TeashopService.login() equalizes timing between the
  two -- never inline the store lookup here.
  Cache-Control: no-store on signup and login responses.

Handlers are sync (def, not async def): bcrypt is CPU-bound and FastAPI runs
sync handlers in its threadpool, keeping the event loop free.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from api.models import ErrorDetail, LoginRequest, LoginResponse, MeResponse, SignupRequest, SignupResponse
from auth.dependencies import get_current_principal
from auth.models import Principal
from auth.tokens import remaining_lifetime
from core.errors import AlreadyExists, InvalidCredentials, NotFoundOrForbidden
from services.teashop import TeashopService

# Auth policy:
# - POST /api/v1/auth/signup: public
# - POST /api/v1/auth/login:  public
# - GET  /api/v1/auth/me:     requires auth (get_current_principal)
router = APIRouter()


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/auth/signup", response_model=SignupResponse, status_code=201)
def signup(request: Request, body: SignupRequest) -> JSONResponse:
    """Register a new account.

    The response confirms registration and shows the 5-digit display id. It
    does not log the caller in -- POST /auth/login issues the token.
    """
    service: TeashopService = request.app.state.service
    try:
        account = service.signup(body.phone, body.password)
    except AlreadyExists as exc:
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(code="already_exists", message="User already exists.").model_dump(),
            headers={"Cache-Control": "no-store"},
        ) from exc

    resp = JSONResponse(
        status_code=201,
        content=SignupResponse(display_id=account.display_id).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/auth/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with phone and password; return a bearer token."""
    service: TeashopService = request.app.state.service
    try:
        issued = service.login(body.phone, body.password)
    except InvalidCredentials as exc:
        raise HTTPException(
            status_code=401,
            detail=ErrorDetail(code="invalid_credentials", message="Invalid credentials.").model_dump(),
            headers={"Cache-Control": "no-store"},
        ) from exc

    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            token=issued.token,
            token_type="bearer",  # noqa: S106 -- OAuth token type, not a password
            expires_in=issued.expires_in,
            display_id=issued.display_id,
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get("/auth/me", response_model=MeResponse)
def me(request: Request, principal: Principal = Depends(get_current_principal)) -> MeResponse:
    """Return the caller's account identity and display id."""
    service: TeashopService = request.app.state.service
    try:
        account = service.get_account(principal)
    except NotFoundOrForbidden as exc:
        raise HTTPException(
            status_code=404,
            detail=ErrorDetail(code="account_not_found", message="User not found.").model_dump(),
        ) from exc
    lifetime = int(remaining_lifetime(principal).total_seconds())
    return MeResponse.from_account(account, token_expires_in=lifetime)

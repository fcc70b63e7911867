"""
api/routes/v1/teas.py -- Tea inventory routes for the Teashop REST API.

Routes (all require a bearer token):
  POST   /teas            -- create a tea owned by the caller; 201
  GET    /teas            -- list the caller's teas
  GET    /teas/{tea_id}   -- one of the caller's teas
  PUT    /teas/{tea_id}   -- replace name and price of one of the caller's teas
  DELETE /teas/{tea_id}   -- delete one of the caller's teas; returns the record

Ownership:
  The owner is always the authenticated principal. No request body or query
  parameter can name an owner. A tea owned by another account answers the
  same 404 tea_not_found as a tea that never existed.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import ErrorDetail, TeaDeletedResponse, TeaResponse, TeaWrite
from auth.dependencies import get_current_principal
from auth.models import Principal
from core.errors import NotFoundOrForbidden
from services.teashop import TeashopService

router = APIRouter()


def _not_found() -> HTTPException:
    # No id in the message: the body must not differ between "missing" and
    # "owned by someone else".
    return HTTPException(
        status_code=404,
        detail=ErrorDetail(code="tea_not_found", message="Tea not found.").model_dump(),
    )


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------


@router.post("/teas", response_model=TeaResponse, status_code=201)
def create_tea(
    request: Request,
    body: TeaWrite,
    principal: Principal = Depends(get_current_principal),
) -> TeaResponse:
    """Add a tea to the caller's inventory."""
    service: TeashopService = request.app.state.service
    tea = service.create_tea(principal, body.name, body.price)
    return TeaResponse.from_tea(tea)


@router.get("/teas", response_model=list[TeaResponse])
def list_teas(request: Request, principal: Principal = Depends(get_current_principal)) -> list[TeaResponse]:
    service: TeashopService = request.app.state.service
    return [TeaResponse.from_tea(t) for t in service.list_teas(principal)]


# ---------------------------------------------------------------------------
# Item
# ---------------------------------------------------------------------------


@router.get("/teas/{tea_id}", response_model=TeaResponse)
def get_tea(request: Request, tea_id: int, principal: Principal = Depends(get_current_principal)) -> TeaResponse:
    service: TeashopService = request.app.state.service
    try:
        return TeaResponse.from_tea(service.get_tea(principal, tea_id))
    except NotFoundOrForbidden as exc:
        raise _not_found() from exc


@router.put("/teas/{tea_id}", response_model=TeaResponse)
def update_tea(
    request: Request,
    tea_id: int,
    body: TeaWrite,
    principal: Principal = Depends(get_current_principal),
) -> TeaResponse:
    """Replace a tea's name and price. Both fields are required."""
    service: TeashopService = request.app.state.service
    try:
        return TeaResponse.from_tea(service.update_tea(principal, tea_id, body.name, body.price))
    except NotFoundOrForbidden as exc:
        raise _not_found() from exc


@router.delete("/teas/{tea_id}", response_model=TeaDeletedResponse)
def delete_tea(
    request: Request,
    tea_id: int,
    principal: Principal = Depends(get_current_principal),
) -> TeaDeletedResponse:
    """Delete a tea and echo the deleted record for confirmation."""
    service: TeashopService = request.app.state.service
    try:
        tea = service.delete_tea(principal, tea_id)
    except NotFoundOrForbidden as exc:
        raise _not_found() from exc
    return TeaDeletedResponse(deleted_tea=TeaResponse.from_tea(tea))

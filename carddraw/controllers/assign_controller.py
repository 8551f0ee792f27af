# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: card draw endpoints.
Thin HTTP layer, delegates ALL logic to the Allocator.
"""

import random

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from carddraw.core.catalog import RoleCatalog
from carddraw.core.dependencies import get_allocator, get_catalog
from carddraw.schemas.draw import AssignRequest, AssignResponse, ErrorResponse
from carddraw.services.allocator import Allocator
from carddraw.services.errors import (
    AllocationError,
    AlreadyAssigned,
    InvalidInput,
    NoCapacityAvailable,
    NoEligibleRole,
    PersistenceFailure,
)

router = APIRouter(prefix="/api/v1", tags=["Draw"])

ERROR_STATUS: dict[type[AllocationError], int] = {
    InvalidInput: 400,
    NoEligibleRole: 400,
    AlreadyAssigned: 409,
    NoCapacityAvailable: 409,
    PersistenceFailure: 503,
}


@router.post(
    "/assign",
    response_model=AssignResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse},
               503: {"model": ErrorResponse}},
)
def assign(
    payload: AssignRequest,
    allocator: Allocator = Depends(get_allocator),
):
    """Draw a card for a member on a meeting date."""
    try:
        result = allocator.allocate(payload.member, payload.date)
    except AllocationError as e:
        return JSONResponse(
            status_code=ERROR_STATUS.get(type(e), 400),
            content={"detail": e.message, "code": e.code},
        )
    return {
        "assignment": {
            "date": result.assignment.date.isoformat(),
            "member": result.assignment.member,
            "role_id": result.assignment.role_id,
        },
        "role": result.role,
        "is_repeated": result.is_repeated,
    }


@router.get("/cards")
def list_cards(catalog: RoleCatalog = Depends(get_catalog)):
    """List every card in catalog order."""
    return [
        {**role.model_dump(), "capacity": catalog.capacity_for(role.id)}
        for role in catalog.list_roles()
    ]


@router.get("/cards/random")
def random_card(catalog: RoleCatalog = Depends(get_catalog)):
    """Pick any card, without recording anything."""
    return JSONResponse(
        content={"card": random.choice(catalog.list_roles()).model_dump()},
        headers={"Cache-Control": "no-store, max-age=0"},
    )

# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: administrative endpoints (reset, audit).
Thin HTTP layer, delegates ALL logic to HistoryService.
"""

import secrets

from fastapi import APIRouter, Depends, HTTPException

from carddraw.core.config import settings
from carddraw.core.dependencies import get_history_service
from carddraw.schemas.draw import ResetRequest, ResetResponse
from carddraw.services.history_service import HistoryService

router = APIRouter(prefix="/api/v1", tags=["Admin"])


@router.post("/reset", response_model=ResetResponse)
def reset_assignments(
    payload: ResetRequest,
    service: HistoryService = Depends(get_history_service),
):
    """Delete the whole assignment history. Requires the admin password."""
    if not secrets.compare_digest(
        payload.password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8")
    ):
        raise HTTPException(status_code=401, detail="Incorrect password")
    return {"ok": True, "deleted": service.reset_all()}


@router.get("/audit")
def audit_assignments(service: HistoryService = Depends(get_history_service)):
    """Consistency report of the stored history against the static data."""
    return service.audit()

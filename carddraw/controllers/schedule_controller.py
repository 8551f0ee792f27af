# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: schedule and member endpoints.
Thin HTTP layer, delegates ALL logic to ScheduleService / HistoryService.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from carddraw.core.dependencies import get_history_service, get_schedule_service
from carddraw.schemas.draw import AssignmentOut, MemberOut, ScheduleResponse
from carddraw.services.history_service import HistoryService
from carddraw.services.schedule_service import ScheduleService

router = APIRouter(prefix="/api/v1", tags=["Schedule"])


@router.get(
    "/schedule",
    response_model=ScheduleResponse,
    response_model_exclude_none=True,
)
def get_schedule(
    date: str = Query(..., description="Meeting date, YYYY-MM-DD"),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Who does what on a given meeting date."""
    try:
        return service.get_schedule(date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/members", response_model=list[MemberOut])
def list_members(service: HistoryService = Depends(get_history_service)):
    """Roster with each member's allowed cards."""
    return service.list_members()


@router.get("/members/{member}/last", response_model=AssignmentOut)
def get_last_assignment(
    member: str,
    service: HistoryService = Depends(get_history_service),
):
    """Most recent card drawn by a member."""
    last = service.last_for_member(member)
    if last is None:
        raise HTTPException(status_code=404, detail=f"No assignments for '{member}'")
    return {
        "date": last.date.isoformat(),
        "member": last.member,
        "role_id": last.role_id,
    }

# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: per-date schedule view.
Read-side projection of the stored assignments onto fixed display slots.
"""

from typing import Any

from carddraw.core.catalog import RoleCatalog
from carddraw.repositories.assignment_repository import AssignmentRepository
from carddraw.services.dates import parse_calendar_date, weekday_label
from carddraw.services.errors import store_faults

# card id -> slot in the printed schedule
ROLE_TO_SLOT: dict[str, str] = {
    "oracao": "oracao",
    "louvor": "louvor",
    "quebra-gelo": "dinamica",
    "visao": "visao",
    "oferta": "oferta",
    "lanche": "comunhao",
}

FACILITATOR_SLOT = "facilitacao"


class ScheduleService:
    """Builds the meeting schedule for a single date."""

    def __init__(
        self,
        catalog: RoleCatalog,
        assignment_repo: AssignmentRepository,
        facilitator: str,
        meeting_time: str,
    ) -> None:
        self._catalog = catalog
        self._assignments = assignment_repo
        self._facilitator = facilitator
        self._meeting_time = meeting_time

    def get_schedule(self, date: str) -> dict[str, Any]:
        """Raises ValueError when ``date`` is not a calendar date."""
        target = parse_calendar_date(date)
        if target is None:
            raise ValueError("Invalid date format. Use YYYY-MM-DD.")

        multi_role = self._catalog.multi_capacity_role_id
        list_slot = ROLE_TO_SLOT.get(multi_role) if multi_role else None
        list_cap = self._catalog.capacity_for(multi_role) if multi_role else 0

        roles: dict[str, Any] = {FACILITATOR_SLOT: self._facilitator}
        if list_slot:
            roles[list_slot] = []

        with store_faults("Failed to read the schedule."):
            day_assignments = self._assignments.assignments_for_date(target)

        for assignment in day_assignments:
            slot = ROLE_TO_SLOT.get(assignment.role_id)
            if slot is None or slot == FACILITATOR_SLOT:
                continue
            if slot == list_slot:
                if len(roles[slot]) < list_cap:
                    roles[slot].append(assignment.member)
            else:
                roles[slot] = assignment.member

        return {
            "date": target.isoformat(),
            "weekday": weekday_label(target),
            "time": self._meeting_time,
            "roles": roles,
        }

# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: assignment history administration.
Bulk reset, per-member lookups and the data consistency audit.
"""

from typing import Any, Optional

from carddraw.core.catalog import EligibilityRules, RoleCatalog
from carddraw.core.logging import get_logger
from carddraw.metrics.prometheus import RESETS_TOTAL, STORED_ASSIGNMENTS
from carddraw.models.domain import Assignment
from carddraw.repositories.assignment_repository import AssignmentRepository
from carddraw.services.errors import store_faults

logger = get_logger(__name__)


class HistoryService:
    """Business logic over the stored assignment history."""

    def __init__(
        self,
        catalog: RoleCatalog,
        eligibility: EligibilityRules,
        roster: list[str],
        assignment_repo: AssignmentRepository,
    ) -> None:
        self._catalog = catalog
        self._eligibility = eligibility
        self._roster = roster
        self._assignments = assignment_repo

    # ── Commands ──

    def reset_all(self) -> int:
        """Delete every stored assignment. Returns how many were removed."""
        with store_faults("Failed to reset the assignment history."):
            removed = self._assignments.delete_all_assignments()
        RESETS_TOTAL.inc()
        STORED_ASSIGNMENTS.set(0)
        logger.warning("Assignment history reset", extra={"deleted": removed})
        return removed

    # ── Queries ──

    def last_for_member(self, member: str) -> Optional[Assignment]:
        with store_faults("Failed to read assignment history."):
            return self._assignments.last_assignment_for_member(member)

    def list_members(self) -> list[dict[str, Any]]:
        members = []
        for name in self._roster:
            allowed = self._eligibility.allowed_role_ids(name)
            members.append({
                "name": name,
                "restricted": bool(allowed),
                "allowed_cards": [
                    rid for rid in self._catalog.role_ids if not allowed or rid in allowed
                ],
            })
        return members

    def audit(self) -> dict[str, Any]:
        """
        Cross-check the stored history against the static configuration:
        unknown cards or members, per-date capacity overflows, allow-list
        violations and members drawing the same card twice in a row.
        """
        with store_faults("Failed to read assignment history."):
            rows = self._assignments.all_assignments()

        unknown_cards = sorted({a.role_id for a in rows if a.role_id not in self._catalog})
        roster = set(self._roster)
        unknown_members = sorted({a.member for a in rows if a.member not in roster})

        by_slot: dict[tuple[str, str], list[str]] = {}
        for a in rows:
            by_slot.setdefault((a.date.isoformat(), a.role_id), []).append(a.member)
        capacity_overflows = [
            {"date": day, "card_id": role_id, "members": members}
            for (day, role_id), members in sorted(by_slot.items())
            if len(members) > self._catalog.capacity_for(role_id)
        ]

        eligibility_violations = [
            {"date": a.date.isoformat(), "member": a.member, "card_id": a.role_id}
            for a in rows
            if self._eligibility.has_restriction(a.member)
            and a.role_id not in self._eligibility.allowed_role_ids(a.member)
        ]

        by_member: dict[str, list[Assignment]] = {}
        for a in rows:
            by_member.setdefault(a.member, []).append(a)
        repeats: list[dict[str, str]] = []
        for member, history in sorted(by_member.items()):
            history.sort(key=lambda a: a.date)
            for prev, curr in zip(history, history[1:]):
                if prev.role_id == curr.role_id:
                    repeats.append({
                        "member": member,
                        "card_id": curr.role_id,
                        "previous_date": prev.date.isoformat(),
                        "date": curr.date.isoformat(),
                    })

        return {
            "totals": {
                "cards": len(self._catalog),
                "members": len(self._roster),
                "assignments": len(rows),
            },
            "unknown_cards": unknown_cards,
            "unknown_members": unknown_members,
            "capacity_overflows": capacity_overflows,
            "eligibility_violations": eligibility_violations,
            "repeats": repeats,
            "ok": not (unknown_cards or unknown_members
                       or capacity_overflows or eligibility_violations),
        }

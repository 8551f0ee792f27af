# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: card draw allocation.
Picks one eligible card with capacity left on the date, avoiding the card the
member held on the previous occurrence of the meeting when possible.
"""

import datetime as dt
import random
from typing import Any, Callable, Optional, Sequence, TypeVar

from carddraw.core.catalog import EligibilityRules, RoleCatalog
from carddraw.core.logging import get_logger
from carddraw.metrics.prometheus import (
    ALLOCATION_FAILURES,
    ALLOCATIONS_TOTAL,
    FORCED_REPEATS,
    STORED_ASSIGNMENTS,
)
from carddraw.models.domain import AllocationResult, Assignment, Role
from carddraw.repositories.assignment_repository import (
    STORE_ERRORS,
    AssignmentRepository,
    CapacityExhaustedError,
    DuplicateAssignmentError,
)
from carddraw.services.dates import parse_calendar_date, previous_occurrence
from carddraw.services.errors import (
    AllocationError,
    AlreadyAssigned,
    InvalidInput,
    NoCapacityAvailable,
    NoEligibleRole,
    PersistenceFailure,
    store_faults,
)

logger = get_logger(__name__)

T = TypeVar("T")
Chooser = Callable[[Sequence[T]], T]


class Allocator:
    """Business logic for drawing a card for a member on a meeting date."""

    def __init__(
        self,
        catalog: RoleCatalog,
        eligibility: EligibilityRules,
        assignment_repo: AssignmentRepository,
        choose: Chooser = random.choice,
        reference_weekday: Optional[int] = None,
    ) -> None:
        if reference_weekday is not None and not 0 <= reference_weekday <= 6:
            raise ValueError(f"reference_weekday must be in 0..6, got {reference_weekday}")
        self._catalog = catalog
        self._eligibility = eligibility
        self._assignments = assignment_repo
        self._choose = choose
        self._reference_weekday = reference_weekday

    # ── Commands ──

    def allocate(self, member: Any, date: Any) -> AllocationResult:
        """
        Draw a card for ``member`` on ``date`` and persist it.
        Raises an AllocationError subclass when the draw is refused.
        """
        try:
            return self._allocate(member, date)
        except AllocationError as exc:
            ALLOCATION_FAILURES.labels(reason=exc.code).inc()
            if isinstance(exc, PersistenceFailure):
                logger.error(
                    "Draw failed: %s", exc.cause,
                    extra={"member": member, "date": date, "reason": exc.code},
                )
            else:
                logger.info(
                    "Draw refused: %s", exc.message,
                    extra={"member": member, "date": date, "reason": exc.code},
                )
            raise

    # ── Queries ──

    def eligible_roles(self, member: str) -> list[Role]:
        """Catalog cards the member may ever receive, in catalog order."""
        allowed = self._eligibility.allowed_role_ids(member)
        roles = self._catalog.list_roles()
        if allowed:
            roles = [r for r in roles if r.id in allowed]
        return roles

    def available_on_date(
        self, roles: Sequence[Role], day_assignments: Sequence[Assignment]
    ) -> list[Role]:
        """Keep the cards whose per-date capacity is not used up yet."""
        used: dict[str, int] = {}
        for a in day_assignments:
            used[a.role_id] = used.get(a.role_id, 0) + 1
        return [
            r for r in roles
            if used.get(r.id, 0) < self._catalog.capacity_for(r.id)
        ]

    def reference_date(self, target: dt.date) -> dt.date:
        return previous_occurrence(target, self._reference_weekday)

    # ── Internal ──

    def _allocate(self, member: Any, date: Any) -> AllocationResult:
        if member is None or date is None:
            raise InvalidInput("Fields 'member' and 'date' are required.")
        if not isinstance(member, str) or not isinstance(date, str):
            raise InvalidInput("Fields 'member' and 'date' must be strings.")
        member = member.strip()
        if not member or not date.strip():
            raise InvalidInput("Fields 'member' and 'date' are required.")

        target = parse_calendar_date(date)
        if target is None:
            raise InvalidInput("Invalid date format. Use YYYY-MM-DD.")

        if self._read(self._assignments.has_assignment, member, target):
            raise AlreadyAssigned(
                f"'{member}' already has a card for {target.isoformat()}."
            )

        eligible = self.eligible_roles(member)
        if not eligible:
            raise NoEligibleRole(f"No card is available for '{member}'.")

        day_assignments = self._read(self._assignments.assignments_for_date, target)
        available = self.available_on_date(eligible, day_assignments)
        if not available:
            raise NoCapacityAvailable(
                f"No cards left for {target.isoformat()}."
            )

        reference = self.reference_date(target)
        previous = self._read(
            self._assignments.assignment_for_member_and_date, member, reference
        )
        preferred = available
        if previous is not None:
            preferred = [r for r in available if r.id != previous.role_id]

        is_repeated = not preferred
        role = self._choose(available if is_repeated else preferred)

        assignment = self._persist(member, target, role)

        ALLOCATIONS_TOTAL.labels(role=role.id).inc()
        STORED_ASSIGNMENTS.inc()
        if is_repeated:
            FORCED_REPEATS.inc()
            logger.info(
                "Forced repeat of the card held on %s", reference.isoformat(),
                extra={"member": member, "card_id": role.id},
            )
        logger.info(
            "Card drawn from %d candidates", len(available),
            extra={"member": member, "date": target.isoformat(), "card_id": role.id},
        )
        return AllocationResult(assignment=assignment, role=role, is_repeated=is_repeated)

    def _persist(self, member: str, target: dt.date, role: Role) -> Assignment:
        try:
            return self._assignments.insert_assignment(
                member, target, role.id, capacity=self._catalog.capacity_for(role.id)
            )
        except DuplicateAssignmentError as exc:
            raise AlreadyAssigned(
                f"'{member}' already has a card for {target.isoformat()}."
            ) from exc
        except CapacityExhaustedError as exc:
            raise NoCapacityAvailable(
                f"Card '{role.id}' was taken for {target.isoformat()} while drawing."
            ) from exc
        except STORE_ERRORS as exc:
            raise PersistenceFailure("Failed to save the assignment.", cause=exc) from exc

    def _read(self, query: Callable[..., T], *args) -> T:
        with store_faults("Failed to read assignment history."):
            return query(*args)

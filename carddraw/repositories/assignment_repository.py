# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository contract for stored assignments.
Every read the Allocator needs plus the single write it performs.
"""

import datetime as dt
from typing import Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from carddraw.models.domain import Assignment

# Failures of the backing store itself, as opposed to rule violations.
STORE_ERRORS = (SQLAlchemyError, OSError)


class DuplicateAssignmentError(Exception):
    """The (member, date) pair already has an assignment."""

    def __init__(self, member: str, date: dt.date) -> None:
        super().__init__(f"Member '{member}' already has an assignment on {date.isoformat()}")
        self.member = member
        self.date = date


class CapacityExhaustedError(Exception):
    """A conditional insert found the card already full on that date."""

    def __init__(self, role_id: str, date: dt.date, capacity: int) -> None:
        super().__init__(
            f"Card '{role_id}' already has {capacity} assignment(s) on {date.isoformat()}"
        )
        self.role_id = role_id
        self.date = date
        self.capacity = capacity


class AssignmentRepository(Protocol):
    # ── Read ──

    def has_assignment(self, member: str, date: dt.date) -> bool: ...

    def assignments_for_date(self, date: dt.date) -> list[Assignment]: ...

    def last_assignment_for_member(self, member: str) -> Optional[Assignment]: ...

    def assignment_for_member_and_date(
        self, member: str, date: dt.date
    ) -> Optional[Assignment]: ...

    def all_assignments(self) -> list[Assignment]: ...

    def count(self) -> int: ...

    def verify_connection(self) -> None: ...

    # ── Write ──

    def insert_assignment(
        self,
        member: str,
        date: dt.date,
        role_id: str,
        capacity: Optional[int] = None,
    ) -> Assignment: ...

    def delete_all_assignments(self) -> int: ...

# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: in-memory assignment store.
Append-only list guarded by a lock so the uniqueness and capacity checks
run atomically with the insert.
"""

import datetime as dt
import threading
from typing import Optional

from carddraw.models.domain import Assignment
from carddraw.repositories.assignment_repository import (
    CapacityExhaustedError,
    DuplicateAssignmentError,
)


class InMemoryAssignmentRepository:
    """In-memory assignment storage, insertion ordered."""

    def __init__(self) -> None:
        self._rows: list[Assignment] = []
        self._lock = threading.Lock()

    # ── Read ──

    def has_assignment(self, member: str, date: dt.date) -> bool:
        return self._find(member, date) is not None

    def assignments_for_date(self, date: dt.date) -> list[Assignment]:
        return [a for a in self._rows if a.date == date]

    def last_assignment_for_member(self, member: str) -> Optional[Assignment]:
        """Latest date wins; on equal dates the later insert wins."""
        latest: Optional[Assignment] = None
        for row in self._rows:
            if row.member != member:
                continue
            if latest is None or row.date >= latest.date:
                latest = row
        return latest

    def assignment_for_member_and_date(
        self, member: str, date: dt.date
    ) -> Optional[Assignment]:
        return self._find(member, date)

    def all_assignments(self) -> list[Assignment]:
        return list(self._rows)

    def count(self) -> int:
        return len(self._rows)

    def verify_connection(self) -> None:
        return None

    # ── Write ──

    def insert_assignment(
        self,
        member: str,
        date: dt.date,
        role_id: str,
        capacity: Optional[int] = None,
    ) -> Assignment:
        with self._lock:
            if self._find(member, date) is not None:
                raise DuplicateAssignmentError(member, date)
            if capacity is not None:
                used = sum(
                    1 for a in self._rows if a.date == date and a.role_id == role_id
                )
                if used >= capacity:
                    raise CapacityExhaustedError(role_id, date, capacity)
            assignment = Assignment(date=date, member=member, role_id=role_id)
            self._rows.append(assignment)
        return assignment

    def delete_all_assignments(self) -> int:
        with self._lock:
            removed = len(self._rows)
            self._rows.clear()
        return removed

    # ── Internal ──

    def _find(self, member: str, date: dt.date) -> Optional[Assignment]:
        for row in self._rows:
            if row.member == member and row.date == date:
                return row
        return None

# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for assignments stored in a relational database."""
import datetime as dt
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from carddraw.core.logging import get_logger
from carddraw.models.domain import Assignment
from carddraw.repositories.assignment_repository import (
    CapacityExhaustedError,
    DuplicateAssignmentError,
)

logger = get_logger(__name__)

ASSIGNMENT_COLS = "date, member, card_id"


def _row_to_assignment(row) -> Assignment:
    raw_date = row[0]
    if isinstance(raw_date, str):
        raw_date = dt.date.fromisoformat(raw_date)
    elif isinstance(raw_date, dt.datetime):
        raw_date = raw_date.date()
    return Assignment(date=raw_date, member=row[1], role_id=row[2])


class SqlAssignmentRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Write ──────────────────────────────────────────────────────────

    def insert_assignment(self, member: str, date: dt.date, role_id: str,
                          capacity: Optional[int] = None) -> Assignment:
        """Insert one row. With ``capacity`` the insert only happens while the
        card has fewer than ``capacity`` rows on that date."""
        params = {"date": date.isoformat(), "member": member, "card_id": role_id}
        try:
            with self._engine.begin() as conn:
                if capacity is None:
                    conn.execute(
                        text("""
                            INSERT INTO assignments (date, member, card_id)
                            VALUES (:date, :member, :card_id)
                        """),
                        params,
                    )
                else:
                    # duplicates are reported before capacity, as in memory
                    existing = conn.execute(
                        text("SELECT 1 FROM assignments WHERE member = :member AND date = :date"),
                        params,
                    ).fetchone()
                    if existing is not None:
                        raise DuplicateAssignmentError(member, date)
                    result = conn.execute(
                        text("""
                            INSERT INTO assignments (date, member, card_id)
                            SELECT :date, :member, :card_id
                            WHERE (
                                SELECT COUNT(*) FROM assignments
                                WHERE date = :date AND card_id = :card_id
                            ) < :capacity
                        """),
                        {**params, "capacity": capacity},
                    )
                    if result.rowcount == 0:
                        raise CapacityExhaustedError(role_id, date, capacity)
        except IntegrityError as exc:
            logger.warning("Duplicate assignment rejected by store: member=%s date=%s",
                           member, date.isoformat())
            raise DuplicateAssignmentError(member, date) from exc
        return Assignment(date=date, member=member, role_id=role_id)

    def delete_all_assignments(self) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(text("DELETE FROM assignments"))
        return result.rowcount or 0

    # ── Read ───────────────────────────────────────────────────────────

    def has_assignment(self, member: str, date: dt.date) -> bool:
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT 1 FROM assignments WHERE member = :member AND date = :date"),
                {"member": member, "date": date.isoformat()},
            ).fetchone()
        return row is not None

    def assignments_for_date(self, date: dt.date) -> list[Assignment]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"SELECT {ASSIGNMENT_COLS} FROM assignments WHERE date = :date ORDER BY id"),
                {"date": date.isoformat()},
            ).fetchall()
        return [_row_to_assignment(r) for r in rows]

    def last_assignment_for_member(self, member: str) -> Optional[Assignment]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"""
                    SELECT {ASSIGNMENT_COLS} FROM assignments
                    WHERE member = :member
                    ORDER BY date DESC, id DESC
                    LIMIT 1
                """),
                {"member": member},
            ).fetchone()
        return _row_to_assignment(row) if row else None

    def assignment_for_member_and_date(self, member: str,
                                       date: dt.date) -> Optional[Assignment]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"""
                    SELECT {ASSIGNMENT_COLS} FROM assignments
                    WHERE member = :member AND date = :date
                    ORDER BY id
                    LIMIT 1
                """),
                {"member": member, "date": date.isoformat()},
            ).fetchone()
        return _row_to_assignment(row) if row else None

    def all_assignments(self) -> list[Assignment]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"SELECT {ASSIGNMENT_COLS} FROM assignments ORDER BY id")
            ).fetchall()
        return [_row_to_assignment(r) for r in rows]

    def count(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(text("SELECT COUNT(*) FROM assignments")).scalar() or 0

    def verify_connection(self):
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self):
        self._engine.dispose()

# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: calendar date helpers, pure computation, no side effects.
Works on plain calendar dates only, so results never depend on the host time zone.
"""

import datetime as dt
import re
from typing import Optional

_ISO_DATE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

WEEKDAY_NAMES_PT = ("Seg", "Ter", "Qua", "Qui", "Sex", "Sáb", "Dom")


def parse_calendar_date(value: Optional[str]) -> Optional[dt.date]:
    """
    Normalise a request date to a calendar date.
    Timestamps keep only the part before 'T'. Returns None when the result is
    not a strict YYYY-MM-DD date that exists in the calendar.
    """
    if value is None:
        return None
    candidate = value.strip()
    if "T" in candidate:
        candidate = candidate.split("T", 1)[0]
    if not _ISO_DATE.match(candidate):
        return None
    try:
        return dt.date.fromisoformat(candidate)
    except ValueError:
        return None


def previous_occurrence(target: dt.date, weekday: Optional[int] = None) -> dt.date:
    """
    Most recent date strictly before ``target`` falling on ``weekday``
    (0=Monday .. 6=Sunday, defaulting to the weekday of ``target``).
    """
    wanted = target.weekday() if weekday is None else weekday
    if not 0 <= wanted <= 6:
        raise ValueError(f"weekday must be in 0..6, got {wanted}")
    day = target - dt.timedelta(days=1)
    while day.weekday() != wanted:
        day -= dt.timedelta(days=1)
    return day


def weekday_label(value: dt.date) -> str:
    return WEEKDAY_NAMES_PT[value.weekday()]

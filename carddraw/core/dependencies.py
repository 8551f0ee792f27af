# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection, wires configuration, repositories and services.
Static data is loaded here once; a CatalogError aborts the import and thus startup.
"""

from carddraw.core.catalog import (
    EligibilityRules,
    RoleCatalog,
    load_catalog,
    load_eligibility,
    load_roster,
    parse_reference_weekday,
)
from carddraw.core.config import settings
from carddraw.core.database import engine
from carddraw.repositories.memory_assignment_repository import InMemoryAssignmentRepository
from carddraw.repositories.sql_assignment_repository import SqlAssignmentRepository
from carddraw.services.allocator import Allocator
from carddraw.services.history_service import HistoryService
from carddraw.services.schedule_service import ScheduleService

# ── Static configuration (loaded once) ──
_catalog = load_catalog(
    settings.cards_path,
    multi_capacity_role_id=settings.MULTI_CAPACITY_ROLE_ID,
    multi_capacity=settings.MULTI_CAPACITY,
)
_eligibility = load_eligibility(settings.restrictions_path, _catalog)
_roster = load_roster(settings.members_path)
_reference_weekday = parse_reference_weekday(settings.REFERENCE_WEEKDAY)

# ── Singleton repository instance ──
_assignment_repo = (
    SqlAssignmentRepository(engine) if engine is not None
    else InMemoryAssignmentRepository()
)

# ── Service instances (with injected dependencies) ──
_allocator = Allocator(
    catalog=_catalog,
    eligibility=_eligibility,
    assignment_repo=_assignment_repo,
    reference_weekday=_reference_weekday,
)
_schedule_service = ScheduleService(
    catalog=_catalog,
    assignment_repo=_assignment_repo,
    facilitator=settings.FACILITATOR,
    meeting_time=settings.MEETING_TIME,
)
_history_service = HistoryService(
    catalog=_catalog,
    eligibility=_eligibility,
    roster=_roster,
    assignment_repo=_assignment_repo,
)


# ── FastAPI dependency functions ──
def get_catalog() -> RoleCatalog:
    return _catalog


def get_eligibility() -> EligibilityRules:
    return _eligibility


def get_assignment_repo():
    return _assignment_repo


def get_allocator() -> Allocator:
    return _allocator


def get_schedule_service() -> ScheduleService:
    return _schedule_service


def get_history_service() -> HistoryService:
    return _history_service

# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Allocation failures. Each carries a stable ``code`` for API clients."""
from contextlib import contextmanager
from typing import Iterator, Optional

from carddraw.repositories.assignment_repository import STORE_ERRORS


class AllocationError(Exception):
    """Base class for every reason a draw can be refused."""

    code = "allocation_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(AllocationError):
    code = "invalid_input"


class AlreadyAssigned(AllocationError):
    code = "already_assigned"


class NoEligibleRole(AllocationError):
    """The member's allow-list leaves nothing, whatever the date."""

    code = "no_eligible_role"


class NoCapacityAvailable(AllocationError):
    """Every eligible card is already full on the requested date."""

    code = "no_capacity_available"


class PersistenceFailure(AllocationError):
    code = "persistence_failure"

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


@contextmanager
def store_faults(message: str) -> Iterator[None]:
    """Re-raise failures of the backing store as PersistenceFailure."""
    try:
        yield
    except STORE_ERRORS as exc:
        raise PersistenceFailure(message, cause=exc) from exc

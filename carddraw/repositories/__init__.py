# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package, re-exports the assignment stores."""
from carddraw.repositories.assignment_repository import (
    AssignmentRepository,
    CapacityExhaustedError,
    DuplicateAssignmentError,
)
from carddraw.repositories.memory_assignment_repository import InMemoryAssignmentRepository
from carddraw.repositories.sql_assignment_repository import SqlAssignmentRepository

__all__ = [
    "AssignmentRepository",
    "CapacityExhaustedError",
    "DuplicateAssignmentError",
    "InMemoryAssignmentRepository",
    "SqlAssignmentRepository",
]

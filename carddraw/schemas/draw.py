# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas, API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from carddraw.models.domain import Role


# ── Draw Schemas ──

class AssignRequest(BaseModel):
    # Presence, type and format are checked by the Allocator so that a missing
    # or non-text field is reported like any other invalid input.
    member: Any = Field(default=None, description="Member display name")
    date: Any = Field(
        default=None,
        description="Meeting date, YYYY-MM-DD or an ISO timestamp",
        examples=["2026-03-07"],
    )


class AssignmentOut(BaseModel):
    date: str
    member: str
    role_id: str


class AssignResponse(BaseModel):
    assignment: AssignmentOut
    role: Role
    is_repeated: bool


# ── Schedule Schemas ──

class ScheduleRoles(BaseModel):
    oracao: Optional[str] = None
    louvor: Optional[str] = None
    dinamica: Optional[str] = None
    visao: Optional[str] = None
    oferta: Optional[str] = None
    facilitacao: str
    comunhao: list[str] = Field(default_factory=list)


class ScheduleResponse(BaseModel):
    date: str
    weekday: str
    time: str
    roles: ScheduleRoles


# ── Admin Schemas ──

class ResetRequest(BaseModel):
    password: str = Field(default="", description="Administrator password")


class ResetResponse(BaseModel):
    ok: bool
    deleted: int


class MemberOut(BaseModel):
    name: str
    restricted: bool
    allowed_cards: list[str]


class ErrorResponse(BaseModel):
    detail: str
    code: Optional[str] = None

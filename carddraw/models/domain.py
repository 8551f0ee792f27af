# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models, pure data structures, NO FastAPI dependency.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class Role(BaseModel):
    """A rotating duty card as defined in the static catalog."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique card id")
    title: str = Field(..., min_length=1, description="Display title")
    subtitle: str = Field(default="", description="Optional subtitle")
    image: str = Field(..., min_length=1, description="Image reference, e.g. /cards/oracao.jpg")
    description: str = Field(default="", description="Optional long description")


class Assignment(BaseModel):
    """A member holding a role on a meeting date. Never mutated after creation."""
    model_config = ConfigDict(frozen=True)

    date: dt.date
    member: str = Field(..., min_length=1)
    role_id: str = Field(..., min_length=1)


class AllocationResult(BaseModel):
    """Outcome of a successful draw."""
    model_config = ConfigDict(frozen=True)

    assignment: Assignment
    role: Role
    is_repeated: bool = False

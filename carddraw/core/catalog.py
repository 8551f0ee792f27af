# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Static configuration: role catalog, eligibility rules and member roster.
Loaded once at startup and passed explicitly to the services that need it.
Any structural problem raises CatalogError, which aborts startup.
"""

import json
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from carddraw.core.logging import get_logger
from carddraw.models.domain import Role

logger = get_logger(__name__)

DEFAULT_CAPACITY = 1

_ROLES_ADAPTER = TypeAdapter(list[Role])
_ROSTER_ADAPTER = TypeAdapter(list[str])
_RULES_ADAPTER = TypeAdapter(dict[str, list[str]])


class CatalogError(Exception):
    """Raised when static configuration is missing or structurally invalid."""


class RoleCatalog:
    """Ordered, immutable set of roles plus their per-date capacities."""

    def __init__(
        self,
        roles: Iterable[Role],
        multi_capacity_role_id: Optional[str] = None,
        multi_capacity: int = 3,
    ) -> None:
        self._roles: tuple[Role, ...] = tuple(roles)
        if not self._roles:
            raise CatalogError("Role catalog is empty: at least one card is required")

        self._by_id: dict[str, Role] = {}
        for role in self._roles:
            if role.id in self._by_id:
                raise CatalogError(f"Duplicate card id '{role.id}' in catalog")
            self._by_id[role.id] = role

        if multi_capacity_role_id is not None:
            if multi_capacity_role_id not in self._by_id:
                raise CatalogError(
                    f"Multi-capacity card '{multi_capacity_role_id}' is not in the catalog"
                )
            if multi_capacity < 1:
                raise CatalogError("Multi-capacity must be at least 1")
        self._multi_role_id = multi_capacity_role_id
        self._multi_capacity = multi_capacity

    # ── Read ──

    def list_roles(self) -> list[Role]:
        return list(self._roles)

    def roles_by_id(self) -> dict[str, Role]:
        return dict(self._by_id)

    def get(self, role_id: str) -> Optional[Role]:
        return self._by_id.get(role_id)

    def __contains__(self, role_id: str) -> bool:
        return role_id in self._by_id

    def __len__(self) -> int:
        return len(self._roles)

    @property
    def role_ids(self) -> list[str]:
        return [r.id for r in self._roles]

    @property
    def multi_capacity_role_id(self) -> Optional[str]:
        return self._multi_role_id

    def capacity_for(self, role_id: str) -> int:
        """How many members may hold this role on the same date."""
        if role_id == self._multi_role_id:
            return self._multi_capacity
        return DEFAULT_CAPACITY


class EligibilityRules:
    """Member name -> allow-list of role ids. Absent member means unrestricted."""

    def __init__(
        self,
        rules: Mapping[str, Sequence[str]],
        catalog: Optional[RoleCatalog] = None,
    ) -> None:
        validated: dict[str, tuple[str, ...]] = {}
        for member, role_ids in rules.items():
            if not role_ids:
                raise CatalogError(f"Allow-list for member '{member}' is empty")
            if catalog is not None:
                unknown = [rid for rid in role_ids if rid not in catalog]
                if unknown:
                    raise CatalogError(
                        f"Allow-list for member '{member}' references unknown cards: {unknown}"
                    )
            validated[member] = tuple(dict.fromkeys(role_ids))
        self._rules = validated

    def allowed_role_ids(self, member: str) -> frozenset[str]:
        """Empty set means every catalog role is allowed."""
        return frozenset(self._rules.get(member, ()))

    def has_restriction(self, member: str) -> bool:
        return member in self._rules

    def restricted_members(self) -> list[str]:
        return list(self._rules)


# ── Loaders ──

def parse_reference_weekday(raw: Optional[str]) -> Optional[int]:
    """
    Weekday (0=Monday .. 6=Sunday) used as the reference occurrence.
    Empty means the weekday of each requested date.
    """
    if raw is None or not raw.strip():
        return None
    try:
        weekday = int(raw.strip())
    except ValueError as exc:
        raise CatalogError(f"REFERENCE_WEEKDAY must be an integer 0..6, got {raw!r}") from exc
    if not 0 <= weekday <= 6:
        raise CatalogError(f"REFERENCE_WEEKDAY must be in 0..6, got {weekday}")
    return weekday


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as exc:
        raise CatalogError(f"Configuration file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"{path.name} is not valid JSON: {exc}") from exc


def load_catalog(
    path: Path,
    multi_capacity_role_id: Optional[str] = None,
    multi_capacity: int = 3,
) -> RoleCatalog:
    """Load and validate the card catalog."""
    try:
        roles = _ROLES_ADAPTER.validate_python(_read_json(path))
    except ValidationError as exc:
        logger.error("Invalid card catalog %s: %s", path, exc)
        raise CatalogError(
            f"{path.name} is invalid. Check the format and required fields."
        ) from exc
    catalog = RoleCatalog(roles, multi_capacity_role_id, multi_capacity)
    logger.info("Loaded %d cards from %s", len(catalog), path.name)
    return catalog


def load_eligibility(path: Path, catalog: RoleCatalog) -> EligibilityRules:
    """Load member restrictions; a missing file means nobody is restricted."""
    if not path.exists():
        logger.info("No restrictions file at %s, all members unrestricted", path)
        return EligibilityRules({}, catalog)
    try:
        rules = _RULES_ADAPTER.validate_python(_read_json(path))
    except ValidationError as exc:
        raise CatalogError(f"{path.name} is invalid: {exc}") from exc
    return EligibilityRules(rules, catalog)


def load_roster(path: Path) -> list[str]:
    """Load the member roster as an ordered list of unique, non-empty names."""
    try:
        names = _ROSTER_ADAPTER.validate_python(_read_json(path))
    except ValidationError as exc:
        raise CatalogError(f"{path.name} is invalid: {exc}") from exc
    roster: list[str] = []
    for name in names:
        name = name.strip()
        if not name:
            raise CatalogError(f"{path.name} contains an empty member name")
        if name in roster:
            raise CatalogError(f"{path.name} lists member '{name}' twice")
        roster.append(name)
    return roster

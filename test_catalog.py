# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for static configuration loading and the calendar date helpers.
"""

import datetime as dt
import json

import pytest

from carddraw.core.catalog import (
    CatalogError,
    EligibilityRules,
    RoleCatalog,
    load_catalog,
    load_eligibility,
    load_roster,
    parse_reference_weekday,
)
from carddraw.core.config import settings
from carddraw.models.domain import Role
from carddraw.services.dates import (
    parse_calendar_date,
    previous_occurrence,
    weekday_label,
)


def _card(card_id, **extra):
    data = {"id": card_id, "title": card_id.title(), "image": f"/cards/{card_id}.jpg"}
    data.update(extra)
    return data


def _write(path, payload):
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


# ============================================
# Role catalog
# ============================================
class TestRoleCatalog:
    def test_loads_cards_in_file_order(self, tmp_path):
        path = _write(tmp_path / "cards.json", [_card("b"), _card("a", subtitle="x")])
        catalog = load_catalog(path)
        assert catalog.role_ids == ["b", "a"]
        assert catalog.get("a").subtitle == "x"
        assert catalog.get("b").description == ""

    def test_missing_required_field(self, tmp_path):
        path = _write(tmp_path / "cards.json", [{"id": "a", "title": "A"}])
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_empty_catalog(self, tmp_path):
        path = _write(tmp_path / "cards.json", [])
        with pytest.raises(CatalogError, match="empty"):
            load_catalog(path)

    def test_duplicate_ids(self, tmp_path):
        path = _write(tmp_path / "cards.json", [_card("a"), _card("a")])
        with pytest.raises(CatalogError, match="Duplicate"):
            load_catalog(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "cards.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(CatalogError, match="not valid JSON"):
            load_catalog(path)

    def test_unknown_multi_capacity_role(self, tmp_path):
        path = _write(tmp_path / "cards.json", [_card("a")])
        with pytest.raises(CatalogError, match="Multi-capacity"):
            load_catalog(path, multi_capacity_role_id="lanche")

    def test_multi_capacity_must_be_positive(self):
        with pytest.raises(CatalogError):
            RoleCatalog([Role(**_card("a"))], "a", 0)

    def test_capacity_for(self):
        catalog = RoleCatalog([Role(**_card("a")), Role(**_card("b"))], "b", 3)
        assert catalog.capacity_for("a") == 1
        assert catalog.capacity_for("b") == 3
        assert catalog.multi_capacity_role_id == "b"

    def test_no_multi_capacity_role(self):
        catalog = RoleCatalog([Role(**_card("a"))])
        assert catalog.multi_capacity_role_id is None
        assert catalog.capacity_for("a") == 1

    def test_membership_and_len(self):
        catalog = RoleCatalog([Role(**_card("a")), Role(**_card("b"))])
        assert "a" in catalog
        assert "z" not in catalog
        assert len(catalog) == 2
        assert set(catalog.roles_by_id()) == {"a", "b"}


# ============================================
# Eligibility
# ============================================
class TestEligibility:
    @pytest.fixture
    def catalog(self):
        return RoleCatalog([Role(**_card(c)) for c in ("a", "b", "c")])

    def test_unrestricted_member_gets_empty_set(self, catalog):
        rules = EligibilityRules({"Ana": ["a"]}, catalog)
        assert rules.allowed_role_ids("Bruno") == frozenset()
        assert rules.has_restriction("Bruno") is False

    def test_restricted_member(self, catalog):
        rules = EligibilityRules({"Ana": ["a", "c", "a"]}, catalog)
        assert rules.allowed_role_ids("Ana") == frozenset({"a", "c"})
        assert rules.has_restriction("Ana") is True
        assert rules.restricted_members() == ["Ana"]

    def test_unknown_role_id(self, catalog):
        with pytest.raises(CatalogError, match="unknown cards"):
            EligibilityRules({"Ana": ["a", "zzz"]}, catalog)

    def test_empty_allow_list(self, catalog):
        with pytest.raises(CatalogError, match="empty"):
            EligibilityRules({"Ana": []}, catalog)

    def test_missing_file_means_unrestricted(self, tmp_path, catalog):
        rules = load_eligibility(tmp_path / "restrictions.json", catalog)
        assert rules.restricted_members() == []

    def test_load_from_file(self, tmp_path, catalog):
        path = _write(tmp_path / "restrictions.json", {"Ana Letícia": ["b"]})
        rules = load_eligibility(path, catalog)
        assert rules.allowed_role_ids("Ana Letícia") == frozenset({"b"})

    def test_wrong_shape(self, tmp_path, catalog):
        path = _write(tmp_path / "restrictions.json", ["a", "b"])
        with pytest.raises(CatalogError):
            load_eligibility(path, catalog)


# ============================================
# Roster
# ============================================
class TestRoster:
    def test_names_are_trimmed(self, tmp_path):
        path = _write(tmp_path / "members.json", ["  Ana ", "Bruno"])
        assert load_roster(path) == ["Ana", "Bruno"]

    def test_duplicate_names(self, tmp_path):
        path = _write(tmp_path / "members.json", ["Ana", "Ana "])
        with pytest.raises(CatalogError, match="twice"):
            load_roster(path)

    def test_empty_name(self, tmp_path):
        path = _write(tmp_path / "members.json", ["Ana", "   "])
        with pytest.raises(CatalogError, match="empty"):
            load_roster(path)

    def test_not_a_list_of_strings(self, tmp_path):
        path = _write(tmp_path / "members.json", [{"name": "Ana"}])
        with pytest.raises(CatalogError):
            load_roster(path)


class TestShippedData:
    def test_shipped_files_load(self):
        catalog = load_catalog(
            settings.cards_path,
            settings.MULTI_CAPACITY_ROLE_ID,
            settings.MULTI_CAPACITY,
        )
        rules = load_eligibility(settings.restrictions_path, catalog)
        roster = load_roster(settings.members_path)
        assert "lanche" in catalog
        assert catalog.capacity_for("lanche") == settings.MULTI_CAPACITY
        assert "Hiris" in roster
        assert rules.allowed_role_ids("Hiris") == frozenset({"oracao", "quebra-gelo", "lanche"})
        for member in rules.restricted_members():
            assert member in roster


class TestReferenceWeekday:
    @pytest.mark.parametrize("raw, expected", [(None, None), ("", None), ("  ", None), ("5", 5), (" 0 ", 0), ("6", 6)])
    def test_valid(self, raw, expected):
        assert parse_reference_weekday(raw) == expected

    @pytest.mark.parametrize("raw", ["7", "-1", "sat", "5.0"])
    def test_invalid_aborts_startup(self, raw):
        with pytest.raises(CatalogError, match="REFERENCE_WEEKDAY"):
            parse_reference_weekday(raw)


# ============================================
# Dates
# ============================================
class TestParseCalendarDate:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2026-03-07", dt.date(2026, 3, 7)),
            ("2026-03-07T10:00:00Z", dt.date(2026, 3, 7)),
            ("2026-03-07T23:59:59-03:00", dt.date(2026, 3, 7)),
            (" 2026-03-07 ", dt.date(2026, 3, 7)),
            ("2024-02-29", dt.date(2024, 2, 29)),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_calendar_date(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, "", "07/03/2026", "2026-3-7", "2026-02-30", "2025-02-29", "hello", "2026-13-01", "T"],
    )
    def test_invalid(self, raw):
        assert parse_calendar_date(raw) is None

    def test_non_ascii_digits_rejected(self):
        assert parse_calendar_date("٢٠٢٦-03-07") is None


class TestPreviousOccurrence:
    def test_same_weekday_one_week_back(self):
        assert previous_occurrence(dt.date(2026, 3, 7)) == dt.date(2026, 2, 28)

    def test_crosses_month_boundary(self):
        assert previous_occurrence(dt.date(2026, 3, 3)) == dt.date(2026, 2, 24)

    def test_crosses_year_boundary(self):
        assert previous_occurrence(dt.date(2026, 1, 2)) == dt.date(2025, 12, 26)

    def test_fixed_weekday(self):
        # Wednesday 2026-03-11 -> previous Saturday
        assert previous_occurrence(dt.date(2026, 3, 11), weekday=5) == dt.date(2026, 3, 7)

    def test_fixed_weekday_equal_to_target_goes_back_a_week(self):
        assert previous_occurrence(dt.date(2026, 3, 7), weekday=5) == dt.date(2026, 2, 28)

    def test_invalid_weekday(self):
        with pytest.raises(ValueError):
            previous_occurrence(dt.date(2026, 3, 7), weekday=7)


class TestWeekdayLabel:
    def test_saturday(self):
        assert weekday_label(dt.date(2026, 3, 7)) == "Sáb"

    def test_monday(self):
        assert weekday_label(dt.date(2026, 3, 2)) == "Seg"

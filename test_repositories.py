# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for the assignment stores. Every case runs against the in-memory store
and against the SQL store on an in-memory SQLite database.
"""

import datetime as dt

import pytest
from sqlalchemy.pool import StaticPool

from carddraw.core.database import build_engine, create_schema, is_memory_sqlite
from carddraw.repositories import (
    CapacityExhaustedError,
    DuplicateAssignmentError,
    InMemoryAssignmentRepository,
    SqlAssignmentRepository,
)

D1 = dt.date(2026, 3, 7)
D2 = dt.date(2026, 3, 14)
D3 = dt.date(2026, 3, 21)


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    if request.param == "memory":
        yield InMemoryAssignmentRepository()
        return
    engine = build_engine("sqlite://")
    create_schema(engine)
    yield SqlAssignmentRepository(engine)
    engine.dispose()


# ============================================
# Writes
# ============================================
class TestInsert:
    def test_insert_returns_assignment(self, repo):
        a = repo.insert_assignment("Bruno", D1, "oracao")
        assert a.member == "Bruno"
        assert a.date == D1
        assert a.role_id == "oracao"
        assert repo.count() == 1

    def test_duplicate_member_date_rejected(self, repo):
        repo.insert_assignment("Bruno", D1, "oracao")
        with pytest.raises(DuplicateAssignmentError) as exc_info:
            repo.insert_assignment("Bruno", D1, "louvor")
        assert exc_info.value.member == "Bruno"
        assert exc_info.value.date == D1
        assert repo.count() == 1

    def test_same_member_different_dates(self, repo):
        repo.insert_assignment("Bruno", D1, "oracao")
        repo.insert_assignment("Bruno", D2, "oracao")
        assert repo.count() == 2

    def test_conditional_insert_respects_capacity(self, repo):
        repo.insert_assignment("a", D1, "lanche", capacity=3)
        repo.insert_assignment("b", D1, "lanche", capacity=3)
        repo.insert_assignment("c", D1, "lanche", capacity=3)
        with pytest.raises(CapacityExhaustedError) as exc_info:
            repo.insert_assignment("d", D1, "lanche", capacity=3)
        assert exc_info.value.capacity == 3
        assert repo.count() == 3
        assert not repo.has_assignment("d", D1)

    def test_conditional_insert_single_capacity(self, repo):
        repo.insert_assignment("a", D1, "oracao", capacity=1)
        with pytest.raises(CapacityExhaustedError):
            repo.insert_assignment("b", D1, "oracao", capacity=1)
        repo.insert_assignment("b", D2, "oracao", capacity=1)
        assert repo.count() == 2

    def test_duplicate_wins_over_capacity(self, repo):
        repo.insert_assignment("a", D1, "oracao", capacity=1)
        with pytest.raises(DuplicateAssignmentError):
            repo.insert_assignment("a", D1, "oracao", capacity=1)

    def test_unconditional_insert_ignores_capacity(self, repo):
        repo.insert_assignment("a", D1, "oracao")
        repo.insert_assignment("b", D1, "oracao")
        assert len(repo.assignments_for_date(D1)) == 2

    def test_delete_all(self, repo):
        repo.insert_assignment("a", D1, "oracao")
        repo.insert_assignment("b", D1, "louvor")
        assert repo.delete_all_assignments() == 2
        assert repo.count() == 0
        assert repo.all_assignments() == []

    def test_delete_all_on_empty_store(self, repo):
        assert repo.delete_all_assignments() == 0


# ============================================
# Reads
# ============================================
class TestQueries:
    def test_has_assignment(self, repo):
        repo.insert_assignment("Bruno", D1, "oracao")
        assert repo.has_assignment("Bruno", D1) is True
        assert repo.has_assignment("Bruno", D2) is False
        assert repo.has_assignment("Camila", D1) is False

    def test_assignments_for_date_in_insert_order(self, repo):
        repo.insert_assignment("b", D1, "louvor")
        repo.insert_assignment("x", D2, "oracao")
        repo.insert_assignment("a", D1, "oracao")
        rows = repo.assignments_for_date(D1)
        assert [(r.member, r.role_id) for r in rows] == [("b", "louvor"), ("a", "oracao")]
        assert all(r.date == D1 for r in rows)

    def test_assignments_for_unknown_date(self, repo):
        assert repo.assignments_for_date(D3) == []

    def test_assignment_for_member_and_date(self, repo):
        repo.insert_assignment("Bruno", D1, "oracao")
        repo.insert_assignment("Bruno", D2, "visao")
        found = repo.assignment_for_member_and_date("Bruno", D2)
        assert found.role_id == "visao"
        assert repo.assignment_for_member_and_date("Bruno", D3) is None

    def test_last_assignment_is_latest_date(self, repo):
        repo.insert_assignment("Bruno", D2, "visao")
        repo.insert_assignment("Bruno", D3, "oferta")
        repo.insert_assignment("Bruno", D1, "oracao")
        last = repo.last_assignment_for_member("Bruno")
        assert last.date == D3
        assert last.role_id == "oferta"

    def test_last_assignment_across_years(self, repo):
        repo.insert_assignment("Bruno", dt.date(2026, 1, 3), "oracao")
        repo.insert_assignment("Bruno", dt.date(2025, 12, 27), "louvor")
        assert repo.last_assignment_for_member("Bruno").date == dt.date(2026, 1, 3)

    def test_last_assignment_none(self, repo):
        repo.insert_assignment("Camila", D1, "oracao")
        assert repo.last_assignment_for_member("Bruno") is None

    def test_all_assignments(self, repo):
        repo.insert_assignment("a", D1, "oracao")
        repo.insert_assignment("b", D2, "louvor")
        rows = repo.all_assignments()
        assert [r.member for r in rows] == ["a", "b"]

    def test_unicode_member_names(self, repo):
        repo.insert_assignment("Ana Letícia", D1, "lanche")
        assert repo.has_assignment("Ana Letícia", D1)
        assert repo.last_assignment_for_member("Ana Letícia").role_id == "lanche"

    def test_verify_connection(self, repo):
        repo.verify_connection()


class TestInMemoryTieBreak:
    def test_later_insert_wins_on_equal_dates(self):
        # not reachable through insert_assignment, which enforces uniqueness
        repo = InMemoryAssignmentRepository()
        repo.insert_assignment("Bruno", D1, "oracao")
        repo._rows.append(repo._rows[0].model_copy(update={"role_id": "louvor"}))
        assert repo.last_assignment_for_member("Bruno").role_id == "louvor"


class TestEngine:
    def test_memory_sqlite_shares_one_connection(self):
        engine = build_engine("sqlite://")
        assert isinstance(engine.pool, StaticPool)
        engine.dispose()

    def test_file_sqlite_uses_a_connection_pool(self, tmp_path):
        engine = build_engine(f"sqlite:///{tmp_path / 'draws.db'}")
        try:
            assert not isinstance(engine.pool, StaticPool)
            create_schema(engine)
            repo = SqlAssignmentRepository(engine)
            repo.insert_assignment("Bruno", D1, "oracao", capacity=1)
            with pytest.raises(CapacityExhaustedError):
                repo.insert_assignment("Camila", D1, "oracao", capacity=1)
            assert repo.count() == 1
        finally:
            engine.dispose()

    @pytest.mark.parametrize("url, expected", [
        ("sqlite://", True),
        ("sqlite:///:memory:", True),
        ("sqlite:///draws.db", False),
        ("postgresql://u:p@db/carddraw", False),
    ])
    def test_is_memory_sqlite(self, url, expected):
        assert is_memory_sqlite(url) is expected

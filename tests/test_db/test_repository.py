"""Tests for the SQLite and in-memory reference data repositories."""

from decimal import Decimal

import pytest

from estax.db import reference_data
from estax.db.memory import InMemoryReferenceRepository
from estax.db.repository import SQLiteReferenceRepository
from estax.db.schema import create_schema, seed_reference_data
from estax.exceptions import BracketGapError, NotFoundError, RepositoryError
from estax.models.enums import FilingStatusCode


class TestSchema:
    def test_tables_created(self, db_conn):
        cursor = db_conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        tables = {row[0] for row in cursor.fetchall()}
        assert {
            "tax_year_config",
            "filing_status",
            "standard_deductions",
            "tax_brackets",
            "estimated_tax_calculation",
        } <= tables

    def test_seed_is_idempotent(self, db_conn):
        seed_reference_data(db_conn)
        seed_reference_data(db_conn)
        count = db_conn.execute("SELECT COUNT(*) FROM tax_brackets").fetchone()[0]
        assert count == 2 * 5 * 7

    def test_reopen_existing(self, tmp_path):
        path = tmp_path / "estax.db"
        conn = create_schema(path)
        seed_reference_data(conn)
        conn.close()
        conn = create_schema(path)
        assert SQLiteReferenceRepository(conn).list_tax_years() == [2024, 2025]
        conn.close()

    def test_seed_rejects_malformed_schedule(self, tmp_path, monkeypatch):
        schedule = reference_data.TAX_BRACKETS[2025][FilingStatusCode.SINGLE]
        broken = schedule[:2] + schedule[3:]
        monkeypatch.setitem(reference_data.TAX_BRACKETS[2025], FilingStatusCode.SINGLE, broken)
        conn = create_schema(tmp_path / "broken.db")
        with pytest.raises(BracketGapError):
            seed_reference_data(conn)
        assert conn.execute("SELECT COUNT(*) FROM tax_brackets").fetchone()[0] == 0
        assert conn.execute("SELECT COUNT(*) FROM tax_year_config").fetchone()[0] == 0
        conn.close()


class TestSQLiteReferenceRepository:
    def test_tax_year_config(self, sqlite_repo):
        config = sqlite_repo.get_tax_year_config(2025)
        assert config.ss_wage_max == Decimal("176100")
        assert config.ss_tax_rate == Decimal("0.124")
        assert config.medicare_tax_rate == Decimal("0.029")
        assert config.required_payment_threshold == Decimal("1000")
        assert config.min_se_threshold == Decimal("400")

    def test_2024_wage_max(self, sqlite_repo):
        assert sqlite_repo.get_tax_year_config(2024).ss_wage_max == Decimal("168600")

    def test_list_tax_years(self, sqlite_repo):
        assert sqlite_repo.list_tax_years() == [2024, 2025]

    def test_filing_statuses(self, sqlite_repo):
        codes = [fs.status_code for fs in sqlite_repo.list_filing_statuses()]
        assert set(codes) == set(FilingStatusCode)
        assert len(codes) == 5

    def test_standard_deduction(self, sqlite_repo):
        sd = sqlite_repo.get_standard_deduction(2025, FilingStatusCode.MFJ)
        assert sd.amount == Decimal("30000")

    def test_brackets_sorted_numerically(self, sqlite_repo):
        brackets = sqlite_repo.get_tax_brackets(2025, FilingStatusCode.SINGLE)
        floors = [b.min_income for b in brackets]
        assert floors == sorted(floors)
        assert floors[0] == Decimal("0")
        assert brackets[-1].max_income is None

    def test_missing_year(self, sqlite_repo):
        with pytest.raises(NotFoundError):
            sqlite_repo.get_tax_year_config(2026)
        with pytest.raises(NotFoundError):
            sqlite_repo.get_standard_deduction(2026, FilingStatusCode.SINGLE)
        with pytest.raises(NotFoundError):
            sqlite_repo.get_tax_brackets(2026, FilingStatusCode.SINGLE)

    def test_closed_connection(self, tmp_path):
        conn = create_schema(tmp_path / "closed.db")
        conn.close()
        with pytest.raises(RepositoryError):
            SQLiteReferenceRepository(conn).list_tax_years()


class TestInMemoryReferenceRepository:
    def test_matches_sqlite(self, sqlite_repo, bundled_repo):
        assert bundled_repo.list_tax_years() == sqlite_repo.list_tax_years()
        assert bundled_repo.list_filing_statuses() == sqlite_repo.list_filing_statuses()
        for year in (2024, 2025):
            assert bundled_repo.get_tax_year_config(year) == sqlite_repo.get_tax_year_config(year)
            for status in FilingStatusCode:
                assert bundled_repo.get_standard_deduction(
                    year, status
                ) == sqlite_repo.get_standard_deduction(year, status)
                assert bundled_repo.get_tax_brackets(
                    year, status
                ) == sqlite_repo.get_tax_brackets(year, status)

    def test_empty_repo(self):
        repo = InMemoryReferenceRepository()
        assert repo.list_tax_years() == []
        with pytest.raises(NotFoundError):
            repo.get_tax_year_config(2025)
        with pytest.raises(NotFoundError):
            repo.get_tax_brackets(2025, FilingStatusCode.SINGLE)

    def test_rejects_schedule_with_gap(self, single_brackets_2025):
        broken = single_brackets_2025[:2] + single_brackets_2025[3:]
        with pytest.raises(BracketGapError):
            InMemoryReferenceRepository(brackets=broken)

    def test_rejects_schedule_without_top_bracket(self, single_brackets_2025):
        with pytest.raises(BracketGapError):
            InMemoryReferenceRepository(brackets=single_brackets_2025[:-1])

    def test_accepts_unsorted_valid_schedule(self, single_brackets_2025):
        repo = InMemoryReferenceRepository(brackets=list(reversed(single_brackets_2025)))
        assert repo.get_tax_brackets(2025, FilingStatusCode.SINGLE) == single_brackets_2025

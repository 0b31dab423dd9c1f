"""Tests for saved estimate persistence."""

import uuid
from decimal import Decimal

import pytest

from estax.db.estimates import EstimateRepository, new_estimate_id
from estax.db.schema import create_schema
from estax.exceptions import NotFoundError, RepositoryError
from estax.models.enums import FilingStatusCode
from estax.models.estimate import TaxEstimateInput


@pytest.fixture
def store(db_conn):
    return EstimateRepository(db_conn)


def _compute(orchestrator, **kwargs):
    kwargs.setdefault("tax_year", 2025)
    kwargs.setdefault("filing_status", FilingStatusCode.SINGLE)
    est = TaxEstimateInput(**kwargs)
    return est, orchestrator.compute_estimate(est)


class TestNewEstimateId:
    def test_is_uuid7(self):
        value = uuid.UUID(new_estimate_id())
        assert value.version == 7
        assert value.variant == uuid.RFC_4122

    def test_unique(self):
        assert len({new_estimate_id() for _ in range(100)}) == 100

    def test_time_sortable(self, monkeypatch):
        ticks = iter([1_700_000_000_000_000_000, 1_700_000_000_005_000_000])
        monkeypatch.setattr("estax.db.estimates.time.time_ns", lambda: next(ticks))
        first = new_estimate_id()
        second = new_estimate_id()
        assert first < second


class TestEstimateRepository:
    def test_save_and_get(self, store, orchestrator):
        est, result = _compute(orchestrator, expected_agi=Decimal("60000"))
        estimate_id = store.save(new_estimate_id(), est, result)
        saved_input, saved_result = store.get(estimate_id)
        assert saved_input == est
        assert saved_result == result
        assert saved_result.calculated_total_tax == Decimal("5161.50")

    def test_get_missing(self, store):
        with pytest.raises(NotFoundError):
            store.get("does-not-exist")

    def test_list_ordered_and_filtered(self, store, orchestrator):
        ids = []
        for year in (2025, 2024, 2025):
            est, result = _compute(orchestrator, tax_year=year, expected_agi=Decimal("50000"))
            ids.append(store.save(new_estimate_id(), est, result))

        rows = store.list_estimates()
        assert [r["id"] for r in rows] == sorted(ids)
        assert {r["tax_year"] for r in store.list_estimates(tax_year=2024)} == {2024}
        assert len(store.list_estimates(tax_year=2025)) == 2
        assert store.list_estimates(tax_year=2023) == []

    def test_list_summary_columns(self, store, orchestrator):
        est, result = _compute(orchestrator, expected_agi=Decimal("60000"))
        store.save(new_estimate_id(), est, result)
        row = store.list_estimates()[0]
        assert row["filing_status"] == "S"
        assert Decimal(row["calculated_total_tax"]) == Decimal("5161.50")
        assert Decimal(row["calculated_required_payment"]) == Decimal("5161.50")

    def test_delete(self, store, orchestrator):
        est, result = _compute(orchestrator, expected_agi=Decimal("60000"))
        estimate_id = store.save(new_estimate_id(), est, result)
        store.delete(estimate_id)
        with pytest.raises(NotFoundError):
            store.get(estimate_id)
        with pytest.raises(NotFoundError):
            store.delete(estimate_id)

    def test_update_replaces_input_and_result(self, store, orchestrator):
        est, result = _compute(orchestrator, expected_agi=Decimal("60000"))
        estimate_id = store.save(new_estimate_id(), est, result)

        new_est, new_result = _compute(
            orchestrator,
            filing_status=FilingStatusCode.MFJ,
            expected_agi=Decimal("60000"),
            se_income=Decimal("400"),
        )
        store.update(estimate_id, new_est, new_result)

        saved_input, saved_result = store.get(estimate_id)
        assert saved_input == new_est
        assert saved_result == new_result
        row = store.list_estimates()[0]
        assert row["id"] == estimate_id
        assert row["filing_status"] == "MFJ"
        assert Decimal(row["calculated_se_tax"]) == Decimal("56.52")
        assert row["updated_at"] is not None

    def test_update_missing(self, store, orchestrator):
        est, result = _compute(orchestrator, expected_agi=Decimal("60000"))
        with pytest.raises(NotFoundError):
            store.update("does-not-exist", est, result)
        assert store.list_estimates() == []

    def test_new_rows_have_no_updated_at(self, store, orchestrator):
        est, result = _compute(orchestrator, expected_agi=Decimal("60000"))
        store.save(new_estimate_id(), est, result)
        assert store.list_estimates()[0]["updated_at"] is None


class TestEstimateRepositoryErrors:
    @pytest.fixture
    def closed_store(self, tmp_path):
        conn = create_schema(tmp_path / "closed.db")
        conn.close()
        return EstimateRepository(conn)

    def test_get_on_closed_connection(self, closed_store):
        with pytest.raises(RepositoryError):
            closed_store.get("any-id")

    def test_list_on_closed_connection(self, closed_store):
        with pytest.raises(RepositoryError):
            closed_store.list_estimates()

    def test_delete_on_closed_connection(self, closed_store):
        with pytest.raises(RepositoryError):
            closed_store.delete("any-id")

    def test_save_and_update_on_closed_connection(self, closed_store, orchestrator):
        est, result = _compute(orchestrator, expected_agi=Decimal("60000"))
        with pytest.raises(RepositoryError):
            closed_store.save(new_estimate_id(), est, result)
        with pytest.raises(RepositoryError):
            closed_store.update("any-id", est, result)

    def test_duplicate_id(self, store, orchestrator):
        est, result = _compute(orchestrator, expected_agi=Decimal("60000"))
        estimate_id = store.save(new_estimate_id(), est, result)
        with pytest.raises(RepositoryError):
            store.save(estimate_id, est, result)

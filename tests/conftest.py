"""Shared test fixtures for estax."""

from decimal import Decimal

import pytest

from estax.db.memory import InMemoryReferenceRepository
from estax.db.repository import SQLiteReferenceRepository
from estax.db.schema import create_schema, seed_reference_data
from estax.engines.estimator import EstimateOrchestrator
from estax.models.enums import FilingStatusCode
from estax.models.reference import TaxBracket, TaxYearConfig


@pytest.fixture
def config_2025() -> TaxYearConfig:
    return TaxYearConfig(
        tax_year=2025,
        ss_wage_max=Decimal("176100.00"),
        ss_tax_rate=Decimal("0.124"),
        medicare_tax_rate=Decimal("0.029"),
        se_tax_deductible_percentage=Decimal("0.9235"),
        se_deduction_factor=Decimal("0.50"),
        required_payment_threshold=Decimal("1000.00"),
        min_se_threshold=Decimal("400.00"),
    )


@pytest.fixture
def single_brackets_2025() -> list[TaxBracket]:
    rows = [
        ("0", "11925", "0.10", "0"),
        ("11925", "48475", "0.12", "1192.50"),
        ("48475", "103350", "0.22", "5578.50"),
        ("103350", "197300", "0.24", "17651"),
        ("197300", "250525", "0.32", "40199"),
        ("250525", "626350", "0.35", "57231"),
        ("626350", None, "0.37", "188769.75"),
    ]
    return [
        TaxBracket(
            tax_year=2025,
            filing_status=FilingStatusCode.SINGLE,
            min_income=Decimal(lo),
            max_income=Decimal(hi) if hi is not None else None,
            tax_rate=Decimal(rate),
            base_tax=Decimal(base),
        )
        for lo, hi, rate, base in rows
    ]


@pytest.fixture
def bundled_repo() -> InMemoryReferenceRepository:
    return InMemoryReferenceRepository.from_bundled()


@pytest.fixture
def db_conn(tmp_path):
    conn = create_schema(tmp_path / "test.db")
    seed_reference_data(conn)
    yield conn
    conn.close()


@pytest.fixture
def sqlite_repo(db_conn) -> SQLiteReferenceRepository:
    return SQLiteReferenceRepository(db_conn)


@pytest.fixture
def orchestrator(bundled_repo) -> EstimateOrchestrator:
    return EstimateOrchestrator(bundled_repo)

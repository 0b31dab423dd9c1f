"""Reference data access layer.

ReferenceDataRepository is the only thing the engine depends on. Backends
(SQLite here, in-memory in estax.db.memory) are interchangeable.
"""

import sqlite3
from abc import ABC, abstractmethod
from decimal import Decimal

from estax.exceptions import NotFoundError, RepositoryError
from estax.models.enums import FilingStatusCode
from estax.models.reference import (
    FilingStatus,
    StandardDeduction,
    TaxBracket,
    TaxYearConfig,
)


class ReferenceDataRepository(ABC):
    """Read-only, year-scoped reference data.

    Every lookup raises NotFoundError when the year or filing status is not
    seeded. Implementations never substitute defaults.
    """

    @abstractmethod
    def get_tax_year_config(self, tax_year: int) -> TaxYearConfig: ...

    @abstractmethod
    def list_tax_years(self) -> list[int]: ...

    @abstractmethod
    def list_filing_statuses(self) -> list[FilingStatus]: ...

    @abstractmethod
    def get_standard_deduction(
        self, tax_year: int, filing_status: FilingStatusCode
    ) -> StandardDeduction:
        """The full StandardDeduction record; the deduction itself is `.amount`."""

    @abstractmethod
    def get_tax_brackets(
        self, tax_year: int, filing_status: FilingStatusCode
    ) -> list[TaxBracket]:
        """Brackets sorted ascending by min_income."""


class SQLiteReferenceRepository(ReferenceDataRepository):
    """Reference data stored in the estax SQLite schema."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def _query(self, sql: str, params: tuple = ()) -> list[dict]:
        try:
            cursor = self.conn.execute(sql, params)
        except sqlite3.Error as exc:
            raise RepositoryError(str(exc)) from exc
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    # --- Tax year config ---

    def get_tax_year_config(self, tax_year: int) -> TaxYearConfig:
        rows = self._query(
            "SELECT * FROM tax_year_config WHERE tax_year = ?", (tax_year,)
        )
        if not rows:
            raise NotFoundError("Tax year config", tax_year)
        row = rows[0]
        return TaxYearConfig(
            tax_year=row["tax_year"],
            ss_wage_max=Decimal(row["ss_wage_max"]),
            ss_tax_rate=Decimal(row["ss_tax_rate"]),
            medicare_tax_rate=Decimal(row["medicare_tax_rate"]),
            se_tax_deductible_percentage=Decimal(row["se_tax_deductible_percentage"]),
            se_deduction_factor=Decimal(row["se_deduction_factor"]),
            required_payment_threshold=Decimal(row["required_payment_threshold"]),
            min_se_threshold=Decimal(row["min_se_threshold"]),
        )

    def list_tax_years(self) -> list[int]:
        rows = self._query("SELECT tax_year FROM tax_year_config ORDER BY tax_year")
        return [row["tax_year"] for row in rows]

    # --- Filing status ---

    def list_filing_statuses(self) -> list[FilingStatus]:
        rows = self._query("SELECT * FROM filing_status ORDER BY id")
        return [
            FilingStatus(
                id=row["id"],
                status_code=FilingStatusCode(row["status_code"]),
                status_name=row["status_name"],
            )
            for row in rows
        ]

    # --- Standard deductions ---

    def get_standard_deduction(
        self, tax_year: int, filing_status: FilingStatusCode
    ) -> StandardDeduction:
        rows = self._query(
            """SELECT sd.amount FROM standard_deductions sd
               JOIN filing_status fs ON fs.id = sd.filing_status_id
               WHERE sd.tax_year = ? AND fs.status_code = ?""",
            (tax_year, FilingStatusCode(filing_status).value),
        )
        if not rows:
            raise NotFoundError("Standard deduction", (tax_year, str(filing_status)))
        return StandardDeduction(
            tax_year=tax_year,
            filing_status=filing_status,
            amount=Decimal(rows[0]["amount"]),
        )

    # --- Tax brackets ---

    def get_tax_brackets(
        self, tax_year: int, filing_status: FilingStatusCode
    ) -> list[TaxBracket]:
        rows = self._query(
            """SELECT tb.* FROM tax_brackets tb
               JOIN filing_status fs ON fs.id = tb.filing_status_id
               WHERE tb.tax_year = ? AND fs.status_code = ?""",
            (tax_year, FilingStatusCode(filing_status).value),
        )
        if not rows:
            raise NotFoundError("Tax brackets", (tax_year, str(filing_status)))
        brackets = [
            TaxBracket(
                tax_year=tax_year,
                filing_status=filing_status,
                min_income=Decimal(row["min_income"]),
                max_income=Decimal(row["max_income"]) if row["max_income"] is not None else None,
                tax_rate=Decimal(row["tax_rate"]),
                base_tax=Decimal(row["base_tax"]),
            )
            for row in rows
        ]
        # min_income is stored as TEXT; order numerically
        return sorted(brackets, key=lambda b: b.min_income)

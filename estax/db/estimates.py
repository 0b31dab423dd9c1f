"""Persistence for computed estimates.

Rows are keyed by a caller-supplied id so the same estimate keeps its
identity across backends and export/import.
"""

import os
import sqlite3
import time
from uuid import UUID

from estax.exceptions import NotFoundError, RepositoryError
from estax.models.estimate import TaxEstimateInput, TaxEstimateResult


def new_estimate_id() -> str:
    """Return a time-sortable UUID version 7 string (48-bit ms timestamp + random)."""
    value = (time.time_ns() // 1_000_000) << 80
    value |= int.from_bytes(os.urandom(10), "big")
    value &= ~(0xF << 76)
    value |= 0x7 << 76  # version
    value &= ~(0x3 << 62)
    value |= 0x2 << 62  # RFC 4122 variant
    return str(UUID(int=value))


class EstimateRepository:
    """CRUD operations for saved estimates."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            return self.conn.execute(sql, params)
        except sqlite3.Error as exc:
            raise RepositoryError(str(exc)) from exc

    def _commit(self) -> None:
        try:
            self.conn.commit()
        except sqlite3.Error as exc:
            raise RepositoryError(str(exc)) from exc

    def save(
        self,
        estimate_id: str,
        estimate_input: TaxEstimateInput,
        result: TaxEstimateResult,
    ) -> str:
        """Insert an estimate. Returns the estimate ID."""
        self._execute(
            """INSERT INTO estimated_tax_calculation
               (id, tax_year, filing_status, input_json,
                calculated_se_tax, calculated_total_tax,
                calculated_required_payment, result_json)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                estimate_id,
                estimate_input.tax_year,
                estimate_input.filing_status.value,
                estimate_input.model_dump_json(),
                str(result.calculated_se_tax),
                str(result.calculated_total_tax),
                str(result.calculated_required_payment),
                result.model_dump_json(),
            ),
        )
        self._commit()
        return estimate_id

    def update(
        self,
        estimate_id: str,
        estimate_input: TaxEstimateInput,
        result: TaxEstimateResult,
    ) -> None:
        """Replace a stored estimate's input and result wholesale.

        The result must be freshly computed from estimate_input; stored
        results are never patched field by field.
        """
        cursor = self._execute(
            """UPDATE estimated_tax_calculation
               SET tax_year = ?, filing_status = ?, input_json = ?,
                   calculated_se_tax = ?, calculated_total_tax = ?,
                   calculated_required_payment = ?, result_json = ?,
                   updated_at = datetime('now')
               WHERE id = ?""",
            (
                estimate_input.tax_year,
                estimate_input.filing_status.value,
                estimate_input.model_dump_json(),
                str(result.calculated_se_tax),
                str(result.calculated_total_tax),
                str(result.calculated_required_payment),
                result.model_dump_json(),
                estimate_id,
            ),
        )
        self._commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Estimate", estimate_id)

    def get(self, estimate_id: str) -> tuple[TaxEstimateInput, TaxEstimateResult]:
        row = self._execute(
            "SELECT input_json, result_json FROM estimated_tax_calculation WHERE id = ?",
            (estimate_id,),
        ).fetchone()
        if row is None:
            raise NotFoundError("Estimate", estimate_id)
        return (
            TaxEstimateInput.model_validate_json(row[0]),
            TaxEstimateResult.model_validate_json(row[1]),
        )

    def list_estimates(self, tax_year: int | None = None) -> list[dict]:
        """Summary rows, oldest first, optionally filtered by tax year."""
        query = (
            "SELECT id, tax_year, filing_status, calculated_se_tax, "
            "calculated_total_tax, calculated_required_payment, created_at, updated_at "
            "FROM estimated_tax_calculation"
        )
        params: tuple = ()
        if tax_year is not None:
            query += " WHERE tax_year = ?"
            params = (tax_year,)
        cursor = self._execute(query + " ORDER BY id", params)
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def delete(self, estimate_id: str) -> None:
        cursor = self._execute(
            "DELETE FROM estimated_tax_calculation WHERE id = ?", (estimate_id,)
        )
        self._commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Estimate", estimate_id)

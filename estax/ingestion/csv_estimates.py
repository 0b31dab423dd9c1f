"""CSV import of taxpayer estimate inputs.

Headers are matched by name, so column order does not matter; surrounding
whitespace in headers and cells is ignored. Required columns are tax_year,
filing_status and expected_agi. Every other TaxEstimateInput amount is an
optional column where a blank cell means "not supplied" (None). A blank
expected_deduction selects the standard deduction.

    tax_year,filing_status,expected_agi,expected_deduction,se_income
    2025,S,75000.00,,25000.00
    2025,MFJ,200000.00,29200.00,

Columns not listed here are ignored.
"""

import csv
import io
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

from estax.exceptions import CsvImportError
from estax.models.enums import FilingStatusCode
from estax.models.estimate import TaxEstimateInput

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("tax_year", "filing_status", "expected_agi")

OPTIONAL_AMOUNT_COLUMNS = (
    "expected_deduction",
    "expected_qbi_deduction",
    "expected_amt",
    "expected_credits",
    "expected_other_taxes",
    "expected_refundable_credits",
    "expected_withholding",
    "prior_year_tax",
    "se_income",
    "expected_crp_payments",
    "expected_wages",
)


def _amount(source: str, row_number: int, column: str, value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise CsvImportError(
            source, f"{column} '{value}' is not a valid amount", row_number
        ) from None
    if not amount.is_finite():
        raise CsvImportError(source, f"{column} '{value}' is not a valid amount", row_number)
    return amount


def _convert_row(source: str, row_number: int, row: dict[str, str]) -> TaxEstimateInput:
    for column in REQUIRED_COLUMNS:
        if not row[column]:
            raise CsvImportError(source, f"{column} is required", row_number)

    try:
        tax_year = int(row["tax_year"])
    except ValueError:
        raise CsvImportError(
            source, f"tax_year '{row['tax_year']}' is not a year", row_number
        ) from None

    try:
        filing_status = FilingStatusCode(row["filing_status"])
    except ValueError:
        raise CsvImportError(
            source, f"unrecognised filing status '{row['filing_status']}'", row_number
        ) from None

    amounts = {
        column: _amount(source, row_number, column, row[column])
        for column in OPTIONAL_AMOUNT_COLUMNS
        if row.get(column)
    }
    return TaxEstimateInput(
        tax_year=tax_year,
        filing_status=filing_status,
        expected_agi=_amount(source, row_number, "expected_agi", row["expected_agi"]),
        **amounts,
    )


def load_estimates_from_str(text: str, source: str = "<string>") -> list[TaxEstimateInput]:
    """Parse CSV text into estimate inputs, in file order.

    A header with no data rows (or empty text) yields an empty list. Any bad
    row aborts the whole load with CsvImportError naming the row.
    """
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None:
        return []
    header = [name.strip() for name in header]

    missing = [column for column in REQUIRED_COLUMNS if column not in header]
    if missing:
        raise CsvImportError(source, f"missing required column(s): {', '.join(missing)}")

    estimates: list[TaxEstimateInput] = []
    for row_number, cells in enumerate(reader, start=1):
        if not cells:
            continue
        if len(cells) != len(header):
            raise CsvImportError(
                source,
                f"expected {len(header)} fields, found {len(cells)}",
                row_number,
            )
        row = {name: cell.strip() for name, cell in zip(header, cells)}
        estimates.append(_convert_row(source, row_number, row))

    logger.debug("Loaded %d estimate(s) from %s", len(estimates), source)
    return estimates


def load_estimates(file_path: Path) -> list[TaxEstimateInput]:
    """Read a CSV file from disk and parse it with load_estimates_from_str."""
    try:
        text = Path(file_path).read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise CsvImportError(str(file_path), str(exc)) from exc
    return load_estimates_from_str(text, source=str(file_path))

"""Dict-backed reference repository.

Holds the same records as the SQLite backend without a database, for
embedding and tests.
"""

from estax.db import reference_data
from estax.db.repository import ReferenceDataRepository
from estax.engines.brackets import validate_brackets
from estax.exceptions import NotFoundError
from estax.models.enums import FilingStatusCode
from estax.models.reference import (
    FilingStatus,
    StandardDeduction,
    TaxBracket,
    TaxYearConfig,
)


class InMemoryReferenceRepository(ReferenceDataRepository):
    """Rate schedules are validated on construction."""

    def __init__(
        self,
        configs: list[TaxYearConfig] | None = None,
        filing_statuses: list[FilingStatus] | None = None,
        deductions: list[StandardDeduction] | None = None,
        brackets: list[TaxBracket] | None = None,
    ) -> None:
        self._configs = {c.tax_year: c for c in configs or []}
        self._statuses = sorted(filing_statuses or [], key=lambda s: s.id)
        self._deductions = {(d.tax_year, d.filing_status): d for d in deductions or []}
        self._brackets: dict[tuple[int, FilingStatusCode], list[TaxBracket]] = {}
        for b in brackets or []:
            self._brackets.setdefault((b.tax_year, b.filing_status), []).append(b)
        for schedule in self._brackets.values():
            schedule.sort(key=lambda b: b.min_income)
            validate_brackets(schedule)

    @classmethod
    def from_bundled(cls) -> "InMemoryReferenceRepository":
        """Build a repository holding the bundled reference tables."""
        configs = [
            TaxYearConfig(tax_year=year, **values)
            for year, values in reference_data.TAX_YEAR_CONFIG.items()
        ]
        statuses = [
            FilingStatus(id=fs_id, status_code=code, status_name=name)
            for fs_id, code, name in reference_data.FILING_STATUSES
        ]
        deductions = [
            StandardDeduction(tax_year=year, filing_status=code, amount=amount)
            for year, by_status in reference_data.STANDARD_DEDUCTION.items()
            for code, amount in by_status.items()
        ]
        brackets = [
            TaxBracket(
                tax_year=year,
                filing_status=code,
                min_income=lo,
                max_income=hi,
                tax_rate=rate,
                base_tax=base,
            )
            for year, by_status in reference_data.TAX_BRACKETS.items()
            for code, schedule in by_status.items()
            for lo, hi, rate, base in schedule
        ]
        return cls(configs, statuses, deductions, brackets)

    def get_tax_year_config(self, tax_year: int) -> TaxYearConfig:
        try:
            return self._configs[tax_year]
        except KeyError:
            raise NotFoundError("Tax year config", tax_year) from None

    def list_tax_years(self) -> list[int]:
        return sorted(self._configs)

    def list_filing_statuses(self) -> list[FilingStatus]:
        return list(self._statuses)

    def get_standard_deduction(
        self, tax_year: int, filing_status: FilingStatusCode
    ) -> StandardDeduction:
        try:
            return self._deductions[(tax_year, filing_status)]
        except KeyError:
            raise NotFoundError("Standard deduction", (tax_year, str(filing_status))) from None

    def get_tax_brackets(
        self, tax_year: int, filing_status: FilingStatusCode
    ) -> list[TaxBracket]:
        schedule = self._brackets.get((tax_year, filing_status))
        if not schedule:
            raise NotFoundError("Tax brackets", (tax_year, str(filing_status)))
        return list(schedule)

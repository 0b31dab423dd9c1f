"""Year-scoped reference data records.

One TaxYearConfig per tax year; standard deductions and brackets are keyed by
(tax_year, filing_status). The engine treats all of these as read-only.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from estax.models.enums import FilingStatusCode


class TaxYearConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_year: int
    ss_wage_max: Decimal
    ss_tax_rate: Decimal
    medicare_tax_rate: Decimal
    se_tax_deductible_percentage: Decimal  # net earnings factor, e.g. 0.9235
    se_deduction_factor: Decimal  # deductible share of SE tax, e.g. 0.50
    required_payment_threshold: Decimal
    min_se_threshold: Decimal


class FilingStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    status_code: FilingStatusCode
    status_name: str


class StandardDeduction(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_year: int
    filing_status: FilingStatusCode
    amount: Decimal


class TaxBracket(BaseModel):
    """One row of a tax rate schedule.

    max_income of None marks the unbounded top bracket. base_tax is the
    cumulative tax owed at min_income.
    """

    model_config = ConfigDict(frozen=True)

    tax_year: int
    filing_status: FilingStatusCode
    min_income: Decimal
    max_income: Decimal | None = None
    tax_rate: Decimal
    base_tax: Decimal

    def contains(self, income: Decimal) -> bool:
        if income < self.min_income:
            return False
        return self.max_income is None or income < self.max_income

"""Taxpayer input and computed result models for one 1040-ES calculation."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from estax.models.enums import FilingStatusCode


class TaxEstimateInput(BaseModel):
    """Taxpayer-supplied worksheet inputs.

    Optional amounts are None when not supplied; the engine reads them as zero.
    expected_deduction of None means "use the standard deduction".
    """

    model_config = ConfigDict(frozen=True)

    tax_year: int
    filing_status: FilingStatusCode
    expected_agi: Decimal = Decimal("0")
    expected_deduction: Decimal | None = None
    expected_qbi_deduction: Decimal | None = None
    expected_amt: Decimal | None = None
    expected_credits: Decimal | None = None
    expected_other_taxes: Decimal | None = None
    expected_refundable_credits: Decimal | None = None
    expected_withholding: Decimal | None = None
    prior_year_tax: Decimal | None = None
    # SE worksheet inputs
    se_income: Decimal | None = None
    expected_crp_payments: Decimal | None = None
    expected_wages: Decimal | None = None


class SEWorksheetResult(BaseModel):
    """Line values from the Self-Employment Tax and Deduction Worksheet."""

    model_config = ConfigDict(frozen=True)

    combined_se_income: Decimal
    net_earnings: Decimal = Decimal("0")
    medicare_tax: Decimal = Decimal("0")
    ss_taxable_earnings: Decimal = Decimal("0")
    social_security_tax: Decimal = Decimal("0")
    self_employment_tax: Decimal = Decimal("0")
    se_tax_deduction: Decimal = Decimal("0")
    below_threshold: bool = False


class AssembledTax(BaseModel):
    """Estimated Tax Worksheet lines 1 through 11c."""

    model_config = ConfigDict(frozen=True)

    deduction_used: Decimal
    used_standard_deduction: bool
    taxable_income: Decimal
    ordinary_income_tax: Decimal
    tax_after_credits: Decimal
    total_tax: Decimal


class PaymentDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    required_payment_basis: Decimal
    required_payment: Decimal
    payment_required: bool


class TaxEstimateResult(BaseModel):
    """Computed output of one calculation. Never patched; recompute instead."""

    model_config = ConfigDict(frozen=True)

    tax_year: int
    filing_status: FilingStatusCode
    calculated_se_tax: Decimal
    calculated_total_tax: Decimal
    calculated_required_payment: Decimal
    payment_required: bool
    # Worksheet breakdown
    deduction_used: Decimal
    used_standard_deduction: bool
    taxable_income: Decimal
    ordinary_income_tax: Decimal
    tax_after_credits: Decimal
    se_tax_deduction: Decimal
    required_payment_basis: Decimal
    required_payment_threshold: Decimal
    se_worksheet: SEWorksheetResult = Field(
        default_factory=lambda: SEWorksheetResult(combined_se_income=Decimal("0"))
    )

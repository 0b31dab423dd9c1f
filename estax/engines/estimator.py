"""Estimated tax orchestration.

Loading (fetch reference data) -> Computing (SE worksheet, bracket tax,
assembly, payment decision) -> Done (TaxEstimateResult). Any failure aborts
the whole calculation with a single EngineError; no partial results.
"""

import asyncio
import logging
from dataclasses import dataclass

from estax.db.repository import ReferenceDataRepository
from estax.engines.assembler import EstimateAssembler
from estax.engines.brackets import BracketTaxCalculator
from estax.engines.payment import decide_required_payment
from estax.engines.rounding import ZERO, or_zero
from estax.engines.self_employment import SEWorksheet
from estax.exceptions import InvalidInputError
from estax.models.estimate import TaxEstimateInput, TaxEstimateResult
from estax.models.reference import StandardDeduction, TaxBracket, TaxYearConfig

logger = logging.getLogger(__name__)

# se_income may be a net loss; everything else must be non-negative
NON_NEGATIVE_FIELDS = (
    "expected_agi",
    "expected_deduction",
    "expected_qbi_deduction",
    "expected_amt",
    "expected_credits",
    "expected_other_taxes",
    "expected_refundable_credits",
    "expected_withholding",
    "prior_year_tax",
    "expected_crp_payments",
    "expected_wages",
)


@dataclass(frozen=True)
class ReferenceSnapshot:
    """Everything fetched during the Loading stage for one calculation."""

    config: TaxYearConfig
    standard_deduction: StandardDeduction
    brackets: list[TaxBracket]


def validate_input(estimate_input: TaxEstimateInput) -> None:
    for field in NON_NEGATIVE_FIELDS:
        value = getattr(estimate_input, field)
        if value is not None and value < ZERO:
            raise InvalidInputError(field, f"must be non-negative, got {value}")


class EstimateOrchestrator:
    """Top-level entry point for 1040-ES estimates."""

    def __init__(self, repo: ReferenceDataRepository) -> None:
        self.repo = repo

    def compute_estimate(self, estimate_input: TaxEstimateInput) -> TaxEstimateResult:
        validate_input(estimate_input)
        snapshot = self.load(estimate_input)
        return self.compute(estimate_input, snapshot)

    async def acompute_estimate(
        self, estimate_input: TaxEstimateInput
    ) -> TaxEstimateResult:
        """Awaitable variant; cancelling before Computing starts yields no result."""
        validate_input(estimate_input)
        snapshot = await asyncio.to_thread(self.load, estimate_input)
        return self.compute(estimate_input, snapshot)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def load(self, estimate_input: TaxEstimateInput) -> ReferenceSnapshot:
        year = estimate_input.tax_year
        status = estimate_input.filing_status
        logger.debug("Loading reference data for %s/%s", year, status)

        config = self.repo.get_tax_year_config(year)
        catalog = {fs.status_code for fs in self.repo.list_filing_statuses()}
        if status not in catalog:
            raise InvalidInputError(
                "filing_status", f"'{status}' is not in the filing status catalog"
            )
        standard_deduction = self.repo.get_standard_deduction(year, status)
        brackets = self.repo.get_tax_brackets(year, status)
        return ReferenceSnapshot(
            config=config,
            standard_deduction=standard_deduction,
            brackets=brackets,
        )

    def compute(
        self, estimate_input: TaxEstimateInput, snapshot: ReferenceSnapshot
    ) -> TaxEstimateResult:
        logger.debug(
            "Computing estimate for %s/%s",
            estimate_input.tax_year,
            estimate_input.filing_status,
        )
        config = snapshot.config

        se = SEWorksheet(config).calculate(
            se_income=or_zero(estimate_input.se_income),
            crp_payments=or_zero(estimate_input.expected_crp_payments),
            wages=or_zero(estimate_input.expected_wages),
        )

        assembler = EstimateAssembler(BracketTaxCalculator(snapshot.brackets))
        assembled = assembler.assemble(
            estimate_input,
            standard_deduction=snapshot.standard_deduction.amount,
            se_tax=se.self_employment_tax,
        )

        decision = decide_required_payment(
            total_tax=assembled.total_tax,
            withholding=or_zero(estimate_input.expected_withholding),
            threshold=config.required_payment_threshold,
        )

        result = TaxEstimateResult(
            tax_year=estimate_input.tax_year,
            filing_status=estimate_input.filing_status,
            calculated_se_tax=se.self_employment_tax,
            calculated_total_tax=assembled.total_tax,
            calculated_required_payment=decision.required_payment,
            payment_required=decision.payment_required,
            deduction_used=assembled.deduction_used,
            used_standard_deduction=assembled.used_standard_deduction,
            taxable_income=assembled.taxable_income,
            ordinary_income_tax=assembled.ordinary_income_tax,
            tax_after_credits=assembled.tax_after_credits,
            se_tax_deduction=se.se_tax_deduction,
            required_payment_basis=decision.required_payment_basis,
            required_payment_threshold=config.required_payment_threshold,
            se_worksheet=se,
        )
        logger.debug(
            "Estimate done: total_tax=%s required_payment=%s",
            result.calculated_total_tax,
            result.calculated_required_payment,
        )
        return result


def compute_estimate(
    repo: ReferenceDataRepository, estimate_input: TaxEstimateInput
) -> TaxEstimateResult:
    """Convenience wrapper around EstimateOrchestrator.compute_estimate."""
    return EstimateOrchestrator(repo).compute_estimate(estimate_input)

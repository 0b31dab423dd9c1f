"""Estimated Tax Worksheet assembly (Form 1040-ES, lines 1 through 11c).

Line 1 AGI is taken as entered. On the worksheet it already reflects the
deductible part of SE tax, so that deduction is reported but not subtracted
here again.
"""

from decimal import Decimal

from estax.engines.brackets import BracketTaxCalculator
from estax.engines.rounding import ZERO, or_zero, round_half_up
from estax.models.estimate import AssembledTax, TaxEstimateInput


class EstimateAssembler:
    """Combines deductions, bracket tax, AMT, credits and SE tax into total tax."""

    def __init__(self, bracket_calculator: BracketTaxCalculator) -> None:
        self.bracket_calculator = bracket_calculator

    def assemble(
        self,
        estimate_input: TaxEstimateInput,
        standard_deduction: Decimal,
        se_tax: Decimal,
    ) -> AssembledTax:
        # Lines 2a-2c
        if estimate_input.expected_deduction is None:
            deduction = round_half_up(standard_deduction)
            used_standard = True
        else:
            deduction = round_half_up(estimate_input.expected_deduction)
            used_standard = False
        total_deductions = deduction + round_half_up(
            or_zero(estimate_input.expected_qbi_deduction)
        )

        # Line 3
        taxable_income = max(
            round_half_up(estimate_input.expected_agi) - total_deductions, ZERO
        )

        # Line 4
        ordinary_tax = self.bracket_calculator.compute(taxable_income)

        # Lines 5-8
        before_credits = ordinary_tax + round_half_up(or_zero(estimate_input.expected_amt))
        tax_after_credits = max(
            before_credits - round_half_up(or_zero(estimate_input.expected_credits)),
            ZERO,
        )

        # Lines 9-11c
        total_tax = (
            tax_after_credits
            + se_tax
            + round_half_up(or_zero(estimate_input.expected_other_taxes))
            - round_half_up(or_zero(estimate_input.expected_refundable_credits))
        )

        return AssembledTax(
            deduction_used=deduction,
            used_standard_deduction=used_standard,
            taxable_income=taxable_income,
            ordinary_income_tax=ordinary_tax,
            tax_after_credits=tax_after_credits,
            total_tax=max(total_tax, ZERO),
        )

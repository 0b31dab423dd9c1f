"""Self-Employment Tax and Deduction Worksheet (Form 1040-ES).

Lines:
  1a/1b/2  SE income plus CRP payments
  3        Line 2 x net earnings factor (92.35%)
  4        Medicare tax: Line 3 x 2.9%
  5        Maximum earnings subject to social security tax
  6        Wages subject to social security tax
  7        Line 5 - Line 6 (if zero or less, no SS component)
  8        Smaller of Line 3 or Line 7
  9        Social security tax: Line 8 x 12.4%
  10       SE tax: Line 4 + Line 9
  11       Deductible part of SE tax: Line 10 x 50%

Rates and limits come from the year's TaxYearConfig. Farm/non-farm splitting
and the Additional Medicare Tax are not modeled.
"""

import logging
from decimal import Decimal

from estax.engines.rounding import ZERO, round_half_up
from estax.exceptions import InvalidInputError
from estax.models.estimate import SEWorksheetResult
from estax.models.reference import TaxYearConfig

logger = logging.getLogger(__name__)


class SEWorksheet:
    """Computes self-employment tax and its deductible half."""

    def __init__(self, config: TaxYearConfig) -> None:
        self.config = config
        self._validate_config()

    def calculate(
        self,
        se_income: Decimal,
        crp_payments: Decimal = ZERO,
        wages: Decimal = ZERO,
    ) -> SEWorksheetResult:
        combined = round_half_up(se_income + crp_payments)

        if combined < self.config.min_se_threshold:
            logger.info(
                "SE income %s below threshold %s; no SE tax due",
                combined,
                self.config.min_se_threshold,
            )
            return SEWorksheetResult(combined_se_income=combined, below_threshold=True)

        net_earnings = round_half_up(combined * self.config.se_tax_deductible_percentage)
        medicare_tax = round_half_up(net_earnings * self.config.medicare_tax_rate)

        remaining_ss_base = max(self.config.ss_wage_max - wages, ZERO)
        if remaining_ss_base == ZERO:
            logger.info(
                "Wages %s exhaust the SS wage base %s; Medicare component only",
                wages,
                self.config.ss_wage_max,
            )
        ss_taxable = min(net_earnings, remaining_ss_base)
        social_security_tax = round_half_up(ss_taxable * self.config.ss_tax_rate)

        se_tax = medicare_tax + social_security_tax
        deduction = round_half_up(se_tax * self.config.se_deduction_factor)

        return SEWorksheetResult(
            combined_se_income=combined,
            net_earnings=net_earnings,
            medicare_tax=medicare_tax,
            ss_taxable_earnings=ss_taxable,
            social_security_tax=social_security_tax,
            self_employment_tax=se_tax,
            se_tax_deduction=deduction,
        )

    def _validate_config(self) -> None:
        c = self.config
        fractions = {
            "ss_tax_rate": c.ss_tax_rate,
            "medicare_tax_rate": c.medicare_tax_rate,
            "se_deduction_factor": c.se_deduction_factor,
        }
        for name, value in fractions.items():
            if not ZERO <= value <= Decimal("1"):
                raise InvalidInputError(name, f"must be between 0 and 1, got {value}")
        if not ZERO < c.se_tax_deductible_percentage <= Decimal("1"):
            raise InvalidInputError(
                "se_tax_deductible_percentage",
                f"must be in (0, 1], got {c.se_tax_deductible_percentage}",
            )
        if c.ss_wage_max <= ZERO:
            raise InvalidInputError("ss_wage_max", f"must be positive, got {c.ss_wage_max}")
        if c.min_se_threshold < ZERO:
            raise InvalidInputError(
                "min_se_threshold", f"must be non-negative, got {c.min_se_threshold}"
            )

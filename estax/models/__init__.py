"""Data models for estax."""

from estax.models.enums import FilingStatusCode
from estax.models.estimate import (
    AssembledTax,
    PaymentDecision,
    SEWorksheetResult,
    TaxEstimateInput,
    TaxEstimateResult,
)
from estax.models.reference import (
    FilingStatus,
    StandardDeduction,
    TaxBracket,
    TaxYearConfig,
)

__all__ = [
    "AssembledTax",
    "FilingStatus",
    "FilingStatusCode",
    "PaymentDecision",
    "SEWorksheetResult",
    "StandardDeduction",
    "TaxBracket",
    "TaxEstimateInput",
    "TaxEstimateResult",
    "TaxYearConfig",
]

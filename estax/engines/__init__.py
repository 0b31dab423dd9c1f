"""Tax computation engines."""

from estax.engines.assembler import EstimateAssembler
from estax.engines.brackets import BracketTaxCalculator, validate_brackets
from estax.engines.estimator import EstimateOrchestrator, compute_estimate
from estax.engines.payment import decide_required_payment
from estax.engines.self_employment import SEWorksheet

__all__ = [
    "BracketTaxCalculator",
    "EstimateAssembler",
    "EstimateOrchestrator",
    "SEWorksheet",
    "compute_estimate",
    "decide_required_payment",
    "validate_brackets",
]

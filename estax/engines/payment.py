"""Required estimated payment decision (Form 1040-ES, lines 13 through 14b).

Only the current-year rule is applied: total tax minus withholding, zeroed
when below the year's threshold. The prior-year safe harbor is not modeled.
"""

from decimal import Decimal

from estax.engines.rounding import ZERO, round_half_up
from estax.models.estimate import PaymentDecision


def decide_required_payment(
    total_tax: Decimal,
    withholding: Decimal,
    threshold: Decimal,
) -> PaymentDecision:
    basis = round_half_up(total_tax - withholding)
    if basis < threshold:
        return PaymentDecision(
            required_payment_basis=basis,
            required_payment=ZERO,
            payment_required=False,
        )
    return PaymentDecision(
        required_payment_basis=basis,
        required_payment=basis,
        payment_required=basis > ZERO,
    )

"""Progressive bracket tax using precomputed base_tax schedules.

tax = base_tax + (taxable_income - min_income) x tax_rate, for the single
bracket with min_income <= taxable_income < max_income (or unbounded).
"""

from bisect import bisect_right
from decimal import Decimal
from typing import Sequence

from estax.engines.rounding import ZERO, round_half_up
from estax.exceptions import BracketGapError
from estax.models.reference import TaxBracket


class BracketTaxCalculator:
    """Computes ordinary income tax from a sorted bracket schedule."""

    def __init__(self, brackets: Sequence[TaxBracket]) -> None:
        if not brackets:
            raise BracketGapError(None, "No tax brackets provided")
        self.brackets = list(brackets)
        self._floors = [b.min_income for b in self.brackets]

    def find_bracket(self, taxable_income: Decimal) -> TaxBracket:
        """Binary search for the bracket containing taxable_income."""
        idx = bisect_right(self._floors, taxable_income) - 1
        if idx < 0 or not self.brackets[idx].contains(taxable_income):
            raise BracketGapError(taxable_income)
        return self.brackets[idx]

    def compute(self, taxable_income: Decimal) -> Decimal:
        income = max(taxable_income, ZERO)
        bracket = self.find_bracket(income)
        tax = bracket.base_tax + (income - bracket.min_income) * bracket.tax_rate
        return round_half_up(tax)


def validate_brackets(brackets: Sequence[TaxBracket]) -> None:
    """Check schedule invariants for one (tax_year, filing_status).

    Sorted ascending, starting at zero, contiguous, exactly one unbounded top
    bracket (last), and each base_tax equal to the previous bracket's
    base_tax plus its full width at its rate.
    """
    if not brackets:
        raise BracketGapError(None, "Empty bracket schedule")
    first = brackets[0]
    if first.min_income != ZERO:
        raise BracketGapError(ZERO, f"Schedule starts at {first.min_income}, not 0")

    unbounded = [b for b in brackets if b.max_income is None]
    if len(unbounded) != 1 or brackets[-1].max_income is not None:
        raise BracketGapError(
            None, "Schedule must end in exactly one unbounded top bracket"
        )

    for prev, cur in zip(brackets, brackets[1:]):
        if prev.max_income != cur.min_income:
            raise BracketGapError(
                prev.max_income,
                f"Gap or overlap between {prev.max_income} and {cur.min_income}",
            )
        if cur.min_income <= prev.min_income:
            raise BracketGapError(cur.min_income, "Brackets are not sorted ascending")
        expected = round_half_up(
            prev.base_tax + (cur.min_income - prev.min_income) * prev.tax_rate
        )
        if round_half_up(cur.base_tax) != expected:
            raise BracketGapError(
                cur.min_income,
                f"base_tax {cur.base_tax} at {cur.min_income} inconsistent "
                f"with lower brackets (expected {expected})",
            )

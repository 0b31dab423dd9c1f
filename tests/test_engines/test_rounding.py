"""Tests for cent rounding."""

from decimal import Decimal

from estax.engines.rounding import or_zero, round_half_up


class TestRoundHalfUp:
    def test_below_midpoint(self):
        assert round_half_up(Decimal("123.454")) == Decimal("123.45")

    def test_at_midpoint(self):
        assert round_half_up(Decimal("123.455")) == Decimal("123.46")

    def test_negative_midpoint_away_from_zero(self):
        assert round_half_up(Decimal("-123.455")) == Decimal("-123.46")

    def test_carries_into_whole_dollars(self):
        assert round_half_up(Decimal("999999.999")) == Decimal("1000000.00")

    def test_already_rounded(self):
        assert str(round_half_up(Decimal("45"))) == "45.00"


class TestOrZero:
    def test_none_is_zero(self):
        assert or_zero(None) == Decimal("0")

    def test_value_passes_through(self):
        assert or_zero(Decimal("12.34")) == Decimal("12.34")

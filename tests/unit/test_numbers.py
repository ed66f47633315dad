"""
Unit Tests - Numeric Helpers
"""
from decimal import Decimal

from storefront_analytics.analytics.numbers import percentage, round2, safe_divide


class TestRounding:

    def test_round_half_up(self):
        assert round2(Decimal("2.675")) == 2.68
        assert round2(Decimal("1.005")) == 1.01

    def test_float_input_rounds_on_its_decimal_form(self):
        assert round2(2.675) == 2.68

    def test_none_is_zero(self):
        assert round2(None) == 0.0


class TestRatios:

    def test_zero_denominator(self):
        assert safe_divide(10, 0) == 0
        assert safe_divide(10, None) == 0
        assert percentage(5, 0) == 0.0

    def test_percentage(self):
        assert percentage(1, 3) == 33.33
        assert percentage(5, 50) == 10.0

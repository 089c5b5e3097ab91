#!/usr/bin/env python3
"""Tests for currency conversion helpers."""

from decimal import Decimal

import pytest

from cargo_intake.core.currency import (
    cents_to_dollars_str,
    decimal_to_cents,
    format_cents,
    format_rate,
    parse_dollars_to_cents,
    to_decimal,
)


@pytest.mark.currency
class TestToDecimal:
    def test_float_goes_through_repr(self):
        assert to_decimal(1.8) == Decimal("1.8")
        assert to_decimal(0.1) == Decimal("0.1")

    def test_string_with_thousands_separator(self):
        assert to_decimal(" 1,234.5 ") == Decimal("1234.5")

    def test_int_and_decimal(self):
        assert to_decimal(3) == Decimal(3)
        value = Decimal("0.10")
        assert to_decimal(value) is value

    def test_not_a_number(self):
        with pytest.raises(ValueError, match="Not a number"):
            to_decimal("abc")

    @pytest.mark.parametrize("value", ["nan", "NaN", "Infinity", "-inf", float("nan"), float("inf")])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ValueError, match="finite"):
            to_decimal(value)


@pytest.mark.currency
class TestCentsConversions:
    def test_decimal_to_cents_half_up(self):
        assert decimal_to_cents(Decimal("1349.5")) == 1350
        assert decimal_to_cents(Decimal("1349.4")) == 1349

    def test_cents_to_dollars_str(self):
        assert cents_to_dollars_str(4599) == "45.99"
        assert cents_to_dollars_str(-5000) == "-50.00"
        assert cents_to_dollars_str(7) == "0.07"

    def test_parse_dollars_to_cents(self):
        assert parse_dollars_to_cents("$1,234.56") == 123456
        assert parse_dollars_to_cents("12.345") == 1235
        assert parse_dollars_to_cents("") == 0

    def test_format_cents(self):
        assert format_cents(16200) == "$162.00"

    def test_format_rate(self):
        assert format_rate(Decimal("0.10")) == "10%"
        assert format_rate(Decimal("0.075")) == "7.5%"
        assert format_rate(Decimal("0")) == "0%"

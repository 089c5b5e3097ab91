#!/usr/bin/env python3
"""
Currency Conversion and Handling Utilities

All monetary amounts in the intake system are held as integer cents (USD).
Volumes and rates are fractional, so the only place where non-integer values
meet money is the cents rounding step in this module.

Key Principles:
- Never use floating-point arithmetic for currency calculations
- Convert floats through their string form, so 1.8 means exactly 1.8
- Round half-up to whole cents exactly once per derived amount
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

NumberLike = Union[int, float, str, Decimal]


def to_decimal(value: NumberLike) -> Decimal:
    """
    Convert a number-like value to Decimal without binary float artifacts.

    Args:
        value: int, float, numeric string, or Decimal

    Returns:
        Decimal with the value as written (1.8 -> Decimal("1.8"))

    Raises:
        ValueError: If the value cannot be read as a finite number
    """
    if isinstance(value, Decimal):
        return value
    try:
        if isinstance(value, float):
            result = Decimal(repr(value))
        else:
            result = Decimal(str(value).replace(",", "").strip())
    except InvalidOperation as e:
        raise ValueError(f"Not a number: {value!r}") from e

    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def decimal_to_cents(amount: Decimal) -> int:
    """
    Round a Decimal number of cents to an integer, half-up.

    Example:
        decimal_to_cents(Decimal("1349.5")) -> 1350
    """
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_dollars_str(cents: int) -> str:
    """
    Convert cents to dollar string using pure integer arithmetic.

    Example:
        cents_to_dollars_str(4599) -> "45.99"
        cents_to_dollars_str(-5000) -> "-50.00"
    """
    is_negative = cents < 0
    abs_cents = abs(int(cents))

    dollars = abs_cents // 100
    remainder = abs_cents % 100

    if is_negative:
        return f"-{dollars}.{remainder:02d}"
    return f"{dollars}.{remainder:02d}"


def parse_dollars_to_cents(dollars_str: str) -> int:
    """
    Parse dollar string to cents.

    Examples:
        parse_dollars_to_cents("12.34") -> 1234
        parse_dollars_to_cents("$1,234.56") -> 123456
        parse_dollars_to_cents("-50") -> -5000
        parse_dollars_to_cents("12.345") -> 1235
    """
    clean = dollars_str.replace("$", "").replace(",", "").strip()
    if not clean:
        return 0
    return decimal_to_cents(to_decimal(clean) * 100)


def format_cents(cents: int) -> str:
    """Format cents as dollar string with $ prefix."""
    return f"${cents_to_dollars_str(cents)}"


def format_rate(rate: Decimal) -> str:
    """Format a fractional rate as a percentage string (Decimal("0.1") -> "10%")."""
    percent = (rate * 100).normalize()
    return f"{percent:f}%"

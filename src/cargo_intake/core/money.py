#!/usr/bin/env python3
"""
Money Primitive Type

Immutable currency value wrapper that uses integer cents internally.
Prevents floating-point errors and provides type-safe currency operations.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from .currency import (
    NumberLike,
    cents_to_dollars_str,
    decimal_to_cents,
    parse_dollars_to_cents,
    to_decimal,
)


@dataclass(frozen=True)
class Money:
    """
    Immutable money value in cents (USD).

    Supports both positive (fees) and negative (discounts) amounts.

    Examples:
        >>> base = Money.from_dollars(150)
        >>> str(base)
        '$150.00'

        >>> damage = Money.from_dollars("-50")
        >>> str(base + damage)
        '$100.00'

        >>> Money.from_dollars(100).scale("1.8")
        Money(cents=18000)
    """

    cents: int

    @classmethod
    def from_cents(cls, cents: int) -> "Money":
        """Create Money from cents."""
        return cls(cents=cents)

    @classmethod
    def from_dollars(cls, dollars: NumberLike) -> "Money":
        """
        Parse from a dollar amount.

        Args:
            dollars: String like "$12.34", integer dollars, float or Decimal

        Returns:
            Money object (fractional cents rounded half-up)
        """
        if isinstance(dollars, int):
            return cls(cents=dollars * 100)
        if isinstance(dollars, str):
            return cls(cents=parse_dollars_to_cents(dollars))
        return cls(cents=decimal_to_cents(to_decimal(dollars) * 100))

    @classmethod
    def zero(cls) -> "Money":
        """Zero dollars."""
        return cls(cents=0)

    def to_cents(self) -> int:
        """Get value in cents."""
        return self.cents

    def to_decimal(self) -> Decimal:
        """Get value in dollars as an exact Decimal."""
        return Decimal(self.cents) / 100

    def to_dollars(self) -> str:
        """Get formatted dollar string."""
        return str(self)

    def scale(self, factor: NumberLike) -> "Money":
        """
        Multiply by a fractional factor (volume, rate), rounding half-up to the cent.

        Args:
            factor: Multiplier such as a CBM volume or a discount rate

        Returns:
            New Money object
        """
        return Money(cents=decimal_to_cents(Decimal(self.cents) * to_decimal(factor)))

    def abs(self) -> "Money":
        """Return absolute value of Money."""
        return Money(cents=abs(self.cents))

    def __add__(self, other: "Money") -> "Money":
        """Add two Money objects."""
        return Money(cents=self.cents + other.cents)

    def __sub__(self, other: "Money") -> "Money":
        """Subtract two Money objects."""
        return Money(cents=self.cents - other.cents)

    def __neg__(self) -> "Money":
        return Money(cents=-self.cents)

    def __lt__(self, other: "Money") -> bool:
        return self.cents < other.cents

    def __le__(self, other: "Money") -> bool:
        return self.cents <= other.cents

    def __gt__(self, other: "Money") -> bool:
        return self.cents > other.cents

    def __ge__(self, other: "Money") -> bool:
        return self.cents >= other.cents

    def __str__(self) -> str:
        """Format as dollar string."""
        return f"${cents_to_dollars_str(self.cents)}"

    def __repr__(self) -> str:
        return f"Money(cents={self.cents})"


def sum_money(amounts: Iterable["Money"]) -> "Money":
    """Sum a sequence of Money values (empty sequence -> $0.00)."""
    total = Money.zero()
    for amount in amounts:
        total = total + amount
    return total

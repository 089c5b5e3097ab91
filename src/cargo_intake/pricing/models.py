#!/usr/bin/env python3
"""
Pricing Domain Models

Split-pricing structure for one shipment:

    base_amount            = volume x unit price
    master_discount_amount = base_amount x master discount rate
    auto_total             = base_amount - master_discount_amount
    manual_total           = sum of manual adjustment amounts (signed)
    final_total            = auto_total + manual_total

The auto part is recomputed whenever volume, unit price or the customer's
discount changes. Manual adjustments are only ever added or removed by an
explicit user action.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from ..core.money import Money


class AdjustmentType(Enum):
    """Kinds of manual price adjustment."""

    DAMAGE_DISCOUNT = "damage_discount"
    VIP_DISCOUNT = "vip_discount"
    SPECIAL_FEE = "special_fee"
    PENALTY = "penalty"
    OTHER = "other"


@dataclass(frozen=True)
class ManualAdjustment:
    """
    One manual delta on a shipment price.

    Negative amounts are discounts, positive amounts are fees.
    """

    id: str
    type: AdjustmentType
    amount: Money
    reason: str
    created_by: str
    created_at: datetime

    @classmethod
    def create(
        cls,
        type: AdjustmentType,
        amount: Money,
        reason: str,
        created_by: str = "system",
    ) -> "ManualAdjustment":
        """Create a new adjustment with a fresh id and timestamp."""
        return cls(
            id=f"adj-{uuid.uuid4().hex[:12]}",
            type=type,
            amount=amount,
            reason=reason,
            created_by=created_by,
            created_at=datetime.now(),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ManualAdjustment":
        """Create ManualAdjustment from its stored dict form."""
        return cls(
            id=data["id"],
            type=AdjustmentType(data["type"]),
            amount=Money.from_cents(int(data["amount_cents"])),
            reason=data.get("reason", ""),
            created_by=data.get("created_by", "system"),
            created_at=datetime.fromisoformat(data["created_at"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "type": self.type.value,
            "amount_cents": self.amount.to_cents(),
            "reason": self.reason,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class PriceChange:
    """Audit entry for one changed pricing input."""

    field: str  # "base_volume", "unit_price" or "master_discount_rate"
    old_value: str
    new_value: str
    changed_by: str = "system"
    changed_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "changed_by": self.changed_by,
            "changed_at": self.changed_at.isoformat(),
        }


@dataclass(frozen=True)
class PriceBreakdown:
    """Derived amounts from one pricing calculation."""

    base_amount: Money
    master_discount_amount: Money
    auto_total: Money
    manual_total: Money
    final_total: Money


@dataclass
class PricingLayer:
    """
    Full price derivation for one shipment.

    manual_adjustments is the holder's own list, shared by reference, so a
    recalculated layer carries exactly the adjustments that were held before.
    """

    base_volume: Decimal
    unit_price: Money
    master_discount_rate: Decimal
    master_discount_reason: str | None
    base_amount: Money
    master_discount_amount: Money
    auto_total: Money
    manual_adjustments: list[ManualAdjustment]
    manual_total: Money
    final_total: Money
    price_history: list[PriceChange] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "base_volume": str(self.base_volume),
            "unit_price_cents": self.unit_price.to_cents(),
            "master_discount_rate": str(self.master_discount_rate),
            "master_discount_reason": self.master_discount_reason,
            "base_amount_cents": self.base_amount.to_cents(),
            "master_discount_amount_cents": self.master_discount_amount.to_cents(),
            "auto_total_cents": self.auto_total.to_cents(),
            "manual_adjustments": [a.to_dict() for a in self.manual_adjustments],
            "manual_total_cents": self.manual_total.to_cents(),
            "final_total_cents": self.final_total.to_cents(),
            "price_history": [c.to_dict() for c in self.price_history],
        }


@dataclass(frozen=True)
class PricingUpdate:
    """
    Flat totals written to a shipment record when its price changes.

    discount_amount folds the master discount together with the magnitude of
    the manual adjustments, as the invoice shows a single discount line.
    """

    total_volume: Decimal
    subtotal: Money
    discount_percent: Decimal
    discount_amount: Money
    total_amount: Money

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_volume": str(self.total_volume),
            "subtotal_cents": self.subtotal.to_cents(),
            "discount_percent": str(self.discount_percent),
            "discount_amount_cents": self.discount_amount.to_cents(),
            "total_amount_cents": self.total_amount.to_cents(),
        }

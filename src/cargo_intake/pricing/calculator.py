#!/usr/bin/env python3
"""
Pricing Engine

Pure price calculation plus a small stateful holder for one shipment.

Key invariant: recomputing the price after a volume, unit price or customer
change reuses the exact same manual adjustment list. Adjustments appear or
disappear only through add_adjustment / remove_adjustment.

Every derived amount is rounded half-up to the cent once, so
1.8 CBM x $100 = $180.00 and a 10% discount on it is exactly $18.00.
"""

import logging
from collections.abc import Sequence
from decimal import Decimal

from ..core.currency import NumberLike, format_rate, to_decimal
from ..core.money import Money, sum_money
from ..core.rules import DEFAULT_RULES, IntakeRules
from ..customers.models import Customer
from .models import (
    ManualAdjustment,
    PriceBreakdown,
    PriceChange,
    PricingLayer,
    PricingUpdate,
)

logger = logging.getLogger(__name__)

DEFAULT_UNIT_PRICE = Money.from_dollars(100)


class AdjustmentNotFoundError(KeyError):
    """Raised when removing an adjustment id that isn't held"""

    pass


def calculate_pricing(
    base_volume: NumberLike,
    unit_price: Money,
    master_discount_rate: NumberLike,
    manual_adjustments: Sequence[ManualAdjustment],
) -> PriceBreakdown:
    """
    Derive every price component from its inputs.

    Never filters, clamps or drops an adjustment. Input ranges are the
    caller's concern; any finite input produces a breakdown.

    Args:
        base_volume: Shipment volume in CBM
        unit_price: Price per CBM
        master_discount_rate: Fraction such as Decimal("0.10")
        manual_adjustments: Held adjustments, summed as given

    Returns:
        PriceBreakdown

    Example:
        calculate_pricing(Decimal("1.5"), Money.from_dollars(100), Decimal("0.10"), [])
        -> base $150.00, discount $15.00, auto $135.00, final $135.00
    """
    base_amount = unit_price.scale(base_volume)
    master_discount_amount = base_amount.scale(master_discount_rate)
    auto_total = base_amount - master_discount_amount
    manual_total = sum_money(adjustment.amount for adjustment in manual_adjustments)

    return PriceBreakdown(
        base_amount=base_amount,
        master_discount_amount=master_discount_amount,
        auto_total=auto_total,
        manual_total=manual_total,
        final_total=auto_total + manual_total,
    )


def extract_master_discount(
    customer: Customer | None, rules: IntakeRules = DEFAULT_RULES
) -> tuple[Decimal, str | None]:
    """
    Find the standing discount for a customer.

    An explicit discount_percent above zero wins (its reason is the free-text
    discount_info). Otherwise discount_info is searched, lower-cased, against
    the keyword table; the first entry that matches sets the rate.

    Returns:
        Tuple of (rate, reason); (0, None) when no discount applies
    """
    if customer is None:
        return Decimal(0), None

    if customer.discount_percent is not None and customer.discount_percent > 0:
        return customer.discount_percent / 100, customer.discount_info

    info = (customer.discount_info or "").lower()
    if info:
        for keyword in rules.discount_keywords:
            if keyword.matches(info):
                return keyword.rate, keyword.reason

    return Decimal(0), None


def build_pricing_layer(
    base_volume: NumberLike,
    unit_price: Money,
    customer: Customer | None,
    manual_adjustments: list[ManualAdjustment],
    rules: IntakeRules = DEFAULT_RULES,
    price_history: list[PriceChange] | None = None,
) -> PricingLayer:
    """
    Calculate a full pricing layer for a shipment.

    The given adjustment and history lists are stored by reference.
    """
    rate, reason = extract_master_discount(customer, rules)
    volume = to_decimal(base_volume)
    breakdown = calculate_pricing(volume, unit_price, rate, manual_adjustments)

    return PricingLayer(
        base_volume=volume,
        unit_price=unit_price,
        master_discount_rate=rate,
        master_discount_reason=reason,
        base_amount=breakdown.base_amount,
        master_discount_amount=breakdown.master_discount_amount,
        auto_total=breakdown.auto_total,
        manual_adjustments=manual_adjustments,
        manual_total=breakdown.manual_total,
        final_total=breakdown.final_total,
        price_history=price_history if price_history is not None else [],
    )


def prepare_pricing_update(layer: PricingLayer) -> PricingUpdate:
    """Flatten a pricing layer into the totals stored on a shipment record."""
    return PricingUpdate(
        total_volume=layer.base_volume,
        subtotal=layer.base_amount,
        discount_percent=layer.master_discount_rate * 100,
        discount_amount=layer.master_discount_amount + layer.manual_total.abs(),
        total_amount=layer.final_total,
    )


class ShipmentPricing:
    """
    Live price state for one shipment.

    Holds the customer, volume, unit price and the manual adjustment list.
    Volume, unit price and customer changes recompute the whole layer and
    log a PriceChange; the adjustment list object is never replaced.

    Example:
        >>> pricing = ShipmentPricing(customer, base_volume="1.5")
        >>> pricing.add_adjustment(ManualAdjustment.create(
        ...     AdjustmentType.DAMAGE_DISCOUNT, Money.from_dollars(-50), "Crushed box"))
        >>> pricing.update_volume("1.8").final_total
        Money(cents=11200)
    """

    def __init__(
        self,
        customer: Customer | None,
        base_volume: NumberLike = 0,
        unit_price: Money = DEFAULT_UNIT_PRICE,
        adjustments: list[ManualAdjustment] | None = None,
        rules: IntakeRules = DEFAULT_RULES,
        operator: str = "system",
    ):
        """
        Initialize pricing state.

        Args:
            customer: Linked customer (None for unlinked rows: no discount)
            base_volume: Initial volume in CBM
            unit_price: Price per CBM
            adjustments: Existing adjustments; this list is kept and mutated in place
            rules: Discount keyword table
            operator: Default author for history entries
        """
        self.customer = customer
        self.rules = rules
        self.operator = operator
        self._volume = to_decimal(base_volume)
        self._unit_price = unit_price
        self._adjustments: list[ManualAdjustment] = adjustments if adjustments is not None else []
        self._history: list[PriceChange] = []
        self._layer = self._calculate()

    @property
    def pricing(self) -> PricingLayer:
        """Current pricing layer."""
        return self._layer

    @property
    def adjustments(self) -> list[ManualAdjustment]:
        """The held adjustment list (the same object on every call)."""
        return self._adjustments

    @property
    def history(self) -> list[PriceChange]:
        return self._history

    def update_volume(self, new_volume: NumberLike, changed_by: str | None = None) -> PricingLayer:
        """
        Set a new volume and recompute.

        Manual adjustments are carried through untouched.
        """
        volume = to_decimal(new_volume)
        if volume != self._volume:
            self._record("base_volume", str(self._volume), str(volume), changed_by)
            logger.debug("Volume %s -> %s CBM", self._volume, volume)
            self._volume = volume
        return self.recalculate()

    def update_unit_price(self, unit_price: Money, changed_by: str | None = None) -> PricingLayer:
        """Set a new price per CBM and recompute."""
        if unit_price != self._unit_price:
            self._record("unit_price", str(self._unit_price), str(unit_price), changed_by)
            self._unit_price = unit_price
        return self.recalculate()

    def change_customer(self, customer: Customer | None, changed_by: str | None = None) -> PricingLayer:
        """Link a different customer; the master discount follows the new customer."""
        old_rate, _ = extract_master_discount(self.customer, self.rules)
        new_rate, _ = extract_master_discount(customer, self.rules)
        if new_rate != old_rate:
            self._record("master_discount_rate", format_rate(old_rate), format_rate(new_rate), changed_by)
        self.customer = customer
        return self.recalculate()

    def add_adjustment(self, adjustment: ManualAdjustment) -> PricingLayer:
        """Hold one more adjustment and refresh the totals."""
        self._adjustments.append(adjustment)
        logger.info(
            "Added %s adjustment %s (%s): %s",
            adjustment.type.name,
            adjustment.id,
            adjustment.amount,
            adjustment.reason,
        )
        return self.recalculate()

    def remove_adjustment(self, adjustment_id: str) -> ManualAdjustment:
        """
        Drop one held adjustment.

        Raises:
            AdjustmentNotFoundError: If no held adjustment has this id
        """
        for index, adjustment in enumerate(self._adjustments):
            if adjustment.id == adjustment_id:
                del self._adjustments[index]
                logger.info("Removed adjustment %s (%s)", adjustment_id, adjustment.amount)
                self.recalculate()
                return adjustment

        raise AdjustmentNotFoundError(adjustment_id)

    def recalculate(self) -> PricingLayer:
        """Recompute the layer from the current inputs."""
        self._layer = self._calculate()
        return self._layer

    def to_update_record(self) -> PricingUpdate:
        return prepare_pricing_update(self._layer)

    def _calculate(self) -> PricingLayer:
        return build_pricing_layer(
            self._volume,
            self._unit_price,
            self.customer,
            self._adjustments,
            rules=self.rules,
            price_history=self._history,
        )

    def _record(self, field_name: str, old: str, new: str, changed_by: str | None) -> None:
        self._history.append(
            PriceChange(
                field=field_name,
                old_value=old,
                new_value=new,
                changed_by=changed_by or self.operator,
            )
        )

#!/usr/bin/env python3
"""Tests for the pricing engine and shipment price state."""

from decimal import Decimal

import pytest

from cargo_intake.core.money import Money
from cargo_intake.core.rules import DEFAULT_RULES, DiscountKeyword
from cargo_intake.customers.models import Customer
from cargo_intake.pricing.calculator import (
    AdjustmentNotFoundError,
    ShipmentPricing,
    build_pricing_layer,
    calculate_pricing,
    extract_master_discount,
    prepare_pricing_update,
)
from cargo_intake.pricing.models import AdjustmentType, ManualAdjustment

USD_100 = Money.from_dollars(100)


def damage(amount: int, reason: str = "Crushed box") -> ManualAdjustment:
    return ManualAdjustment.create(AdjustmentType.DAMAGE_DISCOUNT, Money.from_dollars(amount), reason, "admin")


@pytest.mark.pricing
class TestCalculatePricing:
    def test_basic_breakdown(self):
        breakdown = calculate_pricing(Decimal("1.5"), USD_100, Decimal("0.10"), [])

        assert breakdown.base_amount == Money.from_dollars(150)
        assert breakdown.master_discount_amount == Money.from_dollars(15)
        assert breakdown.auto_total == Money.from_dollars(135)
        assert breakdown.manual_total == Money.zero()
        assert breakdown.final_total == Money.from_dollars(135)

    def test_float_inputs(self):
        breakdown = calculate_pricing(1.8, USD_100, 0.1, [])

        assert breakdown.base_amount == Money.from_dollars(180)
        assert breakdown.auto_total == Money.from_dollars(162)

    def test_signed_adjustments_are_summed_as_given(self):
        adjustments = [damage(-50), ManualAdjustment.create(AdjustmentType.SPECIAL_FEE, Money.from_dollars(20), "Stairs")]

        breakdown = calculate_pricing(Decimal("1"), USD_100, Decimal(0), adjustments)

        assert breakdown.manual_total == Money.from_dollars(-30)
        assert breakdown.final_total == Money.from_dollars(70)

    def test_final_total_can_go_negative(self):
        breakdown = calculate_pricing(Decimal("0.1"), USD_100, Decimal(0), [damage(-50)])
        assert breakdown.final_total == Money.from_dollars(-40)

    def test_fractional_cents_round_half_up_once(self):
        breakdown = calculate_pricing("0.333", Money.from_dollars(1), "0.5", [])

        assert breakdown.base_amount == Money.from_cents(33)
        assert breakdown.master_discount_amount == Money.from_cents(17)
        assert breakdown.auto_total == Money.from_cents(16)

    def test_idempotent(self):
        adjustments = [damage(-50)]

        first = calculate_pricing("1.8", USD_100, "0.10", adjustments)
        second = calculate_pricing("1.8", USD_100, "0.10", adjustments)

        assert first == second
        assert len(adjustments) == 1

    def test_invariants_hold(self):
        for volume in ("0", "0.333", "1.5", "12.75"):
            for rate in ("0", "0.05", "0.15"):
                b = calculate_pricing(volume, Money.from_cents(9999), rate, [damage(-7)])
                assert b.auto_total == b.base_amount - b.master_discount_amount
                assert b.final_total == b.auto_total + b.manual_total


@pytest.mark.pricing
class TestExtractMasterDiscount:
    def test_explicit_percent_wins(self):
        customer = Customer(id="1", name="A", discount_percent=Decimal("12"), discount_info="VIP")

        assert extract_master_discount(customer) == (Decimal("0.12"), "VIP")

    @pytest.mark.parametrize(
        "info,rate",
        [
            ("선교사", Decimal("0.10")),
            ("Missionary family", Decimal("0.10")),
            ("vip", Decimal("0.05")),
            ("BULK shipper", Decimal("0.15")),
            ("대량 고객", Decimal("0.15")),
        ],
    )
    def test_keywords(self, info, rate):
        customer = Customer(id="1", name="A", discount_info=info)
        assert extract_master_discount(customer)[0] == rate

    def test_zero_percent_falls_back_to_keywords(self):
        customer = Customer(id="1", name="A", discount_percent=Decimal(0), discount_info="vip")
        assert extract_master_discount(customer) == (Decimal("0.05"), "VIP discount 5%")

    def test_no_discount(self):
        assert extract_master_discount(Customer(id="1", name="A")) == (Decimal(0), None)
        assert extract_master_discount(None) == (Decimal(0), None)

    def test_custom_keyword_table(self):
        rules = DEFAULT_RULES.with_overrides(
            discount_keywords=(DiscountKeyword("CHURCH", ("church",), Decimal("0.2"), "Church 20%"),)
        )
        customer = Customer(id="1", name="A", discount_info="Church member")

        assert extract_master_discount(customer, rules) == (Decimal("0.2"), "Church 20%")
        assert extract_master_discount(Customer(id="2", name="B", discount_info="vip"), rules)[0] == 0


@pytest.mark.pricing
class TestShipmentPricing:
    def test_end_to_end_numbers(self, lee_customer):
        pricing = ShipmentPricing(lee_customer, base_volume=Decimal("1.5"))

        layer = pricing.pricing
        assert layer.base_amount == Money.from_dollars(150)
        assert layer.master_discount_amount == Money.from_dollars(15)
        assert layer.auto_total == Money.from_dollars(135)
        assert layer.final_total == Money.from_dollars(135)

        adjustment = damage(-50)
        pricing.add_adjustment(adjustment)
        layer = pricing.update_volume(Decimal("1.8"))

        assert layer.auto_total == Money.from_dollars(162)
        assert layer.manual_total == Money.from_dollars(-50)
        assert layer.final_total == Money.from_dollars(112)
        assert layer.manual_adjustments == [adjustment]
        assert layer.manual_adjustments[0] is adjustment

    def test_volume_update_keeps_same_adjustment_list(self, lee_customer):
        held = [damage(-50)]
        pricing = ShipmentPricing(lee_customer, base_volume="1", adjustments=held)

        layer = pricing.update_volume("1")

        assert layer.manual_adjustments is held
        assert pricing.adjustments is held
        assert len(held) == 1

    def test_discount_persistence_over_interleaved_operations(self, lee_customer):
        pricing = ShipmentPricing(lee_customer, base_volume="1")
        first = damage(-50)
        fee = ManualAdjustment.create(AdjustmentType.SPECIAL_FEE, Money.from_dollars(30), "Fragile handling")

        pricing.add_adjustment(first)
        for volume in ("1.2", "2", "0.5"):
            layer = pricing.update_volume(volume)
            expected_auto = calculate_pricing(volume, USD_100, "0.10", []).auto_total
            assert layer.final_total == expected_auto + Money.from_dollars(-50)

        pricing.add_adjustment(fee)
        pricing.remove_adjustment(first.id)
        layer = pricing.update_volume("3")

        assert layer.manual_adjustments == [fee]
        assert layer.final_total == Money.from_dollars(270 + 30)

    def test_remove_unknown_adjustment(self, lee_customer):
        pricing = ShipmentPricing(lee_customer)

        with pytest.raises(AdjustmentNotFoundError):
            pricing.remove_adjustment("adj-missing")

    def test_history_records_changes(self, lee_customer):
        pricing = ShipmentPricing(lee_customer, base_volume="1.5", operator="worker-1")

        pricing.update_volume("1.5")
        pricing.update_volume("1.8", changed_by="worker-2")
        pricing.update_unit_price(Money.from_dollars(120))
        pricing.change_customer(None)

        history = pricing.history
        assert [h.field for h in history] == ["base_volume", "unit_price", "master_discount_rate"]
        assert (history[0].old_value, history[0].new_value, history[0].changed_by) == ("1.5", "1.8", "worker-2")
        assert history[1].changed_by == "worker-1"
        assert (history[2].old_value, history[2].new_value) == ("10%", "0%")
        assert pricing.pricing.price_history is history

    def test_change_customer_recomputes_discount(self, lee_customer):
        pricing = ShipmentPricing(None, base_volume="2")
        assert pricing.pricing.master_discount_amount == Money.zero()

        layer = pricing.change_customer(lee_customer)

        assert layer.master_discount_rate == Decimal("0.1")
        assert layer.master_discount_amount == Money.from_dollars(20)
        assert layer.auto_total == Money.from_dollars(180)

    def test_update_record(self, lee_customer):
        pricing = ShipmentPricing(lee_customer, base_volume="1.8")
        pricing.add_adjustment(damage(-50))

        record = pricing.to_update_record()

        assert record.total_volume == Decimal("1.8")
        assert record.subtotal == Money.from_dollars(180)
        assert record.discount_percent == Decimal("10")
        assert record.discount_amount == Money.from_dollars(68)
        assert record.total_amount == Money.from_dollars(112)
        assert record == prepare_pricing_update(pricing.pricing)


@pytest.mark.pricing
class TestPricingModels:
    def test_layer_to_dict(self, lee_customer):
        layer = build_pricing_layer("1.5", USD_100, lee_customer, [damage(-50)])

        data = layer.to_dict()

        assert data["base_volume"] == "1.5"
        assert data["auto_total_cents"] == 13500
        assert data["final_total_cents"] == 8500
        assert data["manual_adjustments"][0]["amount_cents"] == -5000
        assert data["master_discount_reason"] == "선교사 missionary"

    def test_adjustment_round_trip_through_dict(self):
        adjustment = damage(-50, reason="Wet cardboard")

        assert ManualAdjustment.from_dict(adjustment.to_dict()) == adjustment

    def test_adjustment_ids_are_unique(self):
        assert damage(-1).id != damage(-1).id

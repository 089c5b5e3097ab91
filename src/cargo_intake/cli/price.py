#!/usr/bin/env python3
"""
Price CLI - Shipment Price Breakdown

Shows how a shipment price is derived from volume, unit price, the
customer's standing discount and any manual adjustments.
"""

from decimal import Decimal

import click

from ..core.currency import format_rate, to_decimal
from ..core.json_utils import format_json
from ..core.money import Money
from ..pricing.calculator import calculate_pricing
from ..pricing.models import AdjustmentType, ManualAdjustment


@click.command()
@click.option("--volume", required=True, help="Shipment volume in CBM (e.g. 1.8)")
@click.option("--unit-price", help="Price per CBM in dollars (default: CARGO_UNIT_PRICE)")
@click.option("--rate", default="0", show_default=True, help="Master discount rate as a fraction (e.g. 0.10)")
@click.option(
    "--adjust",
    "adjust_amounts",
    multiple=True,
    help="Manual adjustment in dollars; negative for discounts. Repeatable.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the breakdown as JSON")
@click.pass_context
def price(
    ctx: click.Context,
    volume: str,
    unit_price: str | None,
    rate: str,
    adjust_amounts: tuple[str, ...],
    as_json: bool,
) -> None:
    """
    Calculate a shipment price breakdown.

    Examples:
      cargo-intake price --volume 1.5 --rate 0.10
      cargo-intake price --volume 1.8 --rate 0.10 --adjust=-50
      cargo-intake price --volume 2 --unit-price 120 --adjust=25 --json
    """
    config = ctx.obj["config"]

    try:
        volume_value = to_decimal(volume)
        rate_value = to_decimal(rate)
        price_value = Money.from_dollars(unit_price) if unit_price else config.intake.unit_price
        adjustments = [
            ManualAdjustment.create(
                AdjustmentType.OTHER,
                Money.from_dollars(amount),
                reason="command line",
                created_by=config.intake.operator,
            )
            for amount in adjust_amounts
        ]
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if volume_value < 0:
        raise click.ClickException(f"Volume must be non-negative, got {volume}")
    if not Decimal(0) <= rate_value <= Decimal(1):
        raise click.ClickException(f"Discount rate must be between 0 and 1, got {rate}")

    breakdown = calculate_pricing(volume_value, price_value, rate_value, adjustments)

    if as_json:
        click.echo(
            format_json(
                {
                    "base_volume": volume_value,
                    "unit_price_cents": price_value.to_cents(),
                    "master_discount_rate": rate_value,
                    "base_amount_cents": breakdown.base_amount.to_cents(),
                    "master_discount_amount_cents": breakdown.master_discount_amount.to_cents(),
                    "auto_total_cents": breakdown.auto_total.to_cents(),
                    "manual_total_cents": breakdown.manual_total.to_cents(),
                    "final_total_cents": breakdown.final_total.to_cents(),
                }
            )
        )
        return

    click.echo(f"Volume:          {volume_value} CBM x {price_value}")
    click.echo(f"Base amount:     {breakdown.base_amount}")
    click.echo(f"Master discount: -{breakdown.master_discount_amount} ({format_rate(rate_value)})")
    click.echo(f"Auto total:      {breakdown.auto_total}")
    for adjustment in adjustments:
        click.echo(f"  Adjustment:    {adjustment.amount}")
    click.echo(f"Manual total:    {breakdown.manual_total}")
    click.echo("-" * 40)
    click.echo(f"Final total:     {breakdown.final_total}")

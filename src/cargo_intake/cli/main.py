#!/usr/bin/env python3
"""
Main CLI Entry Point for Cargo Intake

Provides the command-line interface for staging pasted packing lists and
checking shipment prices.
"""

import logging
import os

import click

from ..core.config import get_config


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Cargo Intake - Packing List Staging and Pricing

    Parses packing lists pasted from spreadsheets, reconciles each row with
    the customer ledger, and prices shipments with persistent manual
    adjustments.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["CARGO_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("cargo_intake").setLevel(logging.DEBUG)

    try:
        ctx.obj["config"] = get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug

    if verbose:
        click.echo(f"Environment: {ctx.obj['config'].environment.value}")
        click.echo(f"Data directory: {ctx.obj['config'].data_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
def version() -> None:
    """Show version information."""
    from cargo_intake import __author__, __version__

    click.echo(f"Cargo Intake v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Data Directory: {config_obj.data_dir}")
    click.echo(f"  Shipments Directory: {config_obj.shipments_dir}")
    click.echo(f"  Output Directory: {config_obj.output_dir}")
    click.echo(f"  Unit Price (per CBM): {config_obj.intake.unit_price}")
    click.echo(f"  Parse Batch Size: {config_obj.intake.parse_batch_size}")
    click.echo(f"  Rules File: {config_obj.intake.rules_file or '(built-in defaults)'}")
    click.echo(f"  Operator: {config_obj.intake.operator}")
    click.echo(f"  Debug Mode: {config_obj.debug}")
    click.echo(f"  Log Level: {config_obj.log_level}")


from .price import price  # noqa: E402
from .stage import stage  # noqa: E402

main.add_command(stage)
main.add_command(price)


if __name__ == "__main__":
    main()

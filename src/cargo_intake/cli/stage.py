#!/usr/bin/env python3
"""
Stage CLI - Packing List Review and Commit

Parses a pasted packing list, matches every row against the customer ledger,
prints the review grid, and optionally commits the batch.
"""

from pathlib import Path

import click

from ..core.json_utils import write_json
from ..customers.directory import CsvCustomerDirectory
from ..staging.models import StagingRow
from ..staging.session import StagingSession
from ..staging.store import JsonShipmentStore


@click.command()
@click.argument("paste_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--customers",
    "customers_csv",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Customer ledger CSV (id, name, phone, region, ...)",
)
@click.option("--commit", is_flag=True, help="Commit the batch to the shipment store after review")
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the staging session as JSON",
)
@click.option("--operator", help="Name recorded on committed shipments (default: CARGO_OPERATOR)")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def stage(
    ctx: click.Context,
    paste_file: Path,
    customers_csv: Path,
    commit: bool,
    output_file: Path | None,
    operator: str | None,
    verbose: bool,
) -> None:
    """
    Stage a pasted packing list for review.

    PASTE_FILE holds text copied from the packing-list spreadsheet, either
    tab-separated or with cells separated by two or more spaces.

    Examples:
      cargo-intake stage voyage-12.txt --customers customers.csv
      cargo-intake stage voyage-12.txt --customers customers.csv --output review.json
      cargo-intake stage voyage-12.txt --customers customers.csv --commit
    """
    config = ctx.obj["config"]
    verbose = verbose or ctx.obj.get("verbose", False)

    try:
        rules = config.load_rules()
        customers = CsvCustomerDirectory(customers_csv).list_active_customers()
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    raw_text = paste_file.read_text(encoding="utf-8")
    session = StagingSession(
        rules=rules,
        unit_price=config.intake.unit_price,
        batch_size=config.intake.parse_batch_size,
    )

    task = session.begin_parse(raw_text)
    for progress in task:
        if verbose:
            click.echo(f"Parsed {progress.processed}/{progress.total} rows")
    result = session.finish_parse()

    if not result.success:
        raise click.ClickException("; ".join(str(w) for w in result.warnings))

    session.match(customers)

    click.echo(f"Packing list: {paste_file.name}")
    click.echo(
        f"Format: {result.detected_format.value}, header: {'yes' if result.has_header else 'no'}, "
        f"rows: {result.item_count} parsed / {result.rows_attempted} attempted"
    )
    click.echo("=" * 72)
    for row in session.rows:
        click.echo(_format_row(row))
        if verbose and row.match is not None:
            for candidate in row.match.similar_candidates:
                click.echo(f"      ? {candidate.customer.name} ({candidate.reason})")

    if session.duplicate_groups:
        click.echo()
        click.echo("Duplicate phone groups:")
        for group in session.duplicate_groups:
            rows = ", ".join(str(i) for i in group.member_row_indices)
            click.echo(f"  {group.phone}: rows {rows} (total qty {group.merged_quantity})")

    if result.warnings:
        click.echo()
        click.echo("Warnings:")
        for warning in result.warnings:
            click.echo(f"  {warning}")

    stats = session.stats
    click.echo()
    click.echo(
        f"Total {stats.total}: {stats.verified} verified, {stats.similar} similar, "
        f"{stats.new_customer} new, {stats.warning} warning, {stats.untracked} untracked"
    )

    if output_file:
        write_json(output_file, session.to_dict())
        click.echo(f"Session written to {output_file}")

    if commit:
        store = JsonShipmentStore(config.shipments_dir)
        session.mark_reviewed()
        try:
            batch = session.commit(store, created_by=operator or config.intake.operator)
        except OSError as e:
            raise click.ClickException(f"Commit failed: {e}") from e
        click.echo(f"Committed {len(batch.records)} shipments to {store.batch_path(batch.session_id)}")


def _format_row(row: StagingRow) -> str:
    status = row.status.name if row.status else "-"
    target = row.linked_customer.name if row.linked_customer else ""
    if not target and row.match and row.match.similar_candidates:
        target = f"? {row.match.similar_candidates[0].customer.name}"

    confidence = f"{row.match.confidence:.2f}" if row.match else "-"
    factors = row.match.explanation if row.match else ""
    flags = " ".join(f"[{flag.name}]" for flag in row.warning_flags)

    line = f"{row.row_index:>4}  {status:<9} {row.edited_name:<24} x{row.edited_quantity:<3} -> {target:<24} {confidence}"
    if factors:
        line += f"  {factors}"
    if flags:
        line += f"  {flags}"
    return line

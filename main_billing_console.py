"""Mini README: Entry point CLI for shop backups and the accounts ledger.

This script exposes a Typer CLI that exports and imports backup documents,
manages locally stored snapshots, and prints or records ledger entries. It
draws the store locations from ``SHOPBILL_*`` settings unless a data
directory is passed explicitly, and exits with status 1 whenever an
operation reports a failure.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer

from shopbill.backup import BackupService, OperationOutcome
from shopbill.configuration import ShopbillSettings, get_settings
from shopbill.finance import AccountsBook
from shopbill.logging_utils import configure_root_logger

cli = typer.Typer(help="Back up, restore and inspect the shop's billing data.")
snapshot_cli = typer.Typer(help="Manage snapshots kept in the local snapshot database.")
ledger_cli = typer.Typer(help="Inspect and record income and expense entries.")
cli.add_typer(snapshot_cli, name="snapshot")
cli.add_typer(ledger_cli, name="ledger")


def _service(ctx: typer.Context) -> BackupService:
    return ctx.obj["service"]


def _report(outcome: OperationOutcome) -> None:
    if outcome.ok:
        typer.echo(outcome.message)
        return
    typer.echo(outcome.message, err=True)
    raise typer.Exit(code=1)


@cli.callback()
def main(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir", help="Directory holding the store and snapshot database."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug output to stderr."),
) -> None:
    """Resolve settings and build the backup service shared by all commands."""

    settings = ShopbillSettings(data_directory=data_dir) if data_dir else get_settings()
    configure_root_logger("DEBUG" if verbose else settings.log_level)
    ctx.obj = {"settings": settings, "service": BackupService.from_settings(settings)}


@cli.command("export")
def export_backup(
    ctx: typer.Context,
    output_dir: Path = typer.Option(Path("."), help="Directory the backup file is written to."),
) -> None:
    """Write a JSON backup document of the allow-listed keys."""

    outcome = _service(ctx).export_to_document(output_dir)
    _report(outcome)
    typer.echo(str(outcome.payload))


@cli.command("import-backup")
def import_backup(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Backup document to import."),
    overwrite: bool = typer.Option(False, help="Replace keys that already hold data."),
) -> None:
    """Import a JSON backup document into the store."""

    _report(asyncio.run(_service(ctx).import_from_document(path, overwrite=overwrite)))


@snapshot_cli.command("save")
def save_snapshot(ctx: typer.Context) -> None:
    """Capture the current store into a new snapshot."""

    outcome = asyncio.run(_service(ctx).save_snapshot())
    _report(outcome)
    typer.echo(outcome.payload)


@snapshot_cli.command("list")
def list_snapshots(ctx: typer.Context) -> None:
    """List stored snapshots, most recent first."""

    snapshots = asyncio.run(_service(ctx).list_snapshots())
    if not snapshots:
        typer.echo("No snapshots")
        return
    for snapshot in snapshots:
        typer.echo(f"{snapshot.id}\t{snapshot.meta.created_at}\t{len(snapshot.data)} keys")


@snapshot_cli.command("delete")
def delete_snapshot(ctx: typer.Context, snapshot_id: str = typer.Argument(...)) -> None:
    """Delete a stored snapshot."""

    _report(asyncio.run(_service(ctx).delete_snapshot(snapshot_id)))


@snapshot_cli.command("restore")
def restore_snapshot(
    ctx: typer.Context,
    snapshot_id: str = typer.Argument(...),
    overwrite: bool = typer.Option(False, help="Replace keys that already hold data."),
) -> None:
    """Restore a stored snapshot into the store."""

    _report(asyncio.run(_service(ctx).restore_snapshot(snapshot_id, overwrite=overwrite)))


@ledger_cli.command("show")
def show_ledger(
    ctx: typer.Context,
    period: str = typer.Option("all", help="One of all, day, month or year."),
    vehicle: Optional[str] = typer.Option(None, help="Only bill income for this vehicle number."),
) -> None:
    """Print ledger entries followed by income, expense and balance totals."""

    book = AccountsBook(_service(ctx).store)
    try:
        entries, summary = book.summary(period, vehicle=vehicle)
    except ValueError as error:
        raise typer.BadParameter(str(error), param_hint="--period") from error
    for entry in entries:
        label = f"Bill {entry.ref}" if entry.ref else entry.note
        typer.echo(f"{entry.occurred_at[:10]}\t{entry.kind.value}\t{entry.amount:.2f}\t{label}")
    typer.echo(
        f"Income {summary.income:.2f} | Expense {summary.expense:.2f} | Balance {summary.balance:.2f}"
    )


@ledger_cli.command("add")
def add_entry(
    ctx: typer.Context,
    kind: str = typer.Argument(..., help="income or expense"),
    amount: float = typer.Argument(...),
    note: Optional[str] = typer.Option(None, help="Optional description."),
) -> None:
    """Record a manual income or expense entry."""

    book = AccountsBook(_service(ctx).store)
    try:
        entry = book.add_manual_entry(kind, amount, note)
    except ValueError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=1) from error
    typer.echo(f"Recorded {entry.kind.value} {entry.amount:.2f} ({entry.id})")


if __name__ == "__main__":
    cli()

"""Mini README: Entry point CLI for the cash flow tracker.

This script exposes a Typer CLI that serves the FastAPI application and
offers quick ledger commands (add, list, summary, delete, export) against
the same stored snapshot. Settings come from ``CASHFLOW_`` environment
variables when available.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from pydantic import ValidationError

from cashflow.configuration import get_settings
from cashflow.export import CsvExporter, format_amount
from cashflow.finance import LedgerError, TransactionDraft, TransactionNotFoundError
from cashflow.finance.session import open_ledger
from cashflow.logging_utils import configure_root_logger, level_for_environment

cli = typer.Typer(help="Track income and expenses from the command line or the web API.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(level_for_environment(settings.environment))

    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting Cash Flow Tracker on {effective_host}:{effective_port}.\n"
        f"API docs at http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "cashflow.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def add(
    amount: str = typer.Argument(..., help="Amount, e.g. 12.50."),
    description: str = typer.Argument(..., help="What the transaction was for."),
    kind: str = typer.Option("expense", "--type", help="income or expense."),
    category: str = typer.Option("Food", help="Food, Entertainment, Bills, Transport, Shopping or Other."),
    on: Optional[str] = typer.Option(None, "--date", help="ISO date; defaults to today."),
) -> None:
    """Record a new transaction."""

    ledger = open_ledger()
    try:
        draft = TransactionDraft(
            type=kind.strip().lower(),
            amount=amount,
            description=description,
            category=category,
            date=on or date.today().isoformat(),
        )
        transaction = ledger.add(draft)
    except (ValidationError, LedgerError) as error:
        typer.echo(f"Rejected: {error}", err=True)
        raise typer.Exit(code=1) from error
    typer.echo(f"Added transaction {transaction.transaction_id}. Balance: {format_amount(ledger.balance())}")


@cli.command("list")
def list_transactions(
    kind: str = typer.Option("all", "--type", help="all, income or expense."),
    start: Optional[str] = typer.Option(None, help="Inclusive start date."),
    end: Optional[str] = typer.Option(None, help="Inclusive end date."),
) -> None:
    """Print transactions, optionally filtered."""

    ledger = open_ledger()
    ledger.apply_quick_filter(kind)
    for transaction in ledger.set_date_range(start, end):
        typer.echo(
            f"{transaction.transaction_id}  {transaction.occurred_on.isoformat()}  "
            f"{transaction.transaction_type.value:<7}  {transaction.amount:>10.2f}  "
            f"{transaction.category.value:<13}  {transaction.description}"
        )


@cli.command()
def summary() -> None:
    """Show balance and totals."""

    ledger = open_ledger()
    figures = ledger.summary()
    typer.echo(f"Balance:       {figures['balance']:.2f}")
    typer.echo(f"Total income:  {figures['total_income']:.2f}")
    typer.echo(f"Total expense: {figures['total_expense']:.2f}")
    typer.echo(f"Transactions:  {figures['transaction_count']}")


@cli.command()
def delete(
    transaction_id: int = typer.Argument(..., help="Id of the transaction to delete."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete a transaction after confirmation."""

    ledger = open_ledger()
    try:
        transaction = ledger.get(transaction_id)
    except TransactionNotFoundError as error:
        typer.echo(f"Transaction {transaction_id} not found", err=True)
        raise typer.Exit(code=1) from error
    confirmed = yes or typer.confirm(
        f"Delete {transaction.transaction_type.value} '{transaction.description}'?"
    )
    if ledger.remove(transaction_id, confirmed=confirmed) is None:
        typer.echo("Nothing deleted.")
        return
    typer.echo(f"Deleted transaction {transaction_id}.")


@cli.command()
def export(
    destination: Optional[Path] = typer.Option(None, help="Target file or directory."),
    kind: str = typer.Option("all", "--type", help="all, income or expense."),
    start: Optional[str] = typer.Option(None, help="Inclusive start date."),
    end: Optional[str] = typer.Option(None, help="Inclusive end date."),
) -> None:
    """Write the selected transactions to a CSV file."""

    settings = get_settings()
    ledger = open_ledger(settings)
    ledger.apply_quick_filter(kind)
    ledger.set_date_range(start, end)
    target = destination or Path.cwd() / settings.export_filename
    path = CsvExporter().export(ledger.export_rows(), target)
    typer.echo(f"Exported to {path}")


if __name__ == "__main__":
    cli()

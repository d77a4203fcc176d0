"""Mini README: CSV export for ledger transactions.

Structure:
    * render_csv - serialise transactions into the export text.
    * CsvExporter - write the rendered text to ``transactions.csv`` on disk.

The format is fixed: a ``ID,Type,Amount,Description,Category,Date`` header,
one line per transaction joined with ``\\n`` and no trailing newline. Only
the description is wrapped in double quotes and nothing is escaped, so a
description containing a quote produces a file that strict CSV readers will
mis-parse. Downloads made by earlier versions look exactly like this.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from ..logging_utils import get_logger

if TYPE_CHECKING:
    from ..finance.ledger import Transaction

LOGGER = get_logger(__name__)

CSV_HEADERS = ("ID", "Type", "Amount", "Description", "Category", "Date")
DEFAULT_FILENAME = "transactions.csv"
CSV_MEDIA_TYPE = "text/csv;charset=utf-8"


def format_amount(amount: Decimal) -> str:
    """Plain number text: ``500`` and ``12.5`` rather than ``500.00``."""

    text = format(Decimal(amount).normalize(), "f")
    return "0" if text in {"-0", ""} else text


def render_csv(rows: Iterable["Transaction"]) -> str:
    """Serialise transactions into the export CSV text."""

    lines = [",".join(CSV_HEADERS)]
    for transaction in rows:
        lines.append(
            ",".join(
                [
                    str(transaction.transaction_id),
                    transaction.transaction_type.value,
                    format_amount(transaction.amount),
                    f'"{transaction.description}"',
                    transaction.category.value,
                    transaction.occurred_on.isoformat(),
                ]
            )
        )
    return "\n".join(lines)


class CsvExporter:
    """Persist rendered transaction exports to disk."""

    def export(self, rows: Iterable["Transaction"], destination: Path) -> Path:
        """Write the CSV to ``destination``; directories are treated as targets for the default name."""

        destination = Path(destination)
        if destination.is_dir():
            destination = destination / DEFAULT_FILENAME
        destination.parent.mkdir(parents=True, exist_ok=True)
        text = render_csv(rows)
        destination.write_text(text, encoding="utf-8")
        LOGGER.info("Exported %s transactions to %s", text.count("\n"), destination)
        return destination

"""Mini README: Export helpers for the cash flow tracker.

The CSV exporter renders ledger rows in the download format and can write
them to disk for the CLI.
"""

from .csv_exporter import CSV_HEADERS, CSV_MEDIA_TYPE, DEFAULT_FILENAME, CsvExporter, format_amount, render_csv

__all__ = [
    "CSV_HEADERS",
    "CSV_MEDIA_TYPE",
    "DEFAULT_FILENAME",
    "CsvExporter",
    "format_amount",
    "render_csv",
]

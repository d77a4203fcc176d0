"""Mini README: Core package initializer for the cash flow tracker.

Convenience imports for callers that only need the ledger, its draft and
storage backends, or the logging helpers without knowing the module layout.
"""

from .finance import (
    Category,
    FutureDateError,
    InsufficientFundsError,
    Ledger,
    LedgerError,
    Transaction,
    TransactionDraft,
    TransactionNotFoundError,
    TransactionType,
)
from .logging_utils import get_logger
from .storage import InMemoryStore, JsonFileStore

__all__ = [
    "Category",
    "FutureDateError",
    "InMemoryStore",
    "InsufficientFundsError",
    "JsonFileStore",
    "Ledger",
    "LedgerError",
    "Transaction",
    "TransactionDraft",
    "TransactionNotFoundError",
    "TransactionType",
    "get_logger",
]

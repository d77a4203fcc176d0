"""Mini README: Ledger package for the cash flow tracker.

Exposes the transaction model, the validated draft used for submissions and
the ``Ledger`` that owns balances, filters and persistence.
"""

from .ledger import (
    INITIAL_AMOUNT,
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

__all__ = [
    "INITIAL_AMOUNT",
    "Category",
    "FutureDateError",
    "InsufficientFundsError",
    "Ledger",
    "LedgerError",
    "Transaction",
    "TransactionDraft",
    "TransactionNotFoundError",
    "TransactionType",
]

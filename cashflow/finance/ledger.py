"""Mini README: Transaction ledger with balance, filters and CSV export.

Structure:
    * TransactionType / Category - enums for the supported entry kinds.
    * TransactionDraft - validated user input prior to id assignment.
    * Transaction - stored ledger entry with snapshot helpers.
    * Ledger - owns the ordered transaction list, the active view and
      persistence of the whole snapshot after every mutation.

Balance is always derived: the opening amount plus every income minus every
expense. Adding an expense larger than the current balance is rejected, but
editing an existing entry only re-checks the date, so an edit can still push
the balance below zero.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, validator

from ..export.csv_exporter import render_csv
from ..logging_utils import get_logger
from ..storage import KeyValueStore

LOGGER = get_logger(__name__)

INITIAL_AMOUNT = Decimal("100000")
DEFAULT_STORAGE_KEY = "transactions"
ALL = "all"

DateBound = Union[date, str, None]


class LedgerError(ValueError):
    """Base class for rejected ledger submissions."""


class FutureDateError(LedgerError):
    """Raised when a transaction is dated after today."""


class InsufficientFundsError(LedgerError):
    """Raised when an expense exceeds the current balance."""


class TransactionNotFoundError(KeyError):
    """Raised when no transaction carries the requested id."""


class TransactionType(str, Enum):
    """Enumerate the supported transaction kinds."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_str(cls, value: str) -> "TransactionType":
        """Coerce arbitrary casing into a valid transaction type."""

        try:
            normalised = value.strip().lower()
            return cls(normalised)
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported transaction type: {value}") from error


class Category(str, Enum):
    """Fixed set of spending and earning categories."""

    FOOD = "Food"
    ENTERTAINMENT = "Entertainment"
    BILLS = "Bills"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    OTHER = "Other"

    @classmethod
    def from_str(cls, value: str) -> "Category":
        """Match a category name ignoring case."""

        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        raise ValueError(f"Unsupported category: {value}")


class TransactionDraft(BaseModel):
    """User supplied transaction data, validated before it reaches the ledger."""

    transaction_type: TransactionType = Field(TransactionType.EXPENSE, alias="type")
    amount: Decimal = Field(..., ge=0)
    description: str
    category: Category = Category.FOOD
    occurred_on: date = Field(..., alias="date")

    class Config:
        populate_by_name = True
        frozen = True

    @validator("description")
    def _require_description(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("Description must not be empty.")
        return text


@dataclass(slots=True, frozen=True)
class Transaction:
    """A ledger entry as stored and exported."""

    transaction_id: int
    transaction_type: TransactionType
    amount: Decimal
    description: str
    category: Category
    occurred_on: date

    @classmethod
    def from_draft(cls, transaction_id: int, draft: TransactionDraft) -> "Transaction":
        return cls(
            transaction_id=transaction_id,
            transaction_type=draft.transaction_type,
            amount=draft.amount,
            description=draft.description,
            category=draft.category,
            occurred_on=draft.occurred_on,
        )

    @classmethod
    def from_dict(cls, record: Dict[str, object]) -> "Transaction":
        """Rebuild a transaction from a snapshot record.

        Amounts may be stored as numbers (older browser snapshots) or as
        decimal strings (written by this package).
        """

        try:
            amount = Decimal(str(record["amount"]))
        except InvalidOperation as error:
            raise ValueError(f"Invalid amount: {record['amount']!r}") from error
        if not amount.is_finite() or amount < 0:
            raise ValueError(f"Amount must be a finite, non-negative number: {record['amount']!r}")
        return cls(
            transaction_id=int(record["id"]),
            transaction_type=TransactionType.from_str(str(record["type"])),
            amount=amount,
            description=str(record["description"]),
            category=Category.from_str(str(record["category"])),
            occurred_on=_parse_date(record["date"]),
        )

    def as_dict(self) -> Dict[str, object]:
        """Export the transaction with serialisable values."""

        return {
            "id": self.transaction_id,
            "type": self.transaction_type.value,
            "amount": format(self.amount, "f"),
            "description": self.description,
            "category": self.category.value,
            "date": self.occurred_on.isoformat(),
        }


def _parse_date(value: object) -> date:
    """Parse ISO formatted strings or date objects safely."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ValueError("Dates must be provided as ISO strings or date/datetime instances.")


def _parse_bound(value: DateBound) -> Optional[date]:
    """Date range bounds treat empty strings as absent, like cleared inputs."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _parse_date(value)


def _normalise_selection(selection: Union[str, TransactionType]) -> Optional[TransactionType]:
    """Return ``None`` for the unrestricted "all" selection."""

    if isinstance(selection, TransactionType):
        return selection
    if isinstance(selection, str) and selection.strip().lower() == ALL:
        return None
    return TransactionType.from_str(selection)


def select_by_type(
    rows: Iterable[Transaction], selection: Union[str, TransactionType]
) -> List[Transaction]:
    """Keep rows of the selected type, preserving order."""

    wanted = _normalise_selection(selection)
    if wanted is None:
        return list(rows)
    return [row for row in rows if row.transaction_type is wanted]


def select_by_date_range(
    rows: Iterable[Transaction], start: DateBound, end: DateBound
) -> List[Transaction]:
    """Inclusive date filter; a missing bound disables filtering entirely."""

    start_date = _parse_bound(start)
    end_date = _parse_bound(end)
    if start_date is None or end_date is None:
        return list(rows)
    return [row for row in rows if start_date <= row.occurred_on <= end_date]


class Ledger:
    """Own the ordered transaction list and its derived views.

    The snapshot is loaded once from ``store`` at construction and the whole
    list is written back after every mutation. Store write failures are
    logged and otherwise ignored, so memory and storage can drift apart.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        initial_amount: Decimal = INITIAL_AMOUNT,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._storage_key = storage_key
        self._initial_amount = Decimal(initial_amount)
        self._clock = clock
        self._transactions: List[Transaction] = self._load()
        self._last_id = max((t.transaction_id for t in self._transactions), default=0)
        self._active_filter: Optional[TransactionType] = None
        self._date_range: Tuple[Optional[date], Optional[date]] = (None, None)
        LOGGER.debug(
            "Ledger initialised with %s transactions from key '%s'",
            len(self._transactions),
            storage_key,
        )

    # -- persistence -----------------------------------------------------

    def _load(self) -> List[Transaction]:
        blob = self._store.get(self._storage_key)
        if blob is None:
            return []
        try:
            records = json.loads(blob)
        except json.JSONDecodeError as error:
            LOGGER.error("Stored ledger under '%s' is not valid JSON: %s", self._storage_key, error)
            return []
        if not isinstance(records, list):
            LOGGER.error("Stored ledger under '%s' is not a list; ignoring it", self._storage_key)
            return []

        today = self._today()
        transactions: List[Transaction] = []
        seen: set[int] = set()
        for record in records:
            try:
                transaction = Transaction.from_dict(record)
            except (KeyError, TypeError, ValueError) as error:
                LOGGER.warning("Skipping unreadable stored transaction %r: %s", record, error)
                continue
            if transaction.occurred_on > today:
                LOGGER.warning(
                    "Skipping stored transaction %s dated in the future (%s)",
                    transaction.transaction_id,
                    transaction.occurred_on,
                )
                continue
            if transaction.transaction_id in seen:
                LOGGER.warning("Skipping duplicate stored transaction id %s", transaction.transaction_id)
                continue
            seen.add(transaction.transaction_id)
            transactions.append(transaction)
        return transactions

    def _persist(self) -> None:
        blob = json.dumps([transaction.as_dict() for transaction in self._transactions])
        try:
            self._store.set(self._storage_key, blob)
        except OSError as error:
            LOGGER.warning("Failed to persist ledger under '%s': %s", self._storage_key, error)

    # -- helpers ---------------------------------------------------------

    def _today(self) -> date:
        return self._clock().date()

    def _next_id(self) -> int:
        """Millisecond timestamp, bumped past the previous id on collisions."""

        candidate = int(self._clock().timestamp() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def _index_of(self, transaction_id: int) -> int:
        for index, transaction in enumerate(self._transactions):
            if transaction.transaction_id == transaction_id:
                return index
        raise TransactionNotFoundError(f"Transaction {transaction_id} not found")

    def _check_date(self, draft: TransactionDraft) -> None:
        today = self._today()
        if draft.occurred_on > today:
            LOGGER.warning("Rejected transaction dated %s (today is %s)", draft.occurred_on, today)
            raise FutureDateError("You cannot enter a future date.")

    # -- mutations -------------------------------------------------------

    def add(self, draft: TransactionDraft) -> Transaction:
        """Validate and append a new transaction."""

        self._check_date(draft)
        if draft.transaction_type is TransactionType.EXPENSE:
            balance = self.balance()
            if draft.amount > balance:
                LOGGER.warning("Rejected expense of %s with balance %s", draft.amount, balance)
                raise InsufficientFundsError("You don't have enough money!")

        transaction = Transaction.from_draft(self._next_id(), draft)
        self._transactions.append(transaction)
        self._persist()
        LOGGER.info(
            "Added %s %s (%s) as transaction %s",
            transaction.transaction_type.value,
            transaction.amount,
            transaction.category.value,
            transaction.transaction_id,
        )
        return transaction

    def update(self, transaction_id: int, draft: TransactionDraft) -> Transaction:
        """Replace a transaction in place, keeping its id and position.

        Only the date is re-validated; the balance check from ``add`` does
        not apply to edits.
        """

        index = self._index_of(transaction_id)
        self._check_date(draft)
        transaction = Transaction.from_draft(transaction_id, draft)
        self._transactions[index] = transaction
        self._persist()
        LOGGER.info("Updated transaction %s", transaction_id)
        return transaction

    def remove(self, transaction_id: int, *, confirmed: bool = False) -> Optional[Transaction]:
        """Delete a transaction once the caller has confirmed it.

        Returns the removed transaction, or ``None`` when not confirmed.
        """

        index = self._index_of(transaction_id)
        if not confirmed:
            LOGGER.info("Deletion of transaction %s not confirmed; keeping it", transaction_id)
            return None
        removed = self._transactions.pop(index)
        self._persist()
        LOGGER.info("Removed transaction %s", transaction_id)
        return removed

    # -- derived views ---------------------------------------------------

    @property
    def initial_amount(self) -> Decimal:
        return self._initial_amount

    @property
    def transactions(self) -> List[Transaction]:
        return list(self._transactions)

    def get(self, transaction_id: int) -> Transaction:
        return self._transactions[self._index_of(transaction_id)]

    def total_by_type(self, transaction_type: Union[str, TransactionType]) -> Decimal:
        """Sum amounts of the given type."""

        wanted = _normalise_selection(transaction_type)
        if wanted is None:
            raise ValueError("Totals require 'income' or 'expense'.")
        return sum(
            (t.amount for t in self._transactions if t.transaction_type is wanted),
            Decimal("0"),
        )

    def balance(self) -> Decimal:
        return (
            self._initial_amount
            + self.total_by_type(TransactionType.INCOME)
            - self.total_by_type(TransactionType.EXPENSE)
        )

    def filter_by_type(self, selection: Union[str, TransactionType]) -> List[Transaction]:
        return select_by_type(self._transactions, selection)

    def filter_by_date_range(self, start: DateBound, end: DateBound) -> List[Transaction]:
        return select_by_date_range(self._transactions, start, end)

    def to_csv(self, rows: Optional[Iterable[Transaction]] = None) -> str:
        """Render rows (default: the full ledger) in the export CSV format."""

        return render_csv(self._transactions if rows is None else rows)

    # -- active view -----------------------------------------------------

    @property
    def active_filter(self) -> str:
        return ALL if self._active_filter is None else self._active_filter.value

    @property
    def date_range(self) -> Tuple[Optional[date], Optional[date]]:
        return self._date_range

    def apply_quick_filter(self, selection: Union[str, TransactionType]) -> List[Transaction]:
        """Restrict the displayed view to one type, or lift it with "all"."""

        self._active_filter = _normalise_selection(selection)
        LOGGER.debug("Quick filter set to '%s'", self.active_filter)
        return self.displayed()

    def set_date_range(self, start: DateBound, end: DateBound) -> List[Transaction]:
        self._date_range = (_parse_bound(start), _parse_bound(end))
        LOGGER.debug("Date range set to %s..%s", *self._date_range)
        return self.displayed()

    def clear_filters(self) -> List[Transaction]:
        """Drop the date range; the quick filter stays as it was."""

        self._date_range = (None, None)
        return self.displayed()

    @property
    def has_active_view(self) -> bool:
        start, end = self._date_range
        return self._active_filter is not None or (start is not None and end is not None)

    def displayed(self) -> List[Transaction]:
        """Current view, always computed from the latest transaction list."""

        rows = select_by_type(self._transactions, self.active_filter)
        return select_by_date_range(rows, *self._date_range)

    def export_rows(self) -> List[Transaction]:
        """Rows to export: the active view when one is set, else everything."""

        if self.has_active_view:
            return self.displayed()
        return self.transactions

    def summary(self) -> Dict[str, object]:
        """Figures behind the balance and totals cards."""

        start, end = self._date_range
        return {
            "balance": self.balance(),
            "initial_amount": self._initial_amount,
            "total_income": self.total_by_type(TransactionType.INCOME),
            "total_expense": self.total_by_type(TransactionType.EXPENSE),
            "transaction_count": len(self._transactions),
            "active_filter": self.active_filter,
            "start_date": start.isoformat() if start else None,
            "end_date": end.isoformat() if end else None,
        }

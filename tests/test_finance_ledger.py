"""Mini README: Tests covering ledger balance, validation and views.

Structure:
    * balance and totals - the opening amount plus income minus expenses.
    * add/update/remove - rejections leave the ledger untouched.
    * filters - quick filter and inclusive date ranges keep insertion order.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from cashflow.finance import (
    Category,
    FutureDateError,
    InsufficientFundsError,
    Ledger,
    TransactionDraft,
    TransactionNotFoundError,
    TransactionType,
)
from cashflow.storage import InMemoryStore

TODAY = date(2024, 6, 1)


def _clock() -> datetime:
    return datetime(2024, 6, 1, 12, 0, 0)


def _draft(kind: str = "expense", amount: str = "10", day: date = TODAY, **extra) -> TransactionDraft:
    payload = {
        "type": kind,
        "amount": amount,
        "description": extra.pop("description", "Groceries"),
        "category": extra.pop("category", "Food"),
        "date": day,
    }
    return TransactionDraft(**payload)


def _ledger(store: InMemoryStore | None = None) -> Ledger:
    return Ledger(store or InMemoryStore(), clock=_clock)


def test_income_on_empty_ledger_raises_balance() -> None:
    """Adding income to a fresh ledger moves the balance above the opening amount."""

    ledger = _ledger()
    ledger.add(_draft("income", "500", description="pay", category="Other"))

    assert ledger.balance() == Decimal("100500")


def test_balance_matches_totals() -> None:
    ledger = _ledger()
    ledger.add(_draft("income", "1200.50"))
    ledger.add(_draft("expense", "300.25"))
    ledger.add(_draft("expense", "99.75"))

    assert ledger.total_by_type("income") == Decimal("1200.50")
    assert ledger.total_by_type(TransactionType.EXPENSE) == Decimal("400.00")
    assert ledger.balance() == Decimal("100000") + ledger.total_by_type("income") - ledger.total_by_type("expense")


def test_future_dated_transaction_is_rejected() -> None:
    """Entries dated after today never reach the ledger or the store."""

    store = InMemoryStore()
    ledger = _ledger(store)

    with pytest.raises(FutureDateError):
        ledger.add(_draft("income", "10", day=date(2024, 6, 2)))

    assert ledger.transactions == []
    assert store.get("transactions") is None


def test_expense_above_balance_is_rejected() -> None:
    ledger = _ledger()

    with pytest.raises(InsufficientFundsError):
        ledger.add(_draft("expense", "200000"))

    assert ledger.balance() == Decimal("100000")
    assert ledger.transactions == []


def test_expense_equal_to_balance_is_accepted() -> None:
    ledger = _ledger()
    ledger.add(_draft("expense", "100000"))

    assert ledger.balance() == Decimal("0")


def test_update_skips_balance_check() -> None:
    """Edits only re-check the date, so they can push the balance negative.

    Known inconsistency with ``add``; kept deliberately.
    """

    ledger = _ledger()
    original = ledger.add(_draft("expense", "10"))

    updated = ledger.update(original.transaction_id, _draft("expense", "250000"))

    assert updated.transaction_id == original.transaction_id
    assert ledger.balance() == Decimal("-150000")


def test_update_keeps_position_and_rejects_future_dates() -> None:
    ledger = _ledger()
    first = ledger.add(_draft("income", "1", description="first"))
    second = ledger.add(_draft("income", "2", description="second"))
    ledger.add(_draft("income", "3", description="third"))

    ledger.update(second.transaction_id, _draft("expense", "5", description="edited", category="Bills"))
    with pytest.raises(FutureDateError):
        ledger.update(first.transaction_id, _draft("income", "1", day=date(2030, 1, 1)))

    assert [t.description for t in ledger.transactions] == ["first", "edited", "third"]
    assert ledger.get(second.transaction_id).category is Category.BILLS
    assert ledger.get(first.transaction_id).occurred_on == TODAY


def test_update_unknown_id_raises() -> None:
    ledger = _ledger()

    with pytest.raises(TransactionNotFoundError):
        ledger.update(42, _draft())


def test_remove_requires_confirmation() -> None:
    ledger = _ledger()
    transaction = ledger.add(_draft("income", "50"))

    assert ledger.remove(transaction.transaction_id) is None
    assert len(ledger.transactions) == 1

    removed = ledger.remove(transaction.transaction_id, confirmed=True)
    assert removed == transaction
    assert ledger.transactions == []


def test_remove_is_reflected_in_active_filter() -> None:
    """The filtered view is rebuilt from the current list after a delete."""

    ledger = _ledger()
    keep = ledger.add(_draft("income", "10", description="keep"))
    drop = ledger.add(_draft("income", "20", description="drop"))
    ledger.add(_draft("expense", "5"))
    ledger.apply_quick_filter("income")

    ledger.remove(drop.transaction_id, confirmed=True)

    assert ledger.displayed() == [keep]
    assert ledger.filter_by_type("income") == [keep]


def test_ids_are_unique_and_increasing() -> None:
    """The fixed clock forces collisions, which must be bumped."""

    ledger = _ledger()
    ids = [ledger.add(_draft("income", "1")).transaction_id for _ in range(3)]

    assert ids == sorted(set(ids))
    assert ids[0] == int(_clock().timestamp() * 1000)


def test_filter_by_type_preserves_order() -> None:
    ledger = _ledger()
    ledger.add(_draft("income", "1", description="a"))
    ledger.add(_draft("expense", "1", description="b"))
    ledger.add(_draft("income", "1", description="c"))

    assert [t.description for t in ledger.filter_by_type("income")] == ["a", "c"]
    assert [t.description for t in ledger.filter_by_type("all")] == ["a", "b", "c"]
    with pytest.raises(ValueError):
        ledger.filter_by_type("transfers")


def test_date_range_is_inclusive_and_optional() -> None:
    ledger = _ledger()
    ledger.add(_draft("income", "1", description="may", day=date(2024, 5, 1)))
    ledger.add(_draft("income", "1", description="april", day=date(2024, 4, 15)))
    ledger.add(_draft("income", "1", description="june", day=date(2024, 6, 1)))

    inside = ledger.filter_by_date_range(date(2024, 4, 15), "2024-05-01")
    assert [t.description for t in inside] == ["may", "april"]
    assert [t.description for t in ledger.filter_by_date_range(None, date(2024, 5, 1))] == ["may", "april", "june"]
    assert [t.description for t in ledger.filter_by_date_range("", "")] == ["may", "april", "june"]


def test_export_rows_follow_active_view() -> None:
    ledger = _ledger()
    ledger.add(_draft("income", "1", day=date(2024, 1, 1)))
    expense = ledger.add(_draft("expense", "1", day=date(2024, 3, 1)))
    ledger.add(_draft("expense", "1", day=date(2024, 5, 1)))

    assert len(ledger.export_rows()) == 3

    ledger.apply_quick_filter("expense")
    ledger.set_date_range("2024-02-01", "2024-04-01")
    assert ledger.export_rows() == [expense]

    ledger.clear_filters()
    assert ledger.active_filter == "expense"
    assert len(ledger.export_rows()) == 2


def test_snapshot_written_after_every_mutation_and_reloaded() -> None:
    store = InMemoryStore()
    ledger = _ledger(store)
    first = ledger.add(_draft("income", "12.50", description="refund"))
    ledger.add(_draft("expense", "2"))

    records = json.loads(store.get("transactions"))
    assert [record["amount"] for record in records] == ["12.50", "2"]

    reloaded = _ledger(store)
    assert reloaded.transactions == ledger.transactions
    assert reloaded.get(first.transaction_id).description == "refund"


def test_browser_snapshot_with_numeric_amounts_loads() -> None:
    blob = json.dumps(
        [
            {"id": 1717243200000, "type": "income", "amount": 250.5, "description": "gift",
             "category": "Other", "date": "2024-05-30"},
            {"id": 1717243200001, "type": "expense", "amount": 50, "description": "taxi",
             "category": "Transport", "date": "2024-05-31"},
        ]
    )
    ledger = _ledger(InMemoryStore({"transactions": blob}))

    assert ledger.balance() == Decimal("100200.5")
    next_id = ledger.add(_draft("income", "1")).transaction_id
    assert next_id > 1717243200001


def test_corrupt_snapshot_starts_empty() -> None:
    ledger = _ledger(InMemoryStore({"transactions": "{not json"}))

    assert ledger.transactions == []
    assert ledger.balance() == Decimal("100000")


def test_unreadable_records_are_skipped() -> None:
    blob = json.dumps(
        [
            {"id": 1, "type": "income", "amount": "5", "description": "ok", "category": "Food", "date": "2024-01-01"},
            {"id": 2, "type": "gift", "amount": "5", "description": "bad", "category": "Food", "date": "2024-01-01"},
            {"id": 3, "type": "income", "amount": "5"},
        ]
    )
    ledger = _ledger(InMemoryStore({"transactions": blob}))

    assert [t.transaction_id for t in ledger.transactions] == [1]


def test_store_write_failure_keeps_memory_state() -> None:
    class BrokenStore(InMemoryStore):
        def set(self, key: str, value: str) -> None:
            raise OSError("disk full")

    ledger = _ledger(BrokenStore())
    ledger.add(_draft("income", "5"))

    assert ledger.balance() == Decimal("100005")


def test_draft_validation() -> None:
    """Drafts reject negative amounts, blank descriptions and unknown categories."""

    with pytest.raises(ValidationError):
        _draft(amount="-1")
    with pytest.raises(ValidationError):
        _draft(description="   ")
    with pytest.raises(ValidationError):
        _draft(category="Travel")

    draft = TransactionDraft(amount="3", description="  bus  ", date="2024-05-01")
    assert draft.transaction_type is TransactionType.EXPENSE
    assert draft.category is Category.FOOD
    assert draft.description == "bus"


def test_summary_reports_totals() -> None:
    ledger = _ledger()
    ledger.add(_draft("income", "100"))
    ledger.add(_draft("expense", "40"))

    figures = ledger.summary()
    assert figures["balance"] == Decimal("100060")
    assert figures["total_income"] == Decimal("100")
    assert figures["total_expense"] == Decimal("40")
    assert figures["transaction_count"] == 2
    assert figures["active_filter"] == "all"


def test_stored_records_with_bad_amounts_or_future_dates_are_skipped() -> None:
    """Loaded records get the same amount and date checks as submissions."""

    def record(transaction_id: int, amount: object, day: str = "2024-05-01", kind: str = "income") -> dict:
        return {"id": transaction_id, "type": kind, "amount": amount, "description": "x",
                "category": "Other", "date": day}

    blob = json.dumps(
        [
            record(1, "NaN"),
            record(2, "Infinity"),
            record(3, -500, kind="expense"),
            record(4, "20", day="2099-01-01"),
            record(5, "7.5"),
        ]
    )
    ledger = _ledger(InMemoryStore({"transactions": blob}))

    assert [t.transaction_id for t in ledger.transactions] == [5]
    ledger.add(_draft("expense", "1"))
    assert ledger.balance() == Decimal("100006.5")


def test_as_dict_writes_plain_decimal_amounts() -> None:
    ledger = _ledger()
    transaction = ledger.add(_draft("income", "1e3"))

    assert transaction.as_dict()["amount"] == "1000"
    assert ledger.to_csv().split("\n")[1].split(",")[2] == "1000"


def test_package_exposes_ledger_names() -> None:
    import cashflow

    assert cashflow.Ledger is Ledger
    assert cashflow.TransactionDraft is TransactionDraft
    assert isinstance(cashflow.InMemoryStore(), InMemoryStore)

"""Unit tests for record parsing and the transaction cache"""

import pytest
from datetime import date
from budget_notifier.domain.categories import Category
from budget_notifier.domain.exceptions import InvalidRecordError
from budget_notifier.domain.models import RecurringPeriod
from budget_notifier.infrastructure.cache import TransactionCache
from budget_notifier.infrastructure.database.records import (
    bill_reminder_from_record,
    budget_from_record,
    transaction_from_record,
)


def test_manual_transaction_record():
    txn = transaction_from_record(
        {"id": "t1", "description": "Lunch", "amount": "12.50", "date": "2026-03-01", "category": "Food"}
    )

    assert txn.description == "Lunch"
    assert txn.amount == 12.5
    assert txn.category == Category.FOOD


def test_aggregator_transaction_record():
    """Test synced rows use name and a category hierarchy"""
    txn = transaction_from_record(
        {"name": "LYFT *RIDE", "amount": 18, "date": "2026-03-02", "category": ["Travel", "Taxi"]}
    )

    assert txn.description == "LYFT *RIDE"
    assert txn.category == Category.TRANSPORTATION


def test_transaction_record_without_category():
    txn = transaction_from_record({"description": "Misc", "amount": 1, "date": "2026-03-02", "category": None})
    assert txn.category is None


@pytest.mark.parametrize(
    "row",
    [
        {"amount": 1, "date": "2026-03-02"},
        {"description": "x", "amount": "abc", "date": "2026-03-02"},
        {"description": "x", "amount": 1},
    ],
)
def test_invalid_transaction_record(row):
    with pytest.raises(InvalidRecordError):
        transaction_from_record(row)


def test_budget_record():
    budget = budget_from_record({"category": "Housing", "amount": 500, "spent": None})
    assert budget.category == Category.HOUSING
    assert budget.spent == 0


@pytest.mark.parametrize(
    "row",
    [
        {"category": "Pets", "amount": 50, "spent": 0},
        {"category": "Food", "amount": -1, "spent": 0},
        {"category": "Food"},
    ],
)
def test_invalid_budget_record(row):
    with pytest.raises(InvalidRecordError):
        budget_from_record(row)


def test_bill_reminder_record():
    reminder = bill_reminder_from_record(
        {
            "id": 7,
            "title": "Car insurance",
            "amount": 120,
            "due_date": "2026-03-15",
            "recurring": True,
            "recurring_period": "yearly",
            "paid": False,
        }
    )

    assert reminder.id == "7"
    assert reminder.due_date == date(2026, 3, 15)
    assert reminder.recurring_period == RecurringPeriod.YEARLY
    assert reminder.next_occurrence().due_date == date(2027, 3, 15)


@pytest.mark.parametrize(
    "row",
    [
        {"id": "1", "title": "x", "amount": 0, "due_date": "2026-03-15"},
        {"id": "1", "title": "x", "amount": 5, "due_date": "15/03/2026"},
        {"id": "1", "title": "x", "amount": 5, "due_date": "2026-03-15", "recurring_period": "daily"},
    ],
)
def test_invalid_bill_reminder_record(row):
    with pytest.raises(InvalidRecordError):
        bill_reminder_from_record(row)


def test_transaction_cache_freshness():
    """Test the snapshot expires once the window has passed"""
    now = [1000.0]
    cache = TransactionCache(ttl_seconds=300, clock=lambda: now[0])

    assert cache.get() is None
    cache.put(["a", "b"])
    now[0] += 299
    assert cache.get() == ["a", "b"]
    now[0] += 1
    assert cache.get() is None


def test_transaction_cache_invalidate():
    cache = TransactionCache(ttl_seconds=300, clock=lambda: 0.0)
    cache.put(["a"])
    cache.invalidate()
    assert cache.get() is None


def test_transaction_cache_default_window():
    assert TransactionCache().ttl_seconds == 300

"""Conversion of raw record-store rows into domain models"""

from datetime import date
from typing import Any, Dict, Optional

from budget_notifier.domain.categories import Category, map_aggregator_category, parse_category
from budget_notifier.domain.exceptions import InvalidRecordError
from budget_notifier.domain.models import BillReminder, Budget, RecurringPeriod, Transaction


def _category(value: Any) -> Optional[Category]:
    # Aggregator rows carry a label hierarchy, manual rows a category name
    if value is None or value == "":
        return None
    if isinstance(value, list):
        return map_aggregator_category(value)
    return parse_category(value) or map_aggregator_category(value)


def transaction_from_record(row: Dict[str, Any]) -> Transaction:
    """
    Parse a transaction row (manual or aggregator-synced).

    Raises:
        InvalidRecordError: On missing fields or non-numeric amounts
    """
    try:
        return Transaction(
            description=str(row.get("description") or row["name"]),
            amount=float(row["amount"]),
            date=str(row["date"]),
            category=_category(row.get("category")),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise InvalidRecordError(f"Invalid transaction record: {e}") from e


def budget_from_record(row: Dict[str, Any]) -> Budget:
    """Parse a budget row; unknown categories are rejected"""
    try:
        category = parse_category(row["category"])
        if category is None:
            raise ValueError(f"unknown category {row['category']!r}")
        amount = float(row["amount"])
        spent = float(row.get("spent") or 0)
        if amount < 0 or spent < 0:
            raise ValueError("amount and spent must not be negative")
        return Budget(category=category, amount=amount, spent=spent)
    except (KeyError, ValueError, TypeError) as e:
        raise InvalidRecordError(f"Invalid budget record: {e}") from e


def bill_reminder_from_record(row: Dict[str, Any]) -> BillReminder:
    """Parse a bill reminder row (due_date as ISO calendar date)"""
    try:
        amount = float(row["amount"])
        if amount <= 0:
            raise ValueError("amount must be positive")
        due = row["due_date"]
        period = row.get("recurring_period")
        return BillReminder(
            id=str(row["id"]),
            title=str(row["title"]),
            amount=amount,
            due_date=due if isinstance(due, date) else date.fromisoformat(str(due)[:10]),
            recurring=bool(row.get("recurring", False)),
            recurring_period=RecurringPeriod(period) if period else None,
            paid=bool(row.get("paid", False)),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise InvalidRecordError(f"Invalid bill reminder record: {e}") from e

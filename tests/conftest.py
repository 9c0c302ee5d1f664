"""Pytest fixtures for testing"""

import os
import random
import time
import pytest
from datetime import date, datetime
from typing import Callable, List

from budget_notifier.domain.categories import Category
from budget_notifier.domain.models import BillReminder, Budget, Transaction
from budget_notifier.services.insights import InsightService
from budget_notifier.services.notifications import NotificationScheduler
from tests.fakes import FIXED_NOW, RecordingSubstrate, ScriptedCompletionClient


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def substrate() -> RecordingSubstrate:
    return RecordingSubstrate()


@pytest.fixture
def offline_insights() -> InsightService:
    """Insight service whose completion endpoint is always down"""
    return InsightService(client=ScriptedCompletionClient())


@pytest.fixture
def scheduler(substrate, offline_insights, clock, rng) -> NotificationScheduler:
    return NotificationScheduler(substrate, insights=offline_insights, clock=clock, rng=rng)


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """Mixed snapshot: categorized rows plus rows only the keyword classifier can place"""
    return [
        Transaction(description="Uber ride", amount=20.0, date="2026-03-01"),
        Transaction(description="Pizza Hut", amount=15.0, date="2026-03-01"),
        Transaction(description="Weekly groceries", amount=82.5, date="2026-03-02", category=Category.FOOD),
        Transaction(description="Netflix", amount=15.99, date="2026-03-02"),
        Transaction(description="Rent March", amount=1200.0, date="2026-03-01", category=Category.HOUSING),
    ]


@pytest.fixture
def sample_budgets() -> List[Budget]:
    return [
        Budget(category=Category.FOOD, amount=100.0, spent=90.0),
        Budget(category=Category.HOUSING, amount=500.0, spent=100.0),
        Budget(category=Category.ENTERTAINMENT, amount=50.0, spent=75.0),
    ]


@pytest.fixture
def upcoming_reminder() -> BillReminder:
    return BillReminder(
        id="rem-1",
        title="Electricity",
        amount=84.5,
        due_date=date(2026, 3, 6),
    )


@pytest.fixture
def new_york_tz():
    """Run the test under America/New_York local time (DST begins 2026-03-08 02:00)"""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    saved = os.environ.get("TZ")
    os.environ["TZ"] = "America/New_York"
    time.tzset()
    yield
    if saved is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = saved
    time.tzset()

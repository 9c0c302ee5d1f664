"""Domain models - pure Python dataclasses representing business entities"""

import math
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from budget_notifier.domain.categories import Category
from budget_notifier.utils.date_utils import next_due_date


class RecurringPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class MonthlyTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class NotificationKind(str, Enum):
    BUDGET_ALERT = "budget-alert"
    SPENDING_TIP = "spending-tip"
    SAVING_OPPORTUNITY = "saving-opportunity"
    BILL_REMINDER = "bill-reminder"


class NotificationPriority(str, Enum):
    DEFAULT = "default"
    HIGH = "high"
    MAX = "max"


@dataclass
class Transaction:
    """Transaction snapshot read from the record store"""

    description: str
    amount: float
    date: str
    category: Optional[Category] = None


@dataclass
class Budget:
    """Monthly budget for one category"""

    category: Category
    amount: float
    spent: float

    @property
    def percent_spent(self) -> float:
        """Share of the budget spent, in percent (infinite for a zero budget)"""
        if self.amount == 0:
            return math.inf
        return self.spent / self.amount * 100


@dataclass
class BillReminder:
    """Bill reminder owned by the record store"""

    id: str
    title: str
    amount: float
    due_date: date
    recurring: bool = False
    recurring_period: Optional[RecurringPeriod] = None
    paid: bool = False

    def next_occurrence(self) -> Optional["BillReminder"]:
        """Unpaid copy due at the next period, or None for one-off bills"""
        if not self.recurring or self.recurring_period is None:
            return None
        return replace(
            self,
            due_date=next_due_date(self.due_date, self.recurring_period.value),
            paid=False,
        )


@dataclass(frozen=True)
class CategoryFrequency:
    category: Category
    frequency: int


@dataclass(frozen=True)
class SpendingPattern:
    """Derived spending summary, recomputed on demand"""

    frequent_categories: List[CategoryFrequency]
    average_spending: Dict[Category, float]
    overspending_tendency: List[Category]
    saving_opportunities: List[Category]
    monthly_trend: MonthlyTrend

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation used in prompts"""
        return {
            "frequentCategories": [
                {"category": item.category.value, "frequency": item.frequency}
                for item in self.frequent_categories
            ],
            "averageSpending": {category.value: amount for category, amount in self.average_spending.items()},
            "overspendingTendency": [category.value for category in self.overspending_tendency],
            "savingOpportunities": [category.value for category in self.saving_opportunities],
            "monthlyTrend": self.monthly_trend.value,
        }


@dataclass
class NotificationIntent:
    """Notification to show at a resolved time"""

    title: str
    body: str
    data: Dict[str, Any] = field(default_factory=dict)
    priority: Optional[NotificationPriority] = NotificationPriority.DEFAULT
    play_sound: bool = True

"""Deterministic spending analysis used when the completion endpoint is unavailable"""

from typing import Dict, List

from budget_notifier.domain.categories import Category, fallback_categorize
from budget_notifier.domain.models import (
    Budget,
    CategoryFrequency,
    MonthlyTrend,
    NotificationKind,
    SpendingPattern,
    Transaction,
)

BUDGET_ALERT_THRESHOLD_PERCENT = 80
SAVING_OPPORTUNITY_RATIO = 0.8

FALLBACK_NOTIFICATIONS: Dict[NotificationKind, str] = {
    NotificationKind.BUDGET_ALERT: "Your budget is running low. Consider reviewing your spending.",
    NotificationKind.SPENDING_TIP: "Track your daily expenses to stay within your budget.",
    NotificationKind.SAVING_OPPORTUNITY: "Look for opportunities to save on regular expenses.",
}


def fallback_notification(kind: NotificationKind) -> str:
    return FALLBACK_NOTIFICATIONS.get(kind, FALLBACK_NOTIFICATIONS[NotificationKind.SPENDING_TIP])


def fallback_spending_pattern(transactions: List[Transaction], budgets: List[Budget]) -> SpendingPattern:
    """
    Build a spending pattern from the raw snapshot.

    - Frequency: count per category, uncategorized transactions are
      classified by keyword; sorted descending, ties keep first-seen order
    - Average spending: each budget's spent amount, 0 when no budget exists
    - Overspending: spent > amount
    - Saving opportunities: spent > 80% of amount
    - Trend: always stable (no history available here)
    """
    counts: Dict[Category, int] = {}
    for txn in transactions:
        category = txn.category or fallback_categorize(txn.description)
        counts[category] = counts.get(category, 0) + 1

    frequent = sorted(
        (CategoryFrequency(category=category, frequency=count) for category, count in counts.items()),
        key=lambda item: item.frequency,
        reverse=True,
    )

    spent_by_category: Dict[Category, float] = {}
    for budget in budgets:
        spent_by_category.setdefault(budget.category, budget.spent)
    average_spending = {category: spent_by_category.get(category, 0) for category in Category}

    return SpendingPattern(
        frequent_categories=frequent,
        average_spending=average_spending,
        overspending_tendency=[b.category for b in budgets if b.spent > b.amount],
        saving_opportunities=[b.category for b in budgets if b.spent > b.amount * SAVING_OPPORTUNITY_RATIO],
        monthly_trend=MonthlyTrend.STABLE,
    )


def needs_budget_alert(budget: Budget) -> bool:
    """True once 80% of the budget is spent; a zero budget always alerts"""
    return budget.percent_spent >= BUDGET_ALERT_THRESHOLD_PERCENT

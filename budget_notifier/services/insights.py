"""Transaction categorization and spending insights backed by the completion endpoint"""

import json
import math
from dataclasses import asdict
from typing import Awaitable, Callable, List, TypeVar

from pydantic import ValidationError

from budget_notifier.domain.categories import BUDGET_CATEGORIES, Category, fallback_categorize, parse_category
from budget_notifier.domain.exceptions import MalformedCompletionError
from budget_notifier.domain.models import Budget, NotificationKind, SpendingPattern, Transaction
from budget_notifier.domain.patterns import fallback_notification, fallback_spending_pattern
from budget_notifier.domain.result import Err, FailureKind, attempt
from budget_notifier.infrastructure.clients.completion import CompletionClient
from budget_notifier.infrastructure.observability.logging import log_ai_fallback
from budget_notifier.infrastructure.observability.metrics import record_fallback
from budget_notifier.services.schemas import SPENDING_PATTERN_EXAMPLE, SpendingPatternSchema

T = TypeVar("T")

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Using fallback response."


def _format_amount(amount: float) -> str:
    try:
        if math.isfinite(amount):
            return f"{amount:.2f}"
    except TypeError:
        pass
    return str(amount)


def _to_json(value: object) -> str:
    return json.dumps(value, default=str)


def extract_json_object(text: str) -> str:
    """Slice the outermost {...} out of a model reply"""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise MalformedCompletionError("No JSON object in completion")
    return text[start : end + 1]


class InsightService:
    """Categorization & insight engine; every operation degrades to local heuristics"""

    def __init__(self, client: CompletionClient | None = None):
        self.client = client or CompletionClient()

    async def with_fallback(self, operation: Callable[[], Awaitable[T]], fallback: T, operation_name: str) -> T:
        """Run operation, answering with fallback on any failure"""
        result = await attempt(operation)
        if isinstance(result, Err):
            message = RATE_LIMIT_MESSAGE if result.kind == FailureKind.RATE_LIMITED else result.message
            log_ai_fallback(operation_name, result.kind.value, message)
            record_fallback(operation_name, result.kind.value)
            return fallback
        return result.value

    async def categorize_transaction(self, description: str, amount: float) -> Category:
        """
        Categorize a transaction into one of the fixed budget categories.

        A reply that is not exactly a category name maps to Other; any
        failure falls back to keyword classification.
        """

        async def operation() -> Category:
            prompt = (
                f'Given the transaction description "{description}" and amount ${_format_amount(amount)}, '
                f"categorize it into one of these categories: {', '.join(BUDGET_CATEGORIES)}. "
                "Respond with just the category name."
            )
            text = await self.client.complete(
                [{"role": "user", "content": prompt}],
                temperature=0.3,
                max_tokens=10,
            )
            return parse_category(text.strip()) or Category.OTHER

        return await self.with_fallback(operation, fallback_categorize(description), "categorize_transaction")

    async def analyze_spending_patterns(self, transactions: List[Transaction], budgets: List[Budget]) -> SpendingPattern:
        """Ask the model for a spending analysis; the reply is validated before use"""

        async def operation() -> SpendingPattern:
            prompt = (
                "Analyze these transactions and budgets:\n"
                f"Transactions: {_to_json([asdict(t) for t in transactions])}\n"
                f"Budgets: {_to_json([asdict(b) for b in budgets])}\n"
                f"Provide a spending analysis in this exact JSON format: {_to_json(SPENDING_PATTERN_EXAMPLE)}"
            )
            text = await self.client.complete(
                [{"role": "user", "content": prompt}],
                temperature=0.7,
                max_tokens=500,
            )
            try:
                return SpendingPatternSchema.model_validate_json(extract_json_object(text)).to_domain()
            except ValidationError as e:
                raise MalformedCompletionError(f"Spending analysis has unexpected shape: {e.error_count()} errors") from e

        return await self.with_fallback(
            operation,
            fallback_spending_pattern(transactions, budgets),
            "analyze_spending_patterns",
        )

    async def generate_notification_content(
        self,
        pattern: SpendingPattern,
        budgets: List[Budget],
        kind: NotificationKind,
    ) -> str:
        """Generate short notification copy; static text when the model can't help"""

        async def operation() -> str:
            context = {
                "spendingPattern": pattern.to_dict(),
                "budgets": [asdict(b) for b in budgets],
                "notificationType": kind.value,
            }
            prompt = (
                f"Given this financial context: {_to_json(context)}\n"
                f"Generate a friendly and encouraging {kind.value} notification message.\n"
                "Keep it concise (max 2 sentences) and actionable.\n"
                "For budget alerts, mention the specific category and remaining amount.\n"
                "For spending tips, provide specific actionable advice based on the spending pattern.\n"
                "For saving opportunities, suggest specific areas where the user could save money."
            )
            text = await self.client.complete([{"role": "user", "content": prompt}])
            return text.strip() or fallback_notification(kind)

        return await self.with_fallback(operation, fallback_notification(kind), "generate_notification_content")

"""Pydantic schemas validating completion endpoint payloads"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from budget_notifier.domain.categories import Category
from budget_notifier.domain.models import CategoryFrequency, MonthlyTrend, SpendingPattern


class CategoryFrequencySchema(BaseModel):
    """Single entry of frequentCategories"""

    category: Category
    frequency: int = Field(..., ge=0)


class SpendingPatternSchema(BaseModel):
    """Spending analysis returned by the model"""

    model_config = ConfigDict(populate_by_name=True)

    frequent_categories: List[CategoryFrequencySchema] = Field(..., alias="frequentCategories")
    average_spending: Dict[Category, float] = Field(..., alias="averageSpending")
    overspending_tendency: List[Category] = Field(..., alias="overspendingTendency")
    saving_opportunities: List[Category] = Field(..., alias="savingOpportunities")
    monthly_trend: MonthlyTrend = Field(..., alias="monthlyTrend")

    def to_domain(self) -> SpendingPattern:
        return SpendingPattern(
            frequent_categories=sorted(
                (CategoryFrequency(category=item.category, frequency=item.frequency) for item in self.frequent_categories),
                key=lambda item: item.frequency,
                reverse=True,
            ),
            average_spending={category: self.average_spending.get(category, 0) for category in Category},
            overspending_tendency=list(self.overspending_tendency),
            saving_opportunities=list(self.saving_opportunities),
            monthly_trend=self.monthly_trend,
        )


# Example shape embedded in the analysis prompt
SPENDING_PATTERN_EXAMPLE = {
    "frequentCategories": [{"category": "Food", "frequency": 0}],
    "averageSpending": {"Food": 0},
    "overspendingTendency": ["Food"],
    "savingOpportunities": ["Food"],
    "monthlyTrend": "stable",
}

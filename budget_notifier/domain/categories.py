"""Budget categories and deterministic keyword classification"""

import re
from enum import Enum
from typing import Dict, List, Tuple


class Category(str, Enum):
    """Fixed budget category set"""

    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    HOUSING = "Housing"
    ENTERTAINMENT = "Entertainment"
    OTHER = "Other"


BUDGET_CATEGORIES: List[str] = [category.value for category in Category]

# Checked in order; first match wins
_KEYWORD_RULES: List[Tuple[re.Pattern, Category]] = [
    (re.compile(r"food|restaurant|grocery|meal|drink|cafe|pizza"), Category.FOOD),
    (re.compile(r"transport|uber|lyft|taxi|gas|train|bus|subway"), Category.TRANSPORTATION),
    (re.compile(r"rent|mortgage|utilities|water|electricity|maintenance"), Category.HOUSING),
    (re.compile(r"movie|game|netflix|spotify|entertainment|concert"), Category.ENTERTAINMENT),
]

# Bank aggregator labels -> budget categories
_AGGREGATOR_CATEGORY_MAP: Dict[str, Category] = {
    "Food and Drink": Category.FOOD,
    "Restaurants": Category.FOOD,
    "Groceries": Category.FOOD,
    "Travel": Category.TRANSPORTATION,
    "Taxi": Category.TRANSPORTATION,
    "Gas": Category.TRANSPORTATION,
    "Parking": Category.TRANSPORTATION,
    "Public Transportation": Category.TRANSPORTATION,
    "Rent": Category.HOUSING,
    "Mortgage": Category.HOUSING,
    "Utilities": Category.HOUSING,
    "Home Improvement": Category.HOUSING,
    "Entertainment": Category.ENTERTAINMENT,
    "Movies": Category.ENTERTAINMENT,
    "Music": Category.ENTERTAINMENT,
    "Sports": Category.ENTERTAINMENT,
    "Games": Category.ENTERTAINMENT,
}


def fallback_categorize(description: object) -> Category:
    """
    Classify a transaction description by keyword.

    Pure and total: any input (including None or non-strings) yields a
    valid category, unmatched descriptions fall into Other.
    """
    desc = str(description or "").lower()
    for pattern, category in _KEYWORD_RULES:
        if pattern.search(desc):
            return category
    return Category.OTHER


def parse_category(value: object) -> Category | None:
    """Return the category whose name exactly matches value, else None"""
    if isinstance(value, Category):
        return value
    if isinstance(value, str) and value in BUDGET_CATEGORIES:
        return Category(value)
    return None


def map_aggregator_category(label: str | List[str] | None) -> Category:
    """
    Map a bank aggregator category label onto a budget category.

    Aggregators send either a single label or a hierarchy such as
    ["Food and Drink", "Restaurants"]; the first known label wins.
    """
    if label is None:
        return Category.OTHER
    labels = [label] if isinstance(label, str) else list(label)
    for item in labels:
        if item in _AGGREGATOR_CATEGORY_MAP:
            return _AGGREGATOR_CATEGORY_MAP[item]
    return Category.OTHER

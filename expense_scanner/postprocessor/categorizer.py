"""
Expense Categorizer Module.

Assigns an expense category from a merchant name or document text
using a static keyword table.
"""

from enum import Enum
from typing import Optional, Tuple

from expense_scanner.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class Category(str, Enum):
    """Fixed expense category taxonomy."""

    FUEL = "fuel"
    FOOD = "food"
    MAINTENANCE = "maintenance"
    OFFICE = "office"
    TRAVEL = "travel"
    PARKING = "parking"
    INSURANCE = "insurance"
    TELECOMMUNICATIONS = "telecommunications"
    GENERAL = "general"


# Evaluated top to bottom; the first category with a matching trigger wins.
# "garage" appears under both maintenance and parking, maintenance takes it.
CATEGORY_TRIGGERS: Tuple[Tuple[Category, Tuple[str, ...]], ...] = (
    (Category.FUEL, ('shell', 'bp', 'esso', 'texaco', 'petrol', 'gas', 'fuel', 'station')),
    (Category.FOOD, ('restaurant', 'cafe', 'coffee', 'food', 'pizza', 'burger', 'lunch', 'dinner')),
    (Category.MAINTENANCE, ('garage', 'service', 'repair', 'parts', 'tire', 'oil', 'mechanic')),
    (Category.OFFICE, ('office', 'supplies', 'paper', 'ink', 'stationery', 'depot')),
    (Category.TRAVEL, ('hotel', 'accommodation', 'booking', 'travel', 'flight', 'train')),
    (Category.PARKING, ('parking', 'meter', 'toll', 'garage')),
    (Category.INSURANCE, ('insurance', 'cover', 'policy', 'premium')),
    (Category.TELECOMMUNICATIONS, ('phone', 'mobile', 'internet', 'broadband', 'vodafone', 'three')),
)


class ExpenseCategorizer:
    """
    Keyword-table expense classifier.

    Example:
        >>> categorizer = ExpenseCategorizer()
        >>> categorizer.categorize("STARBUCKS COFFEE")
        <Category.FOOD: 'food'>
        >>> categorizer.categorize("ACME Ltd")
        <Category.GENERAL: 'general'>
    """

    def __init__(self, triggers=CATEGORY_TRIGGERS) -> None:
        self.triggers = triggers

    def categorize(self, text: Optional[str]) -> Category:
        """
        Classify text into a category.

        Args:
            text: Merchant name or document text.

        Returns:
            First category whose triggers occur in the lower-cased text,
            or Category.GENERAL.
        """
        if not text:
            return Category.GENERAL

        content = text.lower()

        for category, keywords in self.triggers:
            for keyword in keywords:
                if keyword in content:
                    logger.debug(f"Categorized as {category.value} (trigger: '{keyword}')")
                    return category

        return Category.GENERAL

"""
Expense Record Data Class.

This module defines the terminal output of the pipeline: one expense
record ready to be handed to the expense store for persistence and
human confirmation.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict
import json

from expense_scanner.postprocessor.categorizer import Category


class Source(str, Enum):
    """Pipeline path that produced a record."""

    RECEIPT_SCAN = "receipt_scan"
    DOCUMENT_SCAN = "document_scan"
    DOCUMENT_MANUAL = "document_manual"


@dataclass(frozen=True)
class ExpenseRecord:
    """
    Represents one extracted expense.

    Attributes:
        date: ISO 8601 date (YYYY-MM-DD); ingestion date when none was found
        description: Merchant name or a filename-based placeholder
        amount: Amount in the document currency, rounded to cents
        category: Expense category
        source: receipt_scan, document_scan or document_manual
        needs_review: True when the fields need human confirmation
        raw_text_snippet: Leading slice of the extracted text for reference

    Example:
        >>> record = ExpenseRecord(
        ...     date="2024-01-12",
        ...     description="STARBUCKS COFFEE",
        ...     amount=Decimal("4.50"),
        ...     category=Category.FOOD,
        ...     source=Source.RECEIPT_SCAN
        ... )
        >>> record.to_dict()['amount']
        '4.50'
    """
    date: str
    description: str
    amount: Decimal
    category: Category
    source: Source
    needs_review: bool = False
    raw_text_snippet: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        The amount is rendered as a string to keep it exact.

        Returns:
            Dictionary representation of the record.
        """
        return {
            'date': self.date,
            'description': self.description,
            'amount': str(self.amount),
            'category': self.category.value,
            'source': self.source.value,
            'needs_review': self.needs_review,
            'raw_text_snippet': self.raw_text_snippet
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExpenseRecord':
        """
        Create an ExpenseRecord from a dictionary produced by to_dict().

        Args:
            data: Dictionary with record data.

        Returns:
            ExpenseRecord instance.
        """
        return cls(
            date=data['date'],
            description=data['description'],
            amount=Decimal(str(data['amount'])),
            category=Category(data.get('category', Category.GENERAL.value)),
            source=Source(data['source']),
            needs_review=bool(data.get('needs_review', False)),
            raw_text_snippet=data.get('raw_text_snippet', '')
        )

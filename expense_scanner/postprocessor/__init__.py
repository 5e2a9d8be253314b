"""
Post-Processing Module for the Expense Scanner.

This module provides functionality for:
    - Date normalization to ISO 8601
    - Amount normalization and plausibility bounds
    - Expense categorization
"""

from .normalizers import DateNormalizer, AmountNormalizer, format_date, NOTATIONS
from .categorizer import ExpenseCategorizer, Category

__all__ = [
    'DateNormalizer',
    'AmountNormalizer',
    'format_date',
    'NOTATIONS',
    'ExpenseCategorizer',
    'Category',
]

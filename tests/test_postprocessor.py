"""
Tests for date and amount normalization and expense categorization.
"""

from datetime import date
from decimal import Decimal

import pytest

from expense_scanner.postprocessor import (
    AmountNormalizer,
    Category,
    DateNormalizer,
    ExpenseCategorizer,
    NOTATIONS,
    format_date,
)


class TestDateNormalizer:
    """Dates become ISO 8601 following the fixed disambiguation order."""

    @pytest.mark.parametrize("raw, expected", [
        ("12/01/2024", "2024-01-12"),      # ambiguous, European default
        ("25/12/2024", "2024-12-25"),      # first group > 12
        ("01/25/2024", "2024-01-25"),      # second group > 12
        ("2024/01/12", "2024-01-12"),      # four-digit first group
        ("2024-01-12", "2024-01-12"),
        ("12.01.24", "2024-01-12"),        # two-digit year
        ("12 Jan 2024", "2024-01-12"),
        ("Jan 12, 2024", "2024-01-12"),
        ("3rd March 2024", "2024-03-03"),
        ("Date: 05/06/2024", "2024-06-05"),
        ("2024-01-12T10:30:00", "2024-01-12"),
    ])
    def test_normalize(self, raw, expected):
        assert DateNormalizer().normalize(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "hello", "31/02/2024", "13/13/2024", "99 Foo 2024"])
    def test_invalid_dates(self, raw):
        assert DateNormalizer().normalize(raw) is None

    def test_us_order_for_ambiguous_dates(self):
        normalizer = DateNormalizer(numeric_order="us")

        assert normalizer.normalize("05/06/2024") == "2024-05-06"
        # Unambiguous dates are unaffected by the locale
        assert normalizer.normalize("25/12/2024") == "2024-12-25"

    @pytest.mark.parametrize("value", [
        date(2024, 1, 12),
        date(2024, 12, 25),
        date(2023, 2, 3),
        date(2025, 10, 1),
        date(2000, 2, 29),
    ])
    @pytest.mark.parametrize("notation", NOTATIONS)
    def test_round_trip(self, value, notation):
        normalizer = DateNormalizer()
        assert normalizer.normalize(format_date(value, notation)) == value.isoformat()

    def test_format_date(self):
        value = date(2024, 1, 12)

        assert format_date(value, "dd/mm/yyyy") == "12/01/2024"
        assert format_date(value, "yyyy/mm/dd") == "2024/01/12"
        assert format_date(value, "d mon yyyy") == "12 Jan 2024"
        assert format_date(value, "mon d, yyyy") == "Jan 12, 2024"

    def test_format_date_unknown_notation(self):
        with pytest.raises(ValueError):
            format_date(date(2024, 1, 12), "yy.mm.dd")


class TestAmountNormalizer:
    """Amount strings become Decimals rounded to cents."""

    @pytest.mark.parametrize("raw, expected", [
        ("4.50", Decimal("4.50")),
        ("4,50", Decimal("4.50")),
        ("€ 1.234,56", Decimal("1234.56")),
        ("$1,234.56", Decimal("1234.56")),
        ("85.00 EUR", Decimal("85.00")),
        ("12", Decimal("12.00")),
    ])
    def test_to_decimal(self, raw, expected):
        assert AmountNormalizer().to_decimal(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc"])
    def test_to_decimal_invalid(self, raw):
        assert AmountNormalizer().to_decimal(raw) is None

    def test_normalize_string(self):
        assert AmountNormalizer().normalize("4,5") == "4.50"

    @pytest.mark.parametrize("value, plausible", [
        (Decimal("0"), False),
        (Decimal("0.01"), True),
        (Decimal("9999.99"), True),
        (Decimal("10000"), False),
        (Decimal("-5"), False),
        (None, False),
    ])
    def test_sanity_range_is_open_interval(self, value, plausible):
        assert AmountNormalizer().is_plausible(value) is plausible


class TestExpenseCategorizer:
    """Keyword table classification."""

    @pytest.mark.parametrize("text, category", [
        ("STARBUCKS COFFEE", Category.FOOD),
        ("SHELL Station 42", Category.FUEL),
        ("Joe's Garage", Category.MAINTENANCE),
        ("Office Depot", Category.OFFICE),
        ("Hilton Hotel", Category.TRAVEL),
        ("M6 Toll", Category.PARKING),
        ("Allianz Insurance", Category.INSURANCE),
        ("Vodafone", Category.TELECOMMUNICATIONS),
        ("ACME Ltd", Category.GENERAL),
    ])
    def test_categorize(self, text, category):
        assert ExpenseCategorizer().categorize(text) is category

    @pytest.mark.parametrize("text", [None, ""])
    def test_empty_text_is_general(self, text):
        assert ExpenseCategorizer().categorize(text) is Category.GENERAL

    def test_first_matching_category_wins(self):
        # "garage" triggers both maintenance and parking
        assert ExpenseCategorizer().categorize("Parking garage") is Category.MAINTENANCE

"""
Data Normalizers Module.

This module provides normalization functions for:
    - Date formats (to ISO 8601)
    - Currency/amount values (to Decimal)
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from dateutil import parser as date_parser

from config import get_config
from expense_scanner.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
_MONTHS = {name.lower(): index for index, name in enumerate(MONTH_ABBREVIATIONS, 1)}

# Canonical notations the date patterns recognize
NOTATION_DAY_FIRST = "dd/mm/yyyy"
NOTATION_YEAR_FIRST = "yyyy/mm/dd"
NOTATION_DAY_MONTH_NAME = "d mon yyyy"
NOTATION_MONTH_NAME_DAY = "mon d, yyyy"
NOTATIONS = (
    NOTATION_DAY_FIRST,
    NOTATION_YEAR_FIRST,
    NOTATION_DAY_MONTH_NAME,
    NOTATION_MONTH_NAME_DAY,
)

ORDER_EUROPEAN = "european"
ORDER_US = "us"


class DateNormalizer:
    """
    Normalizes date strings to ISO format (YYYY-MM-DD).

    Textual dates ("12 Jan 2024", "Jan 12, 2024") are parsed directly.
    Numeric dates are disambiguated by a fixed rule order:

        1. first group has 4 digits     -> YYYY-MM-DD
        2. first group greater than 12  -> DD-MM-YYYY
        3. second group greater than 12 -> MM-DD-YYYY
        4. otherwise ambiguous          -> configured order, European
                                           (DD-MM-YYYY) by default

    Two-digit years are expanded with a "20" prefix.

    Attributes:
        output_format: Target date format string
        numeric_order: 'european' or 'us' for ambiguous numeric dates

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.normalize("12/01/2024")
        '2024-01-12'
        >>> normalizer.normalize("Jan 12, 2024")
        '2024-01-12'
    """

    NUMERIC_DATE = re.compile(r'^(\d{1,4})[/\-.](\d{1,2})[/\-.](\d{1,4})$')
    DAY_MONTH_NAME = re.compile(r'^(\d{1,2})\s+([A-Za-z]{3,9})\.?,?\s+(\d{2}|\d{4})$')
    MONTH_NAME_DAY = re.compile(r'^([A-Za-z]{3,9})\.?\s+(\d{1,2}),?\s+(\d{2}|\d{4})$')

    PREFIXES = ('date:', 'dated:', 'invoice date:', 'due date:')

    def __init__(
        self,
        numeric_order: Optional[str] = None,
        output_format: Optional[str] = None
    ) -> None:
        """Initialize the date normalizer with configuration."""
        self.output_format = output_format or get_config(
            "postprocessing.date.output_format",
            "%Y-%m-%d"
        )
        self.numeric_order = (numeric_order or get_config(
            "postprocessing.date.numeric_order",
            ORDER_EUROPEAN
        )).lower()

        logger.debug(
            f"DateNormalizer initialized (output: {self.output_format}, "
            f"ambiguous order: {self.numeric_order})"
        )

    def normalize(self, date_str: Optional[str]) -> Optional[str]:
        """
        Normalize a date string to the configured output format.

        Args:
            date_str: Raw date match.

        Returns:
            Normalized date string, or None if it is not a valid date.
        """
        if not date_str:
            return None

        cleaned = self._clean_date_string(date_str)
        parsed = self.parse(cleaned)

        if parsed is None:
            logger.debug(f"Could not parse date: {date_str!r}")
            return None

        return parsed.strftime(self.output_format)

    def parse(self, date_str: str) -> Optional[date]:
        """Parse a cleaned date string into a date, or None."""
        match = self.NUMERIC_DATE.match(date_str)
        if match:
            return self._resolve_numeric(*match.groups())

        parsed = self._try_textual_formats(date_str)
        if parsed is None:
            parsed = self._try_dateutil_parser(date_str)
        return parsed

    def _clean_date_string(self, date_str: str) -> str:
        """Collapse whitespace, drop label prefixes and ordinal suffixes."""
        date_str = ' '.join(date_str.split())

        lowered = date_str.lower()
        for prefix in self.PREFIXES:
            if lowered.startswith(prefix):
                date_str = date_str[len(prefix):].strip()
                break

        # 1st, 2nd, 3rd, 4th -> 1, 2, 3, 4
        date_str = re.sub(r'\b(\d{1,2})(st|nd|rd|th)\b', r'\1', date_str, flags=re.IGNORECASE)

        return date_str.strip()

    def _resolve_numeric(self, first: str, second: str, third: str) -> Optional[date]:
        """Apply the numeric disambiguation rule order."""
        if len(first) == 4:
            year, month, day = first, second, third
        elif int(first) > 12:
            day, month, year = first, second, third
        elif int(second) > 12:
            month, day, year = first, second, third
        elif self.numeric_order == ORDER_US:
            month, day, year = first, second, third
        else:
            day, month, year = first, second, third

        return self._build_date(year, month, day)

    def _try_textual_formats(self, date_str: str) -> Optional[date]:
        """Parse '12 Jan 2024' and 'Jan 12, 2024' style dates."""
        match = self.DAY_MONTH_NAME.match(date_str)
        if match:
            day, month_name, year = match.groups()
            return self._build_date(year, self._month_number(month_name), day)

        match = self.MONTH_NAME_DAY.match(date_str)
        if match:
            month_name, day, year = match.groups()
            return self._build_date(year, self._month_number(month_name), day)

        return None

    def _try_dateutil_parser(self, date_str: str) -> Optional[date]:
        """
        Last resort for other unambiguous layouts (e.g. ISO timestamps).

        Strings without a four-digit year are rejected so that dateutil
        never fills in the current year.
        """
        if not re.search(r'\d{4}', date_str):
            return None

        # A leading year means year-month-day whatever the locale
        dayfirst = self.numeric_order != ORDER_US and not re.match(r'\d{4}', date_str)
        try:
            return date_parser.parse(date_str, dayfirst=dayfirst).date()
        except (ValueError, OverflowError):
            return None

    @staticmethod
    def _month_number(month_name: str) -> Optional[int]:
        return _MONTHS.get(month_name[:3].lower())

    @staticmethod
    def _build_date(year, month, day) -> Optional[date]:
        if month is None:
            return None

        year = str(year)
        if len(year) == 2:
            year = "20" + year
        elif len(year) != 4:
            return None

        try:
            return date(int(year), int(month), int(day))
        except ValueError:
            return None


def format_date(value: date, notation: str) -> str:
    """
    Render a date in one of the canonical notations.

    Example:
        >>> format_date(date(2024, 1, 12), "mon d, yyyy")
        'Jan 12, 2024'
    """
    month_name = MONTH_ABBREVIATIONS[value.month - 1]

    if notation == NOTATION_DAY_FIRST:
        return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"
    if notation == NOTATION_YEAR_FIRST:
        return f"{value.year:04d}/{value.month:02d}/{value.day:02d}"
    if notation == NOTATION_DAY_MONTH_NAME:
        return f"{value.day} {month_name} {value.year:04d}"
    if notation == NOTATION_MONTH_NAME_DAY:
        return f"{month_name} {value.day}, {value.year:04d}"

    raise ValueError(f"Unknown date notation: {notation}")


class AmountNormalizer:
    """
    Normalizes currency/amount strings to Decimal values.

    Handles currency symbols, thousand separators and comma decimals.

    Attributes:
        minimum: Exclusive lower bound of a plausible expense amount
        maximum: Exclusive upper bound of a plausible expense amount

    Example:
        >>> normalizer = AmountNormalizer()
        >>> normalizer.to_decimal("€ 1.234,56")
        Decimal('1234.56')
        >>> normalizer.is_plausible(Decimal("12500.00"))
        False
    """

    CURRENCY_SYMBOLS = ['$', '€', '£', '¥', '₹']
    CURRENCY_CODES = ['USD', 'EUR', 'GBP', 'JPY', 'INR', 'CAD', 'AUD', 'CHF']

    CENTS = Decimal("0.01")

    def __init__(self, minimum=None, maximum=None) -> None:
        """Initialize the amount normalizer with configuration."""
        self.minimum = Decimal(str(
            minimum if minimum is not None else get_config("parsing.amount.min", 0)
        ))
        self.maximum = Decimal(str(
            maximum if maximum is not None else get_config("parsing.amount.max", 10000)
        ))

        logger.debug(f"AmountNormalizer initialized (range: ({self.minimum}, {self.maximum}))")

    def to_decimal(self, amount_str: Optional[str]) -> Optional[Decimal]:
        """
        Convert an amount string to a Decimal rounded to cents.

        Args:
            amount_str: Input amount string (e.g., "$1,234.56" or "4,50").

        Returns:
            Decimal value or None if the string is not a number.
        """
        if not amount_str:
            return None

        cleaned = self._clean_amount_string(amount_str)
        if not cleaned:
            return None

        cleaned = self._handle_european_format(cleaned)
        cleaned = cleaned.replace(',', '')

        try:
            return Decimal(cleaned).quantize(self.CENTS)
        except InvalidOperation:
            logger.debug(f"Could not parse amount: {amount_str!r}")
            return None

    def normalize(self, amount_str: Optional[str]) -> Optional[str]:
        """Normalize an amount string to 'dddd.cc' form."""
        value = self.to_decimal(amount_str)
        return None if value is None else str(value)

    def is_plausible(self, value: Optional[Decimal]) -> bool:
        """True when value lies in the open (minimum, maximum) interval."""
        return value is not None and self.minimum < value < self.maximum

    def _clean_amount_string(self, amount_str: str) -> str:
        amount_str = ''.join(amount_str.split())

        for symbol in self.CURRENCY_SYMBOLS:
            amount_str = amount_str.replace(symbol, '')

        for code in self.CURRENCY_CODES:
            amount_str = re.sub(code, '', amount_str, flags=re.IGNORECASE)

        # Keep only digits, comma and dot
        return re.sub(r'[^\d,.]', '', amount_str)

    def _handle_european_format(self, amount_str: str) -> str:
        """
        Convert comma-decimal amounts to dot-decimal.

        "4,50" and "1.234,56" are European; "1,234.56" is left alone.
        """
        if amount_str.count(',') != 1:
            return amount_str

        comma_pos = amount_str.rfind(',')
        dot_pos = amount_str.rfind('.')
        after_comma = amount_str[comma_pos + 1:]

        if comma_pos > dot_pos and len(after_comma) <= 2 and after_comma.isdigit():
            amount_str = amount_str.replace('.', '').replace(',', '.')

        return amount_str


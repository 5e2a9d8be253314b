"""
Receipt Structure Analyzer Module.

Decides whether extracted text looks like a purchase receipt and, if so,
reads the merchant and total from their usual positions: the merchant
name is printed first, the total near the end.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from config import get_config
from expense_scanner.postprocessor.normalizers import AmountNormalizer
from expense_scanner.utils.helpers import non_empty_lines
from expense_scanner.utils.logger import get_logger
from .rules import AMOUNT_TOKEN_PATTERN

# Initialize module logger
logger = get_logger(__name__)


RECEIPT_VOCABULARY = (
    'receipt', 'invoice', 'bill', 'payment', 'purchase', 'transaction',
    'total', 'subtotal', 'tax', 'vat', 'change', 'cash', 'card',
    'thank you', 'thanks for', 'come again', 'store', 'shop',
    '€', '£', '$',
)

TOTAL_LABELS = ('total', 'amount due', 'balance')

AMOUNT_RULE_LABELED = 'labeled_total'
AMOUNT_RULE_LARGEST = 'largest_amount'

_HAS_LETTER = re.compile(r'[^\W\d_]')


@dataclass(frozen=True)
class ReceiptSignal:
    """
    Receipt classification result.

    Attributes:
        is_receipt: True when enough vocabulary terms are present
        confidence: Share of the vocabulary found, 0..1
        matched_terms: Vocabulary terms found in the text
    """
    is_receipt: bool
    confidence: float
    matched_terms: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ReceiptStructure:
    """
    Merchant and total read from receipt layout.

    Attributes:
        merchant: Merchant line, or None
        amount: Total within the sanity range, or None
        amount_rule: 'labeled_total' or 'largest_amount' when amount is set
    """
    merchant: Optional[str] = None
    amount: Optional[Decimal] = None
    amount_rule: Optional[str] = None


class ReceiptAnalyzer:
    """
    Vocabulary-based receipt detection and positional field reading.

    Attributes:
        vocabulary: Terms counted by detect_receipt()
        min_keywords: Distinct terms needed to classify as receipt
        merchant_scan_lines: Leading lines searched for the merchant
        total_scan_lines: Trailing lines searched for the total

    Example:
        >>> analyzer = ReceiptAnalyzer()
        >>> text = "STARBUCKS COFFEE\\n12/01/2024\\nTotal: €4.50\\nThank you"
        >>> analyzer.detect_receipt(text).is_receipt
        True
        >>> analyzer.parse_structure(text).amount
        Decimal('4.50')
    """

    def __init__(
        self,
        amount_normalizer: Optional[AmountNormalizer] = None,
        vocabulary=RECEIPT_VOCABULARY,
        min_keywords: Optional[int] = None
    ) -> None:
        self.amount_normalizer = amount_normalizer or AmountNormalizer()
        self.vocabulary = tuple(vocabulary)
        if min_keywords is None:
            min_keywords = get_config("parsing.receipt.min_keywords", 3)
        self.min_keywords = min_keywords
        self.merchant_scan_lines = get_config("parsing.receipt.merchant_scan_lines", 5)
        self.total_scan_lines = get_config("parsing.receipt.total_scan_lines", 10)

    def detect_receipt(self, text: str) -> ReceiptSignal:
        """
        Score text against the receipt vocabulary.

        Each term counts once however often it occurs.

        Args:
            text: Extracted document text.

        Returns:
            ReceiptSignal with confidence = matched / vocabulary size.
        """
        content = (text or "").lower()
        matched = [term for term in self.vocabulary if term in content]

        confidence = min(len(matched) / len(self.vocabulary), 1.0) if self.vocabulary else 0.0
        is_receipt = len(matched) >= self.min_keywords

        logger.debug(
            f"Receipt signal: {len(matched)} terms {matched} "
            f"(receipt: {is_receipt}, confidence: {confidence:.2f})"
        )

        return ReceiptSignal(is_receipt=is_receipt, confidence=confidence, matched_terms=matched)

    def parse_structure(self, text: str) -> ReceiptStructure:
        """
        Read merchant and total from receipt layout.

        Args:
            text: Extracted document text.

        Returns:
            ReceiptStructure; fields not found are None.
        """
        lines = non_empty_lines(text or "")

        merchant = self._find_merchant(lines)
        amount, rule = self._find_labeled_total(lines), AMOUNT_RULE_LABELED
        if amount is None:
            amount, rule = self._find_largest_amount(lines), AMOUNT_RULE_LARGEST

        return ReceiptStructure(
            merchant=merchant,
            amount=amount,
            amount_rule=rule if amount is not None else None
        )

    def _find_merchant(self, lines: List[str]) -> Optional[str]:
        candidates = [
            line for line in lines[:self.merchant_scan_lines]
            if 3 <= len(line) <= 50 and _HAS_LETTER.search(line)
        ]
        if not candidates:
            return None
        return max(candidates, key=len)

    def _find_labeled_total(self, lines: List[str]) -> Optional[Decimal]:
        for line in reversed(lines[-self.total_scan_lines:]):
            lowered = line.lower()
            if not any(label in lowered for label in TOTAL_LABELS):
                continue

            tokens = AMOUNT_TOKEN_PATTERN.findall(line)
            if not tokens:
                continue

            value = self.amount_normalizer.to_decimal(tokens[-1])
            if self.amount_normalizer.is_plausible(value):
                return value

            logger.debug(f"Discarding implausible total {value} on line {line!r}")

        return None

    def _find_largest_amount(self, lines: List[str]) -> Optional[Decimal]:
        values = [
            self.amount_normalizer.to_decimal(token)
            for line in lines
            for token in AMOUNT_TOKEN_PATTERN.findall(line)
        ]
        plausible = [value for value in values if self.amount_normalizer.is_plausible(value)]
        return max(plausible) if plausible else None

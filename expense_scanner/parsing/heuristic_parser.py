"""
Heuristic Parser Module.

Generic fallback for documents that are not recognizable receipts.
Runs the date, amount and merchant rule banks over the whole text and
pairs the results by position.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterator, List, Optional, Sequence, Tuple

from expense_scanner.postprocessor.normalizers import AmountNormalizer
from expense_scanner.utils.logger import get_logger
from .candidates import AmountCandidate, DateCandidate, MerchantCandidate
from .rules import (
    AMOUNT_RULES,
    AMOUNT_TOKEN_PATTERN,
    DATE_RULES,
    MERCHANT_RULES,
    PatternRule,
    collect,
)

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class ParseResult:
    """
    Candidates found by the heuristic parser, each list in document order.

    Amount candidates are already restricted to the sanity range and
    carry their numeric value in ``values``.
    """
    dates: List[DateCandidate] = field(default_factory=list)
    amounts: List[AmountCandidate] = field(default_factory=list)
    values: List[Decimal] = field(default_factory=list)
    merchants: List[MerchantCandidate] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.dates or self.amounts or self.merchants)

    def paired(self) -> Iterator[Tuple[Decimal, Optional[DateCandidate], Optional[MerchantCandidate]]]:
        """
        Pair the i-th amount with the i-th date and merchant.

        Order-based only: with several line items a record may get the
        wrong date or merchant.
        """
        for index, value in enumerate(self.values):
            date = self.dates[index] if index < len(self.dates) else None
            merchant = self.merchants[index] if index < len(self.merchants) else None
            yield value, date, merchant


class HeuristicParser:
    """
    Rule-bank parser for dates, amounts and merchants.

    Attributes:
        amount_normalizer: Converts and range-checks amount candidates
        date_rules: Ordered date rule bank
        amount_rules: Ordered amount rule bank
        merchant_rules: Ordered merchant rule bank

    Example:
        >>> parser = HeuristicParser()
        >>> result = parser.parse("Invoice #123 - Amount: $85.00")
        >>> result.values
        [Decimal('85.00')]
    """

    def __init__(
        self,
        amount_normalizer: Optional[AmountNormalizer] = None,
        date_rules: Sequence[PatternRule] = DATE_RULES,
        amount_rules: Sequence[PatternRule] = AMOUNT_RULES,
        merchant_rules: Sequence[PatternRule] = MERCHANT_RULES
    ) -> None:
        self.amount_normalizer = amount_normalizer or AmountNormalizer()
        self.date_rules = date_rules
        self.amount_rules = amount_rules
        self.merchant_rules = merchant_rules

    def parse(self, text: str) -> ParseResult:
        """Run all three rule banks over text."""
        amounts = self.find_amounts(text)
        result = ParseResult(
            dates=self.find_dates(text),
            amounts=amounts,
            values=[self.amount_normalizer.to_decimal(c.value) for c in amounts],
            merchants=self.find_merchants(text),
        )

        logger.debug(
            f"Heuristic parse: {len(result.dates)} dates, "
            f"{len(result.amounts)} amounts, {len(result.merchants)} merchants"
        )
        return result

    def find_dates(self, text: str) -> List[DateCandidate]:
        """All date matches in document order."""
        return collect(self.date_rules, text or "")

    def find_amounts(self, text: str) -> List[AmountCandidate]:
        """
        Currency amount matches in document order.

        Candidates outside the open sanity range are discarded as noise
        (phone numbers, references, IDs).
        """
        confident = []
        for candidate in collect(self.amount_rules, text or ""):
            value = self.amount_normalizer.to_decimal(candidate.value)
            if self.amount_normalizer.is_plausible(value):
                confident.append(candidate)
            else:
                logger.debug(f"Discarding amount {candidate.value!r} from rule {candidate.rule}")
        return confident

    def find_merchants(self, text: str) -> List[MerchantCandidate]:
        """All-caps and labeled merchant lines in document order."""
        return collect(self.merchant_rules, text or "")

    def residual_amount(self, text: str) -> Optional[Decimal]:
        """
        Best-guess amount for a document with no confident candidates.

        Returns the first bare decimal number within the sanity range
        that no amount rule matched, or None.
        """
        text = text or ""
        claimed = [candidate.span for rule in self.amount_rules for candidate in rule.finditer(text)]

        for match in AMOUNT_TOKEN_PATTERN.finditer(text):
            start, end = match.span()
            if any(start < other_end and other_start < end for other_start, other_end in claimed):
                continue

            value = self.amount_normalizer.to_decimal(match.group(1))
            if self.amount_normalizer.is_plausible(value):
                return value

        return None

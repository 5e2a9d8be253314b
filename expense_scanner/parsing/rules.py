"""
Pattern Rule Banks.

Each field (date, amount, merchant) is described by an ordered list of
named rules. A rule is a compiled pattern plus the group holding the
field value, evaluated in priority order by collect(). Adding a layout
means adding a rule here, not a branch in the parser.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Pattern, Sequence, Type

from .candidates import AmountCandidate, Candidate, DateCandidate, MerchantCandidate


@dataclass(frozen=True)
class PatternRule:
    """
    A named pattern producing candidates of one type.

    Attributes:
        name: Rule name, recorded on every candidate it produces
        pattern: Compiled regular expression
        candidate_type: Candidate subclass to build
        group: Match group holding the field value
        accept: Optional predicate on the stripped value
    """
    name: str
    pattern: Pattern
    candidate_type: Type[Candidate]
    group: int = 1
    accept: Optional[Callable[[str], bool]] = None

    def finditer(self, text: str) -> Iterator[Candidate]:
        """Yield one candidate per accepted match, in document order."""
        for match in self.pattern.finditer(text):
            value = match.group(self.group).strip()
            if not value:
                continue
            if self.accept is not None and not self.accept(value):
                continue
            yield self.candidate_type(value, self.name, match.span())


def collect(rules: Sequence[PatternRule], text: str) -> List[Candidate]:
    """
    Run a rule bank over text.

    Rules are applied in priority order. A match overlapping a span
    already claimed by an earlier rule (or an earlier match) is dropped.
    Survivors are returned in document order.

    Example:
        >>> [c.value for c in collect(AMOUNT_RULES, "Total: €4.50")]
        ['4.50']
    """
    claimed: List[Candidate] = []

    for rule in rules:
        for candidate in rule.finditer(text):
            if any(candidate.overlaps(existing) for existing in claimed):
                continue
            claimed.append(candidate)

    return sorted(claimed, key=lambda candidate: candidate.start)


# =============================================================================
# DATES
# =============================================================================

_MONTH = (
    r'(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?'
    r'|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\.?'
)
_ORDINAL = r'(?:st|nd|rd|th)?'

DATE_RULES: List[PatternRule] = [
    # 12/01/2024, 12-01-24, 12.01.2024
    PatternRule(
        'day_first',
        re.compile(r'\b(\d{1,2}[/\-.]\d{1,2}[/\-.](?:\d{4}|\d{2}))\b'),
        DateCandidate,
    ),
    # 2024/01/12, 2024-01-12
    PatternRule(
        'year_first',
        re.compile(r'\b(\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2})\b'),
        DateCandidate,
    ),
    # 12 Jan 2024, 3rd March 2024
    PatternRule(
        'day_month_name',
        re.compile(rf'\b(\d{{1,2}}{_ORDINAL}\s+{_MONTH},?\s+\d{{4}})\b', re.IGNORECASE),
        DateCandidate,
    ),
    # Jan 12, 2024
    PatternRule(
        'month_name_day',
        re.compile(rf'\b({_MONTH}\s+\d{{1,2}}{_ORDINAL},?\s+\d{{4}})\b', re.IGNORECASE),
        DateCandidate,
    ),
]


# =============================================================================
# AMOUNTS
# =============================================================================

# 4.50, 4,50, 1,234.56, 1.234,56 (never part of a longer number or a date)
AMOUNT_TOKEN = r'(?<![\d.,])(\d{1,3}(?:[.,]\d{3})+[.,]\d{2}|\d+[.,]\d{2})(?![.,]?\d)'

AMOUNT_TOKEN_PATTERN = re.compile(AMOUNT_TOKEN)


def _amount_rule(name: str, template: str, flags: int = 0) -> PatternRule:
    return PatternRule(
        name,
        re.compile(template.format(amount=AMOUNT_TOKEN), flags),
        AmountCandidate,
    )


AMOUNT_RULES: List[PatternRule] = [
    _amount_rule('euro_prefix', r'€\s*{amount}'),
    _amount_rule('euro_suffix', r'{amount}\s*€'),
    _amount_rule('eur_code_prefix', r'\bEUR\s*{amount}'),
    _amount_rule('eur_code_suffix', r'{amount}\s*EUR\b'),
    _amount_rule('total_label', r'\bTotal:?\s*€?\s*{amount}', re.IGNORECASE),
    _amount_rule('amount_label', r'\bAmount:?\s*€?\s*{amount}', re.IGNORECASE),
    _amount_rule('sum_label', r'\bSum:?\s*€?\s*{amount}', re.IGNORECASE),
    _amount_rule('dollar_prefix', r'\$\s*{amount}'),
    _amount_rule('dollar_suffix', r'{amount}\s*\$'),
]


# =============================================================================
# MERCHANTS
# =============================================================================

def _merchant_length_ok(value: str) -> bool:
    return 3 <= len(value) < 100


MERCHANT_RULES: List[PatternRule] = [
    # A line in capitals only, e.g. "STARBUCKS COFFEE"
    PatternRule(
        'all_caps_line',
        re.compile(r"^([A-Z][A-Z &.,'-]+)$", re.MULTILINE),
        MerchantCandidate,
        accept=_merchant_length_ok,
    ),
    # Store: / Merchant: / Vendor: labels
    PatternRule(
        'labeled_line',
        re.compile(r'^[ \t]*(?:store|merchant|vendor)[ \t]*:[ \t]*(.+)$', re.IGNORECASE | re.MULTILINE),
        MerchantCandidate,
        accept=_merchant_length_ok,
    ),
]


__all__ = [
    'PatternRule',
    'collect',
    'DATE_RULES',
    'AMOUNT_RULES',
    'MERCHANT_RULES',
    'AMOUNT_TOKEN',
    'AMOUNT_TOKEN_PATTERN',
]

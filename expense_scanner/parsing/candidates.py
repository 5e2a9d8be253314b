"""
Parsing Candidate Data Classes.

A candidate is a raw field value produced by a single pattern rule,
not yet confirmed as correct. Candidates stay inside the parsing stage.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Candidate:
    """
    A raw pattern match.

    Attributes:
        value: Matched text, already reduced to the field value
        rule: Name of the rule that produced the match
        span: (start, end) offsets of the whole match in the text
    """
    value: str
    rule: str
    span: Tuple[int, int]

    @property
    def start(self) -> int:
        return self.span[0]

    def overlaps(self, other: "Candidate") -> bool:
        """True when the two match spans share at least one character."""
        return self.span[0] < other.span[1] and other.span[0] < self.span[1]


class DateCandidate(Candidate):
    """Raw date match, e.g. '12/01/2024'."""


class AmountCandidate(Candidate):
    """Raw amount match, e.g. '4.50' from 'Total: €4.50'."""


class MerchantCandidate(Candidate):
    """Raw merchant match, e.g. 'STARBUCKS COFFEE'."""

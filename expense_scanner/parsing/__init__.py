"""
Parsing Module for the Expense Scanner.

This module turns extracted text into field candidates:
    - Receipt detection and positional merchant/total reading
    - Rule-bank parsing of dates, amounts and merchants
"""

from .candidates import AmountCandidate, DateCandidate, MerchantCandidate
from .heuristic_parser import HeuristicParser, ParseResult
from .receipt_analyzer import ReceiptAnalyzer, ReceiptSignal, ReceiptStructure, RECEIPT_VOCABULARY
from .rules import PatternRule, collect, DATE_RULES, AMOUNT_RULES, MERCHANT_RULES

__all__ = [
    'ReceiptAnalyzer',
    'ReceiptSignal',
    'ReceiptStructure',
    'RECEIPT_VOCABULARY',
    'HeuristicParser',
    'ParseResult',
    'PatternRule',
    'collect',
    'DATE_RULES',
    'AMOUNT_RULES',
    'MERCHANT_RULES',
    'DateCandidate',
    'AmountCandidate',
    'MerchantCandidate',
]

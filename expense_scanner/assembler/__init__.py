"""
Result Assembler Module for the Expense Scanner.

This module orchestrates the pipeline and defines its outputs:
    - ExpenseRecord: terminal expense record
    - ProcessingResult: tagged success/failure outcome
    - ExpenseAssembler: document -> records orchestration
"""

from .assembler import ExpenseAssembler
from .expense_record import ExpenseRecord, Source
from .processing_result import ProcessingResult

__all__ = [
    'ExpenseAssembler',
    'ExpenseRecord',
    'Source',
    'ProcessingResult',
]

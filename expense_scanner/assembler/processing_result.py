"""
Processing Result Data Class.

Tagged outcome of one pipeline call: either the records, or exactly one
of the named failure kinds with the backend message.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import json

from expense_scanner.utils.exceptions import ExpenseScannerError, FailureKind
from .expense_record import ExpenseRecord


@dataclass(frozen=True)
class ProcessingResult:
    """
    Success with records, or a failure kind.

    Attributes:
        success: True when records were produced
        records: Expense records (non-empty on success, empty on failure)
        failure: Failure kind when success is False
        error: Human-readable failure message
        details: Failure details from the raised error
        filename: Name of the processed document

    Example:
        >>> result = assembler.run(document)
        >>> if result.success:
        ...     store(result.records)
        ... elif result.failure is FailureKind.PDF_PARSE_FAILURE:
        ...     print("could not read this file")
    """
    success: bool
    records: List[ExpenseRecord] = field(default_factory=list)
    failure: Optional[FailureKind] = None
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    filename: Optional[str] = None

    @classmethod
    def ok(cls, records: List[ExpenseRecord], filename: Optional[str] = None) -> 'ProcessingResult':
        return cls(success=True, records=list(records), filename=filename)

    @classmethod
    def failed(cls, error: ExpenseScannerError, filename: Optional[str] = None) -> 'ProcessingResult':
        """Build a failure result from a raised extraction-stage error."""
        return cls(
            success=False,
            failure=error.kind,
            error=error.message,
            details=dict(error.details),
            filename=filename
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'filename': self.filename,
            'success': self.success,
            'records': [record.to_dict() for record in self.records],
            'failure': self.failure.value if self.failure else None,
            'error': self.error,
            'details': self.details
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False, default=str)

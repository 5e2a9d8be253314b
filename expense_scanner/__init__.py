"""
Expense Scanner - Source Package.

This package turns photographed or uploaded receipts and invoices into
structured expense records. Each module has a single responsibility.

Modules:
    - input_handler: Uploaded files and camera frames as RawDocument
    - text_extraction: OCR for images, text layer for PDFs
    - parsing: Receipt detection and heuristic rule banks
    - postprocessor: Date/amount normalization and categorization
    - assembler: Orchestration into ExpenseRecord lists

Architecture:
    Input → Text Extraction → Receipt Analyzer → Heuristic Parser → Assembler
                                     ↓                  ↓
                               Date Normalizer + Expense Categorizer
"""

__version__ = "1.0.0"

__all__ = [
    'input_handler',
    'text_extraction',
    'parsing',
    'postprocessor',
    'assembler',
    'utils'
]

"""
Extracted Text Data Class.

This module defines the output of the Text Extraction Engine: the plain
text of a document plus where it came from.

Classes:
    ExtractedText: Plain text derived once per RawDocument
"""

from dataclasses import dataclass, field
from typing import Any, Dict

SOURCE_OCR = "ocr"
SOURCE_PDF_TEXT_LAYER = "pdf_text_layer"


@dataclass
class ExtractedText:
    """
    Plain text extracted from a single document.

    Attributes:
        text: Full text, pages joined with newlines in page order
        source_kind: 'ocr' for images, 'pdf_text_layer' for PDFs
        page_count: Number of pages read
        engine: Backend that produced the text
        processing_time: Time taken for extraction in seconds
        metadata: Additional backend metadata

    Example:
        >>> extracted = engine.extract_text(document)
        >>> print(extracted.source_kind, extracted.page_count)
        pdf_text_layer 2
    """
    text: str
    source_kind: str
    page_count: int = 1
    engine: str = "unknown"
    processing_time: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

"""
Text Extraction Module for the Expense Scanner.

This module turns raw documents into plain text:
    - OCR for receipt photos and scanned images (Tesseract)
    - Embedded text layer for PDFs (PyMuPDF, pdfplumber)

Backend settings are injected through ExtractionConfig.
"""

from .engine import TextExtractionEngine
from .extraction_config import ExtractionConfig
from .extracted_text import ExtractedText, SOURCE_OCR, SOURCE_PDF_TEXT_LAYER
from .pdf_text import PDFTextExtractor
from .tesseract_backend import TesseractBackend

__all__ = [
    'TextExtractionEngine',
    'ExtractionConfig',
    'ExtractedText',
    'PDFTextExtractor',
    'TesseractBackend',
    'SOURCE_OCR',
    'SOURCE_PDF_TEXT_LAYER',
]

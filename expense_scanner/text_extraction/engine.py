"""
Main Text Extraction Engine Module.

This module provides the TextExtractionEngine class, the unified
interface turning a RawDocument into plain text. It routes by format:
OCR for images, embedded text layer for PDFs.

Usage:
    from expense_scanner.text_extraction import TextExtractionEngine, ExtractionConfig

    engine = TextExtractionEngine(ExtractionConfig.from_config())
    extracted = engine.extract_text(document)
    print(extracted.text)
"""

import asyncio
import time
from typing import Optional

from expense_scanner.input_handler.raw_document import RawDocument
from expense_scanner.input_handler.image_processor import ImageProcessor
from expense_scanner.utils.logger import get_logger
from expense_scanner.utils.exceptions import OCRFailure, UnsupportedFormat
from .extracted_text import ExtractedText, SOURCE_OCR, SOURCE_PDF_TEXT_LAYER
from .extraction_config import ExtractionConfig
from .pdf_text import PDFTextExtractor, ProgressCallback
from .tesseract_backend import TesseractBackend

# Initialize module logger
logger = get_logger(__name__)


class TextExtractionEngine:
    """
    Routes documents to the OCR or PDF text-layer backend.

    The OCR backend is created on first use, so PDF-only callers do not
    need Tesseract installed. Any object with ``recognize(image) -> str``
    (and optionally ``name`` and ``metadata()``) can stand in for it.

    Attributes:
        config: Injected ExtractionConfig
        ocr_backend: OCR backend (TesseractBackend by default)
        image_processor: ImageProcessor preparing images for OCR
        pdf_extractor: PDFTextExtractor for the text layer

    Example:
        >>> engine = TextExtractionEngine()
        >>> extracted = engine.extract_text(document)
        >>> extracted.source_kind
        'ocr'
    """

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        ocr_backend=None,
        image_processor: Optional[ImageProcessor] = None,
        pdf_extractor: Optional[PDFTextExtractor] = None
    ) -> None:
        self.config = config or ExtractionConfig.from_config()
        self._ocr_backend = ocr_backend
        self.image_processor = image_processor or ImageProcessor()
        self.pdf_extractor = pdf_extractor or PDFTextExtractor(self.config)

        logger.debug(
            f"TextExtractionEngine initialized "
            f"(pdf backend: {self.config.pdf_backend})"
        )

    @property
    def ocr_backend(self):
        if self._ocr_backend is None:
            self._ocr_backend = TesseractBackend(self.config)
        return self._ocr_backend

    def extract_text(
        self,
        document: RawDocument,
        progress: Optional[ProgressCallback] = None
    ) -> ExtractedText:
        """
        Extract the plain text of a document.

        Args:
            document: RawDocument to read.
            progress: Optional callback receiving (fraction, status).

        Returns:
            ExtractedText for the document.

        Raises:
            UnsupportedFormat: If the document is neither image nor PDF.
            OCRFailure: If OCR fails or recognizes nothing.
            PDFParseFailure: If the PDF is corrupt or encrypted.
        """
        kind = document.format_kind

        if kind == "image":
            return self._extract_from_image(document, progress)
        if kind == "pdf":
            return self._extract_from_pdf(document, progress)

        raise UnsupportedFormat(document.declared_format, [], document.filename)

    async def extract_text_async(
        self,
        document: RawDocument,
        progress: Optional[ProgressCallback] = None
    ) -> ExtractedText:
        """Run extract_text() on a worker thread as one awaitable unit of work."""
        return await asyncio.to_thread(self.extract_text, document, progress)

    def _extract_from_image(
        self,
        document: RawDocument,
        progress: Optional[ProgressCallback]
    ) -> ExtractedText:
        name = document.display_name
        start_time = time.time()
        self._report(progress, 0.0, "loading image")

        try:
            image, metadata = self.image_processor.prepare(document.data)
        except Exception as e:
            logger.error(f"Could not decode image {name}: {e}")
            raise OCRFailure(name, f"could not decode image: {e}")

        self._report(progress, 0.3, "recognizing text")

        try:
            text = self.ocr_backend.recognize(image)
        except Exception as e:
            logger.error(f"OCR processing failed for {name}: {e}")
            raise OCRFailure(name, str(e))

        if not text or not text.strip():
            logger.error(f"OCR recognized no text in {name}")
            raise OCRFailure(name, "no text recognized")

        if hasattr(self.ocr_backend, 'metadata'):
            metadata.update(self.ocr_backend.metadata())

        self._report(progress, 1.0, "done")

        return ExtractedText(
            text=text,
            source_kind=SOURCE_OCR,
            page_count=1,
            engine=getattr(self.ocr_backend, 'name', type(self.ocr_backend).__name__),
            processing_time=time.time() - start_time,
            metadata=metadata
        )

    def _extract_from_pdf(
        self,
        document: RawDocument,
        progress: Optional[ProgressCallback]
    ) -> ExtractedText:
        start_time = time.time()
        self._report(progress, 0.0, "opening pdf")

        text, metadata = self.pdf_extractor.extract(
            document.data,
            document.display_name,
            progress
        )

        self._report(progress, 1.0, "done")

        return ExtractedText(
            text=text,
            source_kind=SOURCE_PDF_TEXT_LAYER,
            page_count=metadata['page_count'],
            engine=metadata['backend'],
            processing_time=time.time() - start_time,
            metadata=metadata
        )

    @staticmethod
    def _report(progress: Optional[ProgressCallback], fraction: float, status: str) -> None:
        if progress is not None:
            progress(fraction, status)

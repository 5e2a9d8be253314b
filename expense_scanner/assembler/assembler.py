"""
Result Assembler Module.

This module provides the ExpenseAssembler class, which orchestrates the
complete pipeline from raw document to expense records:

    1. Text extraction (OCR or PDF text layer), fatal on error
    2. Receipt detection and positional reading
    3. Heuristic rule-bank parsing as fallback
    4. Manual-review record when nothing was found

Usage:
    from expense_scanner.assembler import ExpenseAssembler

    assembler = ExpenseAssembler()
    records = assembler.process(document)
"""

from datetime import date
from decimal import Decimal
from typing import Callable, List, Optional

from config import get_config
from expense_scanner.input_handler.raw_document import RawDocument
from expense_scanner.parsing.heuristic_parser import HeuristicParser, ParseResult
from expense_scanner.parsing.receipt_analyzer import ReceiptAnalyzer
from expense_scanner.postprocessor.categorizer import Category, ExpenseCategorizer
from expense_scanner.postprocessor.normalizers import AmountNormalizer, DateNormalizer
from expense_scanner.text_extraction.engine import TextExtractionEngine
from expense_scanner.text_extraction.pdf_text import ProgressCallback
from expense_scanner.utils.exceptions import ExpenseScannerError
from expense_scanner.utils.helpers import text_snippet
from expense_scanner.utils.logger import get_logger
from .expense_record import ExpenseRecord, Source
from .processing_result import ProcessingResult

# Initialize module logger
logger = get_logger(__name__)


class ExpenseAssembler:
    """
    Turns one document into one or more expense records.

    The assembler keeps no state between calls; every collaborator is
    read-only after construction, so calls may run concurrently.

    Attributes:
        engine: TextExtractionEngine
        analyzer: ReceiptAnalyzer for the receipt path
        parser: HeuristicParser for the fallback path
        date_normalizer: DateNormalizer for date candidates
        categorizer: ExpenseCategorizer
        today: Callable returning the ingestion date

    Example:
        >>> assembler = ExpenseAssembler()
        >>> records = assembler.parse_text(
        ...     "STARBUCKS COFFEE\\n12/01/2024\\nTotal: €4.50\\nThank you",
        ...     "receipt.jpg"
        ... )
        >>> records[0].source
        <Source.RECEIPT_SCAN: 'receipt_scan'>
    """

    def __init__(
        self,
        engine: Optional[TextExtractionEngine] = None,
        analyzer: Optional[ReceiptAnalyzer] = None,
        parser: Optional[HeuristicParser] = None,
        date_normalizer: Optional[DateNormalizer] = None,
        categorizer: Optional[ExpenseCategorizer] = None,
        today: Optional[Callable[[], date]] = None
    ) -> None:
        amount_normalizer = AmountNormalizer()

        self.engine = engine or TextExtractionEngine()
        self.analyzer = analyzer or ReceiptAnalyzer(amount_normalizer)
        self.parser = parser or HeuristicParser(amount_normalizer)
        self.date_normalizer = date_normalizer or DateNormalizer()
        self.categorizer = categorizer or ExpenseCategorizer()
        self.today = today or date.today

        self.receipt_snippet_length = get_config("parsing.snippet.receipt", 500)
        self.document_snippet_length = get_config("parsing.snippet.document", 300)

        logger.debug("ExpenseAssembler initialized")

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def process(
        self,
        document: RawDocument,
        progress: Optional[ProgressCallback] = None
    ) -> List[ExpenseRecord]:
        """
        Extract expense records from a document.

        Args:
            document: RawDocument from the input handler or camera.
            progress: Optional extraction progress callback.

        Returns:
            Non-empty list of ExpenseRecord.

        Raises:
            UnsupportedFormat, OCRFailure, PDFParseFailure: Extraction
                failed; no record is produced.
        """
        name = document.display_name
        logger.info(f"Processing document: {name} ({document.mime_type}, {document.size} bytes)")

        extracted = self.engine.extract_text(document, progress)
        logger.debug(
            f"Extracted {len(extracted.text)} characters from {name} "
            f"via {extracted.source_kind} in {extracted.processing_time:.2f}s"
        )

        return self.parse_text(extracted.text, name)

    def parse_text(self, text: str, filename: str = "document") -> List[ExpenseRecord]:
        """
        Build expense records from already extracted text.

        Never fails: when nothing is recognized a single manual-review
        record is returned.

        Args:
            text: Document text.
            filename: Name used in placeholder descriptions.

        Returns:
            Non-empty list of ExpenseRecord.
        """
        text = text or ""
        parsed = self.parser.parse(text)

        signal = self.analyzer.detect_receipt(text)
        if signal.is_receipt:
            record = self._receipt_record(text, filename, parsed)
            if record is not None:
                logger.info(
                    f"Receipt detected in {filename}: {record.description} "
                    f"{record.amount} ({record.category.value})"
                )
                return [record]
            logger.debug(f"Receipt detected in {filename} but no usable total, falling back")

        records = self._document_records(text, filename, parsed)
        if records:
            logger.info(f"Found {len(records)} expense(s) in {filename}")
            return records

        logger.warning(f"No structured data found in {filename}, manual review needed")
        return [self._manual_record(text, filename, parsed)]

    def run(
        self,
        document: RawDocument,
        progress: Optional[ProgressCallback] = None
    ) -> ProcessingResult:
        """
        Process a document and return a tagged result instead of raising.

        Extraction-stage failures become a failed ProcessingResult with
        their FailureKind. Errors without a failure kind still propagate.
        """
        try:
            records = self.process(document, progress)
        except ExpenseScannerError as e:
            if e.kind is None:
                raise
            logger.error(f"Could not read {document.display_name}: {e}")
            return ProcessingResult.failed(e, document.display_name)

        return ProcessingResult.ok(records, document.display_name)

    async def process_async(
        self,
        document: RawDocument,
        progress: Optional[ProgressCallback] = None
    ) -> List[ExpenseRecord]:
        """Awaitable process(): extraction runs on a worker thread."""
        extracted = await self.engine.extract_text_async(document, progress)
        return self.parse_text(extracted.text, document.display_name)

    def capture_and_process(self, camera) -> List[ExpenseRecord]:
        """
        Take a photo with a CameraCapture and process it.

        Raises:
            CameraUnavailable: No camera device or permission.
            CaptureCancelled: The user stopped the camera without a photo.
        """
        document = camera.capture()
        return self.process(document)

    # =========================================================================
    # RECORD BUILDERS
    # =========================================================================

    def _receipt_record(
        self,
        text: str,
        filename: str,
        parsed: ParseResult
    ) -> Optional[ExpenseRecord]:
        structure = self.analyzer.parse_structure(text)
        if structure.amount is None:
            return None

        description = (
            structure.merchant
            or self._first_merchant(parsed)
            or f"Receipt from {filename}"
        )
        category_source = structure.merchant or self._first_merchant(parsed) or text

        return ExpenseRecord(
            date=self._first_date(parsed),
            description=description,
            amount=structure.amount,
            category=self.categorizer.categorize(category_source),
            source=Source.RECEIPT_SCAN,
            needs_review=False,
            raw_text_snippet=text_snippet(text, self.receipt_snippet_length)
        )

    def _document_records(
        self,
        text: str,
        filename: str,
        parsed: ParseResult
    ) -> List[ExpenseRecord]:
        # Positional pairing is unreliable with several line items
        ambiguous = len(parsed.values) > 1
        snippet = text_snippet(text, self.document_snippet_length)

        records = []
        for amount, date_candidate, merchant in parsed.paired():
            merchant_name = merchant.value if merchant else None
            records.append(ExpenseRecord(
                date=self._normalize_date(date_candidate.value if date_candidate else None),
                description=merchant_name or f"Expense from {filename}",
                amount=amount,
                category=self.categorizer.categorize(merchant_name or text),
                source=Source.DOCUMENT_SCAN,
                needs_review=ambiguous,
                raw_text_snippet=snippet
            ))

        return records

    def _manual_record(self, text: str, filename: str, parsed: ParseResult) -> ExpenseRecord:
        residual = self.parser.residual_amount(text)

        return ExpenseRecord(
            date=self._ingestion_date(),
            description=self._first_merchant(parsed) or f"Document: {filename}",
            amount=residual if residual is not None else Decimal("0.00"),
            category=Category.GENERAL,
            source=Source.DOCUMENT_MANUAL,
            needs_review=True,
            raw_text_snippet=text_snippet(text, self.document_snippet_length)
        )

    # =========================================================================
    # FIELD HELPERS
    # =========================================================================

    def _first_date(self, parsed: ParseResult) -> str:
        for candidate in parsed.dates:
            normalized = self.date_normalizer.normalize(candidate.value)
            if normalized:
                return normalized
        return self._ingestion_date()

    def _normalize_date(self, raw: Optional[str]) -> str:
        return self.date_normalizer.normalize(raw) or self._ingestion_date()

    def _ingestion_date(self) -> str:
        return self.today().strftime(self.date_normalizer.output_format)

    @staticmethod
    def _first_merchant(parsed: ParseResult) -> Optional[str]:
        return parsed.merchants[0].value if parsed.merchants else None


__all__ = ['ExpenseAssembler']

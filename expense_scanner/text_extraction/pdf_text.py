"""
PDF Text Layer Module.

This module reads the embedded text layer of PDF receipts and invoices:
    - Page-by-page text extraction, page order preserved
    - Optional page-range extraction in worker processes
    - Encrypted and corrupt document detection

Pages are never rasterized or OCRed; a scanned PDF without a text layer
simply yields empty text. PyMuPDF is the primary backend, pdfplumber the
alternative.
"""

import importlib.util
import io
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any, Callable, Dict, List, Optional, Tuple

from expense_scanner.utils.logger import get_logger
from expense_scanner.utils.exceptions import PDFParseFailure
from .extraction_config import ExtractionConfig

# Initialize module logger
logger = get_logger(__name__)

ProgressCallback = Callable[[float, str], None]


def pymupdf_available() -> bool:
    return importlib.util.find_spec("fitz") is not None


def _open_pymupdf(data: bytes):
    import fitz  # PyMuPDF
    return fitz.open(stream=data, filetype="pdf")


def _extract_page_range(data: bytes, start: int, stop: int) -> List[Tuple[int, str]]:
    """
    Extract pages ``start..stop-1`` with PyMuPDF.

    Runs inside a worker process, so it opens its own document handle.
    """
    with _open_pymupdf(data) as doc:
        return [(index, doc.load_page(index).get_text()) for index in range(start, stop)]


def split_page_ranges(page_count: int, workers: int) -> List[Tuple[int, int]]:
    """
    Split ``page_count`` pages into at most ``workers`` contiguous ranges.

    Example:
        >>> split_page_ranges(5, 2)
        [(0, 3), (3, 5)]
    """
    workers = max(1, min(workers, page_count))
    size, remainder = divmod(page_count, workers)
    ranges = []
    start = 0
    for i in range(workers):
        stop = start + size + (1 if i < remainder else 0)
        ranges.append((start, stop))
        start = stop
    return ranges


def join_pages(pages: Dict[int, str]) -> str:
    """Join page texts by page index, whatever order they arrived in."""
    return '\n'.join(pages[index].rstrip('\n') for index in sorted(pages))


class PDFTextExtractor:
    """
    Extractor for the embedded text layer of PDF files.

    Attributes:
        config: Injected ExtractionConfig (backend and worker count)

    Example:
        >>> extractor = PDFTextExtractor(ExtractionConfig())
        >>> text, metadata = extractor.extract(pdf_bytes, "invoice.pdf")
        >>> metadata['page_count']
        2
    """

    def __init__(self, config: ExtractionConfig) -> None:
        self.config = config
        logger.debug(
            f"PDFTextExtractor initialized (backend={config.pdf_backend}, "
            f"workers={config.pdf_max_workers})"
        )

    def extract(
        self,
        data: bytes,
        filename: str = "document.pdf",
        progress: Optional[ProgressCallback] = None
    ) -> Tuple[str, Dict[str, Any]]:
        """
        Extract the text layer of every page.

        Args:
            data: Raw PDF bytes.
            filename: Name used in log and error messages.
            progress: Optional callback receiving (fraction, status).

        Returns:
            Tuple of (text with pages joined in order, metadata dictionary).

        Raises:
            PDFParseFailure: If the PDF is corrupt or password protected.
        """
        logger.info(f"Extracting PDF text layer: {filename}")

        backend = self.config.pdf_backend
        if backend == "pymupdf" and not pymupdf_available():
            logger.warning("PyMuPDF is not installed, falling back to pdfplumber")
            backend = "pdfplumber"

        if backend == "pdfplumber":
            pages = self._extract_with_pdfplumber(data, filename, progress)
        else:
            pages = self._extract_with_pymupdf(data, filename, progress)

        text = join_pages(pages)
        metadata = {
            'backend': backend,
            'page_count': len(pages),
            'empty_pages': sorted(i + 1 for i, page in pages.items() if not page.strip()),
        }

        if not text.strip():
            logger.warning(f"PDF has no embedded text layer: {filename}")

        logger.info(f"Extracted text from {len(pages)} page(s) of {filename}")
        return text, metadata

    def _extract_with_pymupdf(
        self,
        data: bytes,
        filename: str,
        progress: Optional[ProgressCallback]
    ) -> Dict[int, str]:
        logger.debug("Using PyMuPDF for text extraction")

        try:
            doc = _open_pymupdf(data)
        except Exception as e:
            logger.error(f"PyMuPDF could not open {filename}: {e}")
            raise PDFParseFailure(filename, str(e))

        pages = {}
        with doc:
            if doc.needs_pass:
                raise PDFParseFailure(filename, "document is password protected")

            page_count = doc.page_count
            if page_count == 0:
                raise PDFParseFailure(filename, "document has no pages")
            workers = min(self.config.pdf_max_workers, page_count)

            if workers <= 1:
                try:
                    for index in range(page_count):
                        pages[index] = doc.load_page(index).get_text()
                        self._report(progress, index + 1, page_count)
                except Exception as e:
                    logger.error(f"PyMuPDF failed on {filename}: {e}")
                    raise PDFParseFailure(filename, str(e))

        if workers > 1:
            return self._extract_in_workers(data, filename, page_count, workers, progress)

        return pages

    def _extract_in_workers(
        self,
        data: bytes,
        filename: str,
        page_count: int,
        workers: int,
        progress: Optional[ProgressCallback]
    ) -> Dict[int, str]:
        """Extract page ranges in worker processes and collect them by index."""
        logger.debug(f"Extracting {page_count} pages with {workers} workers")
        pages: Dict[int, str] = {}

        try:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(_extract_page_range, data, start, stop)
                    for start, stop in split_page_ranges(page_count, workers)
                ]
                for future in as_completed(futures):
                    pages.update(future.result())
                    self._report(progress, len(pages), page_count)
        except Exception as e:
            logger.error(f"Parallel PDF extraction failed for {filename}: {e}")
            raise PDFParseFailure(filename, str(e))

        return pages

    def _extract_with_pdfplumber(
        self,
        data: bytes,
        filename: str,
        progress: Optional[ProgressCallback]
    ) -> Dict[int, str]:
        import pdfplumber

        logger.debug("Using pdfplumber for text extraction")
        pages = {}

        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                page_count = len(pdf.pages)
                if page_count == 0:
                    raise ValueError("document has no pages")
                for index, page in enumerate(pdf.pages):
                    pages[index] = page.extract_text() or ""
                    self._report(progress, index + 1, page_count)
        except Exception as e:
            # pdfminer raises PDFPasswordIncorrect for encrypted files
            logger.error(f"pdfplumber failed on {filename}: {e!r}")
            raise PDFParseFailure(filename, str(e) or type(e).__name__)

        return pages

    @staticmethod
    def _report(progress: Optional[ProgressCallback], done: int, total: int) -> None:
        if progress is not None and total:
            progress(done / total, f"reading page {done}/{total}")

"""
Extraction Configuration.

Backend settings for the Text Extraction Engine, snapshotted from
settings.yaml into an immutable object and injected at construction.
"""

from dataclasses import dataclass

from config import get_config
from expense_scanner.utils.exceptions import ConfigurationError

PDF_BACKENDS = ("pymupdf", "pdfplumber")


@dataclass(frozen=True)
class ExtractionConfig:
    """
    OCR and PDF backend settings.

    Attributes:
        ocr_language: Tesseract language code (e.g., "eng")
        ocr_psm: Tesseract page segmentation mode
        ocr_oem: Tesseract OCR engine mode
        ocr_extra_config: Additional Tesseract flags
        pdf_backend: 'pymupdf' or 'pdfplumber'
        pdf_max_workers: Worker processes for page extraction (1 = inline)
    """
    ocr_language: str = "eng"
    ocr_psm: int = 3
    ocr_oem: int = 3
    ocr_extra_config: str = ""
    pdf_backend: str = "pymupdf"
    pdf_max_workers: int = 1

    def __post_init__(self):
        if self.pdf_backend not in PDF_BACKENDS:
            raise ConfigurationError(
                "pdf.backend",
                f"expected one of {PDF_BACKENDS}, got '{self.pdf_backend}'"
            )
        if self.pdf_max_workers < 1:
            raise ConfigurationError("pdf.max_workers", "must be at least 1")

    @property
    def tesseract_flags(self) -> str:
        """Command-line flags passed to Tesseract."""
        parts = [f"--psm {self.ocr_psm}", f"--oem {self.ocr_oem}"]
        if self.ocr_extra_config:
            parts.append(self.ocr_extra_config)
        return ' '.join(parts)

    @classmethod
    def from_config(cls) -> 'ExtractionConfig':
        """Build an ExtractionConfig from the loaded settings.yaml."""
        return cls(
            ocr_language=get_config("ocr.tesseract.lang", "eng"),
            ocr_psm=int(get_config("ocr.tesseract.psm", 3)),
            ocr_oem=int(get_config("ocr.tesseract.oem", 3)),
            ocr_extra_config=get_config("ocr.tesseract.config", "") or "",
            pdf_backend=get_config("pdf.backend", "pymupdf"),
            pdf_max_workers=int(get_config("pdf.max_workers", 1)),
        )

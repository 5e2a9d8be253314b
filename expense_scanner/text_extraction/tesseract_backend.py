"""
Tesseract OCR Backend.

This module recognizes text in receipt images using Tesseract
(pytesseract).

Requirements:
    - Tesseract OCR installed on the system
    - pytesseract Python package
"""

import time
from typing import Any, Dict

import pytesseract
from PIL import Image

from expense_scanner.utils.logger import get_logger
from .extraction_config import ExtractionConfig

# Initialize module logger
logger = get_logger(__name__)


class TesseractBackend:
    """
    Tesseract OCR backend implementation.

    Attributes:
        config: Injected ExtractionConfig with language and mode settings

    Example:
        >>> backend = TesseractBackend(ExtractionConfig())
        >>> text = backend.recognize(image)
    """

    name = "tesseract"

    def __init__(self, config: ExtractionConfig) -> None:
        self.config = config
        self._version = None

        logger.debug(
            f"TesseractBackend initialized (lang={config.ocr_language}, "
            f"psm={config.ocr_psm}, oem={config.ocr_oem})"
        )

    @property
    def version(self) -> str:
        """Installed Tesseract version; raises if the binary is missing."""
        if self._version is None:
            self._version = str(pytesseract.get_tesseract_version())
            logger.info(f"Tesseract version: {self._version}")
        return self._version

    def recognize(self, image: Image.Image) -> str:
        """
        Recognize the text of an image.

        Args:
            image: Prepared RGB PIL Image.

        Returns:
            Recognized text with line breaks preserved.

        Raises:
            pytesseract.TesseractNotFoundError: If Tesseract is not installed.
            pytesseract.TesseractError: If Tesseract fails on the image.
        """
        start_time = time.time()

        # Raises TesseractNotFoundError when the binary is absent
        version = self.version
        logger.debug(f"Running Tesseract {version} (flags: {self.config.tesseract_flags})")

        text = pytesseract.image_to_string(
            image,
            lang=self.config.ocr_language,
            config=self.config.tesseract_flags
        )

        logger.info(
            f"OCR completed: {len(text.split())} words "
            f"({time.time() - start_time:.2f}s)"
        )
        return text

    def metadata(self) -> Dict[str, Any]:
        return {
            'psm': self.config.ocr_psm,
            'oem': self.config.ocr_oem,
            'language': self.config.ocr_language,
            'tesseract_version': self._version,
        }


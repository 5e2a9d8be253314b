"""
Main Input Handler Module.

This module provides the InputHandler class, the entry point for
documents coming from an upload picker or from disk. It validates the
declared format and wraps the payload in a RawDocument.

Usage:
    from expense_scanner.input_handler import InputHandler

    handler = InputHandler()
    document = handler.accept(upload_bytes, "image/png", "receipt.png")

    # Or from a file on disk
    document = handler.load("scans/fuel.pdf")

Classes:
    InputHandler: Format validation and RawDocument construction
"""

import mimetypes
from pathlib import Path
from typing import List, Optional, Union

from config import get_config
from expense_scanner.utils.logger import get_logger
from expense_scanner.utils.helpers import get_file_extension
from expense_scanner.utils.exceptions import InputError, UnsupportedFormat

from .raw_document import RawDocument, PDF_MIME_TYPE, IMAGE_MIME_TYPES, normalize_mime_type


# Initialize module logger
logger = get_logger(__name__)


class InputHandler:
    """
    Input adapter for uploaded expense documents.

    Accepts JPEG, PNG and WebP images and PDFs. A filename ending in
    ``.pdf`` is accepted as a PDF even when the MIME type is generic
    (``application/octet-stream`` from some upload pickers).

    Attributes:
        supported_formats: Set of accepted MIME types

    Example:
        >>> handler = InputHandler()
        >>> doc = handler.accept(data, "application/octet-stream", "bill.pdf")
        >>> doc.format_kind
        'pdf'
    """

    PDF_EXTENSIONS = {'.pdf'}

    def __init__(self, supported_formats: Optional[List[str]] = None) -> None:
        """
        Initialize the InputHandler.

        Args:
            supported_formats: Optional MIME type list. If not provided,
                              it is loaded from settings.yaml.
        """
        formats = supported_formats or get_config(
            "input.supported_formats",
            list(IMAGE_MIME_TYPES) + [PDF_MIME_TYPE]
        )
        self.supported_formats = {normalize_mime_type(f) for f in formats}

        logger.debug(f"InputHandler initialized with formats: {sorted(self.supported_formats)}")

    def is_supported(self, declared_format: str, filename: Optional[str] = None) -> bool:
        """Check a declared format (and filename fallback) against the supported set."""
        mime_type = normalize_mime_type(declared_format)

        if mime_type in self.supported_formats:
            return True

        return (
            PDF_MIME_TYPE in self.supported_formats
            and get_file_extension(filename) in self.PDF_EXTENSIONS
        )

    def accept(
        self,
        data: bytes,
        declared_format: str,
        filename: Optional[str] = None
    ) -> RawDocument:
        """
        Validate an uploaded payload and wrap it as a RawDocument.

        Args:
            data: Raw file bytes.
            declared_format: MIME type declared by the uploader.
            filename: Optional original filename.

        Returns:
            RawDocument ready for text extraction.

        Raises:
            UnsupportedFormat: If neither the MIME type nor the filename
                              identifies a supported format.
        """
        if not self.is_supported(declared_format, filename):
            logger.error(f"Rejected {filename or 'document'}: unsupported type '{declared_format}'")
            raise UnsupportedFormat(
                declared_format,
                sorted(self.supported_formats),
                filename
            )

        mime_type = normalize_mime_type(declared_format)
        if mime_type not in self.supported_formats:
            # Generic MIME type, accepted through the .pdf extension
            declared_format = PDF_MIME_TYPE

        document = RawDocument(
            data=bytes(data),
            declared_format=declared_format,
            filename=filename
        )

        logger.info(f"Accepted document: {document}")
        return document

    def load(self, filepath: Union[str, Path]) -> RawDocument:
        """
        Read a document from disk and accept it.

        The MIME type is guessed from the file extension.

        Args:
            filepath: Path to the receipt or invoice file.

        Returns:
            RawDocument for the file.

        Raises:
            InputError: If the path does not point to a file.
            UnsupportedFormat: If the file type is not supported.
        """
        path = Path(filepath)

        if not path.is_file():
            raise InputError(f"File not found: {filepath}", {"filepath": str(filepath)})

        declared_format, _ = mimetypes.guess_type(path.name)
        if declared_format is None and path.suffix.lower() == '.webp':
            declared_format = "image/webp"

        return self.accept(
            path.read_bytes(),
            declared_format or "application/octet-stream",
            path.name
        )

"""
Raw Document Data Class.

The unprocessed bytes of an uploaded or captured file together with
its declared format. Created per call and never persisted.
"""

from dataclasses import dataclass
from typing import Optional

PDF_MIME_TYPE = "application/pdf"
IMAGE_MIME_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")


def normalize_mime_type(declared_format: Optional[str]) -> str:
    """Lower-case a MIME type and drop any parameters."""
    if not declared_format:
        return ""
    return declared_format.split(";", 1)[0].strip().lower()


@dataclass(frozen=True)
class RawDocument:
    """
    Represents a document handed to the scanner.

    Attributes:
        data: Raw file bytes
        declared_format: MIME type reported by the upload or capture source
        filename: Original filename, if known

    Example:
        >>> doc = RawDocument(b"%PDF-1.7...", "application/pdf", "fuel.pdf")
        >>> doc.format_kind
        'pdf'
    """
    data: bytes
    declared_format: str
    filename: Optional[str] = None

    @property
    def mime_type(self) -> str:
        return normalize_mime_type(self.declared_format)

    @property
    def format_kind(self) -> str:
        """
        Extraction route for this document: 'image', 'pdf' or 'unknown'.

        Image MIME types win over the filename; a generic MIME type with
        a ``.pdf`` filename is routed to the PDF path.
        """
        if self.mime_type in IMAGE_MIME_TYPES:
            return "image"
        if self.mime_type == PDF_MIME_TYPE:
            return "pdf"
        if self.filename and self.filename.lower().endswith(".pdf"):
            return "pdf"
        return "unknown"

    @property
    def display_name(self) -> str:
        return self.filename or "document"

    @property
    def size(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return (
            f"RawDocument(filename='{self.display_name}', "
            f"format='{self.mime_type}', "
            f"bytes={self.size})"
        )

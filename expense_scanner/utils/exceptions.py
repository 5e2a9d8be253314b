"""
Custom Exceptions Module.

This module defines the exceptions raised by the expense scanner.
Only the input and extraction stages raise; parsing never fails and
degrades to a manual-review record instead.

Exception Hierarchy:
    ExpenseScannerError (base)
    ├── InputError
    │   ├── UnsupportedFormat
    │   ├── CameraUnavailable
    │   └── CaptureCancelled
    ├── ExtractionError
    │   ├── OCRFailure
    │   └── PDFParseFailure
    └── ConfigurationError
"""

from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """Closed set of fatal failure kinds surfaced to callers."""

    UNSUPPORTED_FORMAT = "unsupported_format"
    OCR_FAILURE = "ocr_failure"
    PDF_PARSE_FAILURE = "pdf_parse_failure"
    CAMERA_UNAVAILABLE = "camera_unavailable"


class ExpenseScannerError(Exception):
    """
    Base exception for all expense scanner errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    # Set on subclasses that map to a caller-visible failure kind
    kind: Optional[FailureKind] = None

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(ExpenseScannerError):
    """Base exception for input handling errors."""
    pass


class UnsupportedFormat(InputError):
    """
    Raised when a document's declared format is not supported.

    Example:
        >>> raise UnsupportedFormat("text/plain", ["application/pdf"])
    """

    kind = FailureKind.UNSUPPORTED_FORMAT

    def __init__(self, declared_format: str, supported_formats: list, filename: str = None):
        message = f"Unsupported file type: '{declared_format}'"
        details = {
            "declared_format": declared_format,
            "supported_formats": supported_formats,
        }
        if filename:
            details["filename"] = filename
        super().__init__(message, details)


class CameraUnavailable(InputError):
    """Raised when no camera device exists or access was denied."""

    kind = FailureKind.CAMERA_UNAVAILABLE

    def __init__(self, reason: str = None):
        message = "Camera not available"
        details = {"reason": reason}
        super().__init__(message, details)


class CaptureCancelled(InputError):
    """Raised when the user stops the camera without taking a photo."""

    def __init__(self):
        super().__init__("Camera capture cancelled by user")


# =============================================================================
# EXTRACTION ERRORS
# =============================================================================

class ExtractionError(ExpenseScannerError):
    """Base exception for text extraction errors."""
    pass


class OCRFailure(ExtractionError):
    """Raised when OCR errors out or recognizes no usable text."""

    kind = FailureKind.OCR_FAILURE

    def __init__(self, filename: str, reason: str = None):
        message = f"Failed to extract text from image: {filename}"
        details = {"filename": filename, "reason": reason}
        super().__init__(message, details)


class PDFParseFailure(ExtractionError):
    """Raised when a PDF is corrupt, encrypted or otherwise unreadable."""

    kind = FailureKind.PDF_PARSE_FAILURE

    def __init__(self, filename: str, reason: str = None):
        message = f"Failed to extract text from PDF: {filename}"
        details = {"filename": filename, "reason": reason}
        super().__init__(message, details)


class ConfigurationError(ExpenseScannerError):
    """Raised when configuration values are missing or invalid."""

    def __init__(self, key: str, reason: str = None):
        message = f"Invalid configuration value: {key}"
        details = {"key": key, "reason": reason}
        super().__init__(message, details)


__all__ = [
    'FailureKind',
    'ExpenseScannerError',
    'InputError',
    'UnsupportedFormat',
    'CameraUnavailable',
    'CaptureCancelled',
    'ExtractionError',
    'OCRFailure',
    'PDFParseFailure',
    'ConfigurationError',
]

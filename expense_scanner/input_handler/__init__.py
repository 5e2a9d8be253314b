"""
Input Handler Module for the Expense Scanner.

This module provides functionality for:
    - Validating declared document formats
    - Wrapping uploads and files as RawDocument objects
    - Capturing receipt photos from a camera
    - Preparing images for OCR

Supported formats:
    - PDF (application/pdf, or any file ending in .pdf)
    - Images: JPEG, PNG, WebP
"""

from .raw_document import RawDocument
from .handler import InputHandler
from .image_processor import ImageProcessor
from .camera import CameraCapture, FrameSource, OpenCVFrameSource

__all__ = [
    'RawDocument',
    'InputHandler',
    'ImageProcessor',
    'CameraCapture',
    'FrameSource',
    'OpenCVFrameSource',
]

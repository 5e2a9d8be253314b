"""
Shared fixtures for the expense scanner test suite.

Provides fake OCR and camera backends and in-memory test documents
(PNG images, PDFs generated with PyMuPDF).
"""

import io
import os
import sys
from datetime import date

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from config import ConfigurationManager
from expense_scanner.input_handler.raw_document import RawDocument

COFFEE_RECEIPT_TEXT = "STARBUCKS COFFEE\n12/01/2024\nTotal: €4.50\nThank you"
DOLLAR_INVOICE_TEXT = "Invoice #123 — Amount: $85.00"
FIELDLESS_TEXT = "please see attached\nnothing else here"

FIXED_TODAY = date(2025, 3, 1)


class FakeOCRBackend:
    """OCR backend returning canned text, or raising a canned error."""

    name = "fake-ocr"

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = 0

    def recognize(self, image):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text

    def metadata(self):
        return {'fake': True}


class FakeFrameSource:
    """FrameSource recording open/release calls."""

    def __init__(self, frame=b"", open_error=None, frame_error=None):
        self.frame = frame
        self.open_error = open_error
        self.frame_error = frame_error
        self.opened = False
        self.released = 0

    def open(self):
        if self.open_error is not None:
            raise self.open_error
        self.opened = True

    def request_frame(self):
        if self.frame_error is not None:
            raise self.frame_error
        return self.frame

    def release(self):
        self.released += 1


def make_image(image_format="PNG", width=120, height=80, mode="RGB"):
    from PIL import Image

    color = (255, 255, 255, 255) if mode == "RGBA" else "white"
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format=image_format)
    return buffer.getvalue()


def make_png(width=120, height=80, mode="RGB"):
    return make_image("PNG", width, height, mode)


def make_pdf(pages, encrypted=False):
    """Build a PDF with one text page per entry of ``pages``."""
    import fitz

    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text, fontsize=11)

    options = {}
    if encrypted:
        options = {
            'encryption': fitz.PDF_ENCRYPT_AES_256,
            'owner_pw': 'owner-secret',
            'user_pw': 'user-secret',
        }

    data = doc.tobytes(**options)
    doc.close()
    return data


@pytest.fixture(autouse=True)
def reset_configuration(monkeypatch):
    """Every test starts from the default settings.yaml."""
    monkeypatch.delenv("EXPENSE_SCANNER_CONFIG", raising=False)
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def image_document(png_bytes):
    return RawDocument(png_bytes, "image/png", "receipt.png")


@pytest.fixture
def encrypted_pdf_document():
    data = make_pdf(["Total 10.00"], encrypted=True)
    return RawDocument(data, "application/pdf", "locked.pdf")


@pytest.fixture
def today():
    return lambda: FIXED_TODAY

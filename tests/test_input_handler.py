"""
Tests for the input adapter: format validation, file loading and
camera capture with guaranteed device release.
"""

import pytest

from expense_scanner.input_handler import CameraCapture, InputHandler, RawDocument
from expense_scanner.utils.exceptions import (
    CameraUnavailable,
    CaptureCancelled,
    FailureKind,
    InputError,
    UnsupportedFormat,
)
from conftest import FakeFrameSource, make_pdf


class TestAccept:
    """InputHandler.accept() format validation."""

    @pytest.mark.parametrize("mime_type, kind", [
        ("image/jpeg", "image"),
        ("image/png", "image"),
        ("image/webp", "image"),
        ("application/pdf", "pdf"),
    ])
    def test_supported_formats(self, mime_type, kind):
        document = InputHandler().accept(b"payload", mime_type, "upload")
        assert isinstance(document, RawDocument)
        assert document.format_kind == kind
        assert document.data == b"payload"

    def test_mime_parameters_and_case_are_ignored(self):
        document = InputHandler().accept(b"x", "Image/PNG; charset=binary", "r.png")
        assert document.format_kind == "image"

    def test_pdf_extension_accepted_with_generic_mime_type(self):
        document = InputHandler().accept(b"%PDF", "application/octet-stream", "Bill.PDF")
        assert document.declared_format == "application/pdf"
        assert document.format_kind == "pdf"

    def test_unsupported_format_raises(self):
        with pytest.raises(UnsupportedFormat) as excinfo:
            InputHandler().accept(b"hello", "text/plain", "notes.txt")

        error = excinfo.value
        assert error.kind is FailureKind.UNSUPPORTED_FORMAT
        assert error.details["declared_format"] == "text/plain"
        assert error.details["filename"] == "notes.txt"

    def test_generic_mime_without_pdf_extension_rejected(self):
        with pytest.raises(UnsupportedFormat):
            InputHandler().accept(b"data", "application/octet-stream", "scan.tiff")

    def test_custom_supported_formats(self):
        handler = InputHandler(supported_formats=["application/pdf"])
        assert handler.is_supported("application/pdf")
        assert not handler.is_supported("image/png")


class TestLoad:
    """InputHandler.load() reads documents from disk."""

    def test_load_pdf(self, tmp_path):
        path = tmp_path / "invoice.pdf"
        path.write_bytes(make_pdf(["Invoice"]))

        document = InputHandler().load(path)
        assert document.filename == "invoice.pdf"
        assert document.format_kind == "pdf"
        assert document.size == path.stat().st_size

    def test_load_webp(self, tmp_path):
        path = tmp_path / "photo.webp"
        path.write_bytes(b"RIFF0000WEBP")

        document = InputHandler().load(path)
        assert document.mime_type == "image/webp"

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(InputError):
            InputHandler().load(tmp_path / "missing.jpg")

    def test_load_unsupported_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")

        with pytest.raises(UnsupportedFormat):
            InputHandler().load(path)


class TestCameraCapture:
    """The camera device is released on every exit path."""

    def test_capture_returns_jpeg_document(self):
        source = FakeFrameSource(frame=b"jpeg-bytes")

        document = CameraCapture(source).capture()

        assert document.data == b"jpeg-bytes"
        assert document.declared_format == "image/jpeg"
        assert document.filename == "receipt-photo.jpg"
        assert source.opened
        assert source.released == 1

    def test_cancelled_capture_releases_device(self):
        source = FakeFrameSource(frame=None)

        with pytest.raises(CaptureCancelled):
            CameraCapture(source).capture()

        assert source.released == 1

    def test_unavailable_camera_releases_device(self):
        source = FakeFrameSource(open_error=CameraUnavailable("permission denied"))

        with pytest.raises(CameraUnavailable) as excinfo:
            CameraCapture(source).capture()

        assert excinfo.value.kind is FailureKind.CAMERA_UNAVAILABLE
        assert source.released == 1

    def test_frame_error_releases_device(self):
        source = FakeFrameSource(frame_error=RuntimeError("device lost"))

        with pytest.raises(RuntimeError):
            CameraCapture(source).request_frame()

        assert source.released == 1

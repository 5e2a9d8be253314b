"""
Camera Capture Module.

Receipt photos can be taken directly from a camera. Frame acquisition
sits behind the FrameSource capability so the scanning pipeline has no
dependency on any interface toolkit; the default source uses OpenCV.

The camera device is held only for the duration of one capture and is
released on every exit path: success, user cancellation or error.

Usage:
    from expense_scanner.input_handler import CameraCapture

    camera = CameraCapture()
    document = camera.capture()
"""

from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Protocol

from config import get_config
from expense_scanner.utils.logger import get_logger
from expense_scanner.utils.exceptions import CameraUnavailable, CaptureCancelled

from .raw_document import RawDocument

# Initialize module logger
logger = get_logger(__name__)

CAPTURE_FILENAME = "receipt-photo.jpg"
CAPTURE_MIME_TYPE = "image/jpeg"


class FrameSource(Protocol):
    """
    Capability interface for anything that can deliver one camera frame.

    ``open`` raises CameraUnavailable when no device or permission exists.
    ``request_frame`` returns JPEG bytes, or None when the user cancels.
    ``release`` must be safe to call more than once.
    """

    def open(self) -> None:
        ...

    def request_frame(self) -> Optional[bytes]:
        ...

    def release(self) -> None:
        ...


class OpenCVFrameSource:
    """
    FrameSource backed by ``cv2.VideoCapture``.

    Attributes:
        device_index: Camera index passed to VideoCapture
        frame_width: Requested frame width
        frame_height: Requested frame height
        jpeg_quality: JPEG encoding quality (0-100)
        confirm: Optional callback invoked before grabbing the frame;
                 returning False means the user cancelled
    """

    def __init__(
        self,
        device_index: Optional[int] = None,
        confirm: Optional[Callable[[], bool]] = None
    ) -> None:
        self.device_index = device_index if device_index is not None else \
            get_config("input.camera.device_index", 0)
        self.frame_width = get_config("input.camera.frame_width", 1920)
        self.frame_height = get_config("input.camera.frame_height", 1080)
        self.jpeg_quality = get_config("input.camera.jpeg_quality", 90)
        self.confirm = confirm
        self._capture = None

    def open(self) -> None:
        try:
            import cv2
        except ImportError as e:
            raise CameraUnavailable(f"OpenCV not installed: {e}")

        self._cv2 = cv2
        capture = cv2.VideoCapture(self.device_index)
        # Keep the handle even when opening failed so release() can close it
        self._capture = capture

        if not capture.isOpened():
            raise CameraUnavailable(f"No camera at device index {self.device_index}")

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.frame_width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.frame_height)

    def request_frame(self) -> Optional[bytes]:
        if self.confirm is not None and not self.confirm():
            return None

        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise CameraUnavailable("Camera returned no frame")

        ok, encoded = self._cv2.imencode(
            '.jpg', frame, [self._cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality]
        )
        if not ok:
            raise CameraUnavailable("Could not encode camera frame")

        return encoded.tobytes()

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None


class CameraCapture:
    """
    Captures a single receipt photo as a RawDocument.

    Example:
        >>> camera = CameraCapture(OpenCVFrameSource(device_index=1))
        >>> document = camera.capture()
        >>> document.declared_format
        'image/jpeg'
    """

    def __init__(self, source: Optional[FrameSource] = None) -> None:
        self.source = source or OpenCVFrameSource()

    @contextmanager
    def _session(self) -> Iterator[FrameSource]:
        """Hold the device for one capture and always release it."""
        try:
            self.source.open()
            logger.debug("Camera opened")
            yield self.source
        finally:
            self.source.release()
            logger.debug("Camera released")

    def request_frame(self) -> RawDocument:
        """
        Acquire one frame and wrap it as a JPEG RawDocument.

        Raises:
            CameraUnavailable: If no device or permission exists.
            CaptureCancelled: If the user stopped the camera.
        """
        with self._session() as source:
            frame = source.request_frame()

        if not frame:
            logger.info("Camera capture cancelled")
            raise CaptureCancelled()

        logger.info(f"Captured camera frame ({len(frame)} bytes)")
        return RawDocument(
            data=frame,
            declared_format=CAPTURE_MIME_TYPE,
            filename=CAPTURE_FILENAME
        )

    def capture(self) -> RawDocument:
        """Alias of request_frame() for callers reacting to a user action."""
        return self.request_frame()

"""
Image Processor Module.

This module prepares photographed or uploaded receipt images for OCR:
    - Decoding from raw bytes
    - Orientation correction from EXIF data
    - RGB conversion
    - Downscaling of oversized camera frames
    - Contrast and sharpness enhancement

Supports: JPEG, PNG, WebP
"""

import io
from typing import Any, Dict, Tuple

from PIL import Image, ImageEnhance, ExifTags

from config import get_config
from expense_scanner.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)

# EXIF orientation value -> operations restoring an upright image
_ORIENTATION_FIXES = {
    2: (Image.Transpose.FLIP_LEFT_RIGHT,),
    3: (Image.Transpose.ROTATE_180,),
    4: (Image.Transpose.FLIP_TOP_BOTTOM,),
    5: (Image.Transpose.FLIP_LEFT_RIGHT, Image.Transpose.ROTATE_270),
    6: (Image.Transpose.ROTATE_270,),
    7: (Image.Transpose.FLIP_LEFT_RIGHT, Image.Transpose.ROTATE_90),
    8: (Image.Transpose.ROTATE_90,),
}


class ImageProcessor:
    """
    Processor for receipt images.

    Attributes:
        max_width: Maximum image width in pixels
        max_height: Maximum image height in pixels
        auto_orient: Whether to auto-correct orientation
        enhance_contrast: Whether to apply contrast enhancement

    Example:
        >>> processor = ImageProcessor()
        >>> image, metadata = processor.prepare(jpeg_bytes)
    """

    def __init__(self) -> None:
        """Initialize the image processor with configuration."""
        self.max_width = get_config("input.image.max_width", 2480)
        self.max_height = get_config("input.image.max_height", 3508)
        self.auto_orient = get_config("input.image.auto_orient", True)
        self.enhance_contrast = get_config("input.image.enhance_contrast", True)

        logger.debug(
            f"ImageProcessor initialized "
            f"(max_size={self.max_width}x{self.max_height})"
        )

    def prepare(self, data: bytes) -> Tuple[Image.Image, Dict[str, Any]]:
        """
        Decode image bytes and apply the OCR preparation pipeline.

        Args:
            data: Encoded image bytes.

        Returns:
            Tuple of (prepared PIL Image, metadata dictionary).

        Raises:
            OSError: If the bytes are not a decodable image
                     (PIL.UnidentifiedImageError is a subclass).
        """
        image = Image.open(io.BytesIO(data))
        image.load()

        metadata = {
            'original_width': image.width,
            'original_height': image.height,
            'original_mode': image.mode,
            'format': image.format,
        }

        if self.auto_orient:
            image = self._fix_orientation(image)

        image = self._convert_to_rgb(image)
        image = self._resize_if_needed(image)

        if self.enhance_contrast:
            image = self._enhance_image(image)

        metadata['processed_width'] = image.width
        metadata['processed_height'] = image.height

        logger.debug(
            f"Prepared image: {image.width}x{image.height} "
            f"(original: {metadata['original_width']}x{metadata['original_height']})"
        )
        return image, metadata

    def _fix_orientation(self, image: Image.Image) -> Image.Image:
        """
        Rotate the image upright based on EXIF data.

        Phone cameras store rotation in EXIF rather than rotating pixels.
        """
        exif = image.getexif()
        if not exif:
            return image

        orientation_tag = next(
            (tag for tag, name in ExifTags.TAGS.items() if name == 'Orientation'),
            None
        )
        if orientation_tag is None or orientation_tag not in exif:
            return image

        orientation = exif[orientation_tag]
        for operation in _ORIENTATION_FIXES.get(orientation, ()):
            image = image.transpose(operation)

        if orientation in _ORIENTATION_FIXES:
            logger.debug(f"Fixed image orientation (EXIF orientation={orientation})")

        return image

    def _convert_to_rgb(self, image: Image.Image) -> Image.Image:
        """Convert to RGB, flattening transparency onto white."""
        if image.mode == 'RGB':
            return image

        original_mode = image.mode

        if image.mode == 'RGBA':
            background = Image.new('RGB', image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[3])
            image = background
        else:
            image = image.convert('RGB')

        logger.debug(f"Converted image from {original_mode} to RGB")
        return image

    def _resize_if_needed(self, image: Image.Image) -> Image.Image:
        """Downscale images exceeding the maximum size, keeping aspect ratio."""
        width, height = image.size

        if width <= self.max_width and height <= self.max_height:
            return image

        ratio = min(self.max_width / width, self.max_height / height)
        new_size = (int(width * ratio), int(height * ratio))

        image = image.resize(new_size, Image.Resampling.LANCZOS)

        logger.debug(f"Resized image from {width}x{height} to {new_size[0]}x{new_size[1]}")
        return image

    def _enhance_image(self, image: Image.Image) -> Image.Image:
        """Slightly boost contrast and sharpness for thermal-paper prints."""
        image = ImageEnhance.Contrast(image).enhance(1.2)
        image = ImageEnhance.Sharpness(image).enhance(1.1)
        return image

"""Pure image processing operations without UI dependencies."""
import cv2
import numpy as np
from PIL import Image
from typing import Tuple
import logging

logger = logging.getLogger(__name__)

Box = Tuple[int, int, int, int]


class ImageProcessingError(Exception):
    """Raised when image processing operations fail."""
    pass


def _clamp_percentage(percentage: float) -> float:
    return min(max(float(percentage), -100.0), 100.0)


def _to_lut(values: np.ndarray) -> np.ndarray:
    """Round a float curve over 0..255 into a uint8 lookup table."""
    return (np.clip(values, 0.0, 255.0) + 0.5).astype(np.uint8)


def _apply_lut(image: Image.Image, lut: np.ndarray) -> Image.Image:
    """
    Map every colour channel of an image through a lookup table.

    Alpha is carried over untouched. Palette and other modes are expanded to
    RGB (or RGBA when they carry transparency) first.
    """
    if image.mode not in ('L', 'RGB', 'RGBA'):
        has_alpha = 'A' in image.mode or 'transparency' in image.info
        image = image.convert('RGBA' if has_alpha else 'RGB')

    pixels = np.asarray(image)
    if image.mode == 'RGBA':
        colour = cv2.LUT(np.ascontiguousarray(pixels[..., :3]), lut)
        result = np.dstack((colour, pixels[..., 3]))
    else:
        result = cv2.LUT(np.ascontiguousarray(pixels), lut)
    return Image.fromarray(np.ascontiguousarray(result))


def adjust_brightness(image: Image.Image, percentage: float) -> Image.Image:
    """
    Brighten or darken an image.

    Args:
        image: Source image (left untouched)
        percentage: -100 (black) .. 100 (white); values outside are clamped

    Returns:
        New image with every channel shifted by 255 * percentage / 100
    """
    shift = 255.0 * _clamp_percentage(percentage) / 100.0
    lut = _to_lut(np.arange(256, dtype=np.float64) + shift)
    return _apply_lut(image, lut)


def adjust_contrast(image: Image.Image, percentage: float) -> Image.Image:
    """
    Increase or decrease contrast around mid-grey.

    Args:
        image: Source image (left untouched)
        percentage: -100 (flat grey) .. 100 (hard threshold); values outside are clamped

    Returns:
        New image with the contrast curve applied to every channel
    """
    v = (100.0 + _clamp_percentage(percentage)) / 100.0
    levels = np.arange(256, dtype=np.float64) / 255.0

    if 0.0 <= v <= 1.0:
        curve = (0.5 + (levels - 0.5) * v) * 255.0
    elif 1.0 < v < 2.0:
        curve = (0.5 + (levels - 0.5) * (1.0 / (2.0 - v))) * 255.0
    else:
        curve = np.floor(levels + 0.5) * 255.0

    return _apply_lut(image, _to_lut(curve))


def crop_image(image: Image.Image, box: Box) -> Image.Image:
    """
    Crop image to specified coordinates.

    Args:
        image: Source image (left untouched)
        box: Tuple of (left, top, right, bottom) coordinates

    Returns:
        Cropped image

    Raises:
        ImageProcessingError: If the box is empty or reaches outside the image
    """
    left, top, right, bottom = box
    width, height = image.size
    if not (0 <= left < right <= width and 0 <= top < bottom <= height):
        raise ImageProcessingError(
            f"Crop box {box} does not fit inside a {width}x{height} image"
        )
    return image.crop((left, top, right, bottom))


def inset_box(size: Tuple[int, int], margin: int) -> Box:
    """
    Box that trims the same margin from every side.

    Args:
        size: (width, height) of the image
        margin: Pixels to remove on each side

    Returns:
        Tuple of (left, top, right, bottom)

    Raises:
        ImageProcessingError: If the image is too small for the margin
    """
    width, height = size
    if margin < 0:
        raise ImageProcessingError(f"Crop margin must not be negative, got {margin}")
    if width <= 2 * margin or height <= 2 * margin:
        raise ImageProcessingError(
            f"Image of {width}x{height} is too small to crop {margin}px from each side"
        )
    return (margin, margin, width - margin, height - margin)


def fit_within(image: Image.Image, max_width: int, max_height: int) -> Image.Image:
    """
    Shrink an image to fit a display area, keeping its aspect ratio.

    Images that already fit are returned as-is; nothing is upscaled.
    """
    width, height = image.size
    if width <= max_width and height <= max_height:
        return image

    scale = min(max_width / width, max_height / height)
    new_size = (max(1, round(width * scale)), max(1, round(height * scale)))
    logger.debug(f"Scaling {width}x{height} to {new_size[0]}x{new_size[1]} for display")
    return image.resize(new_size, Image.LANCZOS)

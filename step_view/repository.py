"""Repository for image file operations."""
import os
import stat
import shutil
import logging
import tempfile
from pathlib import Path
from typing import List, Optional, Set

from PIL import Image

logger = logging.getLogger(__name__)

# Formats whose encoder only accepts these modes; anything else is converted to RGB
_RGB_ONLY_FORMATS = {'JPEG': ('RGB', 'L', 'CMYK')}


class RepositoryError(Exception):
    """Raised when repository operations fail."""
    pass


class ScanError(RepositoryError):
    """Raised when a directory in the tree cannot be read."""
    pass


class DecodeError(RepositoryError):
    """Raised when a file cannot be decoded as an image."""
    pass


class EncodeError(RepositoryError):
    """Raised when an image cannot be written back to disk."""
    pass


class DeleteError(RepositoryError):
    """Raised when a file cannot be removed from disk."""
    pass


def is_leaf_name(name: str) -> bool:
    """
    Decide whether a file name looks like an image file.

    A name counts when it contains a '.' that is not a leading one, so
    extension-less names and dotfiles are rejected.
    """
    return '.' in name and not name.startswith('.')


def scan_images(root: Path) -> List[Path]:
    """
    Recursively collect image files below a directory.

    Entries are visited depth-first in name order. Directories are always
    recursed into, even when their name contains a '.'. Files are kept when
    is_leaf_name() accepts their name and skipped otherwise.

    Args:
        root: Directory to scan

    Returns:
        List of image file paths in scan order

    Raises:
        ScanError: If root or any directory below it cannot be read
    """
    root = Path(root)
    try:
        root_is_dir = _is_directory(root)
    except OSError as e:
        logger.error(f"Error scanning {root}: {e}")
        raise ScanError(f"Cannot read directory {root}: {e.strerror or e}") from e
    if not root_is_dir:
        logger.error(f"Not a directory: {root}")
        raise ScanError(f"Not a directory: {root}")

    images: List[Path] = []
    _scan_into(root, images, set())
    logger.info(f"Found {len(images)} images in {root}")
    return images


def _is_directory(path: Path) -> bool:
    """
    Stat a path and report whether it is a directory.

    Unlike Path.is_dir(), permission errors are raised rather than read as
    "not a directory". A dangling symlink counts as a file.
    """
    try:
        return stat.S_ISDIR(path.stat().st_mode)
    except FileNotFoundError:
        return False


def _scan_into(directory: Path, images: List[Path], seen: Set[Path]) -> None:
    real = directory.resolve()
    if real in seen:
        logger.warning(f"Skipping directory already visited through a link: {directory}")
        return
    seen.add(real)

    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
        kinds = [(entry, _is_directory(entry)) for entry in entries]
    except OSError as e:
        logger.error(f"Error scanning {directory}: {e}")
        raise ScanError(f"Cannot read directory {directory}: {e.strerror or e}") from e

    for entry, is_dir in kinds:
        if is_dir:
            _scan_into(entry, images, seen)
        elif is_leaf_name(entry.name):
            images.append(entry)
        else:
            logger.debug(f"Skipping non-image entry {entry}")


def decode_image(image_path: Path) -> Image.Image:
    """
    Load an image file fully into memory.

    Multi-frame files (animated GIF, multi-page TIFF) yield their first frame.

    Args:
        image_path: Path to image file

    Returns:
        Decoded PIL Image, detached from the file

    Raises:
        DecodeError: If the file is missing, unreadable or not a supported image
    """
    try:
        with Image.open(image_path) as image:
            image.seek(0)
            image.load()
            return image.copy()
    except Exception as e:
        logger.error(f"Unable to decode {image_path}: {e}")
        raise DecodeError(f"Unable to decode {image_path}: {str(e)}") from e


def encode_image(
    image_path: Path,
    image: Image.Image,
    image_format: str = "JPEG",
    quality: int = 95
) -> None:
    """
    Write an image to a path in the given format, replacing the file.

    The format does not follow the file extension: a .png path edited with
    the default settings ends up holding JPEG data. The data is written to a
    sibling temp file first and moved over the target, so a failed encode
    leaves the original bytes in place. The file keeps its permission bits.

    Args:
        image_path: Destination path
        image: Image to write
        image_format: Pillow format name
        quality: Encoder quality for lossy formats

    Raises:
        EncodeError: If the image cannot be written
    """
    image_path = Path(image_path)
    image_format = image_format.upper()
    if image_format == 'JPG':
        image_format = 'JPEG'

    save_kwargs = {}
    if image_format in ('JPEG', 'WEBP'):
        save_kwargs['quality'] = quality

    tmp_name: Optional[str] = None
    try:
        allowed_modes = _RGB_ONLY_FORMATS.get(image_format)
        if allowed_modes and image.mode not in allowed_modes:
            image = image.convert('RGB')

        with tempfile.NamedTemporaryFile(
            dir=image_path.parent, prefix='.', suffix='.tmp', delete=False
        ) as tmp:
            tmp_name = tmp.name
            image.save(tmp, format=image_format, **save_kwargs)
        if image_path.exists():
            shutil.copymode(image_path, tmp_name)
        os.replace(tmp_name, image_path)
        tmp_name = None
        logger.debug(f"Saved image to {image_path} as {image_format}")
    except Exception as e:
        logger.error(f"Error encoding image {image_path}: {e}")
        raise EncodeError(f"Error encoding image {image_path}: {str(e)}") from e
    finally:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)


def delete_image(image_path: Path) -> None:
    """
    Remove an image file from disk.

    Args:
        image_path: Path to image file to remove

    Raises:
        DeleteError: If the file cannot be removed, including when it is already gone
    """
    try:
        Path(image_path).unlink()
        logger.debug(f"Removed image {image_path}")
    except OSError as e:
        logger.error(f"Error removing image {image_path}: {e}")
        raise DeleteError(f"Error deleting {image_path}: {e.strerror or e}") from e

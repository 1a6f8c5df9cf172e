"""Service layer for orchestrating gallery operations."""
import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from PIL import Image

from .config import AppSettings
from .events import GalleryEvent
from .image_ops import (
    adjust_brightness, adjust_contrast, crop_image, inset_box,
    ImageProcessingError
)
from .repository import (
    scan_images, decode_image, encode_image, delete_image,
    DeleteError
)
from .state import GalleryState

logger = logging.getLogger(__name__)


class UserFacingError(Exception):
    """User-facing error that should be shown in UI."""
    pass


class GalleryService:
    """Service for browsing and editing a directory of images."""

    def __init__(self, settings: Optional[AppSettings] = None):
        """
        Initialize gallery service.

        Args:
            settings: Application settings (defaults if omitted)
        """
        self.settings = settings or AppSettings()
        self.state = GalleryState()
        self._handlers: Dict[GalleryEvent, Callable[[], bool]] = {
            GalleryEvent.STEP_FORWARD: lambda: self.navigate(1),
            GalleryEvent.STEP_BACKWARD: lambda: self.navigate(-1),
            GalleryEvent.DELETE_CURRENT: self.delete_current,
            GalleryEvent.BRIGHTNESS_UP: lambda: self.adjust_brightness_current(1),
            GalleryEvent.BRIGHTNESS_DOWN: lambda: self.adjust_brightness_current(-1),
            GalleryEvent.CONTRAST_UP: lambda: self.adjust_contrast_current(1),
            GalleryEvent.CONTRAST_DOWN: lambda: self.adjust_contrast_current(-1),
            GalleryEvent.CROP_CURRENT: self.crop_current,
        }

    def load(self, root: Path) -> int:
        """
        Scan a directory tree and start a new session over its images.

        Args:
            root: Root directory

        Returns:
            Number of images found

        Raises:
            ScanError: If any directory in the tree cannot be read
        """
        files = scan_images(Path(root))
        self.state = GalleryState(files=files)
        logger.info(f"Loaded {len(files)} images from {root}")
        return len(files)

    def current_path(self) -> Optional[Path]:
        """Get the path of the current image."""
        return self.state.current_path()

    def current_image(self) -> Optional[Image.Image]:
        """
        Decode the current image.

        Returns:
            The decoded image, or None when the gallery is empty

        Raises:
            DecodeError: If the current file cannot be decoded
        """
        path = self.state.current_path()
        if path is None:
            return None
        return decode_image(path)

    def navigate(self, delta: int) -> bool:
        """Step to the next (1) or previous (-1) image, wrapping at the ends."""
        return self.state.advance(delta)

    def delete_current(self) -> bool:
        """
        Delete the current image from disk and from the list.

        The list only changes once the file is gone. If removal fails but the
        file has disappeared anyway, the stale entry is dropped as well.

        Returns:
            True if an image was deleted, False when the gallery is empty

        Raises:
            UserFacingError: If the file could not be deleted
        """
        path = self.state.current_path()
        if path is None:
            logger.debug("Delete requested on an empty gallery")
            return False

        try:
            delete_image(path)
        except DeleteError as e:
            if not path.exists():
                logger.warning(f"{path} no longer exists, dropping it from the list")
                self.state.remove_current()
            raise UserFacingError(str(e)) from e

        self.state.remove_current()
        self.state.mark_deleted()
        logger.info(f"Deleted {path} ({len(self.state)} images left)")
        return True

    def replace_current(self, image: Image.Image) -> None:
        """
        Overwrite the current file with new image content.

        The file keeps its path and position in the list.

        Raises:
            UserFacingError: If the gallery is empty
            EncodeError: If the image cannot be written
        """
        path = self.state.current_path()
        if path is None:
            raise UserFacingError("No image selected")

        encode_image(
            path, image,
            image_format=self.settings.output_format,
            quality=self.settings.default_quality
        )
        self.state.mark_edited()

    def _edit_current(self, description: str, transform: Callable[[Image.Image], Image.Image]) -> bool:
        path = self.state.current_path()
        if path is None:
            logger.debug(f"{description} requested on an empty gallery")
            return False

        image = decode_image(path)
        try:
            edited = transform(image)
        except ImageProcessingError as e:
            logger.warning(f"{description} skipped for {path.name}: {e}")
            raise UserFacingError(str(e)) from e

        self.replace_current(edited)
        logger.info(f"{description}: {path}")
        return True

    def adjust_brightness_current(self, direction: int) -> bool:
        """
        Brighten (1) or darken (-1) the current image by one step and save it.

        Returns:
            True if the image was rewritten, False when the gallery is empty
        """
        if direction not in (1, -1):
            raise ValueError(f"direction must be 1 or -1, got {direction}")
        amount = direction * self.settings.brightness_step
        return self._edit_current(
            f"Brightness {amount:+g}%",
            lambda image: adjust_brightness(image, amount)
        )

    def adjust_contrast_current(self, direction: int) -> bool:
        """
        Raise (1) or lower (-1) the contrast of the current image by one step and save it.

        Returns:
            True if the image was rewritten, False when the gallery is empty
        """
        if direction not in (1, -1):
            raise ValueError(f"direction must be 1 or -1, got {direction}")
        amount = direction * self.settings.contrast_step
        return self._edit_current(
            f"Contrast {amount:+g}%",
            lambda image: adjust_contrast(image, amount)
        )

    def crop_current(self) -> bool:
        """
        Trim the configured margin from every side of the current image and save it.

        Returns:
            True if the image was rewritten, False when the gallery is empty

        Raises:
            UserFacingError: If the image is too small for the margin
        """
        margin = self.settings.crop_margin
        return self._edit_current(
            f"Crop {margin}px",
            lambda image: crop_image(image, inset_box(image.size, margin))
        )

    def handle_event(self, event: GalleryEvent) -> bool:
        """
        Run the operation bound to an input event.

        Returns:
            False for QUIT, True otherwise
        """
        if event is GalleryEvent.QUIT:
            logger.info("Quit requested")
            return False

        handler = self._handlers.get(event)
        if handler is None:
            logger.warning(f"No handler for event {event}")
            return True
        handler()
        return True

    def summary(self) -> str:
        """One-line description of what the session did."""
        return (
            f"{len(self.state)} images left, "
            f"{self.state.edits_written} edits written, "
            f"{self.state.files_deleted} files deleted"
        )

"""Shared fixtures: small image trees built with Pillow in a temp directory."""
import pytest

from step_view.config import AppSettings
from step_view.services import GalleryService

from tests.helpers import make_image


@pytest.fixture
def gallery_dir(tmp_path):
    """Three PNG files a.png, b.png, c.png in one directory."""
    root = tmp_path / "gallery"
    for name, shade in (("a.png", 40), ("b.png", 120), ("c.png", 200)):
        make_image(root / name, color=(shade, shade, shade))
    return root


@pytest.fixture
def service(gallery_dir):
    service = GalleryService(AppSettings())
    service.load(gallery_dir)
    return service

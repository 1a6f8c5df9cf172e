"""Image fixtures shared by the test modules."""
from pathlib import Path

from PIL import Image


def make_image(path: Path, size=(120, 90), color=(100, 100, 100), mode="RGB", fmt=None) -> Path:
    """Write a solid-colour image and return its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size, color).save(path, format=fmt)
    return path

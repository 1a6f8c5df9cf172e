import os
import stat
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from step_view.repository import (
    scan_images, decode_image, encode_image, delete_image, is_leaf_name,
    ScanError, DecodeError, EncodeError, DeleteError
)

from tests.helpers import make_image


def relative(paths, root):
    return [p.relative_to(root).as_posix() for p in paths]


def test_scan_recurses_into_subdirectories(tmp_path):
    make_image(tmp_path / "x.jpg", fmt="JPEG")
    make_image(tmp_path / "y.png")
    make_image(tmp_path / "sub" / "z.gif", fmt="GIF")

    found = scan_images(tmp_path)

    assert relative(found, tmp_path) == ["sub/z.gif", "x.jpg", "y.png"]
    assert all(p.is_file() for p in found)


def test_scan_order_is_depth_first_by_name(tmp_path):
    make_image(tmp_path / "b" / "2.png")
    make_image(tmp_path / "b" / "1.png")
    make_image(tmp_path / "a.png")
    make_image(tmp_path / "c.png")

    assert relative(scan_images(tmp_path), tmp_path) == ["a.png", "b/1.png", "b/2.png", "c.png"]


def test_scan_classifies_by_entry_type_not_name(tmp_path):
    make_image(tmp_path / "album.2020" / "beach.png")
    (tmp_path / "README").write_text("notes")
    (tmp_path / ".hidden").write_text("x")
    (tmp_path / "empty").mkdir()

    assert relative(scan_images(tmp_path), tmp_path) == ["album.2020/beach.png"]


def test_is_leaf_name():
    assert is_leaf_name("photo.jpg")
    assert is_leaf_name("archive.tar.gz")
    assert not is_leaf_name("README")
    assert not is_leaf_name(".DS_Store")


def test_scan_missing_root_fails(tmp_path):
    with pytest.raises(ScanError):
        scan_images(tmp_path / "nope")


def test_scan_file_as_root_fails(tmp_path):
    path = make_image(tmp_path / "one.png")
    with pytest.raises(ScanError):
        scan_images(path)


def test_scan_unreadable_subdirectory_aborts(tmp_path, monkeypatch):
    make_image(tmp_path / "a.png")
    make_image(tmp_path / "locked" / "b.png")

    real_iterdir = Path.iterdir

    def iterdir(self):
        if self.name == "locked":
            raise PermissionError(13, "Permission denied", str(self))
        return real_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", iterdir)

    with pytest.raises(ScanError, match="Permission denied"):
        scan_images(tmp_path)


def test_scan_entry_that_cannot_be_stat_aborts(tmp_path, monkeypatch):
    make_image(tmp_path / "a.png")
    make_image(tmp_path / "sub" / "b.png")

    real_stat = Path.stat

    def refuse_sub(self, *args, **kwargs):
        if self.name == "sub":
            raise PermissionError(13, "Permission denied", str(self))
        return real_stat(self, *args, **kwargs)

    monkeypatch.setattr(Path, "stat", refuse_sub)

    with pytest.raises(ScanError, match="Permission denied"):
        scan_images(tmp_path)


def test_scan_root_that_cannot_be_stat_fails(tmp_path, monkeypatch):
    root = tmp_path / "locked"
    make_image(root / "a.png")

    real_stat = Path.stat

    def refuse_root(self, *args, **kwargs):
        if self == root:
            raise PermissionError(13, "Permission denied", str(self))
        return real_stat(self, *args, **kwargs)

    monkeypatch.setattr(Path, "stat", refuse_root)

    with pytest.raises(ScanError, match="Permission denied"):
        scan_images(root)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="needs symlinks")
def test_scan_keeps_dangling_link_as_a_file(tmp_path):
    make_image(tmp_path / "a.png")
    os.symlink(tmp_path / "missing.png", tmp_path / "link.png")

    assert relative(scan_images(tmp_path), tmp_path) == ["a.png", "link.png"]


def test_decode_returns_loaded_image(tmp_path):
    path = make_image(tmp_path / "a.png", size=(30, 20), color=(1, 2, 3))
    image = decode_image(path)
    assert image.size == (30, 20)
    assert image.getpixel((0, 0)) == (1, 2, 3)


def test_decode_takes_first_frame_of_animation(tmp_path):
    path = tmp_path / "anim.gif"
    frames = [Image.new("RGB", (8, 8), c) for c in ((255, 0, 0), (0, 0, 255))]
    frames[0].save(path, save_all=True, append_images=frames[1:])

    image = decode_image(path).convert("RGB")
    assert image.getpixel((0, 0)) == (255, 0, 0)


def test_decode_corrupt_file_fails(tmp_path):
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"definitely not a jpeg")
    with pytest.raises(DecodeError):
        decode_image(path)


def test_decode_missing_file_fails(tmp_path):
    with pytest.raises(DecodeError):
        decode_image(tmp_path / "gone.png")


def test_encode_roundtrip_is_visually_identical(tmp_path):
    gradient = np.tile(np.linspace(0, 255, 64, dtype=np.uint8), (48, 1))
    source = Image.fromarray(np.dstack([gradient] * 3))
    path = tmp_path / "g.png"
    source.save(path)

    encode_image(path, decode_image(path))

    reread = decode_image(path)
    assert reread.size == source.size
    diff = np.abs(np.asarray(reread, dtype=np.int16) - np.asarray(source, dtype=np.int16))
    assert diff.mean() < 3


def test_encode_writes_canonical_format_whatever_the_extension(tmp_path):
    path = make_image(tmp_path / "keep.png", mode="RGBA", color=(10, 20, 30, 128))

    encode_image(path, decode_image(path), image_format="JPEG")

    with Image.open(path) as image:
        assert image.format == "JPEG"
        assert image.mode == "RGB"
    assert [p.name for p in tmp_path.iterdir()] == ["keep.png"]


def test_encode_failure_keeps_original_bytes(tmp_path):
    path = make_image(tmp_path / "a.png")
    before = path.read_bytes()

    with pytest.raises(EncodeError):
        encode_image(path, decode_image(path), image_format="NOT-A-FORMAT")

    assert path.read_bytes() == before
    assert [p.name for p in tmp_path.iterdir()] == ["a.png"]


def test_encode_into_missing_directory_fails(tmp_path):
    with pytest.raises(EncodeError):
        encode_image(tmp_path / "missing" / "a.jpg", Image.new("RGB", (4, 4)))


def test_delete_removes_file(tmp_path):
    path = make_image(tmp_path / "a.png")
    delete_image(path)
    assert not path.exists()


def test_delete_missing_file_fails(tmp_path):
    with pytest.raises(DeleteError):
        delete_image(tmp_path / "gone.png")


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
@pytest.mark.parametrize("mode", [0o644, 0o640, 0o600])
def test_encode_keeps_file_permissions(tmp_path, mode):
    path = make_image(tmp_path / "shared.png")
    path.chmod(mode)

    encode_image(path, decode_image(path))

    assert stat.S_IMODE(path.stat().st_mode) == mode


def test_encode_conversion_failure_is_an_encode_error(tmp_path):
    image = Image.new("RGBA", (4, 4))

    def refuse(*args, **kwargs):
        raise ValueError("conversion not supported")

    image.convert = refuse

    with pytest.raises(EncodeError, match="conversion not supported"):
        encode_image(tmp_path / "a.jpg", image)
    assert list(tmp_path.iterdir()) == []

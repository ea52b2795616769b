import cv2
import numpy as np
import pytest

from noise_crop.exceptions import ImageReadError, ImageWriteError
from noise_crop.image_io import load_image, save_image, to_rgba


def test_png_round_trip_keeps_rgba(tmp_path, make_rgba):
    rng = np.random.default_rng(1)
    img = make_rgba(rng.integers(0, 256, size=(7, 9), dtype=np.uint8), alpha=123)
    path = tmp_path / "img.png"

    save_image(path, img)
    np.testing.assert_array_equal(load_image(path), img)


def test_bgr_file_loads_as_rgba(tmp_path):
    bgr = np.zeros((2, 3, 3), dtype=np.uint8)
    bgr[:, :, 0] = 255  # blue
    path = tmp_path / "blue.png"
    cv2.imwrite(str(path), bgr)

    img = load_image(path)
    assert img.shape == (2, 3, 4)
    assert (img[:, :, 0] == 0).all()
    assert (img[:, :, 2] == 255).all()
    assert (img[:, :, 3] == 255).all()


def test_grayscale_file_loads_as_rgba(tmp_path):
    gray = np.full((4, 2), 60, dtype=np.uint8)
    path = tmp_path / "gray.png"
    cv2.imwrite(str(path), gray)

    img = load_image(path)
    assert img.shape == (4, 2, 4)
    assert (img[:, :, :3] == 60).all()
    assert (img[:, :, 3] == 255).all()


def test_16_bit_file_is_scaled_down(tmp_path):
    gray = np.full((3, 3), 0xABCD, dtype=np.uint16)
    path = tmp_path / "deep.png"
    cv2.imwrite(str(path), gray)

    img = load_image(path)
    assert img.dtype == np.uint8
    assert (img[:, :, 0] == 0xAB).all()


def test_to_rgba_bgra():
    bgra = np.array([[[1, 2, 3, 4]]], dtype=np.uint8)
    assert to_rgba(bgra).tolist() == [[[3, 2, 1, 4]]]


def test_missing_file(tmp_path):
    with pytest.raises(ImageReadError) as excinfo:
        load_image(tmp_path / "missing.png")
    assert "missing.png" in excinfo.value.user_message


def test_corrupted_file(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    with pytest.raises(ImageReadError):
        load_image(path)


def test_jpeg_drops_alpha(tmp_path, make_rgba):
    img = make_rgba(np.full((8, 8), 100, dtype=np.uint8))
    path = tmp_path / "out.jpg"

    save_image(path, img)
    loaded = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    assert loaded.shape == (8, 8, 3)


def test_unknown_extension(tmp_path, make_rgba):
    img = make_rgba(np.zeros((2, 2), dtype=np.uint8))
    with pytest.raises(ImageWriteError):
        save_image(tmp_path / "out.unknownformat", img)


def test_zero_height_image(tmp_path):
    img = np.zeros((0, 5, 4), dtype=np.uint8)
    with pytest.raises(ImageWriteError) as excinfo:
        save_image(tmp_path / "empty.png", img)
    assert "5x0" in str(excinfo.value)


def test_missing_directory(tmp_path, make_rgba):
    img = make_rgba(np.zeros((2, 2), dtype=np.uint8))
    with pytest.raises(ImageWriteError):
        save_image(tmp_path / "no" / "such" / "dir.png", img)

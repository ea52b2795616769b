"""Image decoding and encoding between files and RGBA arrays."""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np

from .exceptions import ImageReadError, ImageWriteError

# Encoders that keep a fourth channel
_ALPHA_FORMATS = {".png", ".tif", ".tiff", ".webp"}


def to_rgba(img: np.ndarray) -> np.ndarray:
    """Convert an OpenCV image (gray, BGR or BGRA) to 8-bit RGBA."""
    if img.dtype == np.uint16:
        img = (img >> 8).astype(np.uint8)
    elif img.dtype != np.uint8:
        img = cv2.convertScaleAbs(img)

    if img.ndim == 2 or img.shape[2] == 1:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    if img.shape[2] == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)


def load_image(path: str | Path) -> np.ndarray:
    """Decode an image file into an RGBA array of shape (h, w, 4).

    Raises:
        ImageReadError: File is missing or cannot be decoded
    """
    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None or img.size == 0:
        raise ImageReadError(str(path))
    return to_rgba(img)


def save_image(path: str | Path, img: np.ndarray) -> None:
    """Encode an RGBA array using the format implied by the file extension.

    Raises:
        ImageWriteError: Encoder missing, empty image or write failure
    """
    suffix = Path(path).suffix.lower()
    code = cv2.COLOR_RGBA2BGRA if suffix in _ALPHA_FORMATS else cv2.COLOR_RGBA2BGR

    if img.shape[0] == 0 or img.shape[1] == 0:
        raise ImageWriteError(str(path), f"image has no pixels ({img.shape[1]}x{img.shape[0]})")

    try:
        ok = cv2.imwrite(str(path), cv2.cvtColor(img, code))
    except cv2.error as e:
        raise ImageWriteError(str(path), str(e).strip()) from e
    if not ok:
        raise ImageWriteError(str(path))


"""Median filter for per-pixel noise suppression."""

from __future__ import annotations

import numpy as np

MEDIAN_RADIUS = 1
OPAQUE = 255


def median_index(radius: int) -> int:
    """Return index of the median element in a sorted (2r+1)^2 window."""
    size = (radius * 2 + 1) ** 2
    return (size + 1) // 2 - 1


def reflect_clamp_indices(length: int, offset: int) -> np.ndarray:
    """Return neighbour indices for every position along one axis.

    Negative indices are mirrored across 0 with abs(), anything past the
    last valid index is clamped to it. For a 1-pixel axis every neighbour
    maps back to index 0.

    Args:
        length: Size of the axis (width or height)
        offset: Neighbour offset, e.g. -1, 0 or 1

    Returns:
        Integer index array of shape (length,)
    """
    idx = np.abs(np.arange(length) + offset)
    return np.minimum(idx, length - 1)


def _gather_window(red: np.ndarray, radius: int) -> np.ndarray:
    """Stack every window offset of the red channel into shape (h, w, n)."""
    img_h, img_w = red.shape
    offsets = range(-radius, radius + 1)
    window = np.empty((img_h, img_w, (radius * 2 + 1) ** 2), dtype=red.dtype)

    i = 0
    for dx in offsets:
        cols = reflect_clamp_indices(img_w, dx)
        for dy in offsets:
            rows = reflect_clamp_indices(img_h, dy)
            window[:, :, i] = red[rows[:, np.newaxis], cols[np.newaxis, :]]
            i += 1
    return window


def apply_median(img: np.ndarray, radius: int = MEDIAN_RADIUS) -> np.ndarray:
    """Apply median filter on the red channel.

    Every output pixel is computed from the untouched source image, so the
    result does not depend on traversal order. The median is written to
    R, G and B and alpha is set to fully opaque.

    Args:
        img: RGBA image, shape (h, w, 4), dtype uint8
        radius: Window radius (window is 2r+1 pixels square)

    Returns:
        New RGBA image with the same dimensions
    """
    red = img[:, :, 0]
    window = _gather_window(red, radius)
    window.sort(axis=2)
    median = window[:, :, median_index(radius)]

    out = np.empty(img.shape[:2] + (4,), dtype=np.uint8)
    out[:, :, 0] = median
    out[:, :, 1] = median
    out[:, :, 2] = median
    out[:, :, 3] = OPAQUE
    return out

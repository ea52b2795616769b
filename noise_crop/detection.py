"""Noise band detection and cropping utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .models import CropBounds, NoiseProfile

if TYPE_CHECKING:
    from .visualizer import DebugVisualizer

_U32_MAX = int(np.iinfo(np.uint32).max)


def estimate_row_noise(img: np.ndarray) -> np.ndarray:
    """Estimate noise energy of every row.

    Sums |red(x-1, y) - red(x, y)| along each row. The left neighbour of
    column 0 is the last column (horizontal wraparound).

    Args:
        img: RGBA image, shape (h, w, 4)

    Returns:
        Integer array of shape (h,)
    """
    red = img[:, :, 0].astype(np.int64)
    left = np.roll(red, 1, axis=1)
    return np.abs(left - red).sum(axis=1)


def compute_threshold(noise_min: int, noise_max: int, threshold: float) -> int:
    """Interpolate the adaptive cutoff between the noise extremes.

    Evaluated in single precision and truncated with a saturating cast to
    an unsigned 32-bit value: negative or NaN results give 0. The threshold
    parameter is not clamped, values outside 0-1 move the cutoff outside
    the observed range.

    Args:
        noise_min: Smallest row noise value
        noise_max: Largest row noise value
        threshold: Position between min (0.0) and max (1.0)

    Returns:
        Threshold value as a non-negative int
    """
    lo = np.float32(noise_min)
    hi = np.float32(noise_max)
    with np.errstate(over="ignore", invalid="ignore"):
        value = lo + np.float32(threshold) * (hi - lo)

    if np.isnan(value) or value <= 0:
        return 0
    if value >= _U32_MAX:
        return _U32_MAX
    return int(value)


def find_crossings(noise: np.ndarray, threshold_value: int) -> np.ndarray:
    """Find rows where the noise signal crosses the threshold.

    Each row is compared to the row above it; row 0 is compared to the last
    row. Values equal to the threshold are neither above nor below it.

    Args:
        noise: Row noise signal
        threshold_value: Cutoff from compute_threshold

    Returns:
        Ascending array of row indices
    """
    prev = np.roll(noise, 1)
    below = noise < threshold_value
    above = noise > threshold_value
    crossed = (below & (prev > threshold_value)) | (above & (prev < threshold_value))
    return np.flatnonzero(crossed)


def analyze_noise(img: np.ndarray, threshold: float) -> NoiseProfile:
    """Run noise estimation, thresholding and crossing detection.

    Args:
        img: RGBA image, shape (h, w, 4) with h >= 1
        threshold: Position of the cutoff between min and max row noise

    Returns:
        NoiseProfile with the signal, cutoff and crossing rows
    """
    noise = estimate_row_noise(img)
    noise_min = int(noise.min())
    noise_max = int(noise.max())
    threshold_value = compute_threshold(noise_min, noise_max, threshold)

    return NoiseProfile(
        noise=noise,
        noise_min=noise_min,
        noise_max=noise_max,
        threshold_value=threshold_value,
        crossings=find_crossings(noise, threshold_value),
    )


def crop_rows(img: np.ndarray, bounds: CropBounds) -> np.ndarray:
    """Crop image to rows [top, bottom) at full width.

    Args:
        img: Input image as numpy array
        bounds: Rows to keep

    Returns:
        Cropped copy, possibly with zero height
    """
    return img[bounds.top:bounds.bottom, :].copy()


def crop_noise(
    img: np.ndarray,
    threshold: float,
    visualizer: DebugVisualizer | None = None,
) -> tuple[np.ndarray, NoiseProfile]:
    """Crop image to the band between the first and last noise crossing.

    Args:
        img: RGBA image, shape (h, w, 4)
        threshold: Position of the cutoff between min and max row noise
        visualizer: Optional debug visualizer

    Returns:
        Tuple of (image, profile). The image is the input itself when no
        crossings were found.
    """
    profile = analyze_noise(img, threshold)
    bounds = profile.bounds

    if visualizer:
        visualizer.save_noise_profile(profile)
        visualizer.save_crop_bounds(img, bounds)

    if bounds is None:
        return img, profile
    return crop_rows(img, bounds), profile

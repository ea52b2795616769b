"""Filter-then-crop processing of a decoded image."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .detection import crop_noise
from .filters import apply_median
from .models import NoiseProfile, Params

if TYPE_CHECKING:
    from .visualizer import DebugVisualizer


def process_image(
    img: np.ndarray,
    params: Params,
    visualizer: DebugVisualizer | None = None,
) -> tuple[np.ndarray, NoiseProfile | None]:
    """Apply the steps enabled in params.

    The median filter runs first, then the noise band crop. With both
    steps disabled the input array is returned as is.

    Args:
        img: RGBA image, shape (h, w, 4)
        params: Run options
        visualizer: Optional debug visualizer

    Returns:
        Tuple of (image, profile). Profile is None when cropping is off.
    """
    if visualizer:
        visualizer.save_input(img)

    if params.filter:
        filtered = apply_median(img)
        if visualizer:
            visualizer.save_median_filter(img, filtered)
        img = filtered

    if not params.crop:
        return img, None

    return crop_noise(img, params.threshold, visualizer=visualizer)

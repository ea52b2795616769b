"""Data models for noise filtering and cropping."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

DEFAULT_THRESHOLD = 0.5


@dataclass(frozen=True)
class Params:
    """Options for a single run, built once from the command line."""

    input: str
    output: str
    crop: bool = False
    threshold: float = DEFAULT_THRESHOLD
    filter: bool = False
    coords: bool = False
    verbose: bool = False
    debug_dir: str | None = None


@dataclass(frozen=True)
class CropBounds:
    """Rows kept by a noise band crop, as a half-open range [top, bottom)."""

    top: int
    bottom: int

    @property
    def height(self) -> int:
        """Return height of the cropped image (0 when top == bottom)."""
        return self.bottom - self.top

    def as_fractions(self, img_h: int) -> tuple[float, float]:
        """Return (top, bottom) as fractions of the image height."""
        return (self.top / img_h, self.bottom / img_h)

    def as_tuple(self) -> tuple[int, int]:
        """Return bounds as (top, bottom) tuple."""
        return (self.top, self.bottom)


@dataclass(frozen=True)
class NoiseProfile:
    """Result of row noise analysis.

    Holds everything derived from the noise signal so callers and the
    debug visualizer can inspect how the crop bounds were chosen.
    """

    noise: np.ndarray
    """Sum of absolute horizontal red-channel differences, one value per row."""

    noise_min: int
    noise_max: int

    threshold_value: int
    """Adaptive cutoff between noise_min and noise_max."""

    crossings: np.ndarray
    """Ascending row indices where the signal crosses threshold_value."""

    @property
    def bounds(self) -> CropBounds | None:
        """Return crop bounds from first and last crossing, or None."""
        if len(self.crossings) == 0:
            return None
        return CropBounds(int(self.crossings[0]), int(self.crossings[-1]))

    @property
    def above_threshold(self) -> np.ndarray:
        """Boolean mask of rows strictly above threshold_value."""
        return self.noise > self.threshold_value

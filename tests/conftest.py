import os

os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pytest


def _make_rgba(red, green=None, blue=None, alpha=200):
    red = np.asarray(red, dtype=np.uint8)
    img = np.empty(red.shape + (4,), dtype=np.uint8)
    img[:, :, 0] = red
    img[:, :, 1] = red // 2 if green is None else green
    img[:, :, 2] = 255 - red if blue is None else blue
    img[:, :, 3] = alpha
    return img


@pytest.fixture
def make_rgba():
    """Build an RGBA image from a 2D array of red values."""
    return _make_rgba


@pytest.fixture
def band_image():
    """4x4 image with row noise [0, 0, 100, 0]."""
    red = np.zeros((4, 4), dtype=np.uint8)
    red[2] = [0, 50, 0, 0]
    return _make_rgba(red)

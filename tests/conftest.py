import numpy as np
import pytest

from asciimap.model import PixelBuffer


def frame_from_rgb(rows, alpha=255):
    """Build a PixelBuffer from nested lists of (r, g, b) tuples, one list per row."""
    rgb = np.array(rows, dtype=np.uint8)
    alpha_plane = np.full(rgb.shape[:2] + (1,), alpha, dtype=np.uint8)
    return PixelBuffer.from_array(np.concatenate([rgb, alpha_plane], axis=2))


def solid_frame(width, height, rgba):
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = rgba
    return PixelBuffer.from_array(pixels)


class FixedRandom:
    """Stands in for a numpy Generator, always returning the same sample."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


@pytest.fixture
def make_rgb_frame():
    return frame_from_rgb


@pytest.fixture
def make_solid_frame():
    return solid_frame


@pytest.fixture
def fixed_random():
    return FixedRandom

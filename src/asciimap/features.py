from functools import cached_property

import numpy as np

from asciimap.model import NEIGHBOUR_OFFSETS, PixelBuffer

SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]])
SOBEL_Y = np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]])


class FeatureExtractor:
    """Neighbourhood features over a filtered frame.

    Samples come from the buffer as it stands after blur/sharpen, not from the
    per-pixel brightness/contrast/saturation/tonal result.
    """

    def __init__(self, buffer: PixelBuffer):
        self.buffer = buffer

    @cached_property
    def luminance(self) -> np.ndarray:
        """(height, width) Rec. 709 luminance plane, built on first use."""
        rgb = self.buffer.pixels[:, :, :3].astype(np.float64)
        return 0.2126 * rgb[:, :, 0] + 0.7152 * rgb[:, :, 1] + 0.0722 * rgb[:, :, 2]

    def neighbor_luminances(self, x: int, y: int) -> list[float]:
        """Luminance of the in-bounds 8-connected neighbours, row-major."""
        plane = self.luminance
        height, width = plane.shape
        values = []
        for dy, dx in NEIGHBOUR_OFFSETS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < height:
                values.append(float(plane[ny, nx]))
        return values

    def sobel(self, x: int, y: int) -> tuple[float, float]:
        """Sobel X/Y responses at (x, y) with edge-clamped sampling."""
        plane = self.luminance
        height, width = plane.shape
        ys = np.clip(np.arange(y - 1, y + 2), 0, height - 1)
        xs = np.clip(np.arange(x - 1, x + 2), 0, width - 1)
        window = plane[np.ix_(ys, xs)]
        return float((window * SOBEL_X).sum()), float((window * SOBEL_Y).sum())

    def context(self, x: int, y: int) -> "FeatureContext":
        return FeatureContext(self, x, y)


class FeatureContext:
    """Per-pixel features, each computed only when an algorithm asks for it."""

    def __init__(self, extractor: FeatureExtractor, x: int, y: int):
        self._extractor = extractor
        self.x = x
        self.y = y

    @cached_property
    def neighbor_luminances(self) -> list[float]:
        return self._extractor.neighbor_luminances(self.x, self.y)

    @cached_property
    def sobel(self) -> tuple[float, float]:
        return self._extractor.sobel(self.x, self.y)

import logging
import math
from collections import Counter
from collections.abc import Sequence

import numpy as np

from asciimap.colours import bucket_index, clamp, hex_to_rgb, luminance, rgb_to_hex
from asciimap.settings import ColourMode

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK = "#000000"
QUANT_STEP = 32
SAMPLE_TARGET = 1000


def _parse_palette(palette: Sequence[str]) -> np.ndarray:
    return np.array([hex_to_rgb(colour) for colour in palette], dtype=np.float64)


def _nearest(r: float, g: float, b: float, palette: Sequence[str], colours: np.ndarray) -> str:
    distances = ((colours - (r, g, b)) ** 2).sum(axis=1)
    return palette[int(np.argmin(distances))]


def closest_colour(r: float, g: float, b: float, palette: Sequence[str]) -> str:
    """Nearest palette entry by Euclidean RGB distance; the first one wins ties."""
    return _nearest(r, g, b, palette, _parse_palette(palette))


def colour_by_index(r: float, g: float, b: float, palette: Sequence[str]) -> str:
    """Bucket the pixel's brightness across the palette, darkest entry first."""
    return palette[bucket_index(luminance(r, g, b), len(palette))]


class ColourMapper:
    """Resolve colours against a palette, memoising deterministic lookups.

    The cache is keyed on the source triplet only, so it must be cleared
    whenever the palette or mode used with this mapper changes. Parsed
    palettes are held alongside it and dropped by :meth:`clear` too.
    """

    def __init__(self, dither_strength: float = 0.1, rng=None):
        self.dither_strength = dither_strength
        self.rng = rng if rng is not None else np.random.default_rng()
        self._cache: dict[tuple[float, float, float], str] = {}
        self._palettes: dict[tuple[str, ...], np.ndarray] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()
        self._palettes.clear()

    def _colours(self, palette: Sequence[str]) -> np.ndarray:
        key = tuple(palette)
        colours = self._palettes.get(key)
        if colours is None:
            colours = self._palettes[key] = _parse_palette(palette)
        return colours

    def dither(self, r: float, g: float, b: float, palette: Sequence[str]) -> str:
        spread = self.dither_strength * 255
        jittered = (clamp(c + (self.rng.random() - 0.5) * spread, 0, 255) for c in (r, g, b))
        return _nearest(*jittered, palette, self._colours(palette))

    def resolve(
        self,
        r: float,
        g: float,
        b: float,
        palette: Sequence[str],
        mode: ColourMode | str = ColourMode.CLOSEST,
        fallback: str = DEFAULT_FALLBACK,
    ) -> str:
        if not palette:
            return fallback
        try:
            mode = ColourMode(mode)
        except ValueError:
            logger.warning("Unknown colour mapping mode %r, using closest", mode)
            mode = ColourMode.CLOSEST

        if mode is ColourMode.DITHERING:
            return self.dither(r, g, b, palette)

        key = (r, g, b)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        if mode is ColourMode.BY_INDEX:
            colour = colour_by_index(r, g, b, palette)
        else:
            colour = _nearest(r, g, b, palette, self._colours(palette))
        self._cache[key] = colour
        return colour


def extract_colours(pixels: np.ndarray, palette_size: int) -> list[str]:
    """Most frequent colours of an (h, w, 4) frame after snapping channels to a coarse grid.

    Only every n-th pixel is sampled so roughly a thousand samples are taken;
    pixels with alpha below 128 are ignored.
    """
    height, width = pixels.shape[:2]
    rate = max(1, math.floor(width * height / SAMPLE_TARGET))
    flat = pixels.reshape(-1, 4)[::rate]
    opaque = flat[flat[:, 3] >= 128, :3].astype(np.float64)

    snapped = np.minimum(np.floor(opaque / QUANT_STEP + 0.5) * QUANT_STEP, 255)
    counts = Counter(rgb_to_hex(*rgb) for rgb in snapped)
    return [colour for colour, _ in counts.most_common(palette_size)]

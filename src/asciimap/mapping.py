"""Character selection: turn one adjusted pixel into a glyph from a density ramp.

Every algorithm shares the signature ``(r, g, b, ramp, context) -> glyph``.
``context`` is a :class:`~asciimap.features.FeatureContext` (or anything with
``neighbor_luminances`` / ``sobel`` attributes) and is only consulted by the
contrast and edge-detection algorithms; both fall back to plain brightness
indexing when it is missing.
"""

import logging
import math
from collections.abc import Callable, Sequence

from asciimap.colours import bucket_index, clamp, hsl_saturation, luminance, perceptual_luminance, round_half_up
from asciimap.settings import MappingMethod

logger = logging.getLogger(__name__)

Algorithm = Callable[[float, float, float, Sequence[str], object], str]

CONTEXT_METHODS = frozenset({MappingMethod.CONTRAST, MappingMethod.EDGE_DETECTION})

EDGE_THRESHOLD = 0.2
MAX_GRADIENT = 765


def _clamp_index(index: float, count: int) -> int:
    return int(clamp(index, 0, count - 1))


def brightness(r, g, b, ramp, context=None):
    return ramp[bucket_index(luminance(r, g, b), len(ramp))]


def perceptual(r, g, b, ramp, context=None):
    return ramp[bucket_index(perceptual_luminance(r, g, b), len(ramp))]


def local_contrast(r, g, b, ramp, context=None):
    neighbours = getattr(context, "neighbor_luminances", None)
    if not neighbours:
        return brightness(r, g, b, ramp)

    count = len(ramp)
    level = luminance(r, g, b)
    mean = sum(neighbours) / len(neighbours)
    variance = sum((v - mean) ** 2 for v in neighbours) / len(neighbours)
    score = abs(level - mean) / 255 * 0.7 + math.sqrt(variance) / 255 * 0.3

    contrast_index = _clamp_index(math.floor(score * count * 1.5), count)
    brightness_index = bucket_index(level, count)
    return ramp[_clamp_index(round_half_up(contrast_index * 0.6 + brightness_index * 0.4), count)]


def edges(r, g, b, ramp, context=None):
    gradient = getattr(context, "sobel", None)
    if gradient is None:
        return brightness(r, g, b, ramp)

    count = len(ramp)
    sobel_x, sobel_y = gradient
    strength = min(math.sqrt(sobel_x * sobel_x + sobel_y * sobel_y) / MAX_GRADIENT, 1.0)
    if strength > EDGE_THRESHOLD:
        # Strong edges get at least a medium-density glyph
        index = max(math.floor(strength * count), math.floor(count * 0.4))
        return ramp[_clamp_index(index, count)]

    influence = strength * 0.5
    brightness_index = bucket_index(luminance(r, g, b), count)
    blended = math.floor(brightness_index * (1 - influence) + count * 0.6 * influence)
    return ramp[_clamp_index(blended, count)]


def saturation(r, g, b, ramp, context=None):
    count = len(ramp)
    return ramp[_clamp_index(math.floor(hsl_saturation(r, g, b) * count), count)]


def red_channel(r, g, b, ramp, context=None):
    return ramp[bucket_index(r, len(ramp))]


def green_channel(r, g, b, ramp, context=None):
    return ramp[bucket_index(g, len(ramp))]


def blue_channel(r, g, b, ramp, context=None):
    return ramp[bucket_index(b, len(ramp))]


ALGORITHMS: dict[MappingMethod, Algorithm] = {
    MappingMethod.BRIGHTNESS: brightness,
    MappingMethod.LUMINANCE: perceptual,
    MappingMethod.CONTRAST: local_contrast,
    MappingMethod.EDGE_DETECTION: edges,
    MappingMethod.SATURATION: saturation,
    MappingMethod.RED_CHANNEL: red_channel,
    MappingMethod.GREEN_CHANNEL: green_channel,
    MappingMethod.BLUE_CHANNEL: blue_channel,
}


def resolve_method(method: MappingMethod | str) -> MappingMethod:
    """Look up a method by enum or name; unknown names fall back to brightness."""
    try:
        return MappingMethod(method)
    except ValueError:
        logger.warning("Unknown mapping algorithm %r, falling back to brightness", method)
        return MappingMethod.BRIGHTNESS


def needs_context(method: MappingMethod | str) -> bool:
    try:
        return MappingMethod(method) in CONTEXT_METHODS
    except ValueError:
        return False


def select(
    r: float,
    g: float,
    b: float,
    ramp: Sequence[str],
    method: MappingMethod | str = MappingMethod.BRIGHTNESS,
    invert: bool = False,
    context=None,
) -> str:
    """Pick the glyph for one pixel."""
    if not ramp:
        logger.warning("Empty character ramp, using a space")
        return " "
    ramp = list(ramp)
    if invert:
        ramp.reverse()
    return ALGORITHMS[resolve_method(method)](r, g, b, ramp, context)

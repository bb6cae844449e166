import math

import numpy as np

from asciimap.colours import clamp, luminance, round_half_up
from asciimap.model import NEIGHBOUR_OFFSETS, PixelBuffer
from asciimap.settings import ConversionSettings


def _to_bytes(values: np.ndarray) -> np.ndarray:
    """Store floats the way an 8-bit clamped canvas buffer does: round to nearest even, clip."""
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def _box_average(pixels: np.ndarray, radius: int, axis: int) -> np.ndarray:
    """1-D box average along ``axis`` with edge-clamped sampling."""
    length = pixels.shape[axis]
    pad_widths = [(0, 0)] * pixels.ndim
    pad_widths[axis] = (radius, radius)
    padded = np.pad(pixels.astype(np.float64), pad_widths, mode="edge")

    total = np.zeros(pixels.shape, dtype=np.float64)
    for offset in range(2 * radius + 1):
        total += np.take(padded, np.arange(offset, offset + length), axis=axis)
    return _to_bytes(total / (2 * radius + 1))


def box_blur(pixels: np.ndarray, amount: float) -> np.ndarray:
    """Gaussian approximation by repeated separable box blur over an (h, w, 4) array.

    Alpha is blurred with the colour channels.
    """
    if amount <= 0:
        return pixels
    passes = math.ceil(amount / 2)
    radius = max(1, math.floor(amount / passes))
    current = pixels
    for _ in range(passes):
        current = _box_average(current, radius, axis=1)
        current = _box_average(current, radius, axis=0)
    return current


def sharpen(pixels: np.ndarray, amount: float) -> np.ndarray:
    """3x3 unsharp mask over an (h, w, 4) array; alpha passes through."""
    if amount <= 0:
        return pixels
    height, width = pixels.shape[:2]
    centre_weight = 1 + amount * 0.8
    neighbour_weight = -(amount * 0.2)

    rgb = pixels[:, :, :3].astype(np.float64)
    padded = np.pad(rgb, ((1, 1), (1, 1), (0, 0)), mode="edge")
    total = rgb * centre_weight
    for dy, dx in NEIGHBOUR_OFFSETS:
        total += padded[1 + dy : 1 + dy + height, 1 + dx : 1 + dx + width] * neighbour_weight

    result = pixels.copy()
    result[:, :, :3] = np.clip(np.floor(total + 0.5), 0, 255).astype(np.uint8)
    return result


def preprocess(buffer: PixelBuffer, settings: ConversionSettings) -> PixelBuffer:
    """Apply the whole-buffer spatial filters: blur, then sharpen."""
    if buffer.is_empty or (settings.blur <= 0 and settings.sharpen <= 0):
        return buffer
    pixels = box_blur(buffer.pixels, settings.blur)
    pixels = sharpen(pixels, settings.sharpen)
    return PixelBuffer.from_array(pixels)


def adjust_brightness(r: float, g: float, b: float, brightness: float) -> tuple[float, float, float]:
    offset = brightness * 2.55
    return clamp(r + offset, 0, 255), clamp(g + offset, 0, 255), clamp(b + offset, 0, 255)


def adjust_contrast_channel(value: float, contrast: float) -> int:
    """Sigmoid contrast curve; steeper as ``contrast`` grows."""
    enhanced = 1 / (1 + math.exp(-contrast * (value / 255 - 0.5) * 6))
    return round_half_up(clamp(enhanced * 255, 0, 255))


def adjust_saturation(r: float, g: float, b: float, saturation: float) -> tuple[float, float, float]:
    rn, gn, bn = r / 255, g / 255, b / 255
    hi = max(rn, gn, bn)
    lo = min(rn, gn, bn)
    delta = hi - lo
    if delta == 0:
        return r, g, b

    lightness = (hi + lo) / 2
    current = delta / (2 - hi - lo) if lightness > 0.5 else delta / (hi + lo)
    new_saturation = clamp(current * (1 + saturation / 100), 0, 1)

    if hi == rn:
        hue = ((gn - bn) / delta + (6 if gn < bn else 0)) / 6
    elif hi == gn:
        hue = ((bn - rn) / delta + 2) / 6
    else:
        hue = ((rn - gn) / delta + 4) / 6

    chroma = (1 - abs(2 * lightness - 1)) * new_saturation
    x = chroma * (1 - abs((hue * 6) % 2 - 1))
    m = lightness - chroma / 2

    segment = hue * 6
    if segment < 1:
        rp, gp, bp = chroma, x, 0.0
    elif segment < 2:
        rp, gp, bp = x, chroma, 0.0
    elif segment < 3:
        rp, gp, bp = 0.0, chroma, x
    elif segment < 4:
        rp, gp, bp = 0.0, x, chroma
    elif segment < 5:
        rp, gp, bp = x, 0.0, chroma
    else:
        rp, gp, bp = chroma, 0.0, x

    return tuple(clamp(round_half_up((c + m) * 255), 0, 255) for c in (rp, gp, bp))


def adjust_tones(
    r: float, g: float, b: float, highlights: float, shadows: float, midtones: float
) -> tuple[float, float, float]:
    """Shift shadows, midtones and highlights, weighted by where the pixel's luminance falls."""
    level = luminance(r, g, b) / 255
    shadow_weight = max(0.0, 1 - level * 2)
    highlight_weight = max(0.0, (level - 0.5) * 2)
    midtone_weight = 1 - abs(level - 0.5) * 2

    total = (
        shadows / 100 * shadow_weight + highlights / 100 * highlight_weight + midtones / 100 * midtone_weight
    ) * 2.55
    return clamp(r + total, 0, 255), clamp(g + total, 0, 255), clamp(b + total, 0, 255)


def adjust_pixel(r: float, g: float, b: float, settings: ConversionSettings) -> tuple[float, float, float]:
    """Brightness, contrast, saturation and tonal adjustments in that order; neutral steps are skipped."""
    if settings.brightness != 0:
        r, g, b = adjust_brightness(r, g, b, settings.brightness)
    if settings.contrast != 1:
        r, g, b = (adjust_contrast_channel(c, settings.contrast) for c in (r, g, b))
    if settings.saturation != 0:
        r, g, b = adjust_saturation(r, g, b, settings.saturation)
    if settings.has_tonal_adjustment:
        r, g, b = adjust_tones(r, g, b, settings.highlights, settings.shadows, settings.midtones)
    return r, g, b

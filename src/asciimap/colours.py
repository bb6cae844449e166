import math
import re

TRANSPARENT = "transparent"

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values, like the editor's UI does."""
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def hex_to_rgb(colour: str) -> tuple[int, int, int]:
    """Parse ``#RRGGBB`` (hash optional). Anything unparseable is black."""
    match = _HEX_RE.match(colour)
    if match is None:
        return (0, 0, 0)
    return tuple(int(part, 16) for part in match.groups())


def rgb_to_hex(r: float, g: float, b: float) -> str:
    return "#" + "".join(f"{int(clamp(round_half_up(c), 0, 255)):02x}" for c in (r, g, b))


def luminance(r: float, g: float, b: float) -> float:
    """Rec. 709 weighted brightness in [0, 255]."""
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def perceptual_luminance(r: float, g: float, b: float) -> float:
    """Gamma-corrected luminance in [0, 255]."""
    linear = 0.299 * (r / 255) ** 2.2 + 0.587 * (g / 255) ** 2.2 + 0.114 * (b / 255) ** 2.2
    return linear ** (1 / 2.2) * 255


def hsl_saturation(r: float, g: float, b: float) -> float:
    """HSL saturation in [0, 1]; 0 for achromatic colours."""
    hi = max(r, g, b) / 255
    lo = min(r, g, b) / 255
    delta = hi - lo
    if delta == 0:
        return 0.0
    lightness = (hi + lo) / 2
    if lightness > 0.5:
        return delta / (2 - hi - lo)
    return delta / (hi + lo)


def bucket_index(value: float, count: int) -> int:
    """Map a 0-255 value onto one of ``count`` equal buckets."""
    return int(clamp(math.floor(value / 256 * count), 0, count - 1))

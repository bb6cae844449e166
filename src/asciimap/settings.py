from dataclasses import dataclass, replace
from enum import Enum

from asciimap.charsets import MINIMAL_ASCII
from asciimap.colours import clamp


class MappingMethod(str, Enum):
    BRIGHTNESS = "brightness"
    LUMINANCE = "luminance"
    CONTRAST = "contrast"
    EDGE_DETECTION = "edge-detection"
    SATURATION = "saturation"
    RED_CHANNEL = "red-channel"
    GREEN_CHANNEL = "green-channel"
    BLUE_CHANNEL = "blue-channel"


class ColourMode(str, Enum):
    CLOSEST = "closest"
    DITHERING = "dithering"
    BY_INDEX = "by-index"


class Quantization(str, Enum):
    NONE = "none"
    BASIC = "basic"
    ADVANCED = "advanced"


# field name -> (low, high)
RANGES = {
    "brightness": (-100.0, 100.0),
    "contrast": (0.0, 2.0),
    "saturation": (-100.0, 100.0),
    "highlights": (-100.0, 100.0),
    "shadows": (-100.0, 100.0),
    "midtones": (-100.0, 100.0),
    "blur": (0.0, 10.0),
    "sharpen": (0.0, 10.0),
    "dither_strength": (0.0, 1.0),
}


@dataclass(frozen=True)
class ConversionSettings:
    # Character mapping
    enable_character_mapping: bool = True
    character_ramp: tuple[str, ...] = MINIMAL_ASCII
    mapping_method: MappingMethod | str = MappingMethod.BRIGHTNESS
    invert_density: bool = False

    # Foreground colour
    enable_text_colour_mapping: bool = False
    text_colour_palette: tuple[str, ...] = ()
    text_colour_mode: ColourMode | str = ColourMode.CLOSEST
    default_text_colour: str = "#FFFFFF"

    # Background colour
    enable_background_colour_mapping: bool = False
    background_colour_palette: tuple[str, ...] = ()
    background_colour_mode: ColourMode | str = ColourMode.CLOSEST

    # Legacy foreground handling when mapping is on but no palette is given
    use_original_colours: bool = False
    colour_quantization: Quantization | str = Quantization.NONE
    palette_size: int = 16

    # Preprocessing
    brightness: float = 0.0
    contrast: float = 1.0
    saturation: float = 0.0
    highlights: float = 0.0
    shadows: float = 0.0
    midtones: float = 0.0
    blur: float = 0.0
    sharpen: float = 0.0
    dither_strength: float = 0.1

    def __post_init__(self):
        for name in ("character_ramp", "text_colour_palette", "background_colour_palette"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    def clamped(self) -> "ConversionSettings":
        """Copy with every numeric field pulled into its documented range."""
        changes = {name: clamp(getattr(self, name), low, high) for name, (low, high) in RANGES.items()}
        changes["palette_size"] = max(1, int(self.palette_size))
        return replace(self, **changes)

    @property
    def has_tonal_adjustment(self) -> bool:
        return self.highlights != 0 or self.shadows != 0 or self.midtones != 0

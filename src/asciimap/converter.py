import logging
import time

from asciimap.colours import TRANSPARENT, rgb_to_hex
from asciimap.features import FeatureExtractor
from asciimap.mapping import needs_context, resolve_method, select
from asciimap.model import Cell, ConversionMetadata, ConversionResult, PixelBuffer
from asciimap.palette import ColourMapper, extract_colours
from asciimap.preprocess import adjust_pixel, preprocess
from asciimap.settings import ColourMode, ConversionSettings, Quantization

logger = logging.getLogger(__name__)

ALPHA_THRESHOLD = 128


def _quantization(value: Quantization | str) -> Quantization:
    try:
        return Quantization(value)
    except ValueError:
        logger.warning("Unknown colour quantization %r, using none", value)
        return Quantization.NONE


def _colour_mode(value: ColourMode | str) -> ColourMode:
    try:
        return ColourMode(value)
    except ValueError:
        logger.warning("Unknown colour mapping mode %r, using closest", value)
        return ColourMode.CLOSEST


class AsciiConverter:
    """Converts RGBA frames into character cells.

    Holds one colour cache per palette role. Call :meth:`clear_cache` after
    changing palettes, colour modes or preprocessing settings between frames.
    """

    def __init__(self, rng=None):
        self.text_colours = ColourMapper(rng=rng)
        self.background_colours = ColourMapper(rng=rng)
        self.quantized_colours = ColourMapper(rng=rng)

    def clear_cache(self) -> None:
        self.text_colours.clear()
        self.background_colours.clear()
        self.quantized_colours.clear()

    def convert_frame(self, frame: PixelBuffer, settings: ConversionSettings) -> ConversionResult:
        start = time.perf_counter()
        settings = settings.clamped()
        if frame.is_empty:
            return ConversionResult()

        for mapper in (self.text_colours, self.background_colours):
            mapper.dither_strength = settings.dither_strength

        buffer = preprocess(frame, settings)
        pixels = buffer.pixels
        height, width = pixels.shape[:2]

        ramp = settings.character_ramp
        method = resolve_method(settings.mapping_method)
        map_characters = settings.enable_character_mapping and len(ramp) > 0
        if settings.enable_character_mapping and not ramp:
            logger.warning("Character mapping enabled with an empty ramp, using spaces")
        features = FeatureExtractor(buffer) if map_characters and needs_context(method) else None

        text_palette = settings.text_colour_palette
        background_palette = settings.background_colour_palette
        map_text = settings.enable_text_colour_mapping and len(text_palette) > 0
        map_background = settings.enable_background_colour_mapping and len(background_palette) > 0
        text_mode = _colour_mode(settings.text_colour_mode) if map_text else None
        background_mode = _colour_mode(settings.background_colour_mode) if map_background else None
        original_colours = (
            settings.enable_text_colour_mapping and not text_palette and settings.use_original_colours
        )
        quantizing = original_colours and _quantization(settings.colour_quantization) is not Quantization.NONE
        quantized = []
        if quantizing:
            # Extracted per frame, so lookups from the previous frame are stale
            self.quantized_colours.clear()
            quantized = extract_colours(pixels, settings.palette_size)

        cells = {}
        colours = {}
        usage: dict[str, int] = {}
        for y in range(height):
            row = pixels[y].tolist()
            for x in range(width):
                sr, sg, sb, alpha = row[x]
                if alpha < ALPHA_THRESHOLD:
                    continue

                r, g, b = adjust_pixel(sr, sg, sb, settings)

                if map_characters:
                    context = features.context(x, y) if features is not None else None
                    character = select(r, g, b, ramp, method, settings.invert_density, context)
                else:
                    character = " "

                if map_text:
                    foreground = self.text_colours.resolve(r, g, b, text_palette, text_mode)
                elif quantizing:
                    foreground = self.quantized_colours.resolve(sr, sg, sb, quantized)
                elif original_colours:
                    foreground = rgb_to_hex(sr, sg, sb)
                else:
                    foreground = settings.default_text_colour

                if map_background:
                    background = self.background_colours.resolve(r, g, b, background_palette, background_mode)
                else:
                    background = TRANSPARENT

                cells[(x, y)] = Cell(character, foreground, background)
                colours[foreground] = None
                usage[character] = usage.get(character, 0) + 1

        elapsed = (time.perf_counter() - start) * 1000
        logger.debug("Converted %dx%d frame into %d cells in %.1fms", width, height, len(cells), elapsed)
        return ConversionResult(
            cells=cells,
            colours=list(colours),
            character_usage=usage,
            metadata=ConversionMetadata(
                width=width,
                height=height,
                total_cells=len(cells),
                unique_colours=len(colours),
                elapsed_time=elapsed,
            ),
        )


def convert_frame(
    frame: PixelBuffer, settings: ConversionSettings, converter: AsciiConverter | None = None
) -> ConversionResult:
    """One-shot conversion; pass a converter to reuse its colour caches."""
    if converter is None:
        converter = AsciiConverter()
    return converter.convert_frame(frame, settings)

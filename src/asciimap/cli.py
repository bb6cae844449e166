import argparse
import logging
import sys
from pathlib import Path

import numpy as np
from PIL import Image

from asciimap.charsets import RAMPS
from asciimap.converter import AsciiConverter
from asciimap.model import PixelBuffer
from asciimap.settings import ColourMode, ConversionSettings, MappingMethod
from asciimap.terminal import get_terminal_size, render_ansi, render_plain

# Terminal glyphs are roughly twice as tall as they are wide
FONT_ASPECT = 0.5


def _palette(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _ramp(value: str) -> tuple[str, ...]:
    return RAMPS.get(value, tuple(value))


def load_frame(path: Path, columns: int) -> PixelBuffer:
    """Decode an image and scale it so one pixel becomes one character cell."""
    image = Image.open(path).convert("RGBA")
    rows = max(1, int(image.height * columns / image.width * FONT_ASPECT))
    image = image.resize((columns, rows), Image.LANCZOS)
    return PixelBuffer.from_image(image)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert an image into coloured ASCII art")
    parser.add_argument("image", help="Path to input image")
    parser.add_argument(
        "-s", "--size", type=int, default=None, help="Output width in columns (default: terminal width)"
    )
    parser.add_argument(
        "-r",
        "--ramp",
        type=_ramp,
        default=RAMPS["minimal"],
        help=f"Ramp preset ({', '.join(sorted(RAMPS))}) or literal characters ordered light to dark",
    )
    parser.add_argument(
        "-m",
        "--method",
        default=MappingMethod.BRIGHTNESS.value,
        choices=[m.value for m in MappingMethod],
        help="Character mapping algorithm (default: brightness)",
    )
    parser.add_argument("-i", "--invert", action="store_true", help="Reverse the ramp before mapping")
    parser.add_argument("--no-characters", action="store_true", help="Emit spaces only (background blocks)")

    modes = [m.value for m in ColourMode]
    parser.add_argument("--fg-palette", type=_palette, default=(), help="Comma-separated hex colours for text")
    parser.add_argument("--fg-mode", default=ColourMode.CLOSEST.value, choices=modes)
    parser.add_argument("--fg-default", default="#FFFFFF", help="Text colour when no palette is given")
    parser.add_argument("--bg-palette", type=_palette, default=(), help="Comma-separated hex colours for background")
    parser.add_argument("--bg-mode", default=ColourMode.CLOSEST.value, choices=modes)
    parser.add_argument(
        "--original-colours", action="store_true", help="Colour text with the source pixel colours"
    )

    adjust = parser.add_argument_group("preprocessing")
    adjust.add_argument("--brightness", type=float, default=0.0, help="-100 to 100")
    adjust.add_argument("--contrast", type=float, default=1.0, help="0 to 2, 1 is neutral")
    adjust.add_argument("--saturation", type=float, default=0.0, help="-100 to 100")
    adjust.add_argument("--highlights", type=float, default=0.0, help="-100 to 100")
    adjust.add_argument("--shadows", type=float, default=0.0, help="-100 to 100")
    adjust.add_argument("--midtones", type=float, default=0.0, help="-100 to 100")
    adjust.add_argument("--blur", type=float, default=0.0, help="0 to 10")
    adjust.add_argument("--sharpen", type=float, default=0.0, help="0 to 10")
    adjust.add_argument("--dither-strength", type=float, default=0.1, help="0 to 1")
    adjust.add_argument("--seed", type=int, default=None, help="Seed for reproducible dithering")

    parser.add_argument("-c", "--colour", action="store_true", default=False, help="Enable truecolor ANSI output")
    parser.add_argument("--stats", action="store_true", help="Print conversion statistics to stderr")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def settings_from_args(args: argparse.Namespace) -> ConversionSettings:
    return ConversionSettings(
        enable_character_mapping=not args.no_characters,
        character_ramp=args.ramp,
        mapping_method=MappingMethod(args.method),
        invert_density=args.invert,
        enable_text_colour_mapping=bool(args.fg_palette) or args.original_colours,
        text_colour_palette=args.fg_palette,
        text_colour_mode=ColourMode(args.fg_mode),
        default_text_colour=args.fg_default,
        enable_background_colour_mapping=bool(args.bg_palette),
        background_colour_palette=args.bg_palette,
        background_colour_mode=ColourMode(args.bg_mode),
        use_original_colours=args.original_colours,
        brightness=args.brightness,
        contrast=args.contrast,
        saturation=args.saturation,
        highlights=args.highlights,
        shadows=args.shadows,
        midtones=args.midtones,
        blur=args.blur,
        sharpen=args.sharpen,
        dither_strength=args.dither_strength,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s: %(message)s")

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        return 1

    columns = args.size if args.size is not None else get_terminal_size()[0]
    frame = load_frame(image_path, columns)
    converter = AsciiConverter(rng=np.random.default_rng(args.seed))
    result = converter.convert_frame(frame, settings_from_args(args))

    print(render_ansi(result) if args.colour else render_plain(result))
    if args.stats:
        meta = result.metadata
        print(
            f"{meta.width}x{meta.height}, {meta.total_cells} cells, "
            f"{meta.unique_colours} colours, {meta.elapsed_time:.1f}ms",
            file=sys.stderr,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())

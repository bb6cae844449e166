import os
import sys

from asciimap.colours import TRANSPARENT, hex_to_rgb
from asciimap.model import ConversionResult

RESET = "\033[0m"


def get_terminal_size() -> tuple[int, int]:
    """Return (columns, rows) of the terminal, or (80, 24) when stdout is not a tty."""
    if not sys.stdout.isatty():
        return (80, 24)
    size = os.get_terminal_size()
    return (size.columns, size.lines)


def _escape(colour: str, layer: int) -> str:
    if colour == TRANSPARENT:
        return ""
    r, g, b = hex_to_rgb(colour)
    return f"\033[{layer};2;{r};{g};{b}m"


def render_plain(result: ConversionResult) -> str:
    """Glyphs only; cells with no content become spaces."""
    cells = result.cells
    return "\n".join(
        "".join(cells[(x, y)].character if (x, y) in cells else " " for x in range(result.metadata.width))
        for y in range(result.metadata.height)
    )


def render_ansi(result: ConversionResult) -> str:
    """Wrap each cell in 24-bit ANSI foreground/background escapes."""
    lines = []
    for y in range(result.metadata.height):
        parts = []
        for x in range(result.metadata.width):
            cell = result.cells.get((x, y))
            if cell is None:
                parts.append(RESET + " ")
                continue
            parts.append(RESET + _escape(cell.foreground, 38) + _escape(cell.background, 48) + cell.character)
        parts.append(RESET)
        lines.append("".join(parts))
    return "\n".join(lines)

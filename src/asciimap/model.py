from dataclasses import dataclass, field

import numpy as np
from PIL import Image

CHANNELS = 4

# 3x3 neighbourhood offsets (dy, dx), centre excluded
NEIGHBOUR_OFFSETS = [(dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dy, dx) != (0, 0)]


@dataclass(frozen=True)
class PixelBuffer:
    """A decoded RGBA frame: ``width * height * 4`` interleaved bytes."""

    width: int
    height: int
    data: bytes

    def __post_init__(self):
        object.__setattr__(self, "data", bytes(self.data))
        if self.is_empty:
            return
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise ValueError(
                f"Pixel data length {len(self.data)} does not match {self.width}x{self.height} RGBA ({expected})"
            )

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (height, width, 4) uint8 view of the data."""
        if self.is_empty:
            return np.zeros((0, 0, CHANNELS), dtype=np.uint8)
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, CHANNELS)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise ValueError(f"Expected an (h, w, 4) array, got shape {array.shape}")
        height, width = array.shape[:2]
        data = np.ascontiguousarray(np.clip(array, 0, 255).astype(np.uint8)).tobytes()
        return cls(width=width, height=height, data=data)

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        image = image.convert("RGBA")
        return cls(width=image.width, height=image.height, data=image.tobytes())


@dataclass(frozen=True)
class Cell:
    character: str
    foreground: str
    background: str


CellGrid = dict[tuple[int, int], Cell]


@dataclass
class ConversionMetadata:
    width: int = 0
    height: int = 0
    total_cells: int = 0
    unique_colours: int = 0
    elapsed_time: float = 0.0  # milliseconds


@dataclass
class ConversionResult:
    cells: CellGrid = field(default_factory=dict)
    colours: list[str] = field(default_factory=list)
    character_usage: dict[str, int] = field(default_factory=dict)
    metadata: ConversionMetadata = field(default_factory=ConversionMetadata)

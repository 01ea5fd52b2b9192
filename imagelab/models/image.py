from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence, Union
import numpy as np

from .pixel import Pixel
from ..exceptions import InvalidArgumentError

PIXEL_DTYPE = np.int64
RED, GREEN, BLUE, ALPHA = range(4)

# Pixel objects or plain (r, g, b, a) tuples.
PixelGrid = Union[np.ndarray, Sequence[Sequence[Union[Pixel, Sequence[int]]]]]


def _as_pixel_array(pixels: PixelGrid) -> np.ndarray:
    if isinstance(pixels, np.ndarray):
        arr = pixels
    else:
        try:
            arr = np.array([[p.as_tuple() if isinstance(p, Pixel) else tuple(p) for p in row]
                            for row in pixels], dtype=PIXEL_DTYPE)
        except (TypeError, ValueError, OverflowError):
            raise InvalidArgumentError("Pixel grid must be rows of Pixel or (r, g, b, a) values") from None
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise InvalidArgumentError(
            f"Pixel grid must have shape (H, W, 4), got {arr.shape}"
        )
    if arr.shape[0] < 1 or arr.shape[1] < 1:
        raise InvalidArgumentError("Image must be at least 1x1")
    return arr.astype(PIXEL_DTYPE, copy=True)


@dataclass(eq=False)
class Image:
    """
    Simple data object: a (row, col) grid of RGBA pixels.
    Height and width are fixed at construction; ``fill`` replaces every cell,
    ``update_pixel`` replaces one.
    """
    pixels: np.ndarray  # Shape (H, W, 4), int64, RGBA order.

    def __post_init__(self):
        self.pixels = _as_pixel_array(self.pixels)

    # ─── Constructors ───────────────────────────────────────────────
    @classmethod
    def blank(cls, height: int, width: int) -> Image:
        return cls(np.zeros((height, width, 4), dtype=PIXEL_DTYPE))

    @classmethod
    def from_pixels(cls, rows: Sequence[Sequence[Pixel]]) -> Image:
        return cls(_as_pixel_array(rows))

    # ─── Accessors ──────────────────────────────────────────────────
    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    def get_pixel(self, row: int, col: int) -> Pixel:
        r, g, b, a = (int(v) for v in self.pixels[row, col])
        return Pixel(r, g, b, a)

    def to_rows(self) -> List[List[Pixel]]:
        return [[self.get_pixel(y, x) for x in range(self.width)]
                for y in range(self.height)]

    # ─── Mutation (only while a filter is building its result) ──────
    def update_pixel(self, row: int, col: int, pixel: Pixel) -> None:
        self.pixels[row, col] = pixel.as_tuple()

    def fill(self, pixels: PixelGrid) -> None:
        new_pixels = _as_pixel_array(pixels)
        if new_pixels.shape != self.pixels.shape:
            raise InvalidArgumentError(
                f"Cannot fill a {self.height}x{self.width} image with a "
                f"{new_pixels.shape[0]}x{new_pixels.shape[1]} grid"
            )
        self.pixels = new_pixels

    def copy(self) -> Image:
        return Image(self.pixels)

    # ─── Deep equality / hashing ────────────────────────────────────
    def __eq__(self, other) -> bool:
        if self is other:
            return True
        if not isinstance(other, Image):
            return NotImplemented
        return (self.pixels.shape == other.pixels.shape
                and bool(np.array_equal(self.pixels, other.pixels)))

    def __hash__(self) -> int:
        return hash((self.pixels.shape, self.pixels.tobytes()))

    def __repr__(self) -> str:
        return f"Image(height={self.height}, width={self.width})"

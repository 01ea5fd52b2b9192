"""
Generic pixel machinery shared by most filters.

Split view: for a split percentage p, columns left of
``p * width // 100`` get the filtered result, that column becomes a black
divider and the remaining columns keep the source pixels. p = 100 puts the
divider outside the image, i.e. the whole image is filtered.
"""
from __future__ import annotations
from typing import Callable, Dict, Sequence, Tuple
import logging
import numpy as np

from ..models.image import Image, PIXEL_DTYPE, ALPHA
from ..models.commands import FULL_SPLIT, check_split_percent
from ..exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

DIVIDER_PIXEL = (0, 0, 0, 255)

# (r, g, b, a) channel arrays -> (r', g', b', a'); also works on scalars.
PixelFunction = Callable[..., Tuple]

BLUR_KERNEL = np.array([
    [1, 2, 1],
    [2, 4, 2],
    [1, 2, 1],
]) / 16.0

SHARPEN_KERNEL = np.array([
    [-1 / 8, -1 / 8, -1 / 8, -1 / 8, -1 / 8],
    [-1 / 8, 1 / 4, 1 / 4, 1 / 4, -1 / 8],
    [-1 / 8, 1 / 4, 1.0, 1 / 4, -1 / 8],
    [-1 / 8, 1 / 4, 1 / 4, 1 / 4, -1 / 8],
    [-1 / 8, -1 / 8, -1 / 8, -1 / 8, -1 / 8],
])

KERNELS: Dict[str, np.ndarray] = {"blur": BLUR_KERNEL, "sharpen": SHARPEN_KERNEL}

SEPIA_MATRIX = np.array([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
])


# ─── Numeric helpers ──────────────────────────────────────────────────
def round_half_up(values) -> np.ndarray:
    """Round .5 upwards (not to even)."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5).astype(PIXEL_DTYPE)


def clamp(values) -> np.ndarray:
    return np.clip(values, 0, 255)


def split_position(width: int, split_percent: int) -> int:
    check_split_percent(split_percent)
    return split_percent * width // 100


def composite_split(source: np.ndarray, processed: np.ndarray, position: int,
                    divider: bool = True) -> np.ndarray:
    """Left of ``position`` from ``processed``, the rest from ``source``."""
    result = source.copy()
    result[:, :position] = processed[:, :position]
    if divider and position < source.shape[1]:
        result[:, position] = DIVIDER_PIXEL
    return result


# ─── Pixel functions ──────────────────────────────────────────────────
def red_component(r, g, b, a):
    return r, r, r, a


def green_component(r, g, b, a):
    return g, g, g, a


def blue_component(r, g, b, a):
    return b, b, b, a


def luma_component(r, g, b, a):
    luma = round_half_up(0.2126 * r + 0.7152 * g + 0.0722 * b)
    return luma, luma, luma, a


def intensity_component(r, g, b, a):
    intensity = (r + g + b) // 3
    return intensity, intensity, intensity, a


def value_component(r, g, b, a):
    value = np.maximum(np.maximum(r, g), b)
    return value, value, value, a


COMPONENT_FUNCTIONS: Dict[str, PixelFunction] = {
    "red": red_component,
    "green": green_component,
    "blue": blue_component,
    "luma": luma_component,
    "intensity": intensity_component,
    "value": value_component,
}


def brighten(increment: int) -> PixelFunction:
    def _brighten(r, g, b, a):
        return r + increment, g + increment, b + increment, a
    return _brighten


def matrix_transformation(matrix) -> PixelFunction:
    """
    Color-matrix transform: each output channel is the dot product of one
    matrix row with (R, G, B), truncated toward zero and clamped.
    """
    m = np.asarray(matrix, dtype=np.float64)
    if m.shape != (3, 3):
        raise InvalidArgumentError(f"Color matrix must be 3x3, got {m.shape}")

    def _apply(r, g, b, a):
        out = [clamp(np.trunc(r * m[i, 0] + g * m[i, 1] + b * m[i, 2]))
               for i in range(3)]
        return out[0], out[1], out[2], a
    return _apply


# ─── Service ──────────────────────────────────────────────────────────
class TransformationService:
    """
    Stateless image -> new Image algorithms.
    No store access here; the dispatcher does the fetching and writing.
    """

    def apply_transformation(
            self,
            image: Image,
            transformation: PixelFunction,
            split_percent: int = FULL_SPLIT,
    ) -> Image:
        """
        Apply ``transformation`` to every pixel left of the split.
        R, G, B are clamped to [0, 255]; alpha is always the source alpha.
        """
        position = split_position(image.width, split_percent)
        src = image.pixels
        shape = src.shape[:2]

        new_r, new_g, new_b = transformation(*(src[:, :, c] for c in range(4)))[:3]
        processed = np.empty_like(src)
        for channel, values in enumerate((new_r, new_g, new_b)):
            values = np.broadcast_to(np.asarray(values), shape).astype(PIXEL_DTYPE)
            processed[:, :, channel] = clamp(values)
        processed[:, :, ALPHA] = src[:, :, ALPHA]

        return Image(composite_split(src, processed, position))

    def apply_kernel(
            self,
            image: Image,
            kernel,
            split_percent: int = FULL_SPLIT,
    ) -> Image:
        """
        Convolve R, G, B with a square, odd-sized kernel.
        Out-of-bounds taps re-use the nearest edge pixel; every tap counts
        towards the weight sum the result is normalised by.
        """
        position = split_position(image.width, split_percent)
        kernel = np.asarray(kernel, dtype=np.float64)
        if kernel.ndim != 2 or kernel.shape[0] != kernel.shape[1] or kernel.shape[0] % 2 == 0:
            raise InvalidArgumentError(f"Kernel must be square with odd size, got {kernel.shape}")
        weight_sum = kernel.sum()
        if weight_sum == 0:
            raise InvalidArgumentError("Kernel weights must not sum to zero")

        src = image.pixels
        height, width = src.shape[:2]
        size = kernel.shape[0]
        padding = size // 2

        padded = np.pad(src[:, :, :3].astype(np.float64),
                        ((padding, padding), (padding, padding), (0, 0)),
                        mode="edge")
        acc = np.zeros((height, width, 3), dtype=np.float64)
        for ky in range(size):
            for kx in range(size):
                acc += kernel[ky, kx] * padded[ky:ky + height, kx:kx + width]

        processed = np.empty_like(src)
        processed[:, :, :3] = clamp(round_half_up(acc / weight_sum))
        processed[:, :, ALPHA] = src[:, :, ALPHA]

        return Image(composite_split(src, processed, position))

    # ─── Pixel swapping ───────────────────────────────────────────────
    @staticmethod
    def swap_pixels(image: Image, source_rows: Sequence[int], source_cols: Sequence[int]) -> Image:
        """result[y, x] = image[source_rows[y], source_cols[x]]"""
        return Image(image.pixels[np.ix_(source_rows, source_cols)])

    def flip_horizontal(self, image: Image) -> Image:
        return self.swap_pixels(image, np.arange(image.height), np.arange(image.width)[::-1])

    def flip_vertical(self, image: Image) -> Image:
        return self.swap_pixels(image, np.arange(image.height)[::-1], np.arange(image.width))

    # ─── Channel split / combine ──────────────────────────────────────
    def split_channels(self, image: Image) -> Tuple[Image, Image, Image]:
        return tuple(
            self.apply_transformation(image, COMPONENT_FUNCTIONS[name])
            for name in ("red", "green", "blue")
        )

    @staticmethod
    def combine_channels(red: Image, green: Image, blue: Image) -> Image:
        """R from ``red``, G from ``green``, B from ``blue``, alpha from ``red``."""
        if not red.pixels.shape == green.pixels.shape == blue.pixels.shape:
            raise InvalidArgumentError("rgb-combine images must have identical dimensions")
        combined = red.pixels.copy()
        combined[:, :, 1] = green.pixels[:, :, 1]
        combined[:, :, 2] = blue.pixels[:, :, 2]
        return Image(combined)

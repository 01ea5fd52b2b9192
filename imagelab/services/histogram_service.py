import logging
from typing import Tuple
import numpy as np

from ..models.image import Image, PIXEL_DTYPE
from ..models.commands import FULL_SPLIT, check_split_percent
from ..exceptions import InvalidArgumentError
from .transformation_service import TransformationService

logger = logging.getLogger(__name__)

LEVELS = 256
PEAK_RANGE = (10, 245)  # inclusive; ignores clipped shadows / highlights

PLOT_SIZE = 256
GRID_STEP = 32
BACKGROUND = (255, 255, 255, 255)
GRID_COLOR = (200, 200, 200, 255)
CHANNEL_COLORS = ((255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255))


class HistogramService:
    """
    Per-channel intensity histograms, their line-plot rendering, and the
    histogram-peak color correction built on top of them.
    """

    def __init__(self, transformation_service: TransformationService = None):
        self.transformation_service = transformation_service or TransformationService()

    @staticmethod
    def histogram(image: Image) -> np.ndarray:
        """
        Returns:
            (np.ndarray): shape (3, 256); row c counts how many pixels have
            value v in channel c (R, G, B). Alpha is ignored.
        """
        rgb = image.pixels[:, :, :3]
        if rgb.min() < 0 or rgb.max() >= LEVELS:
            raise InvalidArgumentError("Histogram needs channel values within [0, 255]")
        return np.stack([
            np.bincount(rgb[:, :, c].ravel(), minlength=LEVELS) for c in range(3)
        ])

    # ─── Plot ─────────────────────────────────────────────────────────
    def render_histogram(self, image: Image) -> Image:
        """
        Draw R, G and B histograms as line graphs on a 256x256 white canvas
        with a light grid every 32 px, scaled to the tallest bar overall.
        """
        hist = self.histogram(image)
        canvas = np.empty((PLOT_SIZE, PLOT_SIZE, 4), dtype=PIXEL_DTYPE)
        canvas[:, :] = BACKGROUND
        canvas[:, ::GRID_STEP] = GRID_COLOR
        canvas[::GRID_STEP, :] = GRID_COLOR

        max_frequency = int(hist.max())
        for channel, color in enumerate(CHANNEL_COLORS):
            heights = np.clip(PLOT_SIZE - hist[channel] * PLOT_SIZE // max_frequency,
                              0, PLOT_SIZE - 1)
            for x in range(LEVELS - 1):
                self._draw_line(canvas, x, int(heights[x]), x + 1, int(heights[x + 1]), color)

        return Image(canvas)

    @staticmethod
    def _draw_line(canvas: np.ndarray, x1: int, y1: int, x2: int, y2: int, color) -> None:
        """Bresenham's line algorithm; points outside the canvas are skipped."""
        height, width = canvas.shape[:2]
        dx, dy = abs(x2 - x1), abs(y2 - y1)
        sx = 1 if x1 < x2 else -1
        sy = 1 if y1 < y2 else -1
        err = dx - dy

        while True:
            if 0 <= x1 < width and 0 <= y1 < height:
                canvas[y1, x1] = color
            if x1 == x2 and y1 == y2:
                break
            e2 = err * 2
            if e2 > -dy:
                err -= dy
                x1 += sx
            if e2 < dx:
                err += dx
                y1 += sy

    # ─── Color correction ─────────────────────────────────────────────
    @staticmethod
    def find_peak(channel_histogram: np.ndarray) -> int:
        """Most frequent value in [10, 245]; ties go to the lowest value."""
        low, high = PEAK_RANGE
        return low + int(np.argmax(channel_histogram[low:high + 1]))

    def color_correction_offsets(self, image: Image) -> Tuple[int, int, int]:
        hist = self.histogram(image)
        peaks = [self.find_peak(hist[c]) for c in range(3)]
        average_peak = sum(peaks) // 3
        offsets = tuple(average_peak - peak for peak in peaks)
        logger.debug(f"Color correction peaks={peaks} offsets={offsets}")
        return offsets

    def color_correct(self, image: Image, split_percent: int = FULL_SPLIT) -> Image:
        """
        Align the R, G, B histogram peaks on their average.
        Offsets always come from the whole image, even for a split preview.
        """
        check_split_percent(split_percent)
        red_offset, green_offset, blue_offset = self.color_correction_offsets(image)

        def _shift(r, g, b, a):
            return r + red_offset, g + green_offset, b + blue_offset, a

        return self.transformation_service.apply_transformation(image, _shift, split_percent)

import logging
import numpy as np

from ..models.image import Image, PIXEL_DTYPE, ALPHA
from ..models.commands import FULL_SPLIT
from .transformation_service import split_position, composite_split

logger = logging.getLogger(__name__)

THRESHOLD = 127

# (row offset, col offset, weight / 16)
ERROR_DIFFUSION = ((0, 1, 7), (1, -1, 3), (1, 0, 5), (1, 1, 1))


class DitheringService:
    """Floyd-Steinberg dithering of the intensity component to pure black/white."""

    @staticmethod
    def intensity(image: Image) -> np.ndarray:
        rgb = image.pixels[:, :, :3]
        return rgb.sum(axis=2) // 3

    def dither_values(self, image: Image) -> np.ndarray:
        """
        Returns:
            (np.ndarray): (H, W) array of 0 / 255.
        """
        values = [[int(v) for v in row] for row in self.intensity(image)]
        height, width = image.height, image.width
        out = np.zeros((height, width), dtype=PIXEL_DTYPE)

        for r in range(height):
            for c in range(width):
                old = values[r][c]
                new = 255 if old > THRESHOLD else 0
                error = old - new
                out[r, c] = new
                for dr, dc, weight in ERROR_DIFFUSION:
                    rr, cc = r + dr, c + dc
                    if 0 <= rr < height and 0 <= cc < width:
                        # integer share of the error, truncated toward zero
                        values[rr][cc] += int(error * weight / 16)
        return out

    def dither(self, image: Image, split_percent: int = FULL_SPLIT) -> Image:
        """
        Dither left of the split; no divider column is drawn and alpha is
        kept from the source everywhere.
        """
        position = split_position(image.width, split_percent)
        src = image.pixels

        processed = np.empty_like(src)
        processed[:, :, :3] = self.dither_values(image)[:, :, np.newaxis]
        processed[:, :, ALPHA] = src[:, :, ALPHA]

        return Image(composite_split(src, processed, position, divider=False))

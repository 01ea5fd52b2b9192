import logging
import math
import numpy as np

from ..models.image import Image, PIXEL_DTYPE, ALPHA
from ..exceptions import InvalidArgumentError
from .transformation_service import clamp, round_half_up

logger = logging.getLogger(__name__)


def _lower(v: float) -> int:
    return math.floor(v)


def _upper(v: float, dimension: int) -> int:
    return min(math.ceil(v + 1), dimension - 1)


def _is_whole(v: float) -> bool:
    """True when ``v`` is integral once rounded to two decimals."""
    return (math.floor(v * 100.0 + 0.5) / 100.0) % 1 == 0


class DownscalingService:
    """
    Shrink an image with bilinear-style interpolation of the four source
    pixels surrounding each mapped coordinate.
    """

    @staticmethod
    def check_target(image: Image, target_width: int, target_height: int) -> None:
        if target_width <= 0 or target_height <= 0:
            raise InvalidArgumentError("Target width/height must be positive")
        if target_width > image.width or target_height > image.height:
            raise InvalidArgumentError(
                "Target width/height cannot be greater than original width/height in downscaling."
            )

    @staticmethod
    def source_coordinate(source_dimension: int, target_dimension: int, index: int) -> float:
        return source_dimension * (index / target_dimension)

    @staticmethod
    def sample(rgb: np.ndarray, row: float, col: float) -> np.ndarray:
        """
        Interpolated (R, G, B) at fractional source position (row, col).

        Corners: A = (lo row, lo col), B = (hi row, lo col),
        C = (lo row, hi col), D = (hi row, hi col), where "hi" is one past
        the ceiling, capped at the last index.
        """
        height, width = rgb.shape[:2]
        if _is_whole(row) and _is_whole(col):
            return rgb[int(row), int(col)].astype(np.float64)

        r_lo, r_hi = _lower(row), _upper(row, height)
        c_lo, c_hi = _lower(col), _upper(col, width)
        a, b = rgb[r_lo, c_lo], rgb[r_hi, c_lo]
        c, d = rgb[r_lo, c_hi], rgb[r_hi, c_hi]

        m = b * (row - r_lo) + a * (r_hi - row)
        n = d * (row - r_lo) + c * (r_hi - row)
        return n * (col - c_lo) + m * (c_hi - col)

    def downscale(self, image: Image, target_width: int, target_height: int) -> Image:
        self.check_target(image, target_width, target_height)

        rgb = image.pixels[:, :, :3].astype(np.float64)
        out = np.empty((target_height, target_width, 4), dtype=PIXEL_DTYPE)
        for i in range(target_height):
            row = self.source_coordinate(image.height, target_height, i)
            for j in range(target_width):
                col = self.source_coordinate(image.width, target_width, j)
                out[i, j, :3] = clamp(round_half_up(self.sample(rgb, row, col)))
        out[:, :, ALPHA] = 255

        logger.debug(
            f"Downscaled {image.width}x{image.height} -> {target_width}x{target_height}"
        )
        return Image(out)


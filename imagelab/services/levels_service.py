import logging
from typing import Tuple
import numpy as np

from ..models.image import Image
from ..models.commands import FULL_SPLIT, check_split_percent
from ..exceptions import InvalidArgumentError
from .transformation_service import TransformationService, clamp

logger = logging.getLogger(__name__)


class LevelsService:
    """
    Levels adjustment: remap each channel through a quadratic curve anchored
    at black (-> 0), mid (-> 128) and white (-> 255) points.
    """

    def __init__(self, transformation_service: TransformationService = None):
        self.transformation_service = transformation_service or TransformationService()

    @staticmethod
    def curve_coefficients(black: int, mid: int, white: int) -> Tuple[float, float, float]:
        """
        Args:
            black, mid, white: anchor points, 0 <= black < mid < white <= 255.

        Returns:
            (a, b, c) for y = a*x^2 + b*x + c.
        """
        if not 0 <= black < mid < white <= 255:
            raise InvalidArgumentError(
                "Invalid levels adjustment values. Ensure 0 <= b < m < w <= 255."
            )
        b, m, w = float(black), float(mid), float(white)

        a_num = -b * (128 - 255) + 128 * w - 255 * m
        b_num = b * b * (128 - 255) + 255 * m * m - 128 * w * w
        c_num = b * b * (255 * m - 128 * w) - b * (255 * m * m - 128 * w * w)
        denominator = b * b * (m - w) + w * m * m - m * w * w

        return a_num / denominator, b_num / denominator, c_num / denominator

    def levels_adjust(
            self,
            image: Image,
            black: int,
            mid: int,
            white: int,
            split_percent: int = FULL_SPLIT,
    ) -> Image:
        check_split_percent(split_percent)
        a, b, c = self.curve_coefficients(black, mid, white)
        logger.debug(f"Levels curve a={a:.6f} b={b:.6f} c={c:.6f}")

        def _curve(x):
            return clamp(np.trunc(a * x ** 2 + b * x + c))

        def _adjust(red, green, blue, alpha):
            return _curve(red), _curve(green), _curve(blue), alpha

        return self.transformation_service.apply_transformation(image, _adjust, split_percent)

import logging
import math
import numpy as np

from ..models.image import Image, PIXEL_DTYPE, ALPHA
from ..exceptions import InvalidArgumentError
from .transformation_service import clamp, round_half_up

logger = logging.getLogger(__name__)

SQRT2 = math.sqrt(2)


class CompressionService:
    """
    Lossy compression with a 2-D Haar wavelet.

    Each of R, G, B is transformed on a square power-of-two canvas, the
    smallest coefficients are zeroed and the channel is transformed back.
    Alpha does not go through the wavelet at all.
    """

    @staticmethod
    def padded_size(height: int, width: int) -> int:
        size = 1
        while size < max(height, width):
            size *= 2
        return size

    # ─── 1-D steps, applied to every row of a block at once ──────────
    @staticmethod
    def _haar_rows(block: np.ndarray) -> np.ndarray:
        even, odd = block[:, 0::2], block[:, 1::2]
        return np.concatenate([(even + odd) / SQRT2, (even - odd) / SQRT2], axis=1)

    @staticmethod
    def _inverse_haar_rows(block: np.ndarray) -> np.ndarray:
        half = block.shape[1] // 2
        averages, details = block[:, :half], block[:, half:]
        out = np.empty_like(block)
        out[:, 0::2] = (averages + details) / SQRT2
        out[:, 1::2] = (averages - details) / SQRT2
        return out

    # ─── 2-D transforms (in place on a square float matrix) ──────────
    def haar_transform(self, data: np.ndarray) -> None:
        c = data.shape[0]
        while c > 1:
            data[:c, :c] = self._haar_rows(data[:c, :c])
            data[:c, :c] = self._haar_rows(data[:c, :c].T).T
            c //= 2

    def inverse_haar_transform(self, data: np.ndarray) -> None:
        size = data.shape[0]
        c = 2
        while c <= size:
            data[:c, :c] = self._inverse_haar_rows(data[:c, :c].T).T
            data[:c, :c] = self._inverse_haar_rows(data[:c, :c])
            c *= 2

    @staticmethod
    def threshold(coefficients: np.ndarray, percentage: int) -> int:
        """
        Zero the coefficients whose magnitude is within the lowest
        ``percentage`` % of the *distinct* non-zero magnitudes.

        Returns:
            (int): number of coefficients set to zero.
        """
        magnitudes = np.unique(np.abs(coefficients[coefficients != 0]))
        count = int(magnitudes.size * (percentage / 100.0))
        if count == 0:
            return 0
        cutoff = magnitudes[count - 1]
        mask = (np.abs(coefficients) <= cutoff) & (coefficients != 0)
        coefficients[mask] = 0
        return int(mask.sum())

    def compress(self, image: Image, percentage: int) -> Image:
        if not 0 <= percentage <= 100:
            raise InvalidArgumentError("Compression percentage must be between 0 and 100")

        height, width = image.height, image.width
        size = self.padded_size(height, width)

        # Top-left anchored; padding is transparent black.
        padded = np.zeros((size, size, 4), dtype=PIXEL_DTYPE)
        padded[:height, :width] = image.pixels

        result = np.empty_like(image.pixels)
        result[:, :, ALPHA] = padded[:height, :width, ALPHA]
        for channel in range(3):
            data = padded[:, :, channel].astype(np.float64)
            self.haar_transform(data)
            zeroed = self.threshold(data, percentage)
            self.inverse_haar_transform(data)
            result[:, :, channel] = clamp(round_half_up(data[:height, :width]))
            logger.debug(f"Channel {channel}: zeroed {zeroed} of {data.size} coefficients")

        return Image(result)

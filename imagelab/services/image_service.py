from pathlib import Path
from typing import Dict, Union
import logging
import numpy as np

from ..models.image import Image, RED, GREEN, BLUE, ALPHA
from ..repositories.image_repository import ImageRepository
from ..repositories.image_store_repository import ImageStoreRepository
from ..exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

CHANNEL_NAMES = {"red": RED, "green": GREEN, "blue": BLUE, "alpha": ALPHA}


class ImageService:
    """I/O helpers.  Files <-> named images in the store, no filter logic."""
    def __init__(self, store: ImageStoreRepository = None):
        self.store = store if store is not None else ImageStoreRepository()
        self.image_repository = ImageRepository()

    def load(self, path: Union[str, Path], name: str) -> Image:
        """Read an image file and store it under ``name``."""
        image = self.image_repository.load(path)
        self.store.store(name, image)
        logger.info(f"Loaded {path} as '{name}' ({image.width}x{image.height})")
        return image

    def save(self, path: Union[str, Path], name: str) -> None:
        """
        Business-level method to write a stored image to ``path``.
        The format follows the file extension.
        """
        image = self.store.fetch(name)
        self.image_repository.save(image, path)
        logger.info(f"Saved '{name}' to {path}")

    # ─── Codec boundary ───────────────────────────────────────────────
    @staticmethod
    def to_channel_matrices(img: Image) -> Dict[str, np.ndarray]:
        """
        Returns:
            (dict): "red", "green", "blue", "alpha" -> (H, W) integer matrix.
        """
        return {name: img.pixels[:, :, idx].copy() for name, idx in CHANNEL_NAMES.items()}

    @staticmethod
    def from_channel_matrices(channels: Dict[str, np.ndarray]) -> Image:
        """
        Inverse of ``to_channel_matrices``. A missing "alpha" matrix means
        fully opaque.
        """
        missing = [name for name in ("red", "green", "blue") if name not in channels]
        if missing:
            raise InvalidArgumentError(f"Missing channel matrices: {', '.join(missing)}")

        matrices = [np.asarray(channels[name]) for name in ("red", "green", "blue")]
        if "alpha" in channels:
            matrices.append(np.asarray(channels["alpha"]))
        else:
            matrices.append(np.full(matrices[0].shape, 255))

        if any(m.ndim != 2 or m.shape != matrices[0].shape for m in matrices):
            raise InvalidArgumentError("Channel matrices must be 2-D with identical shapes")
        return Image(np.stack(matrices, axis=2))

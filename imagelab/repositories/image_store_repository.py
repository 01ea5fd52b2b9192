import logging
from typing import Dict, List

from ..models.image import Image
from ..exceptions import ImageNotFoundError

logger = logging.getLogger(__name__)


class ImageStoreRepository:
    """
    In-memory name -> Image map.
    Names are case-sensitive; storing under an existing name overwrites it.
    """

    def __init__(self):
        self._images: Dict[str, Image] = {}

    def store(self, name: str, image: Image) -> None:
        if name in self._images:
            logger.debug(f"Overwriting stored image '{name}'")
        self._images[name] = image

    def fetch(self, name: str) -> Image:
        try:
            return self._images[name]
        except KeyError:
            raise ImageNotFoundError(name) from None

    def contains(self, name: str) -> bool:
        return name in self._images

    def names(self) -> List[str]:
        return sorted(self._images)

import numpy as np
import pytest

from imagelab.models.image import Image
from imagelab.repositories.image_store_repository import ImageStoreRepository


def _rgba(rows):
    """Rows of ints (gray) or (r, g, b) / (r, g, b, a) tuples -> Image."""
    pixels = []
    for row in rows:
        out_row = []
        for value in row:
            if isinstance(value, int):
                value = (value, value, value)
            if len(value) == 3:
                value = (*value, 255)
            out_row.append(value)
        pixels.append(out_row)
    return Image(np.array(pixels))


@pytest.fixture
def make_image():
    return _rgba


@pytest.fixture
def gray_2x2():
    return _rgba([[100, 150], [200, 50]])


@pytest.fixture
def color_2x2():
    return _rgba([
        [(100, 150, 200), (50, 100, 150)],
        [(0, 50, 100), (200, 220, 240)],
    ])


@pytest.fixture
def store(gray_2x2, color_2x2):
    store = ImageStoreRepository()
    store.store("gray", gray_2x2)
    store.store("color", color_2x2)
    return store

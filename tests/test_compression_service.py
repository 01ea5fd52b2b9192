import numpy as np
import pytest

from imagelab.services.compression_service import CompressionService
from imagelab.exceptions import InvalidArgumentError

service = CompressionService()


def test_padded_size():
    assert service.padded_size(1, 1) == 1
    assert service.padded_size(2, 3) == 4
    assert service.padded_size(5, 4) == 8
    assert service.padded_size(8, 8) == 8


def test_haar_transform_is_invertible():
    data = np.arange(16, dtype=np.float64).reshape(4, 4)
    original = data.copy()
    service.haar_transform(data)
    assert not np.allclose(data, original)
    service.inverse_haar_transform(data)
    assert np.allclose(data, original)


def test_threshold_uses_distinct_magnitudes():
    coefficients = np.array([[250.0, 50.0], [-50.0, -100.0]])
    zeroed = service.threshold(coefficients, 50)
    assert zeroed == 2
    assert coefficients.tolist() == [[250.0, 0.0], [0.0, -100.0]]


def test_compress_50_percent(gray_2x2):
    result = service.compress(gray_2x2, 50)
    assert result.pixels[:, :, 0].tolist() == [[75, 175], [175, 75]]
    assert result.get_pixel(0, 0).as_tuple() == (75, 75, 75, 255)


def test_compress_pads_non_square_images(make_image):
    img = make_image([[100, 150, 150], [200, 50, 150]])
    result = service.compress(img, 50)
    assert (result.height, result.width) == (2, 3)
    assert result.pixels[:, :, 0].tolist() == [[50, 150, 175], [150, 50, 175]]


def test_compress_0_percent_is_lossless(color_2x2, make_image):
    assert service.compress(color_2x2, 0) == color_2x2
    odd = make_image([[(1, 2, 3), (4, 5, 6), (7, 8, 9)]])
    assert service.compress(odd, 0) == odd


def test_compress_100_percent_is_black(color_2x2):
    result = service.compress(color_2x2, 100)
    assert result.pixels[:, :, :3].max() == 0
    assert result.pixels[:, :, 3].tolist() == [[255, 255], [255, 255]]


def test_alpha_is_kept(make_image):
    img = make_image([[(10, 20, 30, 40), (50, 60, 70, 80)]])
    assert service.compress(img, 70).pixels[:, :, 3].tolist() == [[40, 80]]


@pytest.mark.parametrize("percentage", [-1, 101])
def test_invalid_percentage(gray_2x2, percentage):
    with pytest.raises(InvalidArgumentError):
        service.compress(gray_2x2, percentage)

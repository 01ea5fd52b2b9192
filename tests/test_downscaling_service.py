import pytest

from imagelab.services.downscaling_service import DownscalingService
from imagelab.exceptions import InvalidArgumentError

service = DownscalingService()


def red_plane(img):
    return img.pixels[:, :, 0].tolist()


def test_same_size_is_identity(gray_2x2):
    assert service.downscale(gray_2x2, 2, 2) == gray_2x2


@pytest.mark.parametrize("width, height, expected", [
    (1, 2, [[100], [200]]),
    (2, 1, [[100, 150]]),
    (1, 1, [[100]]),
])
def test_integral_mappings_sample_the_source(gray_2x2, width, height, expected):
    result = service.downscale(gray_2x2, width, height)
    assert (result.height, result.width) == (height, width)
    assert red_plane(result) == expected


def test_fractional_mapping_interpolates(make_image):
    img = make_image([
        [100, 150, 150, 150, 150],
        [200, 50, 50, 150, 150],
        [200, 50, 50, 150, 150],
    ])
    result = service.downscale(img, 5, 2)
    assert red_plane(result) == [[100, 150, 150, 150, 150], [200, 50, 50, 150, 0]]
    assert result.get_pixel(1, 1).as_tuple() == (50, 50, 50, 255)


def test_output_is_opaque(make_image):
    img = make_image([[(10, 10, 10, 0), (20, 20, 20, 0)]])
    assert service.downscale(img, 1, 1).get_pixel(0, 0).as_tuple() == (10, 10, 10, 255)


@pytest.mark.parametrize("width, height", [(3, 2), (2, 3), (0, 1), (1, -1)])
def test_invalid_targets(gray_2x2, width, height):
    with pytest.raises(InvalidArgumentError):
        service.downscale(gray_2x2, width, height)

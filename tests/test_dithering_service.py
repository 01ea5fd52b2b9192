import pytest

from imagelab.services.dithering_service import DitheringService
from imagelab.exceptions import InvalidArgumentError

service = DitheringService()


def test_dither_vector(gray_2x2):
    result = service.dither(gray_2x2)
    assert result.pixels[:, :, 0].tolist() == [[0, 255], [255, 0]]
    assert result.get_pixel(0, 1).as_tuple() == (255, 255, 255, 255)


def test_dither_output_is_binary(color_2x2):
    values = service.dither(color_2x2).pixels[:, :, :3]
    assert set(values.ravel().tolist()) <= {0, 255}


def test_dither_split_has_no_divider(gray_2x2):
    result = service.dither(gray_2x2, 50)
    assert result.pixels[:, :, 0].tolist() == [[0, 150], [255, 50]]


def test_dither_keeps_source_alpha(make_image):
    img = make_image([[(200, 200, 200, 17)]])
    assert service.dither(img).get_pixel(0, 0).as_tuple() == (255, 255, 255, 17)


@pytest.mark.parametrize("split", [-1, 101])
def test_invalid_split(gray_2x2, split):
    with pytest.raises(InvalidArgumentError):
        service.dither(gray_2x2, split)

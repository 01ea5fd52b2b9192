import numpy as np
import pytest

from imagelab.services.image_service import ImageService
from imagelab.exceptions import InvalidArgumentError, ImageNotFoundError


def test_load_and_save_through_store(tmp_path, make_image):
    service = ImageService()
    img = make_image([[(1, 2, 3), (4, 5, 6)]])
    service.store.store("src", img)
    service.save(tmp_path / "src.png", "src")
    loaded = service.load(tmp_path / "src.png", "copy")
    assert service.store.fetch("copy") == loaded == img
    assert (loaded.height, loaded.width) == (1, 2)


def test_save_unknown_name():
    with pytest.raises(ImageNotFoundError):
        ImageService().save("out.png", "nothing")


def test_channel_matrices_round_trip(color_2x2):
    channels = ImageService.to_channel_matrices(color_2x2)
    assert set(channels) == {"red", "green", "blue", "alpha"}
    assert channels["green"].tolist() == [[150, 100], [50, 220]]
    assert ImageService.from_channel_matrices(channels) == color_2x2


def test_missing_alpha_means_opaque():
    img = ImageService.from_channel_matrices({
        "red": [[1]], "green": [[2]], "blue": [[3]],
    })
    assert img.get_pixel(0, 0).as_tuple() == (1, 2, 3, 255)


def test_channel_matrices_must_agree():
    with pytest.raises(InvalidArgumentError):
        ImageService.from_channel_matrices({"red": [[1]], "green": [[2]]})
    with pytest.raises(InvalidArgumentError):
        ImageService.from_channel_matrices({
            "red": np.zeros((2, 2)), "green": np.zeros((2, 3)), "blue": np.zeros((2, 2)),
        })

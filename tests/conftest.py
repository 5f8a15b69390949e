import cv2
import numpy as np
import pytest

from plates import draw_plate


@pytest.fixture
def plate_image():
    return draw_plate()


@pytest.fixture
def plate_path(tmp_path, plate_image):
    path = tmp_path / "plate.png"
    cv2.imwrite(str(path), plate_image)
    return path


@pytest.fixture
def blank_magnitude():
    return np.zeros((500, 256), dtype=np.float64)


@pytest.fixture
def block_magnitude(blank_magnitude):
    """Three 40x40 regions and five 12x12 regions of strong edges."""
    mag = blank_magnitude.copy()
    for x in (10, 100, 190):
        mag[20:60, x:x + 40] = 100.0
    for x in (10, 50, 90, 130, 170):
        mag[200:212, x:x + 12] = 100.0
    return mag

import numpy as np
import pytest

from config import UNSET
from models import Band
from preprocessing import band_from_reference, crop_image, preprocess, to_canonical_y


class TestPreprocess:
    """Canonical frame produced from arbitrary inputs"""

    @pytest.mark.parametrize("shape", [(120, 90, 3), (3000, 2000, 3), (501, 257, 3), (400, 300), (200, 100, 4)])
    def test_output_is_canonical_size(self, shape):
        image = np.random.default_rng(0).integers(0, 255, size=shape, dtype=np.uint8)
        resized, blurred = preprocess(image)
        assert resized.shape == (500, 256, 3)
        assert blurred.shape == (500, 256)
        assert blurred.dtype == np.uint8

    def test_custom_canonical_size(self):
        image = np.zeros((100, 100, 3), dtype=np.uint8)
        resized, blurred = preprocess(image, canonical_size=(128, 250))
        assert resized.shape == (250, 128, 3)
        assert blurred.shape == (250, 128)

    def test_input_is_not_modified(self, plate_image):
        before = plate_image.copy()
        preprocess(plate_image)
        assert np.array_equal(before, plate_image)

    def test_empty_image_rejected(self):
        with pytest.raises(ValueError):
            preprocess(np.zeros((0, 0, 3), dtype=np.uint8))

    def test_crop_uses_original_fractions(self):
        image = np.zeros((200, 100, 3), dtype=np.uint8)
        cropped = crop_image(image, (0.10, 0.10, 0.05, 0.05))
        assert cropped.shape == (180, 80, 3)


class TestReferenceTransform:
    """Mapping baseline/topline from original pixels to the canonical frame"""

    def test_crop_offset_is_removed(self):
        # 5% of 600 = 30 rows trimmed at the top
        assert to_canonical_y(30, 600) == 0

    def test_scaled_by_original_height(self):
        assert to_canonical_y(330, 600) == 250

    def test_clamped_to_frame(self):
        assert to_canonical_y(0, 600) == 0
        assert to_canonical_y(10_000, 600) == 499

    def test_unset_gives_no_band(self):
        assert band_from_reference(UNSET, 100, 600) is None
        assert band_from_reference(500, UNSET, 600) is None

    def test_band_built_from_reference(self):
        band = band_from_reference(baseline_y=590, topline_y=40, original_height=600)
        assert band == Band(topline_y=8, baseline_y=467)

    def test_inverted_lines_are_ignored(self):
        assert band_from_reference(baseline_y=40, topline_y=590, original_height=600) is None

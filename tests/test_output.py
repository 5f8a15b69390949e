import csv
import json

import numpy as np

from annotation import annotate_spots
from models import Band, Rectangle, Spot
from output import spots_to_json, write_csv, write_json
from validity import dark_fraction, is_plate_valid


class TestSpotJson:

    def test_empty(self):
        assert spots_to_json([]) == "[]"

    def test_format_and_rounding(self):
        spots = [Spot(center_x=120, center_y=340, rf_value=0.51234)]
        assert spots_to_json(spots) == '[{"x":120,"y":340,"rf_value":0.512}]'

    def test_write_json(self, tmp_path):
        path = tmp_path / "out" / "spots.json"
        write_json(path, [Spot(1, 2, 0.25), Spot(3, 4, 0.75)])
        assert json.loads(path.read_text(encoding="utf-8")) == [
            {"x": 1, "y": 2, "rf_value": 0.25},
            {"x": 3, "y": 4, "rf_value": 0.75},
        ]


class TestSpotCsv:

    def test_rows(self, tmp_path):
        path = tmp_path / "spots.csv"
        spots = [Spot(30, 250, 0.5, rect=Rectangle(10, 230, 40, 40)), Spot(5, 5, 0.99)]
        write_csv(path, spots)
        with path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["Spot_ID", "X", "Y", "Rf_Value", "Width", "Height", "Area"]
        assert rows[1] == ["0", "30", "250", "0.500", "40", "40", "1600"]
        assert rows[2] == ["1", "5", "5", "0.990", "", "", ""]


class TestAnnotation:

    def test_draws_on_a_copy(self):
        image = np.full((500, 256, 3), 255, dtype=np.uint8)
        before = image.copy()
        spots = [Spot(30, 250, 0.5, rect=Rectangle(10, 230, 40, 40))]
        annotated = annotate_spots(image, spots, band=Band(20, 480))
        assert np.array_equal(before, image)
        assert annotated.shape == image.shape
        assert annotated.dtype == np.uint8
        # green outline on the left edge of the box (BGR)
        assert tuple(annotated[250, 10]) == (0, 255, 0)
        # red center marker (BGR)
        assert tuple(annotated[250, 30]) == (0, 0, 255)
        assert not np.array_equal(annotated[20], before[20])

    def test_no_spots_no_band_is_unchanged(self):
        image = np.full((500, 256, 3), 200, dtype=np.uint8)
        assert np.array_equal(annotate_spots(image, []), image)


class TestPlateValidity:

    def test_black_image_rejected(self):
        image = np.zeros((100, 100, 3), dtype=np.uint8)
        assert dark_fraction(image) == 1.0
        assert not is_plate_valid(image)

    def test_white_image_accepted(self):
        assert is_plate_valid(np.full((100, 100, 3), 255, dtype=np.uint8))

    def test_fraction_limit(self):
        image = np.full((100, 100), 255, dtype=np.uint8)
        image[:40] = 0
        assert dark_fraction(image) == 0.4
        assert is_plate_valid(image, max_dark_fraction=0.5)
        assert not is_plate_valid(image, max_dark_fraction=0.4)

import pytest

from geometry import compute_rf, map_spots, passes_geometry
from models import Band, Rectangle


class TestRfValues:

    @pytest.fixture
    def band(self):
        return Band(topline_y=20, baseline_y=480)

    @pytest.mark.parametrize("center_y, expected", [(250, 0.5), (20, 1.0), (480, 0.0)])
    def test_band_rf(self, band, center_y, expected):
        assert compute_rf(center_y, band) == pytest.approx(expected)

    def test_band_rf_is_not_clamped(self, band):
        assert compute_rf(10, band) > 1.0
        assert compute_rf(490, band) < 0.0

    def test_rf_without_band(self):
        assert compute_rf(125) == pytest.approx(0.75)
        assert compute_rf(0) == pytest.approx(1.0)

    def test_rf_without_band_uses_frame_height(self):
        assert compute_rf(125, canonical_height=250) == pytest.approx(0.5)


class TestGeometryFilter:

    def test_elongated_rectangle_excluded_regardless_of_area(self):
        rect = Rectangle(0, 0, 100, 10)
        assert rect.aspect_ratio == 10
        assert not passes_geometry(rect, min_required_area=0, max_aspect_ratio=3)

    def test_small_rectangle_excluded(self):
        assert not passes_geometry(Rectangle(0, 0, 10, 10), min_required_area=250, max_aspect_ratio=3)

    def test_area_must_exceed_minimum(self):
        rect = Rectangle(0, 0, 25, 10)  # area 250, aspect 2.5
        assert not passes_geometry(rect, min_required_area=250, max_aspect_ratio=3)
        assert passes_geometry(rect, min_required_area=249, max_aspect_ratio=3)

    def test_tall_rectangles_pass(self):
        assert passes_geometry(Rectangle(0, 0, 10, 100), min_required_area=250, max_aspect_ratio=3)


class TestMapSpots:

    def test_centers_and_rf_with_band(self):
        band = Band(topline_y=20, baseline_y=480)
        spots = map_spots([Rectangle(10, 230, 40, 40)], 250, 3, band=band)
        assert len(spots) == 1
        spot = spots[0]
        assert (spot.center_x, spot.center_y) == (30, 250)
        assert spot.rf_value == pytest.approx(0.5)
        assert spot.rect == Rectangle(10, 230, 40, 40)

    def test_centers_and_rf_without_band(self):
        spots = map_spots([Rectangle(10, 105, 40, 40)], 250, 3)
        assert spots[0].center_y == 125
        assert spots[0].rf_value == pytest.approx(0.75)

    def test_filtered_rectangles_dropped_order_kept(self):
        rects = [Rectangle(0, 300, 40, 40), Rectangle(0, 0, 100, 10), Rectangle(100, 100, 30, 30)]
        spots = map_spots(rects, 250, 3)
        assert [s.rect for s in spots] == [rects[0], rects[2]]


class TestModels:

    @pytest.mark.parametrize("w, h", [(0, 5), (5, 0), (-1, 5)])
    def test_rectangle_requires_positive_size(self, w, h):
        with pytest.raises(ValueError):
            Rectangle(0, 0, w, h)

    @pytest.mark.parametrize("top, base", [(-1, 100), (100, 100), (200, 100), (0, 501)])
    def test_band_invariant(self, top, base):
        with pytest.raises(ValueError):
            Band(top, base)

    def test_band_contains_is_full_containment(self):
        band = Band(100, 200)
        assert band.contains(Rectangle(0, 100, 10, 101))
        assert not band.contains(Rectangle(0, 99, 10, 20))
        assert not band.contains(Rectangle(0, 190, 10, 20))

"""Shape filtering and Rf computation for detected rectangles."""

from typing import List, Optional, Sequence

from config import CANONICAL_HEIGHT
from models import Band, Rectangle, Spot


def passes_geometry(rect: Rectangle, min_required_area: float, max_aspect_ratio: float) -> bool:
    """True for rectangles that are compact enough and large enough to be a spot."""
    return rect.aspect_ratio <= max_aspect_ratio and rect.area > min_required_area


def compute_rf(center_y: float, band: Optional[Band] = None, canonical_height: int = CANONICAL_HEIGHT) -> float:
    """Retention factor of a spot centered at center_y.

    With a band the value is measured from the baseline towards the topline and
    is not clamped; without one it falls back to the canonical frame height.
    """
    if band is not None:
        return (band.baseline_y - center_y) / band.span
    return 1.0 - center_y / canonical_height


def map_spots(
    rectangles: Sequence[Rectangle],
    min_required_area: float,
    max_aspect_ratio: float,
    band: Optional[Band] = None,
    canonical_height: int = CANONICAL_HEIGHT,
) -> List[Spot]:
    """Filter rectangles by shape and turn the survivors into spots."""
    spots: List[Spot] = []
    for rect in rectangles:
        if not passes_geometry(rect, min_required_area, max_aspect_ratio):
            continue
        cx, cy = rect.center
        spots.append(Spot(center_x=cx, center_y=cy, rf_value=compute_rf(cy, band, canonical_height), rect=rect))
    return spots

"""Overlap suppression (non-maximum suppression) for candidate rectangles.

Two orderings are supported:

* ``"area"`` - largest rectangle first; overlap is the intersection divided by
  the smaller of the two areas. This is the default.
* ``"edge"`` - lowest bottom edge first; overlap is the intersection divided by
  the area of the rectangle being tested. Kept for plates tuned against the
  older plugin behaviour.
"""

from typing import List, Sequence

import numpy as np

from config import SUPPRESSION_VARIANTS
from models import Rectangle


def intersection_area(a: Rectangle, b: Rectangle) -> int:
    w = min(a.right, b.right) - max(a.x, b.x)
    h = min(a.bottom, b.bottom) - max(a.y, b.y)
    return max(0, w) * max(0, h)


def overlap_fraction(a: Rectangle, b: Rectangle) -> float:
    """Intersection normalized by the smaller rectangle's area."""
    return intersection_area(a, b) / min(a.area, b.area)


def _boxes(rectangles: Sequence[Rectangle]) -> np.ndarray:
    return np.array([(r.x, r.y, r.right, r.bottom) for r in rectangles], dtype=np.int64)


def _intersections(boxes: np.ndarray, i: int, others: np.ndarray) -> np.ndarray:
    xx1 = np.maximum(boxes[i, 0], boxes[others, 0])
    yy1 = np.maximum(boxes[i, 1], boxes[others, 1])
    xx2 = np.minimum(boxes[i, 2], boxes[others, 2])
    yy2 = np.minimum(boxes[i, 3], boxes[others, 3])
    return np.maximum(0, xx2 - xx1) * np.maximum(0, yy2 - yy1)


def suppress_by_area(rectangles: Sequence[Rectangle], overlap_threshold: float) -> List[Rectangle]:
    if not rectangles:
        return []

    boxes = _boxes(rectangles)
    areas = (boxes[:, 2] - boxes[:, 0]) * (boxes[:, 3] - boxes[:, 1])
    # Stable sort keeps detection order among equal areas.
    idxs = np.argsort(-areas, kind="stable")

    pick: List[int] = []
    while idxs.size > 0:
        i = int(idxs[0])
        pick.append(i)
        rest = idxs[1:]
        inter = _intersections(boxes, i, rest)
        overlap = inter / np.minimum(areas[i], areas[rest])
        idxs = rest[overlap <= overlap_threshold]

    return [rectangles[i] for i in pick]


def suppress_by_bottom_edge(rectangles: Sequence[Rectangle], overlap_threshold: float) -> List[Rectangle]:
    if not rectangles:
        return []

    boxes = _boxes(rectangles)
    areas = (boxes[:, 2] - boxes[:, 0]) * (boxes[:, 3] - boxes[:, 1])
    idxs = np.argsort(boxes[:, 3], kind="stable")

    pick: List[int] = []
    while idxs.size > 0:
        i = int(idxs[-1])
        pick.append(i)
        rest = idxs[:-1]
        inter = _intersections(boxes, i, rest)
        overlap = inter / areas[rest]
        idxs = rest[overlap <= overlap_threshold]

    return [rectangles[i] for i in pick]


def suppress(
    rectangles: Sequence[Rectangle],
    overlap_threshold: float = 0.2,
    variant: str = "area",
) -> List[Rectangle]:
    """Drop rectangles that overlap an already kept one by more than the threshold.

    Args:
        rectangles: Candidate rectangles
        overlap_threshold: Overlap fraction in (0, 1) above which a candidate is dropped
        variant: "area" (default) or "edge"

    Returns:
        Kept rectangles in selection order
    """
    if not (0.0 < overlap_threshold < 1.0):
        raise ValueError(f"overlap_threshold must be in (0, 1), got {overlap_threshold}")
    if variant == "area":
        return suppress_by_area(rectangles, overlap_threshold)
    if variant == "edge":
        return suppress_by_bottom_edge(rectangles, overlap_threshold)
    raise ValueError(f"Unknown suppression variant: {variant}. Must be one of {SUPPRESSION_VARIANTS}")

"""Data models for TLC spot detection."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np

from config import CANONICAL_HEIGHT


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned box in canonical pixel coordinates."""
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Rectangle size must be positive, got {self.width}x{self.height}")

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def center(self):
        return (self.x + self.right) // 2, (self.y + self.bottom) // 2


@dataclass(frozen=True)
class Band:
    """Vertical region between topline and baseline, canonical coordinates."""
    topline_y: int
    baseline_y: int
    canonical_height: int = CANONICAL_HEIGHT

    def __post_init__(self):
        if not (0 <= self.topline_y < self.baseline_y <= self.canonical_height):
            raise ValueError(
                f"Band requires 0 <= topline < baseline <= {self.canonical_height}, "
                f"got topline={self.topline_y}, baseline={self.baseline_y}"
            )

    @property
    def span(self) -> int:
        return self.baseline_y - self.topline_y

    def contains(self, rect: Rectangle) -> bool:
        # Every row of the rectangle must fall inside [topline, baseline].
        return rect.y >= self.topline_y and rect.bottom - 1 <= self.baseline_y


@dataclass
class Spot:
    """A detected spot and its retention factor."""
    center_x: int
    center_y: int
    rf_value: float
    rect: Optional[Rectangle] = None


class Phase(str, Enum):
    SEARCHING = "searching"
    DONE = "done"


@dataclass
class DetectionState:
    """Mutable parameters of one adaptive detection run."""
    threshold: float
    min_area: float
    iteration: int = 0
    phase: Phase = Phase.SEARCHING
    candidate_count: int = 0
    exhausted: bool = False


@dataclass
class DetectionResult:
    """Outcome of one top-level detection call."""
    success: bool
    spots: List[Spot] = field(default_factory=list)
    annotated: Optional[np.ndarray] = None
    state: Optional[DetectionState] = None
    band: Optional[Band] = None
    error: Optional[str] = None

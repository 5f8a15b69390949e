"""Adaptive relaxation loop around contour extraction and suppression."""

import logging
from typing import List, Optional, Tuple

import numpy as np

from config import DetectionConfig
from detection import find_rectangles
from models import Band, DetectionState, Phase, Rectangle
from suppression import suppress

logger = logging.getLogger(__name__)


def _relax(state: DetectionState, config: DetectionConfig) -> bool:
    """Loosen the cutoffs one step; False when both are already at their floors."""
    min_area, threshold = state.min_area, state.threshold
    if state.min_area > config.min_area_floor:
        state.min_area = max(state.min_area - config.area_step, config.min_area_floor)
    if state.threshold > config.threshold_floor:
        state.threshold = max(state.threshold - config.threshold_step, config.threshold_floor)
    return (state.min_area, state.threshold) != (min_area, threshold)


def run_adaptive(
    magnitude: np.ndarray,
    config: Optional[DetectionConfig] = None,
    band: Optional[Band] = None,
) -> Tuple[List[Rectangle], DetectionState]:
    """Extract and suppress candidates, relaxing cutoffs until enough are found.

    The loop ends as soon as a pass yields at least ``min_required_spots``
    suppressed candidates, after ``max_iterations`` passes, or once the cutoffs
    can no longer be relaxed. The count is taken before the geometric filter.

    Args:
        magnitude: Gradient magnitude map of the canonical image
        config: Pipeline settings (defaults when None)
        band: Optional band restriction

    Returns:
        Tuple of (suppressed rectangles of the last pass, final DetectionState)
    """
    config = config or DetectionConfig()
    state = DetectionState(threshold=config.threshold, min_area=config.min_area)
    rectangles: List[Rectangle] = []

    while state.phase is Phase.SEARCHING:
        state.iteration += 1
        candidates = find_rectangles(
            magnitude, state.threshold, state.min_area,
            band=band, close_kernel=config.close_kernel,
        )
        rectangles = suppress(candidates, config.overlap_threshold, config.suppression_variant)
        state.candidate_count = len(rectangles)
        logger.debug(
            f"Pass {state.iteration}: threshold={state.threshold}, min_area={state.min_area}, "
            f"candidates={len(candidates)}, after suppression={len(rectangles)}"
        )

        if state.candidate_count >= config.min_required_spots:
            state.phase = Phase.DONE
        elif not config.adaptive_relaxation:
            state.exhausted = True
            state.phase = Phase.DONE
        elif state.iteration >= config.max_iterations or not _relax(state, config):
            state.exhausted = True
            state.phase = Phase.DONE
            logger.warning(
                f"Stopped relaxing after {state.iteration} pass(es) with "
                f"{state.candidate_count}/{config.min_required_spots} candidates "
                f"(threshold={state.threshold}, min_area={state.min_area})"
            )

    return rectangles, state

"""Edge-gradient and contour detection for TLC spot finding."""

import logging
from typing import List, Optional

import cv2
import numpy as np

from models import Band, Rectangle

logger = logging.getLogger(__name__)


def compute_gradients(blurred: np.ndarray) -> np.ndarray:
    """Scharr edge magnitude of a smoothed grayscale image.

    Args:
        blurred: Single-channel image (uint8 or float)

    Returns:
        Non-negative float64 magnitude map with the input's shape
    """
    if blurred.ndim != 2:
        raise ValueError(f"Expected a single-channel image, got shape {blurred.shape}")

    grad_x = cv2.Scharr(blurred, cv2.CV_64F, 1, 0)
    grad_y = cv2.Scharr(blurred, cv2.CV_64F, 0, 1)
    return cv2.magnitude(grad_x, grad_y)


def binarize(magnitude: np.ndarray, threshold: float, close_kernel: int = 3) -> np.ndarray:
    """Foreground mask of strong edges.

    Returns:
        Binary mask (uint8, 0 or 255)
    """
    mask = (magnitude > threshold).astype(np.uint8) * 255

    # Closing bridges the one-pixel gaps the Scharr ring leaves around a spot.
    if close_kernel > 1:
        kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (close_kernel, close_kernel))
        mask = cv2.morphologyEx(mask, cv2.MORPH_CLOSE, kernel)
    return mask


def find_rectangles(
    magnitude: np.ndarray,
    threshold: float,
    min_area: float,
    band: Optional[Band] = None,
    close_kernel: int = 3,
) -> List[Rectangle]:
    """Bounding rectangles of connected edge regions larger than min_area.

    Args:
        magnitude: Gradient magnitude map
        threshold: Binarization threshold on the magnitude
        min_area: Region area (contour area, pixels) that must be exceeded
        band: Optional band; regions must lie fully inside it
        close_kernel: Side of the square closing element (<= 1 disables closing)

    Returns:
        List of candidate Rectangle objects
    """
    # Regions crossing a band edge are dropped whole, never clipped.
    mask = binarize(magnitude, threshold, close_kernel=close_kernel)
    contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

    rectangles: List[Rectangle] = []
    for contour in contours:
        if cv2.contourArea(contour) <= min_area:
            continue
        x, y, w, h = cv2.boundingRect(contour)
        rect = Rectangle(int(x), int(y), int(w), int(h))
        if band is not None and not band.contains(rect):
            continue
        rectangles.append(rect)

    logger.debug(
        f"find_rectangles: threshold={threshold}, min_area={min_area}, "
        f"contours={len(contours)}, kept={len(rectangles)}"
    )
    return rectangles

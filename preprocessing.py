"""Plate image preprocessing: crop, canonical resize, grayscale and smoothing."""

import logging
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from config import (
    BLUR_KSIZE,
    CANONICAL_HEIGHT,
    CANONICAL_WIDTH,
    DEFAULT_CROP_FRACTIONS,
    UNSET,
)
from models import Band

logger = logging.getLogger(__name__)


def crop_image(image: np.ndarray, crop_fractions: Sequence[float] = DEFAULT_CROP_FRACTIONS) -> np.ndarray:
    """Trim plate borders; fractions are (left, right, top, bottom) of the original size."""
    left_pct, right_pct, top_pct, bottom_pct = crop_fractions
    height, width = image.shape[:2]
    left = int(width * left_pct)
    right = int(width * right_pct)
    top = int(height * top_pct)
    bottom = int(height * bottom_pct)
    if width - left - right <= 0 or height - top - bottom <= 0:
        raise ValueError(f"Crop leaves no pixels of a {width}x{height} image")
    return image[top:height - bottom, left:width - right]


def _as_bgr(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image


def preprocess(
    image: np.ndarray,
    crop_fractions: Sequence[float] = DEFAULT_CROP_FRACTIONS,
    canonical_size: Tuple[int, int] = (CANONICAL_WIDTH, CANONICAL_HEIGHT),
    blur_ksize: int = BLUR_KSIZE,
) -> Tuple[np.ndarray, np.ndarray]:
    """Bring a raw plate photo into the canonical frame.

    Args:
        image: Raw image (BGR, BGRA or grayscale), any size
        crop_fractions: (left, right, top, bottom) fractions to trim
        canonical_size: (width, height) of the output frame
        blur_ksize: Gaussian kernel size (odd)

    Returns:
        Tuple of (resized_bgr, blurred_gray), both canonical_size
    """
    if image is None or image.size == 0:
        raise ValueError("Cannot preprocess an empty image")

    cropped = crop_image(_as_bgr(image), crop_fractions)
    resized = cv2.resize(cropped, canonical_size)
    gray = cv2.cvtColor(resized, cv2.COLOR_BGR2GRAY)
    blurred = cv2.GaussianBlur(gray, (blur_ksize, blur_ksize), 0)
    return resized, blurred


def to_canonical_y(
    y: int,
    original_height: int,
    top_fraction: float = DEFAULT_CROP_FRACTIONS[2],
    canonical_height: int = CANONICAL_HEIGHT,
) -> int:
    """Map a Y coordinate from original pixel space into the canonical frame."""
    top = int(original_height * top_fraction)
    scaled = (y - top) * canonical_height / original_height
    return int(np.clip(round(scaled), 0, canonical_height - 1))


def band_from_reference(
    baseline_y: int,
    topline_y: int,
    original_height: int,
    top_fraction: float = DEFAULT_CROP_FRACTIONS[2],
    canonical_height: int = CANONICAL_HEIGHT,
) -> Optional[Band]:
    """Build the canonical Band from original-space baseline/topline, or None."""
    if baseline_y == UNSET or topline_y == UNSET:
        return None

    base = to_canonical_y(baseline_y, original_height, top_fraction, canonical_height)
    top = to_canonical_y(topline_y, original_height, top_fraction, canonical_height)
    if top >= base:
        logger.warning(
            f"Ignoring reference lines: topline {topline_y} -> {top} is not above "
            f"baseline {baseline_y} -> {base} in the canonical frame"
        )
        return None
    return Band(topline_y=top, baseline_y=base, canonical_height=canonical_height)

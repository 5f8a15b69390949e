"""Plate validity pre-check based on the share of near-black pixels."""

import cv2
import numpy as np


def dark_fraction(image: np.ndarray, dark_threshold: int = 30) -> float:
    """Fraction of pixels whose grayscale intensity is below dark_threshold."""
    gray = image if image.ndim == 2 else cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if gray.size == 0:
        return 0.0
    return float(np.count_nonzero(gray < dark_threshold)) / gray.size


def is_plate_valid(image: np.ndarray, dark_threshold: int = 30, max_dark_fraction: float = 0.5) -> bool:
    """Reject photos dominated by near-black pixels (lens cap, no plate in frame)."""
    return dark_fraction(image, dark_threshold) < max_dark_fraction

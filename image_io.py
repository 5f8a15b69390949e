"""Image I/O utilities for TLC spot detection."""

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from errors import ImageLoadError, ImageSaveError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_image(path: PathLike) -> np.ndarray:
    """Load a plate photo as a BGR uint8 array.

    Raises:
        ImageLoadError: If the file is missing or cannot be decoded
    """
    path = Path(path)
    if not path.is_file():
        raise ImageLoadError(f"Image file not found: {path}")
    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None or img.size == 0:
        raise ImageLoadError(f"Failed to load image: {path}")
    logger.debug(f"Loaded {path.name}: {img.shape[1]}x{img.shape[0]}")
    return img


def save_image(path: PathLike, image: np.ndarray) -> None:
    """Encode an image to disk, overwriting any existing file.

    Raises:
        ImageSaveError: If OpenCV cannot encode or write the image
    """
    path = Path(path)
    try:
        written = cv2.imwrite(str(path), image)
    except cv2.error as e:
        raise ImageSaveError(f"Failed to encode image for {path}: {e}") from e
    if not written:
        raise ImageSaveError(f"Failed to write image: {path}")
    logger.debug(f"Wrote annotated image to {path}")

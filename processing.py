"""Core processing pipeline functions."""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np

from adaptive import run_adaptive
from annotation import annotate_spots
from config import UNSET, DetectionConfig
from detection import compute_gradients
from errors import InvalidPlateError, TLCError
from geometry import map_spots
from image_io import load_image, save_image
from models import DetectionResult
from output import spots_to_json
from preprocessing import band_from_reference, preprocess
from validity import dark_fraction

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def run_pipeline(
    image: np.ndarray,
    baseline_y: int = UNSET,
    topline_y: int = UNSET,
    config: Optional[DetectionConfig] = None,
) -> DetectionResult:
    """Detect spots on an in-memory plate image.

    Args:
        image: Raw plate image (BGR)
        baseline_y: Baseline Y in original pixel space, or UNSET
        topline_y: Topline Y in original pixel space, or UNSET
        config: Pipeline settings (defaults when None)

    Returns:
        Successful DetectionResult with spots and the annotated canonical image

    Raises:
        InvalidPlateError: If the validity pre-check is enabled and rejects the plate
        ValueError: For malformed images or settings
    """
    config = (config or DetectionConfig()).validate()

    if config.color_validity_check:
        fraction = dark_fraction(image, config.dark_threshold)
        if fraction >= config.max_dark_fraction:
            raise InvalidPlateError(
                f"Plate rejected: {fraction:.1%} of pixels are darker than {config.dark_threshold}"
            )

    resized, blurred = preprocess(
        image,
        crop_fractions=config.crop_fractions,
        canonical_size=(config.canonical_width, config.canonical_height),
        blur_ksize=config.blur_ksize,
    )

    band = None
    if config.band_restriction:
        band = band_from_reference(
            baseline_y, topline_y,
            original_height=image.shape[0],
            top_fraction=config.crop_fractions[2],
            canonical_height=config.canonical_height,
        )

    magnitude = compute_gradients(blurred)
    rectangles, state = run_adaptive(magnitude, config, band=band)
    spots = map_spots(
        rectangles,
        config.min_required_area,
        config.max_aspect_ratio,
        band=band,
        canonical_height=config.canonical_height,
    )
    annotated = annotate_spots(resized, spots, band=band)

    logger.info(
        f"Detected {len(spots)} spot(s) from {state.candidate_count} candidate(s) "
        f"in {state.iteration} pass(es){' within band' if band else ''}"
    )
    return DetectionResult(success=True, spots=spots, annotated=annotated, state=state, band=band)


def detect_spots(
    path: PathLike,
    baseline_y: int = UNSET,
    topline_y: int = UNSET,
    config: Optional[DetectionConfig] = None,
) -> DetectionResult:
    """Load a plate photo and detect its spots; failures come back as success=False."""
    logger.info(f"Processing image at path: {path}")
    try:
        image = load_image(path)
        return run_pipeline(image, baseline_y, topline_y, config)
    except TLCError as e:
        logger.error(f"Error: {e}")
        return DetectionResult(success=False, error=str(e))
    except Exception as e:
        logger.error(f"Unexpected error while processing {path}: {e}", exc_info=True)
        return DetectionResult(success=False, error=f"{type(e).__name__}: {e}")


def write_annotated(result: DetectionResult, target: PathLike) -> bool:
    try:
        save_image(target, result.annotated)
    except TLCError as e:
        logger.error(f"Error: {e}")
        return False
    return True


def detect_spots_json(
    path: PathLike,
    baseline_y: int = UNSET,
    topline_y: int = UNSET,
    config: Optional[DetectionConfig] = None,
    output_path: Optional[PathLike] = None,
) -> str:
    """Detect spots, write the annotated frame back, and return the spots as JSON.

    The annotated canonical image overwrites ``path`` unless ``output_path`` is
    given. Any failure yields ``"[]"`` and leaves the files untouched.
    """
    result = detect_spots(path, baseline_y, topline_y, config)
    if not result.success:
        return "[]"
    if not write_annotated(result, output_path or path):
        return "[]"
    return spots_to_json(result.spots)


def detect_contour_tlc(path: PathLike, config: Optional[DetectionConfig] = None) -> bool:
    """Annotate the plate in place; True once the annotated image is written."""
    result = detect_spots(path, config=config)
    return result.success and write_annotated(result, path)

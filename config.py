"""Configuration and constants for TLC spot detection."""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

# Canonical frame all detection runs on (width x height).
CANONICAL_WIDTH = 256
CANONICAL_HEIGHT = 500

# Crop fractions are (left, right, top, bottom) of the original image.
DEFAULT_CROP_FRACTIONS: Tuple[float, float, float, float] = (0.10, 0.10, 0.05, 0.05)

BLUR_KSIZE = 5

# Sentinel for "reference coordinate not supplied".
UNSET = -1

SUPPRESSION_VARIANTS = ("area", "edge")


@dataclass
class DetectionConfig:
    """All tunables of the detection pipeline in one place."""
    crop_fractions: Tuple[float, float, float, float] = DEFAULT_CROP_FRACTIONS
    canonical_width: int = CANONICAL_WIDTH
    canonical_height: int = CANONICAL_HEIGHT
    blur_ksize: int = BLUR_KSIZE

    # Contour extraction / adaptive relaxation
    threshold: float = 50.0
    min_area: float = 200.0
    area_step: float = 100.0
    min_area_floor: float = 0.0
    threshold_step: float = 0.0
    threshold_floor: float = 0.0
    max_iterations: int = 10
    min_required_spots: int = 7
    close_kernel: int = 3

    # Suppression and geometric filter
    overlap_threshold: float = 0.2
    min_required_area: float = 250.0
    max_aspect_ratio: float = 3.0

    # Pipeline switches
    band_restriction: bool = True
    color_validity_check: bool = False
    adaptive_relaxation: bool = True
    suppression_variant: str = "area"

    # Plate validity pre-check
    dark_threshold: int = 30
    max_dark_fraction: float = 0.5

    def validate(self) -> "DetectionConfig":
        """Raise ValueError for out-of-range settings; return self for chaining."""
        if len(self.crop_fractions) != 4:
            raise ValueError("crop_fractions must be (left, right, top, bottom)")
        for frac in self.crop_fractions:
            if not (0.0 <= frac < 0.5):
                raise ValueError(f"crop fraction must be in [0, 0.5), got {frac}")
        if self.canonical_width <= 0 or self.canonical_height <= 0:
            raise ValueError("canonical size must be positive")
        if self.blur_ksize < 1 or self.blur_ksize % 2 == 0:
            raise ValueError(f"blur_ksize must be a positive odd number, got {self.blur_ksize}")
        if not (0.0 < self.overlap_threshold < 1.0):
            raise ValueError(f"overlap_threshold must be in (0, 1), got {self.overlap_threshold}")
        if self.suppression_variant not in SUPPRESSION_VARIANTS:
            raise ValueError(
                f"Unknown suppression variant: {self.suppression_variant}. "
                f"Must be one of {SUPPRESSION_VARIANTS}"
            )
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.min_required_spots < 0:
            raise ValueError("min_required_spots must be >= 0")
        if self.area_step < 0 or self.threshold_step < 0:
            raise ValueError("relaxation steps must be >= 0")
        if self.min_area_floor < 0 or self.threshold_floor < 0:
            raise ValueError("relaxation floors must be >= 0")
        if self.max_aspect_ratio <= 0:
            raise ValueError("max_aspect_ratio must be positive")
        if not (0.0 < self.max_dark_fraction <= 1.0):
            raise ValueError(f"max_dark_fraction must be in (0, 1], got {self.max_dark_fraction}")
        return self


def load_detection_config(config_file: Optional[Path] = None) -> DetectionConfig:
    """Load detection settings from a JSON file, merged over the defaults.

    Args:
        config_file: Optional path to a JSON object with DetectionConfig keys

    Returns:
        Validated DetectionConfig (defaults when the file is absent or unreadable)

    Raises:
        ValueError: If the file names unknown keys or holds out-of-range or
            wrongly typed values
    """
    if config_file is None or not config_file.exists():
        return DetectionConfig()

    try:
        with config_file.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning(f"Ignoring malformed config file {config_file}: {e}")
        return DetectionConfig()

    if not isinstance(data, dict):
        raise ValueError(f"Config file must hold a JSON object: {config_file}")

    known = {f.name for f in fields(DetectionConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config key(s) in {config_file}: {', '.join(unknown)}")

    try:
        if "crop_fractions" in data:
            data["crop_fractions"] = tuple(float(v) for v in data["crop_fractions"])
        return DetectionConfig(**data).validate()
    except TypeError as e:
        raise ValueError(f"Invalid value type in {config_file}: {e}") from e


def save_detection_config(config: DetectionConfig, config_file: Path) -> None:
    """Persist settings to disk for API/CLI use."""
    config_file.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(config)
    payload["crop_fractions"] = list(config.crop_fractions)
    with config_file.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)

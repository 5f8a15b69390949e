"""Image annotation functions for TLC spot detection."""

from typing import Optional, Sequence

import cv2
import numpy as np
from PIL import Image, ImageDraw, ImageFont

from models import Band, Spot


def annotate_spots(
    image: np.ndarray,
    spots: Sequence[Spot],
    band: Optional[Band] = None,
    show_band: bool = True,
) -> np.ndarray:
    """Draw spot boxes, centers and Rf labels on a copy of the canonical image.

    Args:
        image: Canonical BGR image (left untouched)
        spots: Spots to draw; spots without a source rectangle only get a center marker
        band: Optional band whose topline/baseline are drawn as reference lines
        show_band: Whether to draw the band lines

    Returns:
        Annotated BGR image
    """
    annotated = Image.fromarray(cv2.cvtColor(image, cv2.COLOR_BGR2RGB))
    draw = ImageDraw.Draw(annotated)
    font = ImageFont.load_default()
    width, height = annotated.size

    if band is not None and show_band:
        for y in (band.topline_y, band.baseline_y):
            draw.line([(0, y), (width - 1, y)], fill="orange", width=1)

    for spot in spots:
        cx, cy = spot.center_x, spot.center_y
        if spot.rect is not None:
            r = spot.rect
            draw.rectangle([r.x, r.y, r.right, r.bottom], outline=(0, 255, 0), width=2)

            label = f"{spot.rf_value:.3f}"
            left, top, right, bottom = draw.textbbox((0, 0), label, font=font)
            text_w, text_h = right - left, bottom - top
            # Centered above the box, kept inside the frame.
            tx = min(max((r.x + r.right - text_w) // 2, 0), max(width - text_w, 0))
            ty = max(r.y - text_h - 5, 0)
            draw.text((tx, ty), label, fill=(0, 0, 255), font=font)

        draw.ellipse([cx - 1, cy - 1, cx + 1, cy + 1], fill=(255, 0, 0))

    return cv2.cvtColor(np.asarray(annotated), cv2.COLOR_RGB2BGR)

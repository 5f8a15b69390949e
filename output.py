"""Output generation functions for TLC spot detection."""

import csv
from pathlib import Path
from typing import List, Sequence

from pydantic import TypeAdapter

from models import Spot
from schemas import SpotRecord

_SPOT_LIST = TypeAdapter(List[SpotRecord])


def spots_to_records(spots: Sequence[Spot]) -> List[SpotRecord]:
    return [SpotRecord(x=s.center_x, y=s.center_y, rf_value=s.rf_value) for s in spots]


def spots_to_json(spots: Sequence[Spot]) -> str:
    """Compact JSON array of {x, y, rf_value}; rf_value rounded to 3 decimals."""
    return _SPOT_LIST.dump_json(spots_to_records(spots)).decode("utf-8")


def write_json(output_json: Path, spots: Sequence[Spot]) -> None:
    output_json.parent.mkdir(parents=True, exist_ok=True)
    output_json.write_text(spots_to_json(spots), encoding="utf-8")


def write_csv(output_csv: Path, spots: Sequence[Spot]) -> None:
    """Write one row per spot with its center, Rf and source box size."""
    output_csv.parent.mkdir(parents=True, exist_ok=True)
    with output_csv.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["Spot_ID", "X", "Y", "Rf_Value", "Width", "Height", "Area"])
        for idx, spot in enumerate(spots):
            rect = spot.rect
            writer.writerow(
                [
                    idx,
                    spot.center_x,
                    spot.center_y,
                    f"{spot.rf_value:.3f}",
                    rect.width if rect else "",
                    rect.height if rect else "",
                    rect.area if rect else "",
                ]
            )

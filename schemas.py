from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from config import UNSET


class SpotRecord(BaseModel):
    x: int
    y: int
    rf_value: float

    @field_serializer("rf_value")
    def round_rf(self, value: float) -> float:
        return round(value, 3)


class BandInfo(BaseModel):
    topline_y: int
    baseline_y: int


class DetectRequest(BaseModel):
    path: str
    baseline_y: int = UNSET
    topline_y: int = UNSET
    write_annotated: bool = True


class DetectResponse(BaseModel):
    success: bool
    spots: List[SpotRecord] = Field(default_factory=list)
    spot_count: int = 0
    band: Optional[BandInfo] = None
    error: Optional[str] = None


class ValidateRequest(BaseModel):
    path: str


class ValidateResponse(BaseModel):
    valid: bool
    dark_fraction: Optional[float] = None
    error: Optional[str] = None

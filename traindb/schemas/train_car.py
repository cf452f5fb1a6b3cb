import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_LIMIT = 50
MAX_LIMIT = 100
DEFAULT_OFFSET = 0


LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(value, default: int) -> int:
    # Leading-integer parse; anything unparseable falls back to the default instead of a 422
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    match = LEADING_INT.match(str(value)) if value is not None else None
    return int(match.group(1)) if match else default


class TrainCarsQuery(BaseModel):
    """Listing parameters after parsing and clamping"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    search: str = ""
    group_by_marriage: bool = Field(False, alias="groupByMarriage")
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET

    @field_validator("search", mode="before")
    @classmethod
    def none_is_empty(cls, v):
        return v or ""

    @field_validator("group_by_marriage", mode="before")
    @classmethod
    def exact_true(cls, v):
        if isinstance(v, bool):
            return v
        return v == "true"

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, v):
        return min(max(parse_int(v, DEFAULT_LIMIT), 1), MAX_LIMIT)

    @field_validator("offset", mode="before")
    @classmethod
    def clamp_offset(cls, v):
        return max(parse_int(v, DEFAULT_OFFSET), 0)


class TrainCarOut(BaseModel):
    vehicle_id: int
    name: Optional[str] = None
    status: Optional[str] = None
    delivery_date: Optional[str] = None
    enter_service_date: Optional[str] = None
    batch_id: Optional[int] = None
    notes: Optional[str] = None
    model_common_name: Optional[str] = None
    manufacturer: Optional[str] = None
    manufacture_location: Optional[str] = None
    years_manufactured: Optional[str] = None
    full_name: Optional[str] = None


class MarriageOut(BaseModel):
    marriage_id: int
    batch_id: int
    cars: List[int]
    marriage_size: int


class TrainCarsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data: List[TrainCarOut]
    total: int
    limit: int
    offset: int
    last_updated: Optional[datetime] = Field(None, alias="lastUpdated")
    marriages: Optional[List[MarriageOut]] = None


class ErrorResponse(BaseModel):
    error: str

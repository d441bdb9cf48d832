from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DaySelector(str, Enum):
    TODAY = "today"
    TOMORROW = "tomorrow"


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class RawPlace(BaseModel):
    place_id: str
    raw: dict[str, Any] = Field(default_factory=dict)


class PlaceDetail(BaseModel):
    name: str
    address: str | None = None
    phone: str | None = None
    website: str | None = None
    location: Coordinate | None = None
    opening_hours: list[str] | None = None


class ResultItem(BaseModel):
    name: str
    address: str | None = None
    phone: str | None = None
    website: str | None = None
    opening_hours: list[str] | None = None
    walk_minutes: int | None = None
    maps_url: str | None = None


class HospitalSearchResponse(BaseModel):
    day: DaySelector
    count: int
    items: list[ResultItem]

# core/schemas.py
"""
Lenient pydantic models for itinerary JSON produced by an external generator.

Every field is optional and unknown keys are ignored, so a half-filled or
slightly malformed answer still parses. Costs are coerced to non-negative
integers; aggregates such as ``dailyCost`` are read only for logging and are
never trusted.
"""

import math
import re
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

_NUMBER_RE = re.compile(r"-?\d[\d,]*(?:\.\d+)?")


def to_cost(value: Any) -> int:
    """Best-effort conversion of an upstream cost to a non-negative int (floored)."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        return max(0, math.floor(value)) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _NUMBER_RE.search(value)
        if not match:
            return 0
        return to_cost(float(match.group().replace(",", "")))
    return 0


def _to_optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _to_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _to_rating(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        rating = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(rating):
        return 0.0
    return min(5.0, max(0.0, rating))


def _only_dicts(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


Cost = Annotated[int, BeforeValidator(to_cost)]
Text = Annotated[Optional[str], BeforeValidator(_to_text)]
OptionalInt = Annotated[Optional[int], BeforeValidator(_to_optional_int)]
Rating = Annotated[float, BeforeValidator(_to_rating)]


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def _object_or_none(text_key: str):
    """A bare string becomes ``{text_key: string}``; anything but a dict becomes None."""

    def convert(value: Any):
        if isinstance(value, str):
            return {text_key: value} if value.strip() else None
        if isinstance(value, list) and value and isinstance(value[0], dict):
            return value[0]
        return value if isinstance(value, dict) else None

    return BeforeValidator(convert)


class UpstreamSlot(_Lenient):
    activity: Text = None
    cost: Cost = 0


class UpstreamDining(_Lenient):
    restaurant: Text = None
    cuisine: Text = None
    cost: Cost = 0


class UpstreamHotelStay(_Lenient):
    name: Text = None
    price: Cost = 0


class UpstreamDay(_Lenient):
    day: OptionalInt = None
    morning: Annotated[Optional[UpstreamSlot], _object_or_none("activity")] = None
    afternoon: Annotated[Optional[UpstreamSlot], _object_or_none("activity")] = None
    evening: Annotated[Optional[UpstreamSlot], _object_or_none("activity")] = None
    dining: Annotated[Optional[UpstreamDining], _object_or_none("restaurant")] = None
    hotel: Annotated[Optional[UpstreamHotelStay], _object_or_none("name")] = None
    declared_daily_cost: OptionalInt = Field(None, alias="dailyCost")


class UpstreamHotel(_Lenient):
    name: Text = None
    price_per_night: Cost = Field(0, alias="pricePerNight")
    description: Text = None
    rating: Rating = 0.0
    distance_from_center: Text = Field(None, alias="distanceFromCenter")


class PartialItinerary(_Lenient):
    summary: Text = None
    declared_total_cost: OptionalInt = Field(None, alias="totalCost")
    hotels: Annotated[List[UpstreamHotel], BeforeValidator(_only_dicts)] = []
    itinerary: Annotated[List[UpstreamDay], BeforeValidator(_only_dicts)] = []

    @model_validator(mode="before")
    @classmethod
    def _accept_days_key(cls, data: Any) -> Any:
        # some prompts/models answer with "days" instead of "itinerary"
        if isinstance(data, dict) and "itinerary" not in data and isinstance(data.get("days"), list):
            data = {**data, "itinerary": data["days"]}
        return data

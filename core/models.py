# core/models.py

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class TripRequest:
    city: str
    total_budget: int
    days: int
    preferences: str = ""


@dataclass
class Hotel:
    name: str
    price_per_night: int = 0
    description: str = ""
    rating: float = 0.0
    distance_from_center: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "pricePerNight": self.price_per_night,
            "description": self.description,
            "rating": self.rating,
            "distanceFromCenter": self.distance_from_center,
        }


@dataclass
class Slot:
    activity: str
    cost: int = 0

    def to_dict(self) -> dict:
        return {"activity": self.activity, "cost": self.cost}


@dataclass
class Dining:
    restaurant: str
    cuisine: str
    cost: int = 0

    def to_dict(self) -> dict:
        return {"restaurant": self.restaurant, "cuisine": self.cuisine, "cost": self.cost}


@dataclass
class HotelStay:
    name: str
    price: int = 0

    def to_dict(self) -> dict:
        return {"name": self.name, "price": self.price}


@dataclass
class DayPlan:
    day: int
    morning: Slot
    afternoon: Slot
    evening: Slot
    dining: Dining
    hotel: HotelStay
    daily_cost: int = 0

    def parts_total(self) -> int:
        return (
            self.morning.cost
            + self.afternoon.cost
            + self.evening.cost
            + self.dining.cost
            + self.hotel.price
        )

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "morning": self.morning.to_dict(),
            "afternoon": self.afternoon.to_dict(),
            "evening": self.evening.to_dict(),
            "dining": self.dining.to_dict(),
            "hotel": self.hotel.to_dict(),
            "dailyCost": self.daily_cost,
        }


@dataclass
class Location:
    """A named map point (pin) near the destination."""

    name: str
    type: str
    lng: float
    lat: float

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type, "lng": self.lng, "lat": self.lat}


@dataclass
class Itinerary:
    summary: str
    total_cost: int
    hotels: List[Hotel]
    itinerary: List[DayPlan]
    city_coordinates: Tuple[float, float]
    over_budget: bool = False
    locations: List[Location] = field(default_factory=list)
    fallback: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "summary": self.summary,
            "totalCost": self.total_cost,
            "overBudget": self.over_budget,
            "hotels": [h.to_dict() for h in self.hotels],
            "itinerary": [d.to_dict() for d in self.itinerary],
            "cityCoordinates": list(self.city_coordinates),
            "locations": [loc.to_dict() for loc in self.locations],
        }
        if self.fallback:
            out["_fallback"] = True
        if self.error:
            out["_error"] = self.error
        return out

# core/synthesis.py
"""
Itinerary synthesis.

Two modes share one output contract:

* reconcile: an external generator produced a (possibly partial) plan. Missing
  days and sub-objects are filled with placeholders, then every aggregate is
  recomputed from its parts.
* local: no usable external plan. The per-day budget is split across fixed
  slot percentages and activity text rotates through a deterministic pool.

In both modes ``daily_cost`` is the sum of the five slot costs and
``total_cost`` is the sum of the daily costs.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from core.config import Settings, get_settings
from core.errors import SynthesisError
from core.models import (
    DayPlan,
    Dining,
    Hotel,
    HotelStay,
    Itinerary,
    Location,
    Slot,
    TripRequest,
)
from core.pools import build_pool
from core.schemas import PartialItinerary, UpstreamDay, UpstreamHotel

logger = logging.getLogger(__name__)

PLACEHOLDER_ACTIVITY = {
    "morning": "Explore local area",
    "afternoon": "Sightseeing",
    "evening": "Evening activity",
}
PLACEHOLDER_RESTAURANT = "Local eatery"
PLACEHOLDER_CUISINE = "Local cuisine"
PLACEHOLDER_HOTEL = "Unknown"

# (tier, price multiplier %, rating, distance from center)
_HOTEL_TIERS = (
    ("luxury", 150, 4.8, "0.5 km"),
    ("mid", 100, 4.2, "2 km"),
    ("budget", 60, 3.6, "4 km"),
)
_HOTEL_NAMES = {
    "luxury": ("{city} Grand Palace", "Luxury stay with spa and fine dining"),
    "mid": ("{city} Central Inn", "Comfortable mid-range hotel near the sights"),
    "budget": ("{city} Backpackers Lodge", "Clean, simple rooms for budget travellers"),
}


# ──────────────────────────────────────────────────────────────────────────────
# Shared helpers
# ──────────────────────────────────────────────────────────────────────────────
def reconcile_totals(days: List[DayPlan]) -> int:
    """Recompute every daily_cost from its parts and return the trip total."""
    for day in days:
        day.daily_cost = day.parts_total()
    return sum(day.daily_cost for day in days)


def _summary(req: TripRequest) -> str:
    text = f"A {req.days}-day trip to {req.city}"
    if req.preferences:
        text += f" focused on {req.preferences}"
    return text + "."


def _check_request(req: TripRequest) -> None:
    if req.days <= 0:
        raise SynthesisError(f"days must be positive, got {req.days}")
    if req.total_budget <= 0:
        raise SynthesisError(f"total_budget must be positive, got {req.total_budget}")


def _finish(
    req: TripRequest,
    summary: str,
    hotels: List[Hotel],
    days: List[DayPlan],
    coordinates: Tuple[float, float],
    locations: Sequence[Location],
    fallback: bool,
) -> Itinerary:
    total = reconcile_totals(days)
    if len(days) != req.days or not hotels:
        raise SynthesisError(
            f"built {len(days)} day(s) and {len(hotels)} hotel(s) for a {req.days}-day request"
        )
    return Itinerary(
        summary=summary,
        total_cost=total,
        hotels=hotels,
        itinerary=days,
        city_coordinates=coordinates,
        over_budget=total > req.total_budget,
        locations=list(locations),
        fallback=fallback,
    )


# ──────────────────────────────────────────────────────────────────────────────
# Local synthesis
# ──────────────────────────────────────────────────────────────────────────────
def allocate(per_day: int, split: Mapping[str, int]) -> Dict[str, int]:
    """Floor each slot's share of the per-day budget."""
    return {slot: per_day * pct // 100 for slot, pct in split.items()}


def hotel_tiers(req: TripRequest, nightly: int, settings: Settings) -> List[Hotel]:
    """Luxury, mid and budget options; luxury only when the allocation allows it."""
    tiers = _HOTEL_TIERS if nightly >= settings.luxury_hotel_floor else _HOTEL_TIERS[1:]
    hotels = []
    for tier, pct, rating, distance in tiers:
        name, description = _HOTEL_NAMES[tier]
        hotels.append(
            Hotel(
                name=name.format(city=req.city),
                price_per_night=nightly * pct // 100,
                description=description,
                rating=rating,
                distance_from_center=distance,
            )
        )
    return hotels


def local_plan(
    req: TripRequest,
    settings: Settings,
    places: Optional[Dict[str, Sequence[str]]] = None,
) -> Tuple[List[Hotel], List[DayPlan]]:
    per_day = req.total_budget // req.days
    shares = allocate(per_day, settings.slot_split)
    pool = build_pool(req.city, req.preferences, places)
    hotels = hotel_tiers(req, shares["hotel"], settings)

    days = []
    for day in range(1, req.days + 1):
        i = day - 1
        restaurant, cuisine = pool.restaurant(i)
        days.append(
            DayPlan(
                day=day,
                morning=Slot(pool.activity("morning", i), shares["morning"]),
                afternoon=Slot(pool.activity("afternoon", i), shares["afternoon"]),
                evening=Slot(pool.activity("evening", i), shares["evening"]),
                dining=Dining(restaurant, cuisine, shares["dining"]),
                hotel=HotelStay(hotels[i % len(hotels)].name, shares["hotel"]),
            )
        )
    return hotels, days


# ──────────────────────────────────────────────────────────────────────────────
# Reconcile an external plan
# ──────────────────────────────────────────────────────────────────────────────
def _merge_day(day: int, upstream: Optional[UpstreamDay]) -> DayPlan:
    u = upstream or UpstreamDay()
    slots = {}
    for name in ("morning", "afternoon", "evening"):
        s = getattr(u, name)
        slots[name] = Slot(
            activity=(s.activity if s and s.activity else PLACEHOLDER_ACTIVITY[name]),
            cost=s.cost if s else 0,
        )
    d, h = u.dining, u.hotel
    return DayPlan(
        day=day,
        dining=Dining(
            restaurant=(d.restaurant if d and d.restaurant else PLACEHOLDER_RESTAURANT),
            cuisine=(d.cuisine if d and d.cuisine else PLACEHOLDER_CUISINE),
            cost=d.cost if d else 0,
        ),
        hotel=HotelStay(
            name=(h.name if h and h.name else PLACEHOLDER_HOTEL),
            price=h.price if h else 0,
        ),
        **slots,
    )


def _assign_days(upstream: List[UpstreamDay], count: int) -> Dict[int, UpstreamDay]:
    """Index upstream days by their own ``day`` number when valid, else by position."""
    assigned: Dict[int, UpstreamDay] = {}
    unplaced = []
    for entry in upstream:
        if entry.day is not None and 1 <= entry.day <= count and entry.day not in assigned:
            assigned[entry.day] = entry
        else:
            unplaced.append(entry)
    free = (n for n in range(1, count + 1) if n not in assigned)
    for entry, n in zip(unplaced, free):
        assigned[n] = entry
    return assigned


def _merge_hotels(upstream: List[UpstreamHotel], days: List[DayPlan]) -> List[Hotel]:
    hotels = [
        Hotel(
            name=h.name,
            price_per_night=h.price_per_night,
            description=h.description or "",
            rating=h.rating,
            distance_from_center=h.distance_from_center or "",
        )
        for h in upstream
        if h.name
    ]
    if hotels:
        return hotels
    # derive from the stays actually used
    seen: Dict[str, Hotel] = {}
    for day in days:
        if day.hotel.name != PLACEHOLDER_HOTEL and day.hotel.name not in seen:
            seen[day.hotel.name] = Hotel(name=day.hotel.name, price_per_night=day.hotel.price)
    return list(seen.values())


def parse_external(external_plan: Any) -> Optional[PartialItinerary]:
    """Parse an upstream plan; None when it is not usable (not an object, or no days)."""
    if not isinstance(external_plan, Mapping):
        return None
    try:
        partial = PartialItinerary.model_validate(dict(external_plan))
    except ValidationError as e:
        logger.warning("External plan failed validation: %s", e)
        return None
    if not partial.itinerary:
        return None
    return partial


def reconcile_plan(
    req: TripRequest, partial: PartialItinerary, settings: Settings
) -> Tuple[str, List[Hotel], List[DayPlan]]:
    if len(partial.itinerary) != req.days:
        logger.info(
            "External plan has %d day(s), request asked for %d", len(partial.itinerary), req.days
        )
    assigned = _assign_days(partial.itinerary, req.days)
    days = [_merge_day(n, assigned.get(n)) for n in range(1, req.days + 1)]
    hotels = _merge_hotels(partial.hotels, days)
    if not hotels:
        shares = allocate(req.total_budget // req.days, settings.slot_split)
        hotels = hotel_tiers(req, shares["hotel"], settings)
    return partial.summary or _summary(req), hotels, days


# ──────────────────────────────────────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────────────────────────────────────
def synthesize(
    req: TripRequest,
    external_plan: Any = None,
    *,
    settings: Optional[Settings] = None,
    coordinates: Optional[Tuple[float, float]] = None,
    locations: Sequence[Location] = (),
    places: Optional[Dict[str, Sequence[str]]] = None,
) -> Itinerary:
    """
    Build a complete, cost-consistent Itinerary for ``req``.

    ``external_plan`` is the decoded JSON from an external generator, if any.
    When it is absent or unusable the plan is synthesized locally from the
    activity pool (optionally extended with ``places`` names).
    """
    settings = settings or get_settings()
    _check_request(req)
    coords = tuple(coordinates) if coordinates else settings.default_coordinates

    partial = parse_external(external_plan) if external_plan is not None else None
    if partial is not None:
        summary, hotels, days = reconcile_plan(req, partial, settings)
        itinerary = _finish(req, summary, hotels, days, coords, locations, fallback=False)
        declared = partial.declared_total_cost
        if declared is not None and declared != itinerary.total_cost:
            logger.info(
                "Upstream totalCost %s replaced by reconciled %s", declared, itinerary.total_cost
            )
        return itinerary

    if external_plan is not None:
        logger.warning("External plan unusable, synthesizing locally for %s", req.city)
    hotels, days = local_plan(req, settings, places)
    return _finish(req, _summary(req), hotels, days, coords, locations, fallback=True)

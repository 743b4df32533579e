# tests/test_synthesis.py

import json

import pytest

from core.config import Settings
from core.errors import SynthesisError
from core.models import TripRequest
from core.synthesis import synthesize

SETTINGS = Settings()


def _assert_consistent(itin, days):
    assert len(itin.itinerary) == days
    assert [d.day for d in itin.itinerary] == list(range(1, days + 1))
    for d in itin.itinerary:
        assert d.daily_cost == (
            d.morning.cost + d.afternoon.cost + d.evening.cost + d.dining.cost + d.hotel.price
        )
    assert itin.total_cost == sum(d.daily_cost for d in itin.itinerary)
    assert len(itin.hotels) >= 1


# ──────────────────────────────────────────────────────────────────────────────
# Local synthesis
# ──────────────────────────────────────────────────────────────────────────────
def test_local_split_of_daily_budget():
    itin = synthesize(TripRequest("Delhi", 50000, 5), settings=SETTINGS)
    _assert_consistent(itin, 5)
    day = itin.itinerary[0]
    assert (day.morning.cost, day.afternoon.cost, day.evening.cost) == (2500, 2000, 2500)
    assert (day.dining.cost, day.hotel.price) == (1500, 1500)
    assert day.daily_cost == 10000
    assert itin.total_cost == 50000
    assert itin.fallback is True
    assert itin.over_budget is False
    assert itin.to_dict()["cityCoordinates"] == [77.209, 28.6139]


def test_floor_drift_stays_within_slot_count():
    itin = synthesize(TripRequest("Delhi", 10007, 1), settings=SETTINGS)
    _assert_consistent(itin, 1)
    assert itin.total_cost == 10005
    assert 0 <= 10007 - itin.total_cost <= 5


def test_local_synthesis_is_deterministic():
    req = TripRequest("Nowhereville", 42000, 4, "adventure and food")
    first = json.dumps(synthesize(req, settings=SETTINGS).to_dict(), ensure_ascii=False)
    second = json.dumps(synthesize(req, settings=SETTINGS).to_dict(), ensure_ascii=False)
    assert first == second


def test_pool_rotates_by_day_index():
    itin = synthesize(TripRequest("Delhi", 40000, 4), settings=SETTINGS)
    mornings = [d.morning.activity for d in itin.itinerary]
    assert mornings[0] == "Red Fort and Chandni Chowk"
    assert mornings[3] == mornings[0]


def test_adventure_preference_extends_pool():
    itin = synthesize(TripRequest("Delhi", 40000, 4, "Adventure trips"), settings=SETTINGS)
    assert itin.itinerary[3].morning.activity == "Trekking trail near Delhi"


def test_unknown_city_uses_generic_templates():
    itin = synthesize(TripRequest("Nowhereville", 10000, 2), settings=SETTINGS)
    assert all("Nowhereville" in d.morning.activity for d in itin.itinerary)


def test_hotel_tiers_cycle_across_days():
    itin = synthesize(TripRequest("Delhi", 30000, 3), settings=SETTINGS)
    # nightly allocation 1500 is below the luxury floor: mid + budget only
    assert [h.name for h in itin.hotels] == ["Delhi Central Inn", "Delhi Backpackers Lodge"]
    assert [d.hotel.name for d in itin.itinerary] == [
        "Delhi Central Inn",
        "Delhi Backpackers Lodge",
        "Delhi Central Inn",
    ]


def test_luxury_tier_when_allocation_allows():
    itin = synthesize(TripRequest("Delhi", 300000, 5), settings=SETTINGS)
    assert len(itin.hotels) == 3
    assert itin.hotels[0].price_per_night == 13500
    assert itin.itinerary[0].hotel.price == 9000


def test_places_names_join_the_pool():
    itin = synthesize(
        TripRequest("Nowhereville", 50000, 5),
        settings=SETTINGS,
        places={"attractions": ["Old Fort"], "restaurants": []},
    )
    assert itin.itinerary[4].morning.activity == "Visit Old Fort"


def test_non_positive_days_raise_synthesis_error():
    with pytest.raises(SynthesisError):
        synthesize(TripRequest("Delhi", 10000, 0), settings=SETTINGS)


# ──────────────────────────────────────────────────────────────────────────────
# Reconciling an external plan
# ──────────────────────────────────────────────────────────────────────────────
def _full_day(n, base=100):
    return {
        "day": n,
        "dailyCost": 99999,
        "morning": {"activity": f"Fort {n}", "cost": base},
        "afternoon": {"activity": f"Museum {n}", "cost": base * 2},
        "evening": {"activity": f"Bazaar {n}", "cost": base * 3},
        "dining": {"restaurant": f"Dhaba {n}", "cuisine": "Punjabi", "cost": base * 4},
        "hotel": {"name": "The Imperial", "price": base * 5},
    }


def test_upstream_totals_are_recomputed():
    plan = {
        "summary": "Royal Delhi",
        "totalCost": 123,
        "hotels": [{"name": "The Imperial", "pricePerNight": 500, "rating": 4.9}],
        "itinerary": [_full_day(1), _full_day(2)],
    }
    itin = synthesize(TripRequest("Delhi", 10000, 2), plan, settings=SETTINGS)
    _assert_consistent(itin, 2)
    assert itin.itinerary[0].daily_cost == 1500
    assert itin.total_cost == 3000
    assert itin.summary == "Royal Delhi"
    assert itin.fallback is False
    assert "_fallback" not in itin.to_dict()


def test_missing_days_and_slots_get_placeholders():
    day1 = _full_day(1)
    del day1["evening"]
    plan = {"itinerary": [day1]}
    itin = synthesize(TripRequest("Delhi", 10000, 3), plan, settings=SETTINGS)
    _assert_consistent(itin, 3)
    assert itin.itinerary[0].evening.activity == "Evening activity"
    assert itin.itinerary[0].evening.cost == 0
    blank = itin.itinerary[2]
    assert blank.morning.activity == "Explore local area"
    assert blank.afternoon.activity == "Sightseeing"
    assert blank.dining.restaurant == "Local eatery"
    assert blank.hotel.name == "Unknown"
    assert blank.daily_cost == 0
    assert itin.total_cost == itin.itinerary[0].daily_cost


def test_messy_upstream_values_are_coerced():
    plan = {
        "itinerary": [
            {
                "day": "1",
                "morning": "Walk the old city",
                "afternoon": {"activity": "Lunch cruise", "cost": "₹1,200"},
                "evening": {"activity": "Show", "cost": -50},
                "dining": {"restaurant": "Karim's", "cost": 99.9},
                "hotel": {"name": "Haveli", "price": "n/a"},
            }
        ],
        "hotels": [{"name": "Haveli", "rating": 7}],
    }
    itin = synthesize(TripRequest("Delhi", 10000, 1), plan, settings=SETTINGS)
    day = itin.itinerary[0]
    assert day.morning.activity == "Walk the old city"
    assert day.morning.cost == 0
    assert day.afternoon.cost == 1200
    assert day.evening.cost == 0
    assert day.dining.cost == 99
    assert day.dining.cuisine == "Local cuisine"
    assert day.hotel.price == 0
    assert day.daily_cost == 1299
    assert itin.hotels[0].rating == 5.0


def test_days_matched_by_number_and_extras_dropped():
    plan = {"itinerary": [_full_day(2), _full_day(1), _full_day(3), _full_day(4)]}
    itin = synthesize(TripRequest("Delhi", 10000, 3), plan, settings=SETTINGS)
    _assert_consistent(itin, 3)
    assert [d.morning.activity for d in itin.itinerary] == ["Fort 1", "Fort 2", "Fort 3"]


def test_days_key_is_accepted():
    itin = synthesize(TripRequest("Delhi", 10000, 1), {"days": [_full_day(1)]}, settings=SETTINGS)
    assert itin.fallback is False
    assert itin.itinerary[0].morning.activity == "Fort 1"


def test_hotels_derived_from_stays_when_missing():
    itin = synthesize(TripRequest("Delhi", 10000, 2), {"itinerary": [_full_day(1)]}, settings=SETTINGS)
    assert [h.name for h in itin.hotels] == ["The Imperial"]
    assert itin.hotels[0].price_per_night == 500


def test_hotel_tiers_used_when_upstream_has_no_hotels_at_all():
    itin = synthesize(TripRequest("Delhi", 10000, 1), {"itinerary": [{"day": 1}]}, settings=SETTINGS)
    assert itin.hotels[0].name == "Delhi Central Inn"
    assert itin.total_cost == 0


def test_over_budget_is_flagged_not_clamped():
    plan = {"itinerary": [_full_day(1, base=1000)]}
    itin = synthesize(TripRequest("Delhi", 5000, 1), plan, settings=SETTINGS)
    assert itin.total_cost == 15000
    assert itin.over_budget is True
    assert itin.to_dict()["overBudget"] is True


@pytest.mark.parametrize("plan", [[1, 2, 3], "not json", {"summary": "no days"}, {"itinerary": []}])
def test_unusable_external_plan_falls_back_to_local(plan):
    itin = synthesize(TripRequest("Delhi", 10000, 2), plan, settings=SETTINGS)
    _assert_consistent(itin, 2)
    assert itin.fallback is True
    assert itin.total_cost == 10000

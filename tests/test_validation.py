# tests/test_validation.py

import pytest

from core.config import Settings
from core.errors import (
    BudgetTooLow,
    InvalidNumber,
    MissingField,
    RequestValidationError,
)
from core.validation import validate

SETTINGS = Settings()


def test_budget_below_daily_floor_is_rejected():
    with pytest.raises(BudgetTooLow) as exc:
        validate({"city": "Delhi", "totalBudget": 1000, "days": 5}, SETTINGS)
    assert exc.value.minimum == 25000
    assert "25000" in str(exc.value)


def test_budget_equal_to_floor_passes():
    req = validate({"city": "Delhi", "totalBudget": 25000, "days": 5}, SETTINGS)
    assert (req.city, req.total_budget, req.days) == ("Delhi", 25000, 5)


def test_single_day_boundary():
    req = validate({"city": "Goa", "budget": 5000, "days": 1}, SETTINGS)
    assert req.days == 1


def test_numeric_strings_are_coerced():
    req = validate(
        {"city": "  Jaipur ", "budget": " 25,000 ", "days": "5", "preferences": "  food  "},
        SETTINGS,
    )
    assert req.city == "Jaipur"
    assert req.total_budget == 25000
    assert req.days == 5
    assert req.preferences == "food"


def test_total_budget_key_wins_over_budget():
    req = validate({"city": "Delhi", "totalBudget": 30000, "budget": 1, "days": 2}, SETTINGS)
    assert req.total_budget == 30000


def test_decimal_budget_is_floored():
    req = validate({"city": "Delhi", "budget": "25000.75", "days": 5}, SETTINGS)
    assert req.total_budget == 25000


def test_integral_float_days_accepted():
    assert validate({"city": "Delhi", "budget": 15000, "days": 3.0}, SETTINGS).days == 3


def test_preferences_default_to_empty_string():
    req = validate({"city": "Delhi", "budget": 5000, "days": 1, "preferences": None}, SETTINGS)
    assert req.preferences == ""


@pytest.mark.parametrize(
    "raw, field",
    [
        ({"budget": 10000, "days": 2}, "city"),
        ({"city": "   ", "budget": 10000, "days": 2}, "city"),
        ({"city": "Delhi", "days": 2}, "totalBudget"),
        ({"city": "Delhi", "budget": "", "days": 2}, "totalBudget"),
        ({"city": "Delhi", "budget": 10000}, "days"),
        ({"city": "Delhi", "budget": 10000, "days": None}, "days"),
    ],
)
def test_missing_fields(raw, field):
    with pytest.raises(MissingField) as exc:
        validate(raw, SETTINGS)
    assert exc.value.field == field


@pytest.mark.parametrize(
    "budget, days",
    [
        ("lots", 2),
        (True, 2),
        (float("nan"), 2),
        (-5, 2),
        (0, 2),
        (10000, "two"),
        (10000, "2.5"),
        (10000, 0),
        (10000, -1),
        (10_000_000, 31),
    ],
)
def test_invalid_numbers(budget, days):
    with pytest.raises(InvalidNumber):
        validate({"city": "Delhi", "budget": budget, "days": days}, SETTINGS)


def test_non_object_body_is_rejected():
    with pytest.raises(RequestValidationError):
        validate(["Delhi", 10000, 2], SETTINGS)


def test_custom_daily_floor():
    cheap = Settings(min_daily_cost=100)
    assert validate({"city": "Delhi", "budget": 300, "days": 3}, cheap).total_budget == 300


@pytest.mark.parametrize(
    "budget, days",
    [
        ("1e2000000", 2),
        (10000, "1e2000000"),
        (10**13, 2),
    ],
)
def test_huge_numbers_rejected_before_conversion(budget, days):
    with pytest.raises(InvalidNumber) as exc:
        validate({"city": "Delhi", "budget": budget, "days": days}, SETTINGS)
    assert "must be at most" in str(exc.value)


def test_custom_budget_ceiling():
    capped = Settings(max_budget=50000)
    assert validate({"city": "Delhi", "budget": 50000, "days": 2}, capped).total_budget == 50000
    with pytest.raises(InvalidNumber):
        validate({"city": "Delhi", "budget": "50001", "days": 2}, capped)

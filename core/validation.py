# core/validation.py

import math
from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from core.config import Settings, get_settings
from core.errors import (
    BudgetTooLow,
    InvalidNumber,
    MissingField,
    RequestValidationError,
)
from core.models import TripRequest


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_decimal(field: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidNumber(field, value, "must be a number, not a boolean")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidNumber(field, value, "must be finite")
        return Decimal(str(value))
    if isinstance(value, str):
        cleaned = value.strip().replace(",", "").replace("_", "")
        try:
            number = Decimal(cleaned)
        except InvalidOperation:
            raise InvalidNumber(field, value, "is not numeric") from None
        if not number.is_finite():
            raise InvalidNumber(field, value, "must be finite")
        return number
    raise InvalidNumber(field, value, "is not numeric")


def coerce_budget(value: Any, max_budget: int) -> int:
    """Budget accepts decimals (e.g. "25000.50") and is floored to a whole amount."""
    number = _to_decimal("budget", value)
    if number <= 0:
        raise InvalidNumber("budget", value)
    # compared as Decimal so huge exponents never reach int()
    if number > max_budget:
        raise InvalidNumber("budget", value, f"must be at most {max_budget}")
    budget = int(number.to_integral_value(rounding=ROUND_FLOOR))
    if budget <= 0:
        raise InvalidNumber("budget", value)
    return budget


def coerce_days(value: Any, max_days: int) -> int:
    number = _to_decimal("days", value)
    if number > max_days:
        raise InvalidNumber("days", value, f"must be at most {max_days}")
    if number != number.to_integral_value():
        raise InvalidNumber("days", value, "must be a whole number")
    days = int(number)
    if days < 1:
        raise InvalidNumber("days", value)
    return days


def validate(raw: Any, settings: Optional[Settings] = None) -> TripRequest:
    """
    Turn an untrusted JSON body into a TripRequest.

    Accepts the budget under ``totalBudget`` or ``budget``. Raises a
    RequestValidationError subclass (MissingField, InvalidNumber,
    BudgetTooLow) on the first problem found.
    """
    settings = settings or get_settings()
    if not isinstance(raw, Mapping):
        raise RequestValidationError("Request body must be a JSON object")

    city = raw.get("city")
    budget_raw = raw.get("totalBudget")
    if _is_blank(budget_raw):
        budget_raw = raw.get("budget")
    days_raw = raw.get("days")

    if _is_blank(city):
        raise MissingField("city")
    if _is_blank(budget_raw):
        raise MissingField("totalBudget")
    if _is_blank(days_raw):
        raise MissingField("days")

    budget = coerce_budget(budget_raw, settings.max_budget)
    days = coerce_days(days_raw, settings.max_days)

    minimum = days * settings.min_daily_cost
    if budget < minimum:
        raise BudgetTooLow(budget, days, minimum, settings.currency)

    preferences = raw.get("preferences")
    preferences = "" if preferences is None else str(preferences).strip()

    return TripRequest(
        city=str(city).strip(),
        total_budget=budget,
        days=days,
        preferences=preferences,
    )

# core/config.py

import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

SLOTS = ("morning", "afternoon", "evening", "dining", "hotel")

_DEFAULT_SPLIT = "25,20,25,15,15"
_DEFAULT_COORDS = "77.209,28.6139"  # Delhi


@dataclass
class Settings:
    """Runtime configuration for validation, synthesis and collaborators."""

    min_daily_cost: int = 5000
    max_days: int = 30
    max_budget: int = 10**12
    slot_split: Dict[str, int] = field(
        default_factory=lambda: dict(zip(SLOTS, (25, 20, 25, 15, 15)))
    )
    luxury_hotel_floor: int = 3000
    external_timeout: float = 8.0
    currency: str = "₹"
    default_coordinates: Tuple[float, float] = (77.209, 28.6139)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    mapbox_token: Optional[str] = None
    google_places_api_key: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self):
        if self.min_daily_cost < 0:
            raise ValueError("min_daily_cost must be >= 0")
        if self.max_days < 1:
            raise ValueError("max_days must be >= 1")
        if self.max_budget < 1:
            raise ValueError("max_budget must be >= 1")
        if self.external_timeout <= 0:
            raise ValueError("external_timeout must be > 0")
        if set(self.slot_split) != set(SLOTS):
            raise ValueError(f"slot_split must define exactly {', '.join(SLOTS)}")
        if any(v < 0 for v in self.slot_split.values()):
            raise ValueError("slot_split percentages must be >= 0")
        if sum(self.slot_split.values()) != 100:
            raise ValueError(
                f"slot_split must sum to 100, got {sum(self.slot_split.values())}"
            )


def _parse_split(raw: str) -> Dict[str, int]:
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != len(SLOTS):
        raise ValueError(
            f"PLANNER_SLOT_SPLIT needs {len(SLOTS)} comma-separated values, got {raw!r}"
        )
    return dict(zip(SLOTS, (int(p) for p in parts)))


def _parse_coords(raw: str) -> Tuple[float, float]:
    lng, lat = (float(p.strip()) for p in raw.split(","))
    return (lng, lat)


def get_settings() -> Settings:
    """Build Settings from environment variables (.env is loaded by the entry points)."""
    return Settings(
        min_daily_cost=int(os.getenv("PLANNER_MIN_DAILY_COST", "5000")),
        max_days=int(os.getenv("PLANNER_MAX_DAYS", "30")),
        max_budget=int(os.getenv("PLANNER_MAX_BUDGET", str(10**12))),
        slot_split=_parse_split(os.getenv("PLANNER_SLOT_SPLIT", _DEFAULT_SPLIT)),
        luxury_hotel_floor=int(os.getenv("PLANNER_LUXURY_HOTEL_FLOOR", "3000")),
        external_timeout=float(os.getenv("PLANNER_EXTERNAL_TIMEOUT", "8.0")),
        currency=os.getenv("PLANNER_CURRENCY", "₹"),
        default_coordinates=_parse_coords(
            os.getenv("PLANNER_DEFAULT_COORDINATES", _DEFAULT_COORDS)
        ),
        gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_AI_API_KEY"),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
        mapbox_token=os.getenv("MAPBOX_ACCESS_TOKEN") or None,
        google_places_api_key=os.getenv("GOOGLE_PLACES_API_KEY") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )

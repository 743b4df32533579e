# services/geocode.py

import logging
from typing import Optional
from urllib.parse import quote

import requests

from core.config import Settings
from core.errors import ExternalCollaboratorUnavailable

logger = logging.getLogger(__name__)

_MAPBOX_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json"
_NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
# Nominatim requires an explicit User-Agent
_USER_AGENT = "budget-itinerary-planner/1.0 (contact@example.com)"


def _get_json(url: str, timeout: float, **kwargs):
    try:
        r = requests.get(url, timeout=timeout, **kwargs)
        r.raise_for_status()
        return r.json()
    except (requests.RequestException, ValueError) as e:
        raise ExternalCollaboratorUnavailable(f"Geocoding request failed: {e}") from e


def mapbox_coords(city_name: str, token: str, timeout: float = 8.0) -> tuple[float, float]:
    """City name -> (longitude, latitude) from the Mapbox geocoding API."""
    data = _get_json(
        _MAPBOX_URL.format(query=quote(city_name)),
        timeout,
        params={"access_token": token, "limit": 1},
    )
    features = (data.get("features") if isinstance(data, dict) else None) or []
    first = features[0] if isinstance(features, list) and features else None
    center = first.get("center") if isinstance(first, dict) else None
    if not isinstance(center, list) or len(center) != 2:
        raise ExternalCollaboratorUnavailable(f"Mapbox could not geocode {city_name!r}.")
    try:
        return (float(center[0]), float(center[1]))
    except (TypeError, ValueError) as e:
        raise ExternalCollaboratorUnavailable(f"Malformed Mapbox result: {e}") from e


def nominatim_coords(city_name: str, timeout: float = 8.0) -> tuple[float, float]:
    """City name -> (longitude, latitude) from OpenStreetMap Nominatim."""
    results = _get_json(
        _NOMINATIM_URL,
        timeout,
        params={"q": city_name, "format": "json", "limit": 1},
        headers={"User-Agent": _USER_AGENT},
    )
    if not results:
        raise ExternalCollaboratorUnavailable(f"Nominatim could not geocode {city_name!r}.")
    try:
        return (float(results[0]["lon"]), float(results[0]["lat"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ExternalCollaboratorUnavailable(f"Malformed Nominatim result: {e}") from e


class Geocoder:
    """Mapbox when a token is configured, Nominatim otherwise."""

    def __init__(self, mapbox_token: Optional[str] = None, timeout: float = 8.0):
        self.mapbox_token = mapbox_token
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "Geocoder":
        return cls(settings.mapbox_token, settings.external_timeout)

    def __call__(self, city_name: str) -> tuple[float, float]:
        if self.mapbox_token:
            return mapbox_coords(city_name, self.mapbox_token, self.timeout)
        return nominatim_coords(city_name, self.timeout)

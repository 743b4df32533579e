# services/places.py
"""
Points of interest from the Google Places API.

Used for two things: map pins (``Location``) and extra names for the local
activity pool.
"""

import logging
from typing import Dict, List, Optional

import googlemaps
from googlemaps import exceptions as gm_exceptions

from core.config import Settings
from core.errors import ExternalCollaboratorUnavailable
from core.models import Location

logger = logging.getLogger(__name__)

ATTRACTION = "tourist_attraction"
RESTAURANT = "restaurant"


def _to_location(place: dict, category: str) -> Optional[Location]:
    if not isinstance(place, dict):
        return None
    name = place.get("name")
    geometry = place.get("geometry")
    loc = geometry.get("location") if isinstance(geometry, dict) else None
    if not isinstance(loc, dict):
        return None
    if not name or loc.get("lat") is None or loc.get("lng") is None:
        return None
    try:
        lng, lat = float(loc["lng"]), float(loc["lat"])
    except (TypeError, ValueError):
        return None
    return Location(name=name, type=category, lng=lng, lat=lat)


class PlacesLookup:
    """Callable collaborator: (city, category) -> list of Location."""

    def __init__(self, api_key: str, timeout: float = 8.0, limit: int = 10):
        try:
            self.client = googlemaps.Client(
                key=api_key,
                timeout=timeout,
                retry_timeout=timeout,
                retry_over_query_limit=False,
            )
        except ValueError as e:
            raise ExternalCollaboratorUnavailable(f"Google Places misconfigured: {e}") from e
        self.limit = limit

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["PlacesLookup"]:
        if not settings.google_places_api_key:
            return None
        return cls(settings.google_places_api_key, timeout=settings.external_timeout)

    def __call__(self, city: str, category: str) -> List[Location]:
        try:
            result = self.client.places(query=f"{category.replace('_', ' ')} in {city}", type=category)
        except (gm_exceptions.ApiError, gm_exceptions.TransportError, gm_exceptions.Timeout) as e:
            raise ExternalCollaboratorUnavailable(f"Places lookup failed for {category}: {e}") from e

        locations = []
        for place in result.get("results", []):
            location = _to_location(place, category)
            if location:
                locations.append(location)
            if len(locations) >= self.limit:
                break
        logger.info("Found %d %s place(s) in %s", len(locations), category, city)
        return locations


def lookup_pois(lookup, city: str) -> Dict[str, List[Location]]:
    """
    Attractions and restaurants for ``city``.

    Each category is one attempt; a failed category is logged and left empty.
    """
    found: Dict[str, List[Location]] = {ATTRACTION: [], RESTAURANT: []}
    if lookup is None:
        return found
    for category in found:
        try:
            found[category] = lookup(city, category)
        except ExternalCollaboratorUnavailable as e:
            logger.warning("%s", e)
    return found

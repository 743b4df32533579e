# core/planner.py

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from core.config import Settings, get_settings
from core.errors import ExternalCollaboratorUnavailable
from core.models import Itinerary, Location, TripRequest
from core.synthesis import synthesize
from core.validation import validate
from ai.gemini import GeminiGenerator
from services.geocode import Geocoder
from services.places import ATTRACTION, RESTAURANT, PlacesLookup, lookup_pois

logger = logging.getLogger(__name__)

GenerateFn = Callable[[TripRequest], Any]
GeocodeFn = Callable[[str], Tuple[float, float]]
PlacesFn = Callable[[str, str], List[Location]]


@dataclass
class Collaborators:
    generator: Optional[GenerateFn] = None
    geocoder: Optional[GeocodeFn] = None
    places: Optional[PlacesFn] = None


def default_collaborators(settings: Settings) -> Collaborators:
    """Real clients for whatever is configured; a misconfigured one is left out."""
    collab = Collaborators(geocoder=Geocoder.from_settings(settings))
    try:
        collab.generator = GeminiGenerator.from_settings(settings)
    except ExternalCollaboratorUnavailable as e:
        logger.warning("Gemini disabled: %s", e)
    try:
        collab.places = PlacesLookup.from_settings(settings)
    except ExternalCollaboratorUnavailable as e:
        logger.warning("Places lookup disabled: %s", e)
    return collab


def _coordinates(req: TripRequest, collab: Collaborators, settings: Settings) -> Tuple[float, float]:
    if collab.geocoder is None:
        return settings.default_coordinates
    try:
        return collab.geocoder(req.city)
    except ExternalCollaboratorUnavailable as e:
        logger.warning("Geocoding failed for %s, using default coordinates: %s", req.city, e)
        return settings.default_coordinates


def plan_trip(
    raw: Any,
    settings: Optional[Settings] = None,
    collaborators: Optional[Collaborators] = None,
) -> Itinerary:
    """
    Validate ``raw`` and produce an Itinerary.

    Validation errors propagate. Collaborator failures never do: coordinates
    fall back to the configured default and the plan falls back to local
    synthesis, with the failure message kept on ``Itinerary.error``.
    """
    settings = settings or get_settings()
    req = validate(raw, settings)
    collab = collaborators if collaborators is not None else default_collaborators(settings)
    logger.info("Planning %d day(s) in %s with budget %s", req.days, req.city, req.total_budget)

    coords = _coordinates(req, collab, settings)
    pois = lookup_pois(collab.places, req.city)
    locations = pois[ATTRACTION] + pois[RESTAURANT]
    names = {
        "attractions": [p.name for p in pois[ATTRACTION]],
        "restaurants": [p.name for p in pois[RESTAURANT]],
    }

    external, error = None, None
    if collab.generator is None:
        error = "No itinerary generator configured"
    else:
        try:
            external = collab.generator(req)
        except ExternalCollaboratorUnavailable as e:
            logger.warning("Generator unavailable, falling back to local synthesis: %s", e)
            error = str(e)

    itinerary = synthesize(
        req,
        external,
        settings=settings,
        coordinates=coords,
        locations=locations,
        places=names,
    )
    if itinerary.fallback:
        itinerary.error = error or "Generator returned an unusable itinerary"
        logger.info("Local itinerary for %s: total %s", req.city, itinerary.total_cost)
    return itinerary

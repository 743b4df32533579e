# ai/gemini.py
# ------------------------------------------------------------------------------
import json
import logging
import re
import textwrap
from typing import Optional

import google.generativeai as genai

from core.config import Settings
from core.errors import ExternalCollaboratorUnavailable
from core.models import TripRequest

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

# ──────────────────────────────────────────────────────────────────────────────
# Prompt template – day-by-day plan with per-slot costs
# ──────────────────────────────────────────────────────────────────────────────
_PROMPT_TEMPLATE = textwrap.dedent(
    """\
    You are a travel planning expert.
    Create a {days}-day detailed itinerary for {city}.
    Total budget: {currency}{budget}.
    Travel preferences: {preferences}.

    Output ONLY valid JSON with this structure:
    {{
      "summary": "Short exciting trip description",
      "totalCost": 0,
      "hotels": [
        {{"name": "", "pricePerNight": 0, "description": "", "rating": 0, "distanceFromCenter": ""}}
      ],
      "itinerary": [
        {{
          "day": 1,
          "dailyCost": 0,
          "morning": {{"activity": "", "cost": 0}},
          "afternoon": {{"activity": "", "cost": 0}},
          "evening": {{"activity": "", "cost": 0}},
          "dining": {{"restaurant": "", "cuisine": "", "cost": 0}},
          "hotel": {{"name": "", "price": 0}}
        }}
      ]
    }}

    Guidelines:
    * Use real hotels, restaurants and attractions where possible.
    * Hotel prices per night should be realistic and <= {currency}{per_day} (budget per day).
    * Daily costs must sum within the total budget.
    * Include 2-3 hotels with different price ranges.
    * Use whole numbers in {currency} for every cost.
    """
)


def build_prompt(req: TripRequest, currency: str = "₹") -> str:
    """Return the itinerary prompt string for Gemini."""
    return _PROMPT_TEMPLATE.format(
        days=req.days,
        city=req.city,
        currency=currency,
        budget=req.total_budget,
        per_day=req.total_budget // req.days,
        preferences=req.preferences or "sightseeing, food, culture",
    )


def extract_json(text: str) -> dict:
    """
    Pull the first JSON object out of a model answer.

    Handles ```json fences and prose before/after the object.
    """
    if not text or not text.strip():
        raise ValueError("empty response text")
    cleaned = _FENCE_RE.sub("", text.strip())
    start = cleaned.find("{")
    if start == -1:
        raise ValueError("no JSON object in response")
    obj, _ = json.JSONDecoder().raw_decode(cleaned[start:])
    if not isinstance(obj, dict):
        raise ValueError(f"expected a JSON object, got {type(obj).__name__}")
    return obj


# ──────────────────────────────────────────────────────────────────────────────
# Client
# ──────────────────────────────────────────────────────────────────────────────
class GeminiGenerator:
    """Callable collaborator: TripRequest -> decoded itinerary JSON."""

    def __init__(self, api_key: str, model_name: str = "gemini-1.5-flash",
                 timeout: float = 8.0, currency: str = "₹"):
        if not api_key:
            raise ExternalCollaboratorUnavailable("GEMINI_API_KEY is missing.")
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)
        self.timeout = timeout
        self.currency = currency

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["GeminiGenerator"]:
        if not settings.gemini_api_key:
            return None
        return cls(
            settings.gemini_api_key,
            settings.gemini_model,
            timeout=settings.external_timeout,
            currency=settings.currency,
        )

    def _text(self, prompt: str) -> str:
        resp = self.model.generate_content(
            prompt,
            generation_config={
                "temperature": 0.7,
                "max_output_tokens": 8192,
                "response_mime_type": "application/json",
            },
            request_options={"timeout": self.timeout},
        )
        return resp.candidates[0].content.parts[0].text

    def __call__(self, req: TripRequest) -> dict:
        try:
            text = self._text(build_prompt(req, self.currency))
        except Exception as e:
            raise ExternalCollaboratorUnavailable(f"Gemini request failed: {e}") from e
        try:
            return extract_json(text)
        except ValueError as e:
            logger.debug("Unparseable Gemini answer: %.200s", text)
            raise ExternalCollaboratorUnavailable(f"Gemini returned invalid JSON: {e}") from e

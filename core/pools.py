# core/pools.py

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

# ──────────────────────────────────────────────────────────────────────────────
# Generic entries, formatted with the city name
# ──────────────────────────────────────────────────────────────────────────────
_GENERIC = {
    "morning": [
        "Heritage walk through old {city}",
        "Visit the main museum of {city}",
        "Sunrise viewpoint and breakfast in {city}",
        "Guided tour of {city}'s landmarks",
    ],
    "afternoon": [
        "Explore the local markets of {city}",
        "Lunch and stroll in central {city}",
        "Art galleries and cafés of {city}",
        "Botanical garden or city park in {city}",
    ],
    "evening": [
        "Sunset promenade in {city}",
        "Cultural show in {city}",
        "Night market food crawl in {city}",
        "Riverside or rooftop evening in {city}",
    ],
    "dining": [
        ("{city} Spice Kitchen", "Local cuisine"),
        ("The {city} Table", "Regional specialities"),
        ("Street Food Lane, {city}", "Street food"),
        ("Garden Terrace {city}", "Multi-cuisine"),
    ],
}

# ──────────────────────────────────────────────────────────────────────────────
# Curated entries for a few destinations (lower-case keys)
# ──────────────────────────────────────────────────────────────────────────────
_CITIES = {
    "delhi": {
        "morning": ["Red Fort and Chandni Chowk", "Qutub Minar", "Humayun's Tomb"],
        "afternoon": ["India Gate and Rajpath", "Lodhi Garden", "Dilli Haat"],
        "evening": ["Akshardham light show", "Connaught Place walk", "Hauz Khas Village"],
        "dining": [("Karim's", "Mughlai"), ("Indian Accent", "Modern Indian"), ("Paranthe Wali Gali", "Street food")],
    },
    "mumbai": {
        "morning": ["Gateway of India", "Elephanta Caves ferry", "Chhatrapati Shivaji Terminus"],
        "afternoon": ["Colaba Causeway shopping", "Chhatrapati Shivaji Maharaj Vastu Sangrahalaya", "Bandra Bandstand"],
        "evening": ["Marine Drive sunset", "Juhu Beach", "Worli Sea Face"],
        "dining": [("Leopold Cafe", "Continental"), ("Trishna", "Seafood"), ("Bademiya", "Street food")],
    },
    "jaipur": {
        "morning": ["Amber Fort", "Hawa Mahal", "Nahargarh Fort"],
        "afternoon": ["City Palace", "Jantar Mantar", "Johari Bazaar"],
        "evening": ["Chokhi Dhani village", "Jal Mahal at dusk", "Albert Hall lights"],
        "dining": [("Laxmi Mishthan Bhandar", "Rajasthani"), ("Suvarna Mahal", "Royal Indian"), ("Masala Chowk", "Street food")],
    },
    "goa": {
        "morning": ["Basilica of Bom Jesus", "Fort Aguada", "Dudhsagar Falls trip"],
        "afternoon": ["Calangute Beach", "Fontainhas Latin Quarter", "Spice plantation tour"],
        "evening": ["Baga Beach shacks", "Mandovi river cruise", "Anjuna night market"],
        "dining": [("Fisherman's Wharf", "Goan seafood"), ("Gunpowder", "South Indian"), ("Britto's", "Goan")],
    },
    "paris": {
        "morning": ["Louvre Museum", "Notre-Dame and Île de la Cité", "Montmartre and Sacré-Cœur"],
        "afternoon": ["Musée d'Orsay", "Le Marais walk", "Jardin du Luxembourg"],
        "evening": ["Eiffel Tower at night", "Seine river cruise", "Latin Quarter evening"],
        "dining": [("Bouillon Chartier", "French"), ("Le Comptoir du Relais", "Bistro"), ("L'As du Fallafel", "Middle Eastern")],
    },
}

# ──────────────────────────────────────────────────────────────────────────────
# Preference themes: keyword -> extra entries appended to each slot
# ──────────────────────────────────────────────────────────────────────────────
_THEMES = {
    "adventure": {
        "morning": ["Trekking trail near {city}"],
        "afternoon": ["Zip-lining or rafting around {city}"],
        "evening": ["Campfire evening outside {city}"],
        "dining": [("Trailhead Grill, {city}", "Barbecue")],
    },
    "food": {
        "morning": ["Breakfast food walk in {city}"],
        "afternoon": ["Cooking class in {city}"],
        "evening": ["Street food tour of {city}"],
        "dining": [("Chef's Tasting Room, {city}", "Tasting menu")],
    },
    "culture": {
        "morning": ["Temples and monuments of {city}"],
        "afternoon": ["Craft workshop in {city}"],
        "evening": ["Classical music or dance in {city}"],
        "dining": [("Heritage Haveli Dining, {city}", "Traditional")],
    },
    "nightlife": {
        "morning": ["Late brunch in {city}"],
        "afternoon": ["Craft brewery visit in {city}"],
        "evening": ["Bar hopping in {city}"],
        "dining": [("Midnight Diner, {city}", "Bar food")],
    },
    "nature": {
        "morning": ["Birdwatching near {city}"],
        "afternoon": ["Lake or nature reserve near {city}"],
        "evening": ["Sunset hike around {city}"],
        "dining": [("Farm Table, {city}", "Organic")],
    },
    "shopping": {
        "morning": ["Handicraft emporium in {city}"],
        "afternoon": ["Main bazaar of {city}"],
        "evening": ["Mall and boutiques of {city}"],
        "dining": [("Food Court Central, {city}", "Multi-cuisine")],
    },
    "relax": {
        "morning": ["Yoga session in {city}"],
        "afternoon": ["Spa afternoon in {city}"],
        "evening": ["Quiet café evening in {city}"],
        "dining": [("Slow Kitchen, {city}", "Healthy")],
    },
}

ACTIVITY_SLOTS = ("morning", "afternoon", "evening")


@dataclass
class ActivityPool:
    morning: List[str] = field(default_factory=list)
    afternoon: List[str] = field(default_factory=list)
    evening: List[str] = field(default_factory=list)
    dining: List[Tuple[str, str]] = field(default_factory=list)

    def activity(self, slot: str, index: int) -> str:
        entries = getattr(self, slot)
        return entries[index % len(entries)]

    def restaurant(self, index: int) -> Tuple[str, str]:
        return self.dining[index % len(self.dining)]


def preference_themes(preferences: str) -> List[str]:
    """Theme keywords found in the free-text preferences, in a fixed order."""
    text = preferences.lower()
    return [theme for theme in _THEMES if theme in text]


def build_pool(
    city: str,
    preferences: str = "",
    places: Dict[str, Sequence[str]] | None = None,
) -> ActivityPool:
    """
    Deterministic activity pool for a city.

    Curated entries come first when the city is known, generic templates
    otherwise; then themed entries for each preference keyword; then any
    place names from a places lookup (``{"attractions": [...],
    "restaurants": [...]}``).
    """
    base = _CITIES.get(city.strip().lower())
    if base is None:
        base = {
            slot: [entry.format(city=city) for entry in entries]
            for slot, entries in _GENERIC.items()
            if slot != "dining"
        }
        base["dining"] = [(name.format(city=city), cuisine) for name, cuisine in _GENERIC["dining"]]

    pool = ActivityPool(
        morning=list(base["morning"]),
        afternoon=list(base["afternoon"]),
        evening=list(base["evening"]),
        dining=list(base["dining"]),
    )

    for theme in preference_themes(preferences):
        extra = _THEMES[theme]
        for slot in ACTIVITY_SLOTS:
            getattr(pool, slot).extend(e.format(city=city) for e in extra[slot])
        pool.dining.extend((n.format(city=city), c) for n, c in extra["dining"])

    if places:
        attractions = [name for name in places.get("attractions", ()) if name]
        # round-robin across the activity slots
        for i, name in enumerate(attractions):
            getattr(pool, ACTIVITY_SLOTS[i % len(ACTIVITY_SLOTS)]).append(f"Visit {name}")
        pool.dining.extend((name, "Local cuisine") for name in places.get("restaurants", ()) if name)

    return pool

# smartkisan/tools/regions.py
from typing import Tuple

# Canonical key -> (lat, lng) of the provincial capital used for weather lookups
REGION_COORDINATES = {
    "punjab":      (31.5204, 74.3587),  # Lahore
    "sindh":       (24.8607, 67.0011),  # Karachi
    "khyber":      (34.0151, 71.5249),  # Peshawar
    "balochistan": (30.1798, 66.9750),  # Quetta
}

# Accepted spellings -> canonical key
REGION_ALIASES = {
    "punjab": "punjab",
    "sindh": "sindh",
    "khyber": "khyber",
    "khyber pakhtunkhwa": "khyber",
    "balochistan": "balochistan",
}

REGION_LABELS = {
    "en": {
        "punjab": "Punjab",
        "sindh": "Sindh",
        "khyber": "Khyber Pakhtunkhwa",
        "balochistan": "Balochistan",
    },
    "ur": {
        "punjab": "پنجاب",
        "sindh": "سندھ",
        "khyber": "خیبر پختونخوا",
        "balochistan": "بلوچستان",
    },
}

DEFAULT_REGION = "punjab"


def canonical_region(region: str | None) -> str:
    """Map any spelling (any case) to a table key; unknown input resolves to punjab."""
    key = " ".join((region or "").strip().lower().split())
    return REGION_ALIASES.get(key, DEFAULT_REGION)


def resolve_region(region: str | None) -> Tuple[float, float]:
    """Return the fixed (lat, lng) pair for a region. Never raises."""
    return REGION_COORDINATES[canonical_region(region)]

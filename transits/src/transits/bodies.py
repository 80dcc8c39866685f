"""Body definitions, orb tables, significance, and sign data."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from transitwire.zodiac import SIGNS, longitude_to_sign, normalize_longitude, sign_index

__all__ = [
    "ASPECTS",
    "ASPECT_BODIES",
    "BODY_IDS",
    "CORE_BODIES",
    "DEFAULT_ORBS",
    "DISPLAY_NAMES",
    "NATAL_ASPECT_POINTS",
    "SIGNS",
    "SIGN_CHANGE_SIGNIFICANCE",
    "STATION_BODIES",
    "STATION_SIGNIFICANCE",
    "display_name",
    "longitude_to_sign",
    "normalize_longitude",
    "sign_index",
]

# Celestial body IDs for pyswisseph
# These map to swisseph constants
BODY_IDS: Mapping[str, int] = MappingProxyType({
    "sun": 0,  # SE_SUN
    "moon": 1,  # SE_MOON
    "mercury": 2,  # SE_MERCURY
    "venus": 3,  # SE_VENUS
    "mars": 4,  # SE_MARS
    "jupiter": 5,  # SE_JUPITER
    "saturn": 6,  # SE_SATURN
    "uranus": 7,  # SE_URANUS
    "neptune": 8,  # SE_NEPTUNE
    "pluto": 9,  # SE_PLUTO
    "north_node": 11,  # SE_TRUE_NODE
    "lilith": 12,  # SE_MEAN_APOG
    "chiron": 15,  # SE_CHIRON
})

# The ten bodies tracked for transit events
CORE_BODIES: tuple[str, ...] = (
    "sun",
    "moon",
    "mercury",
    "venus",
    "mars",
    "jupiter",
    "saturn",
    "uranus",
    "neptune",
    "pluto",
)

# Transiting bodies scanned against a natal chart
ASPECT_BODIES: tuple[str, ...] = CORE_BODIES

# Natal points an aspect scan may land on: nodes, Chiron and Lilith are excluded
NATAL_ASPECT_POINTS: frozenset[str] = frozenset(CORE_BODIES) | {"ascendant", "midheaven"}

DISPLAY_NAMES: Mapping[str, str] = MappingProxyType({
    "sun": "Sun",
    "moon": "Moon",
    "mercury": "Mercury",
    "venus": "Venus",
    "mars": "Mars",
    "jupiter": "Jupiter",
    "saturn": "Saturn",
    "uranus": "Uranus",
    "neptune": "Neptune",
    "pluto": "Pluto",
    "north_node": "North Node",
    "lilith": "Lilith",
    "chiron": "Chiron",
    "ascendant": "Ascendant",
    "midheaven": "Midheaven",
})

# Aspect definitions: name -> exact angle. Order is the final tie-break.
ASPECTS: Mapping[str, float] = MappingProxyType({
    "conjunction": 0.0,
    "opposition": 180.0,
    "trine": 120.0,
    "square": 90.0,
    "sextile": 60.0,
})

# Default maximum orbs by aspect type (in degrees)
DEFAULT_ORBS: Mapping[str, float] = MappingProxyType({
    "conjunction": 10.0,
    "opposition": 10.0,
    "trine": 8.0,
    "square": 8.0,
    "sextile": 6.0,
})

SIGN_CHANGE_SIGNIFICANCE: Mapping[str, str] = MappingProxyType({
    "sun": "high",
    "moon": "medium",
    "mercury": "medium",
    "venus": "medium",
    "mars": "high",
    "jupiter": "high",
    "saturn": "high",
    "uranus": "medium",
    "neptune": "medium",
    "pluto": "high",
})

# Sun and Moon never station
STATION_BODIES: tuple[str, ...] = tuple(b for b in CORE_BODIES if b not in ("sun", "moon"))

STATION_SIGNIFICANCE: Mapping[str, str] = MappingProxyType({
    "mercury": "high",
    "venus": "high",
    "mars": "high",
    "jupiter": "medium",
    "saturn": "medium",
    "uranus": "low",
    "neptune": "low",
    "pluto": "low",
})


def display_name(body: str) -> str:
    return DISPLAY_NAMES.get(body, body.replace("_", " ").title())

"""Zodiac sign table and longitude helpers shared by schemas and engine."""

from __future__ import annotations

import math

# Zodiac signs in order, each a 30 degree segment starting at 0 Aries
SIGNS: tuple[str, ...] = (
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
)


def normalize_longitude(longitude: float) -> float:
    """Wrap any longitude into [0, 360)."""
    if not math.isfinite(longitude):
        raise ValueError(f"Longitude must be finite, got {longitude!r}")
    lon = longitude % 360.0
    # -1e-17 % 360.0 rounds up to 360.0
    if lon >= 360.0:
        lon = 0.0
    return lon


def sign_index(longitude: float) -> int:
    """Index (0-11) of the sign containing a longitude."""
    return int(normalize_longitude(longitude) // 30.0)


def longitude_to_sign(longitude: float) -> tuple[str, float]:
    """Convert ecliptic longitude to sign and degree within sign."""
    longitude = normalize_longitude(longitude)
    index = int(longitude // 30.0)
    degree = longitude - (index * 30.0)
    return SIGNS[index], degree

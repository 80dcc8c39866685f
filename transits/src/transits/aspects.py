"""Aspect detection between transiting bodies and natal points.

A pair may sit inside the orb of more than one aspect when orbs are widened;
every scan here keeps the match with the smallest orb (best match, never
first match). Ties on orb go to the higher intensity, then to table order.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, NamedTuple

from transitwire.schemas import Aspect, AspectDuration, CelestialPosition, NatalChart

from transits.bodies import ASPECT_BODIES, ASPECTS, DEFAULT_ORBS, NATAL_ASPECT_POINTS, normalize_longitude

logger = logging.getLogger(__name__)

# Absorbs float noise so a pair exactly at target +/- max orb is accepted
ORB_EPSILON = 1e-9

DEFAULT_ASPECT_LIMIT = 8

# Below this speed an aspect is treated as stationary and gets no duration
_MIN_SPEED = 1e-6


class AspectMatch(NamedTuple):
    type: str
    orb: float
    intensity: float
    max_orb: float


def angular_separation(lon1: float, lon2: float) -> float:
    """Calculate the shortest angular distance between two longitudes, in [0, 180]."""
    diff = abs(normalize_longitude(lon1) - normalize_longitude(lon2))
    if diff > 180.0:
        diff = 360.0 - diff
    return diff


def _orb_table(orbs: Mapping[str, float] | None) -> Mapping[str, float]:
    if orbs is None:
        return DEFAULT_ORBS
    unknown = set(orbs) - set(ASPECTS)
    if unknown:
        raise ValueError(f"Unknown aspect types: {', '.join(sorted(unknown))}")
    return {name: float(orbs.get(name, DEFAULT_ORBS[name])) for name in ASPECTS}


def _rank(match: AspectMatch, order: int) -> tuple[float, float, int]:
    return (match.orb, -match.intensity, order)


def match_aspect(
    lon_a: float,
    lon_b: float,
    orbs: Mapping[str, float] | None = None,
) -> AspectMatch | None:
    """Best aspect formed by two longitudes, or None when nothing is in orb.

    Symmetric in its arguments. Intensity is the unused part of the orb
    allowance, so an exact aspect scores its full maximum orb.
    """
    table = _orb_table(orbs)
    separation = angular_separation(lon_a, lon_b)

    best: tuple[tuple[float, float, int], AspectMatch] | None = None
    for order, (aspect_name, aspect_angle) in enumerate(ASPECTS.items()):
        max_orb = table[aspect_name]
        orb = abs(separation - aspect_angle)
        if orb > max_orb + ORB_EPSILON:
            continue
        match = AspectMatch(aspect_name, orb, max(0.0, max_orb - orb), max_orb)
        key = _rank(match, order)
        if best is None or key < best[0]:
            best = (key, match)
    return best[1] if best else None


def _is_applying(
    lon1: float, lon2: float, speed1: float, speed2: float, aspect_angle: float
) -> bool:
    """Determine if an aspect is applying (getting tighter) or separating."""
    dist_now = angular_separation(lon1, lon2)

    # Project positions forward slightly
    lon1_future = (lon1 + speed1 * 0.1) % 360.0
    lon2_future = (lon2 + speed2 * 0.1) % 360.0
    dist_future = angular_separation(lon1_future, lon2_future)

    orb_now = abs(dist_now - aspect_angle)
    orb_future = abs(dist_future - aspect_angle)

    return orb_future < orb_now


def aspect_duration(orb: float, max_orb: float, speed: float, applying: bool) -> AspectDuration | None:
    """Days the aspect spends in orb, and days until it leaves orb.

    An applying aspect still has to perfect and then separate through the
    full orb; a separating one only has the unused orb left.
    """
    rate = abs(speed)
    if rate < _MIN_SPEED:
        return None
    remaining = (orb + max_orb) if applying else max(0.0, max_orb - orb)
    return AspectDuration(
        total_days=round(2 * max_orb / rate, 4),
        remaining_days=round(remaining / rate, 4),
    )


def _build_aspect(
    transit: CelestialPosition,
    natal: CelestialPosition,
    match: AspectMatch,
) -> Aspect:
    applying = duration = None
    if transit.speed_deg_day is not None:
        applying = _is_applying(
            transit.longitude,
            natal.longitude,
            transit.speed_deg_day,
            0.0,
            ASPECTS[match.type],
        )
        duration = aspect_duration(match.orb, match.max_orb, transit.speed_deg_day, applying)
    return Aspect(
        transit_body=transit.body,
        natal_body=natal.body,
        type=match.type,
        orb=round(match.orb, 4),
        intensity=round(match.intensity, 4),
        applying=applying,
        duration=duration,
    )


def aspect_sort_key(aspect: Aspect) -> tuple[float, float, int]:
    order = list(ASPECTS).index(aspect.type)
    return (aspect.orb, -aspect.intensity, order)


def _eligible_points(chart: NatalChart) -> list[CelestialPosition]:
    return [p for p in chart.points() if p.body in NATAL_ASPECT_POINTS]


def find_aspects_to_chart(
    transit: CelestialPosition,
    chart: NatalChart,
    orbs: Mapping[str, float] | None = None,
    limit: int | None = DEFAULT_ASPECT_LIMIT,
) -> list[Aspect]:
    """Every natal point one transiting body aspects, tightest first."""
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    found = []
    for natal in _eligible_points(chart):
        match = match_aspect(transit.longitude, natal.longitude, orbs)
        if match is not None:
            found.append(_build_aspect(transit, natal, match))
    found.sort(key=aspect_sort_key)
    return found if limit is None else found[:limit]


def find_best_aspect(
    transit: CelestialPosition,
    chart: NatalChart,
    orbs: Mapping[str, float] | None = None,
) -> Aspect | None:
    """Single tightest aspect from one transiting body to a natal chart."""
    found = find_aspects_to_chart(transit, chart, orbs, limit=1)
    return found[0] if found else None


def find_transit_aspects(
    transits: Iterable[CelestialPosition],
    chart: NatalChart,
    orbs: Mapping[str, float] | None = None,
    limit: int | None = DEFAULT_ASPECT_LIMIT,
) -> list[Aspect]:
    """Aspects from every transiting core body to a natal chart, tightest first."""
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    found: list[Aspect] = []
    for transit in transits:
        if transit.body not in ASPECT_BODIES:
            continue
        found.extend(find_aspects_to_chart(transit, chart, orbs, limit=None))
    found.sort(key=aspect_sort_key)
    logger.debug("Found %d transit-to-natal aspects", len(found))
    return found if limit is None else found[:limit]

"""Lunar phase classification and phase-event detection."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Iterable

from transitwire.schemas import DailyPositions, PositionWindow, TransitEvent

logger = logging.getLogger(__name__)

SYNODIC_MONTH_DAYS = 29.530588853
REFERENCE_NEW_MOON = datetime(2000, 1, 6, 18, 14, tzinfo=UTC)
PHASE_TOLERANCE = 0.02

# Principal phases: (target fraction, label, significance). New Moon also
# matches fractions just below 1.0.
PRINCIPAL_PHASES: tuple[tuple[float, str, str], ...] = (
    (0.0, "New Moon", "high"),
    (0.25, "First Quarter", "medium"),
    (0.5, "Full Moon", "high"),
    (0.75, "Last Quarter", "medium"),
)

# Named lunar phases with their synodic percentage ranges
PHASE_NAMES = [
    (0.000, 0.0625, "new_moon"),
    (0.0625, 0.1875, "waxing_crescent"),
    (0.1875, 0.3125, "first_quarter"),
    (0.3125, 0.4375, "waxing_gibbous"),
    (0.4375, 0.5625, "full_moon"),
    (0.5625, 0.6875, "waning_gibbous"),
    (0.6875, 0.8125, "last_quarter"),
    (0.8125, 0.9375, "waning_crescent"),
    (0.9375, 1.000, "new_moon"),
]


def phase_fraction(moment: datetime) -> float:
    """Synodic progress in [0, 1): 0 = new moon, 0.5 = full moon."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    days = (moment - REFERENCE_NEW_MOON).total_seconds() / 86400.0
    fraction = (days % SYNODIC_MONTH_DAYS) / SYNODIC_MONTH_DAYS
    return 0.0 if fraction >= 1.0 else fraction


def _distance_to(fraction: float, target: float) -> float:
    diff = abs(fraction - target)
    return min(diff, 1.0 - diff)


def classify_phase(fraction: float, tolerance: float = PHASE_TOLERANCE) -> tuple[str, str, float] | None:
    """Return (label, significance, distance) when within tolerance of a principal phase."""
    for target, label, significance in PRINCIPAL_PHASES:
        distance = _distance_to(fraction, target)
        if distance <= tolerance:
            return label, significance, distance
    return None


def lunar_phase_name(moment: datetime) -> tuple[str, float]:
    """Eight-way phase name and synodic fraction for display."""
    fraction = phase_fraction(moment)
    phase_name = "new_moon"
    for low, high, name in PHASE_NAMES:
        if low <= fraction < high:
            phase_name = name
            break
    return phase_name, round(fraction, 4)


def calculate_lunar_phase(sun_longitude: float, moon_longitude: float) -> tuple[str, float]:
    """Phase name and fraction from the Moon's elongation from the Sun."""
    elongation = (moon_longitude - sun_longitude) % 360.0
    fraction = elongation / 360.0
    phase_name = "new_moon"
    for low, high, name in PHASE_NAMES:
        if low <= fraction < high:
            phase_name = name
            break
    return phase_name, round(fraction, 4)


def _is_closest_in_run(moment: datetime, label: str, distance: float) -> bool:
    """Whether ``moment`` is the daily sample nearest the exact phase within its in-band run.

    Neighbouring samples are recomputed from the clock, not read from the
    caller's days. Equal distances go to the earlier day.
    """
    for step in (timedelta(days=-1), timedelta(days=1)):
        neighbour = moment + step
        while True:
            match = classify_phase(phase_fraction(neighbour))
            if match is None or match[0] != label:
                break
            if match[2] < distance or (match[2] == distance and step.days < 0):
                return False
            neighbour += step
    return True


def detect_lunar_phases(days: Iterable[DailyPositions] | PositionWindow) -> list[TransitEvent]:
    """At most one principal-phase event per phase occurrence.

    Days are assumed to be sampled once a day at the same time. When
    consecutive days fall in band for the same phase, only the one closest
    to the exact phase reports it.
    """
    entries = days.entries if isinstance(days, PositionWindow) else list(days)

    events = []
    for entry in entries:
        match = classify_phase(phase_fraction(entry.moment))
        if match is None:
            continue
        label, significance, distance = match
        if not _is_closest_in_run(entry.moment, label, distance):
            continue
        moon = entry.get("moon")
        events.append(
            TransitEvent(
                timestamp=entry.moment,
                body="moon",
                label=label,
                significance=significance,
                kind="lunar_phase",
                sign=moon.sign if moon else None,
                longitude=moon.longitude if moon else None,
            )
        )
    events.sort(key=lambda e: e.timestamp)
    logger.debug("Detected %d lunar phase events", len(events))
    return events

"""Sign-change (ingress) detection between consecutive daily samples."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Sequence

from transitwire.schemas import CelestialPosition, DailyPositions, PositionWindow, TransitEvent

from transits.bodies import CORE_BODIES, SIGN_CHANGE_SIGNIFICANCE, display_name

logger = logging.getLogger(__name__)


def crossing_time(prior: CelestialPosition, prior_moment: datetime, fallback: datetime) -> datetime:
    """Interpolated instant a body left its prior sign.

    Uses the prior sample's remaining-days-in-sign, rounded to the minute;
    without it, the detection sample stands in.
    """
    if prior.duration is None:
        return fallback
    minutes = round(prior.duration.remaining_days * 24 * 60)
    return prior_moment + timedelta(minutes=minutes)


def detect_sign_change(
    body: str,
    prior: CelestialPosition,
    current: CelestialPosition,
    prior_moment: datetime,
    current_moment: datetime,
) -> TransitEvent | None:
    """Emit a sign_change event when ``body`` changed sign between two samples."""
    if prior.sign == current.sign:
        return None
    timestamp = crossing_time(prior, prior_moment, current_moment)
    # Never report a crossing outside the sampled interval
    timestamp = min(max(timestamp, prior_moment), current_moment)
    return TransitEvent(
        timestamp=timestamp,
        body=body,
        label=f"{display_name(body)} enters {current.sign}",
        significance=SIGN_CHANGE_SIGNIFICANCE.get(body, "medium"),
        kind="sign_change",
        sign=current.sign,
        longitude=current.longitude,
        duration=current.duration,
    )


def detect_day_sign_changes(
    prior_day: DailyPositions,
    day: DailyPositions,
    bodies: Sequence[str] = CORE_BODIES,
) -> list[TransitEvent]:
    events = []
    for body in bodies:
        prior = prior_day.get(body)
        current = day.get(body)
        if prior is None or current is None:
            continue
        event = detect_sign_change(body, prior, current, prior_day.moment, day.moment)
        if event is not None:
            events.append(event)
    return events


def detect_sign_changes(window: PositionWindow, bodies: Sequence[str] = CORE_BODIES) -> list[TransitEvent]:
    """All sign changes across a window, including the boundary into its first day."""
    events: list[TransitEvent] = []
    for prior_day, day in window.pairs():
        events.extend(detect_day_sign_changes(prior_day, day, bodies))
    logger.debug("Detected %d sign changes in window starting %s", len(events), window.start)
    return events

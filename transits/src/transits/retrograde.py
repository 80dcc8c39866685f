"""Retrograde and direct station detection."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Sequence

from transitwire.schemas import DailyPositions, PositionWindow, TransitEvent

from transits.bodies import STATION_BODIES, STATION_SIGNIFICANCE, display_name

logger = logging.getLogger(__name__)


def _station_moment(prior_day: DailyPositions, day: DailyPositions, body: str) -> datetime:
    """Where speeds straddle zero, interpolate the station linearly; else the detection sample."""
    v0 = prior_day.positions[body].speed_deg_day
    v1 = day.positions[body].speed_deg_day
    if v0 is None or v1 is None or v0 * v1 > 0 or (v0 == 0 and v1 == 0):
        return day.moment
    span = day.moment - prior_day.moment
    fraction = abs(v0) / (abs(v0) + abs(v1))
    return prior_day.moment + timedelta(minutes=round(span.total_seconds() / 60 * fraction))


def detect_day_stations(
    prior_day: DailyPositions,
    day: DailyPositions,
    bodies: Sequence[str] = STATION_BODIES,
) -> list[TransitEvent]:
    events = []
    for body in bodies:
        prior = prior_day.get(body)
        current = day.get(body)
        if prior is None or current is None or prior.retrograde == current.retrograde:
            continue
        if current.retrograde:
            kind, label = "retrograde", f"{display_name(body)} stations retrograde"
        else:
            kind, label = "direct", f"{display_name(body)} stations direct"
        events.append(
            TransitEvent(
                timestamp=_station_moment(prior_day, day, body),
                body=body,
                label=label,
                significance=STATION_SIGNIFICANCE.get(body, "medium"),
                kind=kind,
                sign=current.sign,
                longitude=current.longitude,
                duration=current.duration,
            )
        )
    return events


def detect_stations(window: PositionWindow, bodies: Sequence[str] = STATION_BODIES) -> list[TransitEvent]:
    """Flag every change of apparent direction across a window."""
    events: list[TransitEvent] = []
    for prior_day, day in window.pairs():
        events.extend(detect_day_stations(prior_day, day, bodies))
    logger.debug("Detected %d stations in window starting %s", len(events), window.start)
    return events

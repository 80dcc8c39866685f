"""Transit calendar: merges detector output into one ordered, deduplicated stream."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from transitwire.schemas import SIGNIFICANCE_RANK, PositionWindow, TransitEvent

from transits.ingress import detect_sign_changes
from transits.lunar import detect_lunar_phases
from transits.positions import PositionCache
from transits.retrograde import detect_stations

logger = logging.getLogger(__name__)


def deduplicate_events(events: Iterable[TransitEvent]) -> list[TransitEvent]:
    """Keep the first event for each (calendar day, body, label)."""
    seen: set[tuple[date, str, str]] = set()
    unique = []
    for event in events:
        if event.identity in seen:
            continue
        seen.add(event.identity)
        unique.append(event)
    return unique


def aggregate_events(*streams: Iterable[TransitEvent]) -> list[TransitEvent]:
    """Concatenate, sort ascending by timestamp (stable), then deduplicate."""
    merged = [event for stream in streams for event in stream]
    merged.sort(key=lambda e: e.timestamp)
    return deduplicate_events(merged)


# Overlapping query windows are merged the same way detector streams are
merge_transit_streams = aggregate_events


def prioritize_events(events: Iterable[TransitEvent]) -> list[TransitEvent]:
    """Order by significance (high first), then timestamp."""
    return sorted(events, key=lambda e: (SIGNIFICANCE_RANK[e.significance], e.timestamp))


def collect_window_events(window: PositionWindow) -> list[TransitEvent]:
    sign_changes = detect_sign_changes(window)
    lunar_phases = detect_lunar_phases(window)
    stations = detect_stations(window)
    events = aggregate_events(sign_changes, lunar_phases, stations)
    logger.info(
        "Window %s +%dd: %d sign changes, %d lunar phases, %d stations -> %d events",
        window.start,
        window.days,
        len(sign_changes),
        len(lunar_phases),
        len(stations),
        len(events),
    )
    return events


class TransitCalendar:
    """Upcoming transit events over rolling windows of cached positions."""

    def __init__(self, cache: PositionCache, window_days: int = 30) -> None:
        if window_days < 1:
            raise ValueError(f"window_days must be at least 1, got {window_days}")
        self.cache = cache
        self.window_days = window_days

    async def get_window(self, start_date: date, days: int | None = None) -> PositionWindow:
        return await self.cache.get_window(start_date, self.window_days if days is None else days)

    async def get_upcoming_transits(self, start_date: date, days: int | None = None) -> list[TransitEvent]:
        """Events detected over the window, ascending by timestamp.

        The window's first sample pair starts at the day before ``start_date``,
        so an ingress into the first day can be timestamped on that earlier day.

        Raises UpstreamFetchError if any day of the window cannot be fetched.
        """
        window = await self.get_window(start_date, days)
        return collect_window_events(window)

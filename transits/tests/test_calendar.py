"""Tests for event aggregation and the transit calendar."""

from datetime import UTC, date, datetime, timedelta

import pytest
from transitwire.schemas import TransitEvent

from transits.calendar import (
    TransitCalendar,
    aggregate_events,
    deduplicate_events,
    merge_transit_streams,
    prioritize_events,
)
from transits.errors import UpstreamFetchError
from transits.positions import PositionCache

START = date(2026, 1, 1)


def _event(hour: int, label: str = "Mars enters Leo", body: str = "mars", day: int = 5, **kwargs) -> TransitEvent:
    defaults = {"significance": "high", "kind": "sign_change"}
    defaults.update(kwargs)
    return TransitEvent(
        timestamp=datetime(2026, 1, day, hour, tzinfo=UTC),
        body=body,
        label=label,
        **defaults,
    )


def test_same_day_body_label_collapses_to_one():
    """Test same day, body and label collapse to the earliest event."""
    events = deduplicate_events([_event(3), _event(20), _event(20, label="Mars stations retrograde")])
    assert len(events) == 2
    assert events[0].timestamp.hour == 3


def test_different_days_are_distinct():
    """Test the same event on different days is kept twice."""
    events = deduplicate_events([_event(3, day=5), _event(3, day=6)])
    assert len(events) == 2


def test_aggregate_sorts_then_deduplicates():
    """Test streams are sorted by time before deduplication."""
    late = _event(22, label="Venus enters Aries", body="venus")
    early = _event(1, label="Moon enters Cancer", body="moon", significance="medium")
    dup = _event(23, label="Venus enters Aries", body="venus")
    merged = aggregate_events([late, dup], [early])
    assert [e.label for e in merged] == ["Moon enters Cancer", "Venus enters Aries"]
    assert merged[1].timestamp.hour == 22


def test_aggregate_is_stable_for_equal_timestamps():
    """Test equal timestamps keep their input order."""
    first = _event(6, label="Sun enters Leo", body="sun")
    second = _event(6, label="Full Moon", body="moon", kind="lunar_phase")
    assert aggregate_events([first, second]) == [first, second]
    assert aggregate_events([second], [first]) == [second, first]


def test_naive_timestamps_are_utc():
    """Test naive event timestamps are read as UTC."""
    event = TransitEvent(
        timestamp=datetime(2026, 1, 5, 23, 30),
        body="sun",
        label="Sun enters Aquarius",
        significance="high",
        kind="sign_change",
    )
    assert event.timestamp.tzinfo is UTC
    assert event.day == date(2026, 1, 5)


def test_prioritize_by_significance_then_time():
    """Test prioritizing orders by significance, then time."""
    low = _event(1, label="Pluto stations direct", body="pluto", significance="low", kind="direct")
    medium = _event(2, label="First Quarter", body="moon", significance="medium", kind="lunar_phase")
    high_late = _event(9, label="Sun enters Leo", body="sun")
    high_early = _event(4)
    ordered = prioritize_events([low, medium, high_late, high_early])
    assert ordered == [high_early, high_late, medium, low]


@pytest.mark.asyncio
async def test_upcoming_transits_over_fake_sky(fake_provider, greenwich):
    """Test a thirty day window over the fake sky."""
    calendar = TransitCalendar(PositionCache(fake_provider, greenwich), window_days=30)
    events = await calendar.get_upcoming_transits(START)

    timestamps = [e.timestamp for e in events]
    assert timestamps == sorted(timestamps)
    assert len({e.identity for e in events}) == len(events)

    sun_ingress = [e for e in events if e.label == "Sun enters Aquarius"]
    assert len(sun_ingress) == 1
    # Interpolated from the prior noon sample, not snapped to the detection sample
    assert sun_ingress[0].day == date(2026, 1, 21)
    assert sun_ingress[0].timestamp.hour < 12
    assert sun_ingress[0].significance == "high"

    kinds = {e.kind for e in events}
    assert "lunar_phase" in kinds
    assert "retrograde" not in kinds and "direct" not in kinds


@pytest.mark.asyncio
async def test_overlapping_windows_merge_without_duplicates(fake_provider, greenwich):
    """Test overlapping windows merge without duplicates."""
    calendar = TransitCalendar(PositionCache(fake_provider, greenwich))
    first = await calendar.get_upcoming_transits(START)
    second = await calendar.get_upcoming_transits(START + timedelta(days=15))

    shared = {e.identity for e in first} & {e.identity for e in second}
    assert shared
    merged = merge_transit_streams(first, second)
    identities = [e.identity for e in merged]
    assert len(identities) == len(set(identities))
    assert set(identities) == {e.identity for e in first} | {e.identity for e in second}
    assert len(fake_provider.calls) == 46


@pytest.mark.asyncio
async def test_upstream_failure_propagates(fake_provider, greenwich):
    """Test an upstream failure propagates out of the calendar."""
    fake_provider.fail_on.add(START + timedelta(days=3))
    calendar = TransitCalendar(PositionCache(fake_provider, greenwich))
    with pytest.raises(UpstreamFetchError):
        await calendar.get_upcoming_transits(START)


def test_window_days_must_be_positive(fake_provider, greenwich):
    """Test a zero default window is rejected."""
    with pytest.raises(ValueError):
        TransitCalendar(PositionCache(fake_provider, greenwich), window_days=0)


@pytest.mark.asyncio
async def test_ingress_into_first_day_can_fall_on_previous_day(fake_provider, greenwich):
    """Test an ingress between the previous sample and the first day keeps its real timestamp."""
    calendar = TransitCalendar(PositionCache(fake_provider, greenwich))
    events = await calendar.get_upcoming_transits(START)
    # The fake Moon moves from 26.8 Aries to 10 Taurus between the two noon samples
    ingress = [e for e in events if e.label == "Moon enters Taurus"][0]
    assert ingress.day == START - timedelta(days=1)
    assert ingress.timestamp == datetime(2025, 12, 31, 17, 47, tzinfo=UTC)


@pytest.mark.asyncio
async def test_zero_day_window_is_rejected(fake_provider, greenwich):
    """Test an explicit zero-day window raises instead of using the default."""
    calendar = TransitCalendar(PositionCache(fake_provider, greenwich))
    with pytest.raises(ValueError):
        await calendar.get_upcoming_transits(START, 0)
    assert fake_provider.calls == []

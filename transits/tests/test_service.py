"""Tests for the transit service entry points."""

from datetime import date

import pytest

from transits.service import TransitService

START = date(2026, 1, 1)


@pytest.fixture
def service(fake_provider):
    return TransitService.from_settings(provider=fake_provider)


def test_from_settings_defaults_to_greenwich(service):
    """Test the service defaults to a Greenwich observer and default caps."""
    assert service.cache.observer.latitude == 51.4769
    assert service.cache.observer.longitude == 0.0005
    assert service.calendar.window_days == 30
    assert service.impact_limit == 15
    assert service.aspect_list_limit == 8
    assert service.orbs == {"conjunction": 10.0, "opposition": 10.0, "trine": 8.0, "square": 8.0, "sextile": 6.0}


def test_from_settings_reads_environment(monkeypatch, fake_provider):
    """Test the service reads its settings from the environment."""
    monkeypatch.setenv("TRANSITS_WINDOW_DAYS", "7")
    monkeypatch.setenv("TRANSITS_IMPACT_LIMIT", "4")
    monkeypatch.setenv("TRANSITS_OBSERVER_LATITUDE", "40.7")
    service = TransitService.from_settings(provider=fake_provider)
    assert service.calendar.window_days == 7
    assert service.impact_limit == 4
    assert service.cache.observer.latitude == 40.7


@pytest.mark.asyncio
async def test_upcoming_transits_default_window(service, fake_provider):
    """Test upcoming transits over the default window."""
    events = await service.get_upcoming_transits(START)
    assert events
    # Ingresses into the first day can be interpolated back onto the day before
    assert all(date(2025, 12, 31) <= e.day <= date(2026, 1, 30) for e in events)
    assert len(fake_provider.calls) == 31


@pytest.mark.asyncio
async def test_personal_impacts_reuse_cached_days(service, fake_provider, natal_chart):
    """Test personal impacts reuse the cached days."""
    events = await service.get_upcoming_transits(START)
    calls = len(fake_provider.calls)
    impacts = await service.get_personal_transit_impacts(events, natal_chart)

    assert 0 < len(impacts) <= 15
    assert all(i.event.kind != "lunar_phase" for i in impacts)
    assert len(fake_provider.calls) == calls
    # Input order survives
    ordered = [e for e in events if e.kind != "lunar_phase"]
    assert [i.event for i in impacts] == ordered[: len(impacts)]
    assert all(i.is_approximate is False for i in impacts)


@pytest.mark.asyncio
async def test_personal_impacts_can_include_lunar(service, natal_chart):
    """Test lunar phases can be included in personal impacts."""
    events = await service.get_upcoming_transits(START)
    impacts = await service.get_personal_transit_impacts(events, natal_chart, limit=len(events), include_lunar=True)
    assert len(impacts) == len(events)
    assert any(i.event.kind == "lunar_phase" for i in impacts)


@pytest.mark.asyncio
async def test_personal_impacts_limit_and_missing_chart(service, natal_chart):
    """Test the impact limit and a missing chart."""
    events = await service.get_upcoming_transits(START)
    assert len(await service.get_personal_transit_impacts(events, natal_chart, limit=2)) == 2
    assert await service.get_personal_transit_impacts(events, None) == []
    assert await service.get_personal_transit_impacts(events, natal_chart, limit=0) == []
    with pytest.raises(ValueError):
        await service.get_personal_transit_impacts(events, natal_chart, limit=-1)


@pytest.mark.asyncio
async def test_personal_impacts_without_birth_time(service, chart_without_time):
    """Test impacts without a birth time are all approximate."""
    events = await service.get_upcoming_transits(START)
    impacts = await service.get_personal_transit_impacts(events, chart_without_time)
    assert impacts
    assert all(i.is_approximate for i in impacts)


@pytest.mark.asyncio
async def test_transit_aspects_for_a_day(service, natal_chart):
    """Test transit aspects for a single day, tightest first."""
    aspects = await service.get_transit_aspects(natal_chart, START)
    assert 0 < len(aspects) <= 8
    assert [a.orb for a in aspects] == sorted(a.orb for a in aspects)
    assert all(a.natal_body not in ("chiron", "north_node") for a in aspects)

    capped = await service.get_transit_aspects(natal_chart, START, limit=2)
    assert capped == aspects[:2]

"""Shared test fixtures: deterministic in-memory ephemeris and sample charts."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest
from transitwire.config import reset_settings_cache
from transitwire.schemas import CelestialPosition, NatalChart, Observer

from transits.provider import sign_duration

EPOCH = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

# (longitude at EPOCH, degrees per day): mean motions, all direct
LINEAR_MOTIONS: dict[str, tuple[float, float]] = {
    "sun": (280.5, 0.9856),
    "moon": (40.0, 13.1764),
    "mercury": (265.0, 1.2),
    "venus": (290.0, 1.2),
    "mars": (275.0, 0.78),
    "jupiter": (108.0, 0.083),
    "saturn": (355.0, 0.034),
    "uranus": (57.5, 0.012),
    "neptune": (359.0, 0.006),
    "pluto": (303.0, 0.004),
}


class FakeEphemerisProvider:
    """Ephemeris provider moving each body linearly from EPOCH.

    Records every requested moment in ``calls``; dates in ``fail_on`` raise
    ConnectionError and bodies in ``omit`` are left out.
    """

    def __init__(self, motions: dict[str, tuple[float, float]] | None = None) -> None:
        self.motions = dict(LINEAR_MOTIONS)
        if motions:
            self.motions.update(motions)
        self.calls: list[datetime] = []
        self.fail_on: set[date] = set()
        self.omit: set[str] = set()

    async def get_positions(self, moment: datetime, observer: Observer) -> list[CelestialPosition]:
        self.calls.append(moment)
        if moment.date() in self.fail_on:
            raise ConnectionError(f"ephemeris offline for {moment.date()}")
        days = (moment - EPOCH).total_seconds() / 86400.0
        positions = []
        for body, (start, speed) in self.motions.items():
            if body in self.omit:
                continue
            longitude = (start + speed * days) % 360.0
            positions.append(
                CelestialPosition(
                    body=body,
                    longitude=longitude,
                    retrograde=speed < 0,
                    speed_deg_day=speed,
                    duration=sign_duration(longitude, speed),
                )
            )
        return positions


def _make_chart(longitudes: dict[str, float], ascendant: float | None = None) -> NatalChart:
    return NatalChart(
        positions=[CelestialPosition(body=b, longitude=lon) for b, lon in longitudes.items()],
        ascendant=CelestialPosition(body="ascendant", longitude=ascendant) if ascendant is not None else None,
    )


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def epoch() -> datetime:
    """Instant at which the fake ephemeris reports its starting longitudes."""
    return EPOCH


@pytest.fixture
def provider_factory():
    """Build a fake ephemeris, optionally overriding (start, speed) per body."""
    return FakeEphemerisProvider


@pytest.fixture
def fake_provider(provider_factory) -> FakeEphemerisProvider:
    return provider_factory()


@pytest.fixture
def greenwich() -> Observer:
    return Observer(latitude=51.4769, longitude=0.0005, elevation=0.0)


@pytest.fixture
def chart_factory():
    """Build a natal chart from body longitudes and an optional Ascendant."""
    return _make_chart


@pytest.fixture
def natal_chart(chart_factory) -> NatalChart:
    """Chart with every core body and an Ascendant at 10 Aries."""
    return chart_factory(
        {
            "sun": 95.0,
            "moon": 200.0,
            "mercury": 80.0,
            "venus": 130.0,
            "mars": 15.0,
            "jupiter": 250.0,
            "saturn": 310.0,
            "uranus": 275.0,
            "neptune": 282.0,
            "pluto": 225.0,
            "chiron": 96.0,
            "north_node": 5.0,
        },
        ascendant=10.0,
    )


@pytest.fixture
def chart_without_time(natal_chart: NatalChart) -> NatalChart:
    return natal_chart.model_copy(update={"ascendant": None, "midheaven": None})

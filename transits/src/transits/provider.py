"""Ephemeris provider contract and the Swiss Ephemeris implementation."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Protocol, Sequence, runtime_checkable

import swisseph as swe
from transitwire.schemas import CelestialPosition, Observer, SignDuration

from transits.bodies import BODY_IDS, CORE_BODIES, longitude_to_sign
from transits.errors import UpstreamFetchError

logger = logging.getLogger(__name__)

# Below this speed a body is treated as stationary and gets no duration
_MIN_SPEED = 1e-6


@runtime_checkable
class EphemerisProvider(Protocol):
    """Supplies body positions for an instant and observer."""

    async def get_positions(self, moment: datetime, observer: Observer) -> list[CelestialPosition]:
        ...


def datetime_to_jd(dt: datetime) -> float:
    """Convert datetime to Julian Day number (UT)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    utc = dt.astimezone(UTC)
    return swe.julday(
        utc.year,
        utc.month,
        utc.day,
        utc.hour + utc.minute / 60.0 + utc.second / 3600.0,
    )


def sign_duration(longitude: float, speed: float) -> SignDuration | None:
    """Days a body spends in its sign, and days left before it leaves.

    Direct motion exits through the end of the sign, retrograde motion
    through its start.
    """
    rate = abs(speed)
    if rate < _MIN_SPEED:
        return None
    _, degree = longitude_to_sign(longitude)
    degrees_left = (30.0 - degree) if speed > 0 else degree
    return SignDuration(
        total_days=round(30.0 / rate, 4),
        remaining_days=round(degrees_left / rate, 4),
    )


class SwissEphemerisProvider:
    """Geocentric (optionally topocentric) tropical positions from pyswisseph.

    Falls back to the built-in Moshier ephemeris when Swiss data files are
    missing. A core body that cannot be computed at all fails the date.
    """

    def __init__(
        self,
        bodies: Sequence[str] = CORE_BODIES,
        ephe_path: str = "",
        topocentric: bool = False,
    ) -> None:
        unknown = [b for b in bodies if b not in BODY_IDS]
        if unknown:
            raise ValueError(f"Unknown bodies: {', '.join(unknown)}")
        self.bodies = tuple(bodies)
        self.topocentric = topocentric
        ephe_path = str(ephe_path or "").strip()
        swe.set_ephe_path(ephe_path if ephe_path else None)

    async def get_positions(self, moment: datetime, observer: Observer) -> list[CelestialPosition]:
        jd = datetime_to_jd(moment)
        flags = swe.FLG_SPEED
        if self.topocentric:
            swe.set_topo(observer.longitude, observer.latitude, observer.elevation)
            flags |= swe.FLG_TOPOCTR

        positions: list[CelestialPosition] = []
        for body_name in self.bodies:
            try:
                longitude, speed = self._calculate(body_name, jd, flags)
            except Exception as exc:
                if body_name in CORE_BODIES:
                    raise UpstreamFetchError(moment.date(), f"{body_name} unavailable: {exc}") from exc
                logger.warning("swisseph failed for %s at %s: %s", body_name, moment.isoformat(), exc)
                continue
            positions.append(
                CelestialPosition(
                    body=body_name,
                    longitude=longitude,
                    retrograde=speed < 0,
                    speed_deg_day=round(speed, 6),
                    duration=sign_duration(longitude, speed),
                )
            )
        return positions

    @staticmethod
    def _calculate(body_name: str, jd: float, flags: int) -> tuple[float, float]:
        body_id = BODY_IDS[body_name]
        try:
            result, _ = swe.calc_ut(jd, body_id, flags | swe.FLG_SWIEPH)
        except Exception as exc:
            # Moshier needs no external files
            logger.debug("Swiss data unavailable for %s, using Moshier: %s", body_name, exc)
            result, _ = swe.calc_ut(jd, body_id, flags | swe.FLG_MOSEPH)
        return result[0], result[3]

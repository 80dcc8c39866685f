"""Natal chart calculator - birth positions and whole-sign angles."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime, time, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import swisseph as swe
from transitwire.schemas import CelestialPosition, NatalCalculationMetadata, NatalChart

from transits.bodies import BODY_IDS, CORE_BODIES
from transits.provider import datetime_to_jd

logger = logging.getLogger(__name__)

NATAL_BODIES: tuple[str, ...] = (*CORE_BODIES, "north_node", "chiron", "lilith")

# Whole-sign houses: the Ascendant's sign is house 1
HOUSE_SYSTEM_CODE = b"W"

ZODIAC_MODE = "tropical"


def _calculate_position(body_name: str, jd: float) -> tuple[CelestialPosition | None, str, str | None]:
    """Calculate position for a single body.

    Returns (position, source, warning). Position can be None when unavailable.
    """
    body_id = BODY_IDS[body_name]
    try:
        result, _ = swe.calc_ut(jd, body_id, swe.FLG_SWIEPH | swe.FLG_SPEED)
        source = "swisseph"
    except Exception:
        try:
            result, _ = swe.calc_ut(jd, body_id, swe.FLG_MOSEPH | swe.FLG_SPEED)
            source = "moshier"
        except Exception as exc:
            return None, "unavailable", f"{body_name} unavailable: {exc}"

    longitude, speed = result[0], result[3]
    position = CelestialPosition(
        body=body_name,
        longitude=longitude,
        retrograde=speed < 0,
        speed_deg_day=round(speed, 6),
    )
    return position, source, None


def _resolve_timezone(name: str, warnings: list[str]) -> tuple[tzinfo, str]:
    try:
        return ZoneInfo(name), name
    except (ZoneInfoNotFoundError, ValueError):
        warnings.append(f"invalid timezone '{name}', fallback to UTC")
        return UTC, "UTC"


def calculate_natal_chart(
    birth_date: date,
    birth_time: time | None,
    birth_latitude: float,
    birth_longitude: float,
    birth_timezone: str = "UTC",
) -> NatalChart:
    """Calculate a natal chart.

    Without a birth time, positions are taken at local noon and the chart
    carries no Ascendant or Midheaven; house math downstream then falls back
    to the Sun.
    """
    warnings: list[str] = []
    tz, timezone_used = _resolve_timezone(birth_timezone, warnings)
    bt = birth_time or time(12, 0, 0)  # Noon if unknown
    birth_dt_local = datetime.combine(birth_date, bt, tzinfo=tz)
    birth_dt_utc = birth_dt_local.astimezone(UTC)
    jd = datetime_to_jd(birth_dt_local)

    positions: list[CelestialPosition] = []
    position_sources: dict[str, str] = {}
    unavailable_bodies: list[str] = []
    for body_name in NATAL_BODIES:
        pos, source, warning = _calculate_position(body_name, jd)
        position_sources[body_name] = source
        if warning:
            warnings.append(warning)
        if pos is None:
            unavailable_bodies.append(body_name)
            continue
        positions.append(pos)

    missing_core = [b for b in CORE_BODIES if b in unavailable_bodies]
    if missing_core:
        logger.warning("Natal chart missing core bodies: %s", ", ".join(missing_core))

    ascendant = midheaven = None
    if birth_time is not None:
        try:
            _, angle_result = swe.houses_ex(jd, birth_latitude, birth_longitude, HOUSE_SYSTEM_CODE)
            ascendant = CelestialPosition(body="ascendant", longitude=angle_result[0])
            midheaven = CelestialPosition(body="midheaven", longitude=angle_result[1])
        except Exception as exc:
            warnings.append(f"angle calculation failed, houses will be approximate: {exc}")
            logger.warning("Ascendant unavailable for %s: %s", birth_dt_utc.isoformat(), exc)

    metadata = NatalCalculationMetadata(
        ephemeris_engine="swisseph",
        zodiac=ZODIAC_MODE,
        house_system="whole_sign",
        birth_datetime_local=birth_dt_local.isoformat(),
        birth_datetime_utc=birth_dt_utc.isoformat(),
        timezone=timezone_used,
        time_known=birth_time is not None,
        julian_day_ut=round(float(jd), 8),
        position_sources=position_sources,
        unavailable_bodies=sorted(set(unavailable_bodies)),
        warnings=warnings,
    )
    return NatalChart(
        positions=positions,
        ascendant=ascendant,
        midheaven=midheaven,
        calculation_metadata=metadata,
    )


class SwissNatalChartProvider:
    """Natal Chart Provider backed by pyswisseph."""

    def get_natal_chart(
        self,
        birth_date: date,
        birth_time: time | None,
        latitude: float,
        longitude: float,
        timezone: str = "UTC",
    ) -> NatalChart:
        return calculate_natal_chart(birth_date, birth_time, latitude, longitude, timezone)

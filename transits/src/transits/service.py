"""Transit service: the engine's primary entry points."""

from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from transitwire.config import Settings, get_settings
from transitwire.schemas import Aspect, NatalChart, Observer, PersonalTransitImpact, TransitEvent

from transits.aspects import find_transit_aspects
from transits.calendar import TransitCalendar
from transits.impacts import get_personal_transit_impacts, personal_candidates
from transits.positions import PositionCache
from transits.provider import EphemerisProvider, SwissEphemerisProvider

logger = logging.getLogger(__name__)


class TransitService:
    """Upcoming transits and their personal reading, over one shared position cache."""

    def __init__(
        self,
        provider: EphemerisProvider,
        observer: Observer,
        window_days: int = 30,
        impact_limit: int = 15,
        aspect_list_limit: int = 8,
        orbs: dict[str, float] | None = None,
    ) -> None:
        self.cache = PositionCache(provider, observer)
        self.calendar = TransitCalendar(self.cache, window_days=window_days)
        self.impact_limit = impact_limit
        self.aspect_list_limit = aspect_list_limit
        self.orbs = orbs

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        provider: EphemerisProvider | None = None,
    ) -> TransitService:
        settings = settings or get_settings()
        if provider is None:
            provider = SwissEphemerisProvider(
                ephe_path=settings.swisseph_ephe_path,
                topocentric=settings.topocentric,
            )
        observer = Observer(
            latitude=settings.observer_latitude,
            longitude=settings.observer_longitude,
            elevation=settings.observer_elevation,
        )
        return cls(
            provider,
            observer,
            window_days=settings.window_days,
            impact_limit=settings.impact_limit,
            aspect_list_limit=settings.aspect_list_limit,
            orbs=settings.orbs.as_table(),
        )

    async def get_upcoming_transits(self, start_date: date, days: int | None = None) -> list[TransitEvent]:
        return await self.calendar.get_upcoming_transits(start_date, days)

    async def get_personal_transit_impacts(
        self,
        transits: Sequence[TransitEvent],
        natal_chart: NatalChart | None,
        limit: int | None = None,
        include_lunar: bool = False,
    ) -> list[PersonalTransitImpact]:
        """Personal impacts for the leading events, in the order given.

        Lunar phases are dropped unless ``include_lunar`` is set or they are
        all there is.
        """
        limit = self.impact_limit if limit is None else limit
        if natal_chart is None or limit <= 0:
            return get_personal_transit_impacts(transits, natal_chart, limit)
        candidates = list(transits) if include_lunar else personal_candidates(transits)
        days = sorted({event.day for event in candidates[:limit]})
        positions = await self.cache.get_days(days) if days else {}
        return get_personal_transit_impacts(candidates, natal_chart, limit, positions=positions, orbs=self.orbs)

    async def get_transit_aspects(
        self,
        natal_chart: NatalChart,
        day: date,
        limit: int | None = None,
    ) -> list[Aspect]:
        """Today's aspects view: every transiting body against the chart, tightest first."""
        entry = await self.cache.get_day(day)
        limit = self.aspect_list_limit if limit is None else limit
        return find_transit_aspects(entry.positions.values(), natal_chart, self.orbs, limit=limit)

"""Position cache and bulk window fetcher."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, date, datetime, time, timedelta
from typing import Sequence

from transitwire.schemas import DailyPositions, Observer, PositionWindow

from transits.bodies import CORE_BODIES
from transits.errors import UpstreamFetchError
from transits.provider import EphemerisProvider

logger = logging.getLogger(__name__)

# Positions are sampled once per day at noon UTC
SAMPLE_TIME = time(12, 0, tzinfo=UTC)


def sample_moment(day: date) -> datetime:
    return datetime.combine(day, SAMPLE_TIME)


class PositionCache:
    """Read-mostly cache of daily positions keyed by (date, observer).

    Each missing date costs exactly one provider call, no matter how many
    detectors or overlapping windows read it afterwards.
    """

    def __init__(
        self,
        provider: EphemerisProvider,
        observer: Observer,
        required_bodies: Sequence[str] = CORE_BODIES,
    ) -> None:
        self.provider = provider
        self.observer = observer
        self.required_bodies = tuple(required_bodies)
        self._entries: dict[tuple[date, Observer], DailyPositions] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, day: object) -> bool:
        return (day, self.observer) in self._entries

    def clear(self) -> None:
        self._entries.clear()

    async def get_day(self, day: date) -> DailyPositions:
        return (await self.get_days([day]))[day]

    async def get_days(self, days: Sequence[date]) -> dict[date, DailyPositions]:
        """Positions for every requested day, fetching only the uncached ones.

        Any failed date raises UpstreamFetchError and nothing from the batch
        is cached.
        """
        missing = sorted({d for d in days if (d, self.observer) not in self._entries})
        if missing:
            logger.debug("Fetching %d uncached days (%s .. %s)", len(missing), missing[0], missing[-1])
            results = await asyncio.gather(
                *(self.provider.get_positions(sample_moment(d), self.observer) for d in missing),
                return_exceptions=True,
            )
            fetched: dict[date, DailyPositions] = {}
            for day, result in zip(missing, results):
                if isinstance(result, UpstreamFetchError) or (
                    isinstance(result, BaseException) and not isinstance(result, Exception)
                ):
                    raise result
                if isinstance(result, Exception):
                    raise UpstreamFetchError(day, str(result) or type(result).__name__) from result
                fetched[day] = self._build_entry(day, result)
            for day, entry in fetched.items():
                self._entries[(day, self.observer)] = entry
        return {d: self._entries[(d, self.observer)] for d in days}

    async def get_window(self, start: date, days: int = 30) -> PositionWindow:
        """Daily positions for ``days`` days from ``start`` plus the day before."""
        if days < 1:
            raise ValueError(f"Window length must be at least one day, got {days}")
        previous_day = start - timedelta(days=1)
        wanted = [previous_day + timedelta(days=i) for i in range(days + 1)]
        entries = await self.get_days(wanted)
        logger.info("Position window %s +%dd ready (%d cached days)", start, days, len(self))
        return PositionWindow(
            start=start,
            days=days,
            observer=self.observer,
            previous=entries[previous_day],
            entries=[entries[d] for d in wanted[1:]],
        )

    def _build_entry(self, day: date, positions: list) -> DailyPositions:
        by_body = {p.body: p for p in positions}
        absent = [b for b in self.required_bodies if b not in by_body]
        if absent:
            raise UpstreamFetchError(day, f"missing positions for {', '.join(absent)}")
        return DailyPositions(day=day, moment=sample_moment(day), positions=by_body)

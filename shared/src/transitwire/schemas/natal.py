"""Pydantic schemas for natal chart data."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from transitwire.schemas.positions import CelestialPosition

ANGLE_BODIES = frozenset({"ascendant", "midheaven"})


class NatalCalculationMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    ephemeris_engine: str = "swisseph"
    zodiac: str = "tropical"
    house_system: str = "whole_sign"
    birth_datetime_local: str = ""
    birth_datetime_utc: str = ""
    timezone: str = "UTC"
    time_known: bool = False
    julian_day_ut: float | None = None
    position_sources: dict[str, str] = Field(default_factory=dict)
    unavailable_bodies: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class NatalChart(BaseModel):
    """Body positions at a birth instant; angles only when birth time is known."""

    model_config = ConfigDict(frozen=True)

    positions: list[CelestialPosition]
    ascendant: CelestialPosition | None = None
    midheaven: CelestialPosition | None = None
    calculation_metadata: NatalCalculationMetadata | None = None

    @model_validator(mode="after")
    def _check_points(self) -> NatalChart:
        seen: set[str] = set()
        for position in self.positions:
            if position.body in ANGLE_BODIES:
                raise ValueError(f"Angle '{position.body}' belongs in its own field, not positions")
            if position.body in seen:
                raise ValueError(f"Duplicate natal position for '{position.body}'")
            seen.add(position.body)
        if self.ascendant is not None and self.ascendant.body != "ascendant":
            raise ValueError("ascendant field must hold the 'ascendant' point")
        if self.midheaven is not None and self.midheaven.body != "midheaven":
            raise ValueError("midheaven field must hold the 'midheaven' point")
        return self

    def get(self, body: str) -> CelestialPosition | None:
        if body == "ascendant":
            return self.ascendant
        if body == "midheaven":
            return self.midheaven
        for position in self.positions:
            if position.body == body:
                return position
        return None

    def points(self) -> list[CelestialPosition]:
        """Bodies followed by any known angles, in chart order."""
        angles = [p for p in (self.ascendant, self.midheaven) if p is not None]
        return [*self.positions, *angles]

"""Pydantic schemas for body positions and position windows."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from transitwire.zodiac import SIGNS, longitude_to_sign, normalize_longitude

BodyName = Literal[
    "sun",
    "moon",
    "mercury",
    "venus",
    "mars",
    "jupiter",
    "saturn",
    "uranus",
    "neptune",
    "pluto",
    "north_node",
    "chiron",
    "lilith",
    "ascendant",
    "midheaven",
]


class Observer(BaseModel):
    """Geographic observer location; hashable so it can key caches."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    elevation: float = 0.0


class SignDuration(BaseModel):
    """How long a body spends in its current sign."""

    model_config = ConfigDict(frozen=True)

    total_days: float = Field(ge=0.0)
    remaining_days: float = Field(ge=0.0)


class CelestialPosition(BaseModel):
    """Position of a body (or chart angle) at one instant."""

    model_config = ConfigDict(frozen=True)

    body: BodyName
    longitude: float
    sign: str = ""
    retrograde: bool = False
    speed_deg_day: float | None = None
    duration: SignDuration | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_sign(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("sign") and data.get("longitude") is not None:
            data = dict(data)
            data["sign"], _ = longitude_to_sign(float(data["longitude"]))
        return data

    @field_validator("longitude")
    @classmethod
    def _wrap_longitude(cls, value: float) -> float:
        return normalize_longitude(value)

    @model_validator(mode="after")
    def _check_sign(self) -> CelestialPosition:
        expected, _ = longitude_to_sign(self.longitude)
        if self.sign not in SIGNS:
            raise ValueError(f"Unknown sign '{self.sign}'")
        elif self.sign != expected:
            raise ValueError(
                f"Sign '{self.sign}' does not contain longitude {self.longitude:.4f} ({expected})"
            )
        return self

    @property
    def degree(self) -> float:
        """Degree within the sign, 0 <= degree < 30."""
        return longitude_to_sign(self.longitude)[1]


class DailyPositions(BaseModel):
    """All body positions sampled at one instant of a calendar day."""

    model_config = ConfigDict(frozen=True)

    day: date
    moment: datetime
    positions: dict[str, CelestialPosition]

    def get(self, body: str) -> CelestialPosition | None:
        return self.positions.get(body)


class PositionWindow(BaseModel):
    """A contiguous run of daily positions plus the day before it."""

    model_config = ConfigDict(frozen=True)

    start: date
    days: int = Field(ge=0)
    observer: Observer
    previous: DailyPositions
    entries: list[DailyPositions]

    @model_validator(mode="after")
    def _check_contiguous(self) -> PositionWindow:
        if len(self.entries) != self.days:
            raise ValueError(f"Expected {self.days} entries, got {len(self.entries)}")
        prior = self.previous.day
        for entry in self.entries:
            if (entry.day - prior).days != 1:
                raise ValueError(f"Position window is not contiguous at {entry.day}")
            prior = entry.day
        return self

    @property
    def by_date(self) -> dict[date, DailyPositions]:
        lookup = {self.previous.day: self.previous}
        lookup.update({entry.day: entry for entry in self.entries})
        return lookup

    def pairs(self) -> list[tuple[DailyPositions, DailyPositions]]:
        """Consecutive (prior day, day) pairs covering the window."""
        sequence = [self.previous, *self.entries]
        return list(zip(sequence, sequence[1:]))

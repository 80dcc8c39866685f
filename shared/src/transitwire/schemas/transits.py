"""Pydantic schemas for transit events, aspects, and personal impacts."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from transitwire.schemas.positions import SignDuration

Significance = Literal["low", "medium", "high"]
TransitKind = Literal["sign_change", "retrograde", "direct", "lunar_phase"]
AspectType = Literal["conjunction", "opposition", "trine", "square", "sextile"]

SIGNIFICANCE_RANK: dict[str, int] = {"high": 0, "medium": 1, "low": 2}


class TransitEvent(BaseModel):
    """A dated sky event: sign change, station, or lunar phase."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    body: str
    label: str
    significance: Significance
    kind: TransitKind
    sign: str | None = None
    longitude: float | None = None
    duration: SignDuration | None = None

    @field_validator("timestamp")
    @classmethod
    def _require_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def day(self) -> date:
        """UTC calendar day of the event."""
        return self.timestamp.astimezone(UTC).date()

    @property
    def identity(self) -> tuple[date, str, str]:
        """Deduplication key: (calendar day, body, label)."""
        return (self.day, self.body, self.label)


class AspectDuration(BaseModel):
    """How long an aspect stays in orb at the transiting body's current speed."""

    model_config = ConfigDict(frozen=True)

    total_days: float = Field(ge=0.0)
    remaining_days: float = Field(ge=0.0)


class Aspect(BaseModel):
    """An aspect between a transiting body and a natal point."""

    model_config = ConfigDict(frozen=True)

    transit_body: str
    natal_body: str
    type: AspectType
    orb: float = Field(ge=0.0)
    intensity: float = Field(ge=0.0)
    applying: bool | None = None
    duration: AspectDuration | None = None


class HousePlacement(BaseModel):
    """Whole-sign house of a longitude relative to a chart anchor."""

    model_config = ConfigDict(frozen=True)

    house: int = Field(ge=1, le=12)
    sign: str
    meaning: str
    is_approximate: bool = False


class PersonalTransitImpact(BaseModel):
    """A transit event read against one natal chart."""

    model_config = ConfigDict(frozen=True)

    event: TransitEvent
    house: int = Field(ge=1, le=12)
    house_meaning: str
    is_approximate: bool = False
    aspect: Aspect | None = None
    impact: str
    guidance: str

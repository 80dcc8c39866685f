"""Pydantic schemas shared by the transit engine and its consumers."""

from transitwire.schemas.natal import NatalCalculationMetadata, NatalChart
from transitwire.schemas.positions import (
    BodyName,
    CelestialPosition,
    DailyPositions,
    Observer,
    PositionWindow,
    SignDuration,
)
from transitwire.schemas.transits import (
    SIGNIFICANCE_RANK,
    Aspect,
    AspectDuration,
    AspectType,
    HousePlacement,
    PersonalTransitImpact,
    Significance,
    TransitEvent,
    TransitKind,
)

__all__ = [
    "SIGNIFICANCE_RANK",
    "Aspect",
    "AspectDuration",
    "AspectType",
    "BodyName",
    "CelestialPosition",
    "DailyPositions",
    "HousePlacement",
    "NatalCalculationMetadata",
    "NatalChart",
    "Observer",
    "PersonalTransitImpact",
    "PositionWindow",
    "SignDuration",
    "Significance",
    "TransitEvent",
    "TransitKind",
]

"""Personal transit impact synthesis: house + aspect + event into guidance."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Mapping, Sequence

from transitwire.schemas import (
    Aspect,
    CelestialPosition,
    DailyPositions,
    HousePlacement,
    NatalChart,
    PersonalTransitImpact,
    TransitEvent,
)

from transits.aspects import find_best_aspect
from transits.bodies import display_name
from transits.errors import MissingNatalDataError
from transits.houses import locate_house, resolve_house_anchor
from transits.meanings import (
    ASPECT_PHRASES,
    KIND_PHRASES,
    natal_theme,
    ordinal,
    select_guidance,
    transit_verb,
)

logger = logging.getLogger(__name__)


def personal_candidates(transits: Sequence[TransitEvent]) -> list[TransitEvent]:
    """Drop lunar phases (the same for everyone) unless nothing else is left."""
    non_lunar = [t for t in transits if t.kind != "lunar_phase"]
    return non_lunar if non_lunar else list(transits)


def resolve_transit_position(
    event: TransitEvent,
    positions: Mapping[date, DailyPositions] | None = None,
) -> CelestialPosition | None:
    """Transiting body's position for an event.

    Prefers the sampled position on the event's day (it carries speed),
    falling back to the longitude captured on the event itself.
    """
    if positions is not None:
        day = positions.get(event.day)
        sampled = day.get(event.body) if day is not None else None
        # The sample can sit on the far side of an interpolated ingress
        if sampled is not None and (event.sign is None or sampled.sign == event.sign):
            return sampled
    if event.longitude is not None:
        return CelestialPosition(body=event.body, longitude=event.longitude, duration=event.duration)
    return None


def _house_clause(event: TransitEvent, placement: HousePlacement) -> str:
    body = display_name(event.body)
    where = f"your {ordinal(placement.house)} house of {placement.meaning}"
    if event.kind == "sign_change":
        return f"{body} enters {placement.sign}, moving through {where}"
    if event.kind == "lunar_phase":
        return f"The {event.label} in {placement.sign} lights up {where}"
    return f"{body} {KIND_PHRASES[event.kind]} {placement.sign}, in {where}"


def _aspect_clause(aspect: Aspect) -> str:
    natal = display_name(aspect.natal_body)
    return (
        f", {ASPECT_PHRASES[aspect.type]} your natal {natal} ({aspect.orb:.1f}° orb). "
        f"{display_name(aspect.transit_body)} {transit_verb(aspect.transit_body)} "
        f"{natal_theme(aspect.natal_body)}."
    )


def compose_impact(event: TransitEvent, placement: HousePlacement, aspect: Aspect | None) -> str:
    """One deterministic impact sentence (two when an aspect is present)."""
    sentence = _house_clause(event, placement)
    if aspect is None:
        return f"{sentence}."
    return sentence + _aspect_clause(aspect)


def synthesize_impact(
    event: TransitEvent,
    chart: NatalChart,
    position: CelestialPosition,
    orbs: Mapping[str, float] | None = None,
) -> PersonalTransitImpact:
    placement = locate_house(position.longitude, chart)
    aspect = find_best_aspect(position, chart, orbs)
    guidance = select_guidance(
        event.body,
        event.kind,
        placement.house,
        aspect.type if aspect is not None else None,
    )
    return PersonalTransitImpact(
        event=event,
        house=placement.house,
        house_meaning=placement.meaning,
        is_approximate=placement.is_approximate,
        aspect=aspect,
        impact=compose_impact(event, placement, aspect),
        guidance=guidance,
    )


def get_personal_transit_impacts(
    transits: Iterable[TransitEvent],
    natal_chart: NatalChart | None,
    limit: int,
    positions: Mapping[date, DailyPositions] | None = None,
    orbs: Mapping[str, float] | None = None,
) -> list[PersonalTransitImpact]:
    """Read up to ``limit`` events against a natal chart, preserving input order.

    Returns an empty list when there is no chart to personalise against;
    callers then show generic content.
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    if natal_chart is None or limit == 0:
        return []
    try:
        resolve_house_anchor(natal_chart)
    except MissingNatalDataError as exc:
        logger.warning("Skipping personal impacts: %s", exc)
        return []
    if natal_chart.ascendant is None:
        logger.info("No Ascendant in natal chart; houses approximated from the Sun")

    impacts: list[PersonalTransitImpact] = []
    for event in transits:
        if len(impacts) >= limit:
            break
        position = resolve_transit_position(event, positions)
        if position is None:
            logger.debug("No position for %s on %s; skipping", event.body, event.day)
            continue
        impacts.append(synthesize_impact(event, natal_chart, position, orbs))
    logger.debug("Synthesized %d personal impacts", len(impacts))
    return impacts

"""Whole-sign house placement."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from transitwire.schemas import HousePlacement, NatalChart

from transits.bodies import SIGNS, sign_index
from transits.errors import MissingNatalDataError
from transits.meanings import house_meaning

logger = logging.getLogger(__name__)

# Points that never occupy a house in the chart summary
_UNHOUSED = frozenset({"ascendant", "midheaven", "north_node", "chiron", "lilith"})


def whole_sign_house(body_longitude: float, ascendant_longitude: float) -> int:
    """House 1-12 counted in whole signs from the sign holding the Ascendant."""
    offset = (sign_index(body_longitude) - sign_index(ascendant_longitude) + 12) % 12
    return offset + 1


def resolve_house_anchor(chart: NatalChart) -> tuple[float, bool]:
    """Longitude that defines house 1, and whether it is an approximation.

    Without an Ascendant (birth time unknown) the natal Sun stands in.
    """
    if chart.ascendant is not None:
        return chart.ascendant.longitude, False
    sun = chart.get("sun")
    if sun is not None:
        return sun.longitude, True
    raise MissingNatalDataError("Natal chart has neither an Ascendant nor a Sun position")


def locate_house(body_longitude: float, chart: NatalChart) -> HousePlacement:
    anchor, approximate = resolve_house_anchor(chart)
    house = whole_sign_house(body_longitude, anchor)
    return HousePlacement(
        house=house,
        sign=SIGNS[sign_index(body_longitude)],
        meaning=house_meaning(house),
        is_approximate=approximate,
    )


@dataclass(frozen=True)
class WholeSignHouse:
    house: int
    sign: str
    bodies: tuple[str, ...]


def whole_sign_houses(chart: NatalChart) -> tuple[list[WholeSignHouse], bool]:
    """The twelve houses with their signs and occupying natal bodies."""
    anchor, approximate = resolve_house_anchor(chart)
    first = sign_index(anchor)
    houses = []
    for i in range(12):
        index = (first + i) % 12
        occupants = tuple(
            p.body for p in chart.positions
            if p.body not in _UNHOUSED and sign_index(p.longitude) == index
        )
        houses.append(WholeSignHouse(house=i + 1, sign=SIGNS[index], bodies=occupants))
    if approximate:
        logger.debug("House table anchored on the Sun; birth time unknown")
    return houses, approximate

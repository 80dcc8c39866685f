"""Astrological transit engine: sky events, aspects, houses, and personal impacts."""

from transits.aspects import angular_separation, find_best_aspect, find_transit_aspects, match_aspect
from transits.calendar import TransitCalendar, aggregate_events, merge_transit_streams
from transits.errors import MissingNatalDataError, TransitEngineError, UpstreamFetchError
from transits.houses import locate_house, whole_sign_house
from transits.impacts import get_personal_transit_impacts
from transits.positions import PositionCache
from transits.service import TransitService

__all__ = [
    "MissingNatalDataError",
    "PositionCache",
    "TransitCalendar",
    "TransitEngineError",
    "TransitService",
    "UpstreamFetchError",
    "aggregate_events",
    "angular_separation",
    "find_best_aspect",
    "find_transit_aspects",
    "get_personal_transit_impacts",
    "locate_house",
    "match_aspect",
    "merge_transit_streams",
    "whole_sign_house",
]

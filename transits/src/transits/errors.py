"""Exceptions raised by the transit engine."""

from __future__ import annotations

from datetime import date


class TransitEngineError(Exception):
    """Base class for transit engine failures."""


class UpstreamFetchError(TransitEngineError):
    """The ephemeris provider could not supply positions for a date.

    Aborts the whole window: downstream detectors need an unbroken daily
    sequence. The engine never retries; retry policy belongs to the caller.
    """

    def __init__(self, day: date, reason: str = "") -> None:
        self.day = day
        self.reason = reason
        message = f"Ephemeris fetch failed for {day.isoformat()}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MissingNatalDataError(TransitEngineError):
    """A natal chart lacks the points needed to anchor house math."""

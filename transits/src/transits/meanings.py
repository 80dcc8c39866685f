"""Fixed interpretive tables: house meanings, body themes, and guidance phrase banks.

Everything here is process-wide constant data wrapped in read-only
mappings. Lookups fall back compositionally, so every (body, house)
combination has guidance even without a curated entry.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from transits.bodies import display_name

HOUSE_MEANINGS: Mapping[int, str] = MappingProxyType({
    1: "self and identity",
    2: "money and values",
    3: "communication and learning",
    4: "home and family",
    5: "creativity and romance",
    6: "work and health",
    7: "partnerships",
    8: "transformation and shared resources",
    9: "travel and philosophy",
    10: "career and reputation",
    11: "friendships and community",
    12: "spirituality and the subconscious",
})

# What each house asks of you, appended to body guidance
HOUSE_ACTIONS: Mapping[int, str] = MappingProxyType({
    1: "put yourself first and refresh how you show up",
    2: "review your budget and what you truly value",
    3: "say what you mean and follow up on conversations",
    4: "tend to your home and the people closest to you",
    5: "make room for play, romance, and creative projects",
    6: "tighten your routines and look after your body",
    7: "meet your partners halfway and clarify agreements",
    8: "look honestly at shared money, intimacy, and what needs to end",
    9: "study, travel, or widen your perspective",
    10: "take visible steps toward your professional goals",
    11: "reach out to friends and invest in your community",
    12: "rest, reflect, and listen to your inner life",
})

TRANSIT_VERBS: Mapping[str, str] = MappingProxyType({
    "sun": "is lighting up",
    "moon": "is stirring",
    "mercury": "is speaking to",
    "venus": "is gently lifting",
    "mars": "is pushing",
    "jupiter": "is opening doors around",
    "saturn": "is grounding",
    "uranus": "is shaking up",
    "neptune": "is softening",
    "pluto": "is quietly reshaping",
})

NATAL_THEMES: Mapping[str, str] = MappingProxyType({
    "sun": "your sense of self",
    "moon": "your emotions",
    "mercury": "how you think and communicate",
    "venus": "your relationships",
    "mars": "your drive and ambition",
    "jupiter": "your path to growth",
    "saturn": "your sense of responsibility",
    "uranus": "your need for freedom",
    "neptune": "your inner world",
    "pluto": "your personal power",
    "ascendant": "how you show up in the world",
    "midheaven": "your public life and career",
})

# Opening clause of guidance, by transiting body
BODY_GUIDANCE: Mapping[str, str] = MappingProxyType({
    "sun": "Step into the spotlight:",
    "moon": "Check in with your feelings:",
    "mercury": "Think before you commit:",
    "venus": "Lead with warmth:",
    "mars": "Channel the extra drive:",
    "jupiter": "Say yes to growth:",
    "saturn": "Build slowly and deliberately:",
    "uranus": "Stay flexible:",
    "neptune": "Trust your intuition but verify:",
    "pluto": "Let go of what no longer fits:",
})

ASPECT_PHRASES: Mapping[str, str] = MappingProxyType({
    "conjunction": "merging with",
    "opposition": "opposing",
    "trine": "flowing with",
    "square": "challenging",
    "sextile": "supporting",
})

KIND_PHRASES: Mapping[str, str] = MappingProxyType({
    "sign_change": "moves through",
    "retrograde": "turns retrograde in",
    "direct": "turns direct in",
    "lunar_phase": "peaks in",
})

# Curated guidance for notable (body, event kind, aspect type) combinations
ASPECT_GUIDANCE: Mapping[tuple[str, str, str], str] = MappingProxyType({
    ("sun", "sign_change", "conjunction"): "A fresh personal cycle begins; set an intention you can act on this month.",
    ("moon", "lunar_phase", "conjunction"): "Emotions run close to the surface; name what you need before reacting.",
    ("moon", "lunar_phase", "opposition"): "Something reaches its peak; notice what wants to be released.",
    ("mercury", "retrograde", "conjunction"): "Revisit old plans and double-check messages before sending them.",
    ("mercury", "retrograde", "square"): "Expect crossed wires; slow down and confirm the details.",
    ("mercury", "retrograde", "opposition"): "Misunderstandings with others are likely; listen twice, speak once.",
    ("mercury", "direct", "conjunction"): "Stalled conversations start moving; send the message you held back.",
    ("venus", "retrograde", "conjunction"): "Reassess what and whom you value before making new commitments.",
    ("venus", "sign_change", "trine"): "Connection comes easily; reach out to someone you appreciate.",
    ("mars", "sign_change", "square"): "Frustration is fuel; pick one hard task and finish it.",
    ("mars", "retrograde", "square"): "Pushing harder backfires now; rework your strategy instead.",
    ("mars", "sign_change", "opposition"): "Others may push back; choose your battles deliberately.",
    ("jupiter", "sign_change", "conjunction"): "A door opens in a core part of life; walk through it with a plan.",
    ("jupiter", "sign_change", "trine"): "Luck favours the prepared; apply for the bigger opportunity.",
    ("saturn", "sign_change", "conjunction"): "A serious chapter starts; commit to the long game and set firm boundaries.",
    ("saturn", "sign_change", "square"): "Pressure reveals weak foundations; repair them rather than work around them.",
    ("saturn", "retrograde", "conjunction"): "Review your commitments and drop the ones you keep out of obligation.",
    ("saturn", "direct", "conjunction"): "Lessons click into place; formalise what you have learned.",
    ("uranus", "sign_change", "opposition"): "Expect surprises through other people; stay open to a new arrangement.",
    ("neptune", "sign_change", "square"): "Boundaries blur; check the facts before trusting a promise.",
    ("pluto", "sign_change", "conjunction"): "Deep change is underway; let an outdated version of yourself go.",
    ("pluto", "direct", "square"): "Power struggles surface; choose transformation over control.",
})


def house_meaning(house: int) -> str:
    if house not in HOUSE_MEANINGS:
        raise ValueError(f"House must be between 1 and 12, got {house}")
    return HOUSE_MEANINGS[house]


def ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def transit_verb(body: str) -> str:
    return TRANSIT_VERBS.get(body, "is influencing")


def natal_theme(body: str) -> str:
    return NATAL_THEMES.get(body, f"your {display_name(body).lower()} energy")


def select_guidance(body: str, kind: str, house: int, aspect_type: str | None = None) -> str:
    """Guidance for an event: curated (body, kind, aspect) entry, else (body, house) composition."""
    if aspect_type is not None:
        curated = ASPECT_GUIDANCE.get((body, kind, aspect_type))
        if curated:
            return curated
    opening = BODY_GUIDANCE.get(body, f"Work with {display_name(body)}:")
    action = HOUSE_ACTIONS.get(house)
    if action is None:
        raise ValueError(f"House must be between 1 and 12, got {house}")
    return f"{opening} {action}."

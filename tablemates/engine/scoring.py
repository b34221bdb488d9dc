from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

import pandas as pd

from ..catalog.models import Venue
from .config import DEFAULT_ENGINE_CONFIG
from .intervals import contains
from .models import GroupCandidate, Interval, Participant

logger = logging.getLogger(__name__)

# Cheaper venues score higher
PRICE_SCORES: dict[int, float] = {1: 1.0, 2: 0.75, 3: 0.5, 4: 0.25}
UNKNOWN_PRICE_SCORE = 0.5

COMPONENTS = ("availability", "preference", "rating", "price")


def availability_score(participants: Sequence[Participant], slot: Interval) -> float:
    """Share of the group with one window covering the whole slot."""
    if not participants:
        return 0.0
    available = sum(
        1
        for p in participants
        if any(contains(w.start, w.end, slot.start, slot.end) for w in p.windows)
    )
    return available / len(participants)


def group_preferences(participants: Sequence[Participant]) -> frozenset[str]:
    union: frozenset[str] = frozenset()
    for p in participants:
        union |= p.preferences
    return union


def preference_score(venue: Venue, preferences: frozenset[str]) -> float:
    if not preferences:
        return 0.0
    categories = {title.strip().casefold() for title in venue.category_titles}
    return len(categories & preferences) / len(preferences)


def rating_score(venue: Venue) -> float:
    return venue.rating / 5.0


def price_score(venue: Venue) -> float:
    tier = venue.price_tier
    if tier is None:
        return UNKNOWN_PRICE_SCORE
    return PRICE_SCORES[tier]


def _combine(components: dict[str, float], weights: Mapping[str, float]) -> float:
    return sum(weights[name] * components[name] for name in COMPONENTS)


def score_group_candidate(
    venue: Venue,
    participants: Sequence[Participant],
    slot: Interval,
    weights: Mapping[str, float] | None = None,
) -> float:
    """Weighted sum of availability, preference, rating and price sub-scores."""
    w = weights or DEFAULT_ENGINE_CONFIG.weights
    components = {
        "availability": availability_score(participants, slot),
        "preference": preference_score(venue, group_preferences(participants)),
        "rating": rating_score(venue),
        "price": price_score(venue),
    }
    return _combine(components, w)


def rank_group_candidates(
    venues: Sequence[Venue],
    participants: Sequence[Participant],
    slot: Interval,
    weights: Mapping[str, float] | None = None,
    limit: int = DEFAULT_ENGINE_CONFIG.top_n,
) -> list[GroupCandidate]:
    """
    Score every venue for ``slot`` and return the best ``limit`` candidates.

    Sorting is stable, so equally scored venues keep their input order.
    """
    if not venues:
        return []

    w = weights or DEFAULT_ENGINE_CONFIG.weights
    preferences = group_preferences(participants)

    frame = pd.DataFrame(
        {
            "availability": availability_score(participants, slot),
            "preference": [preference_score(v, preferences) for v in venues],
            "rating": [rating_score(v) for v in venues],
            "price": [price_score(v) for v in venues],
        }
    )
    frame["score"] = sum(w[name] * frame[name] for name in COMPONENTS)
    top = frame.sort_values("score", ascending=False, kind="stable").head(limit)

    member_ids = tuple(p.id for p in participants)
    candidates = [
        GroupCandidate(
            venue=venues[idx],
            participants=member_ids,
            best_time_slot=slot,
            group_score=min(max(float(score), 0.0), 1.0),
        )
        for idx, score in top["score"].items()
    ]
    logger.debug("Ranked %d of %d venues for slot %s", len(candidates), len(venues), slot.start)
    return candidates

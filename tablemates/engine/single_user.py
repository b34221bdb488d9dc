from __future__ import annotations

import logging
from collections.abc import Sequence

from ..catalog.models import Venue
from .models import Participant, RecommendedOuting
from .venue_hours import venue_open_during

logger = logging.getLogger(__name__)


def matches_preferences(venue: Venue, preferences: frozenset[str]) -> bool:
    """True when at least one venue category is a loved or want-to-try cuisine."""
    categories = {title.strip().casefold() for title in venue.category_titles}
    return bool(categories & preferences)


def recommend_outings(participant: Participant, venues: Sequence[Venue]) -> list[RecommendedOuting]:
    """
    One outing per (window, venue) pair where the venue is open during the
    window and serves something the person likes.

    Order follows the windows chronologically, then the venues as given.
    """
    preferences = participant.preferences
    liked = [v for v in venues if matches_preferences(v, preferences)]

    outings: list[RecommendedOuting] = []
    for window in sorted(participant.windows, key=lambda w: (w.start, w.end)):
        for venue in liked:
            if venue_open_during(venue, window):
                outings.append(RecommendedOuting(venue=venue, date=window.date, window=window))

    logger.info(
        "Recommended %d outings for %s from %d windows and %d venues",
        len(outings),
        participant.id,
        len(participant.windows),
        len(venues),
    )
    return outings

"""Opening-hours matching between venue spans and availability windows."""
from __future__ import annotations

from typing import NamedTuple

from ..catalog.models import Venue, VenueOpenSpan
from .intervals import TimeOfDay, normalize_overnight, overlap
from .models import AvailabilityWindow


class OpenOverlap(NamedTuple):
    """Overlap in minutes since the window's midnight; may run past 1440."""

    start_minute: int
    end_minute: int

    @property
    def start_time(self) -> TimeOfDay:
        return TimeOfDay(self.start_minute % 1440)

    @property
    def end_time(self) -> TimeOfDay:
        return TimeOfDay(self.end_minute % 1440)


def span_minutes(span: VenueOpenSpan) -> tuple[int, int]:
    return normalize_overnight(span.start_time, span.end_time)


def window_minutes(window: AvailabilityWindow) -> tuple[int, int]:
    return normalize_overnight(TimeOfDay.of(window.start), TimeOfDay.of(window.end))


def open_overlap(span: VenueOpenSpan, window: AvailabilityWindow) -> OpenOverlap | None:
    """
    Part of ``window`` during which the venue is open according to ``span``.

    Weekdays must match exactly. The portion of an overnight span past
    midnight still belongs to the span's own weekday, so a Friday 22:00-02:00
    span never matches a Saturday 00:30 window.
    """
    if span.weekday != window.weekday:
        return None
    shared = overlap(*span_minutes(span), *window_minutes(window))
    if shared is None:
        return None
    return OpenOverlap(*shared)


def is_open_during(span: VenueOpenSpan, window: AvailabilityWindow) -> bool:
    return open_overlap(span, window) is not None


def venue_open_during(venue: Venue, window: AvailabilityWindow) -> bool:
    return any(is_open_during(span, window) for span in venue.open_spans)

"""Half-open interval primitives and the time-of-day value type."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import TypeVar

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 1440

T = TypeVar("T")


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Minutes since midnight, 0..1439."""

    minutes: int

    @classmethod
    def parse(cls, raw: str | None) -> TimeOfDay:
        """Parse ``"HHMM"`` or ``"HH:MM"``.

        Anything unparseable becomes midnight rather than an error, so a venue
        with garbled hours is still listed.
        """
        text = (raw or "").strip().replace(":", "")
        if text.isdigit() and len(text) in (3, 4):
            text = text.zfill(4)
            hours, minutes = int(text[:2]), int(text[2:])
            if hours < 24 and minutes < 60:
                return cls(hours * 60 + minutes)
        logger.warning("Unparseable time of day %r, treating it as 00:00", raw)
        return cls(0)

    @classmethod
    def of(cls, moment: datetime | time) -> TimeOfDay:
        return cls(moment.hour * 60 + moment.minute)

    def format(self) -> str:
        hours, minutes = divmod(self.minutes % MINUTES_PER_DAY, 60)
        return f"{hours:02d}{minutes:02d}"

    def to_time(self) -> time:
        hours, minutes = divmod(self.minutes % MINUTES_PER_DAY, 60)
        return time(hours, minutes)

    def __str__(self) -> str:
        hours, minutes = divmod(self.minutes % MINUTES_PER_DAY, 60)
        return f"{hours:02d}:{minutes:02d}"


def normalize_overnight(start: TimeOfDay, end: TimeOfDay) -> tuple[int, int]:
    """Return ``(start, end)`` in minutes, pushing ``end`` past midnight when it
    does not come after ``start``."""
    end_minutes = end.minutes
    if end_minutes <= start.minutes:
        end_minutes += MINUTES_PER_DAY
    return start.minutes, end_minutes


def wrap_overnight(start: datetime, end: datetime) -> datetime:
    """Datetime flavour of :func:`normalize_overnight`; returns the adjusted end."""
    if end <= start:
        return end + timedelta(days=1)
    return end


def overlap(a_start: T, a_end: T, b_start: T, b_end: T) -> tuple[T, T] | None:
    """Intersection of ``[a_start, a_end)`` and ``[b_start, b_end)``.

    A single shared instant is not an overlap.
    """
    latest_start = max(a_start, b_start)  # type: ignore[type-var]
    earliest_end = min(a_end, b_end)  # type: ignore[type-var]
    if latest_start < earliest_end:
        return latest_start, earliest_end
    return None


def overlaps(a_start: T, a_end: T, b_start: T, b_end: T) -> bool:
    return overlap(a_start, a_end, b_start, b_end) is not None


def contains(outer_start: T, outer_end: T, inner_start: T, inner_end: T) -> bool:
    return outer_start <= inner_start and outer_end >= inner_end  # type: ignore[operator]


def sunday_weekday(day: date) -> int:
    """Weekday with 0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


class RoundingMode(str, Enum):
    half_hour = "half_hour"
    five_minute_floor = "five_minute_floor"


def round_to_half_hour(moment: datetime) -> datetime:
    base = moment.replace(minute=0, second=0, microsecond=0)
    if moment.minute < 15:
        return base
    if moment.minute < 45:
        return base.replace(minute=30)
    return base + timedelta(hours=1)


def floor_to_five_minutes(moment: datetime) -> datetime:
    return moment.replace(minute=moment.minute - moment.minute % 5, second=0, microsecond=0)


def round_instant(moment: datetime, mode: RoundingMode = RoundingMode.half_hour) -> datetime:
    if mode is RoundingMode.five_minute_floor:
        return floor_to_five_minutes(moment)
    return round_to_half_hour(moment)

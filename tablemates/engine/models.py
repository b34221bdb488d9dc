from __future__ import annotations

import datetime as dt
from datetime import datetime, time, timedelta

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..catalog.models import Venue

ALL_WEEKDAYS = frozenset(range(7))


class Interval(BaseModel):
    """Half-open ``[start, end)`` between two instants."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _end_after_start(self) -> Interval:
        if self.end <= self.start:
            raise ValueError("interval end must be after its start")
        return self

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


class DailyAvailabilityConfig(BaseModel):
    """When a person is willing to go out; ``preferred_weekdays`` uses 0=Sunday.

    ``daily_end`` at or before ``daily_start`` means the range runs past
    midnight, e.g. 17:00-00:00.
    """

    model_config = ConfigDict(frozen=True)

    preferred_weekdays: frozenset[int] = ALL_WEEKDAYS
    daily_start: time = time(17, 0)
    daily_end: time = time(0, 0)

    @field_validator("preferred_weekdays")
    @classmethod
    def _weekdays_in_range(cls, value: frozenset[int]) -> frozenset[int]:
        if not value <= ALL_WEEKDAYS:
            raise ValueError("weekdays must be between 0 (Sunday) and 6 (Saturday)")
        return value


class AvailabilityWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: dt.date
    weekday: int = Field(..., ge=0, le=6)
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


class Participant(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    windows: tuple[AvailabilityWindow, ...] = ()
    loved_cuisines: frozenset[str] = frozenset()
    want_to_try_cuisines: frozenset[str] = frozenset()

    @property
    def preferences(self) -> frozenset[str]:
        """Loved and want-to-try cuisines, case-folded for matching."""
        return frozenset(
            c.strip().casefold() for c in self.loved_cuisines | self.want_to_try_cuisines
        )

    def windows_on(self, day: dt.date) -> list[AvailabilityWindow]:
        return [w for w in self.windows if w.date == day]


class RecommendedOuting(BaseModel):
    model_config = ConfigDict(frozen=True)

    venue: Venue
    date: dt.date
    window: AvailabilityWindow


class GroupCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    venue: Venue
    participants: tuple[str, ...]
    best_time_slot: Interval
    group_score: float = Field(..., ge=0.0, le=1.0)


class GroupPlan(BaseModel):
    """Best slot for a date plus the venues ranked for it."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    slot: Interval | None = None
    candidates: tuple[GroupCandidate, ...] = ()

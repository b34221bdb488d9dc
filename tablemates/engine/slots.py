"""
Meeting-slot search for a group on one date.

Two policies sit behind :func:`find_slot`:

* ``discretized_threshold`` samples the day on a fixed grid, counts how many
  participants are free at each point and accepts the shortest, best-ranked
  interval whose mean coverage clears ``threshold * participants``. It always
  answers with something once there is a grid, falling back to the single
  best-covered point.
* ``exact_intersection`` walks the initiator's windows and intersects them
  with every other participant's windows on the same date, each pairwise
  intersection lasting at least ``min_duration_minutes``. It answers ``None``
  when nobody overlaps.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime, timedelta
from enum import Enum

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config import DEFAULT_ENGINE_CONFIG
from .intervals import RoundingMode, overlap, round_instant
from .models import Interval, Participant

logger = logging.getLogger(__name__)

_MINUTE = timedelta(minutes=1)


class SlotPolicy(str, Enum):
    exact_intersection = "exact_intersection"
    discretized_threshold = "discretized_threshold"


class SlotSearch(BaseModel):
    model_config = ConfigDict(frozen=True)

    policy: SlotPolicy = SlotPolicy.discretized_threshold
    min_duration_minutes: int = Field(default=DEFAULT_ENGINE_CONFIG.min_duration_minutes, gt=0)
    max_duration_minutes: int = Field(default=DEFAULT_ENGINE_CONFIG.max_duration_minutes, gt=0)
    granularity_minutes: int = Field(default=DEFAULT_ENGINE_CONFIG.granularity_minutes, gt=0, le=60)
    threshold: float = Field(default=DEFAULT_ENGINE_CONFIG.discovery_threshold, ge=0.0, le=1.0)
    rounding: RoundingMode = DEFAULT_ENGINE_CONFIG.rounding

    @model_validator(mode="after")
    def _durations_ordered(self) -> SlotSearch:
        if self.max_duration_minutes < self.min_duration_minutes:
            raise ValueError("max_duration_minutes must not be below min_duration_minutes")
        return self


def _day_bounds(participants: Sequence[Participant], target_date: date) -> tuple[datetime, datetime]:
    day_start = datetime.combine(target_date, datetime.min.time())
    day_end = day_start + timedelta(days=1)
    for participant in participants:
        for window in participant.windows_on(target_date):
            day_start = min(day_start, window.start)
            day_end = max(day_end, window.end)
    return day_start, day_end


def coverage_grid(
    participants: Sequence[Participant],
    target_date: date,
    granularity_minutes: int,
) -> tuple[datetime, np.ndarray, np.ndarray, int]:
    """
    Sample the target date every ``granularity_minutes``.

    Returns ``(day_start, offsets, scores, total_minutes)`` where ``offsets`` are
    minutes from ``day_start`` and ``scores[i]`` is the number of participants
    with a window containing that instant.
    """
    day_start, day_end = _day_bounds(participants, target_date)
    total_minutes = int((day_end - day_start) / _MINUTE)
    offsets = np.arange(0, total_minutes, granularity_minutes)

    scores = np.zeros(offsets.size, dtype=np.int64)
    for participant in participants:
        free = np.zeros(offsets.size, dtype=bool)
        for window in participant.windows_on(target_date):
            lo = (window.start - day_start) / _MINUTE
            hi = (window.end - day_start) / _MINUTE
            free |= (offsets >= lo) & (offsets < hi)
        scores += free
    return day_start, offsets, scores, total_minutes


def _rounded_slot(start: datetime, duration: int, search: SlotSearch) -> Interval:
    """
    Round ``start`` for display; the end stays at ``start + duration`` but never
    falls before one grid step past the rounded start.
    """
    rounded = round_instant(start, search.rounding)
    end = max(
        start + timedelta(minutes=duration),
        rounded + timedelta(minutes=search.granularity_minutes),
    )
    return Interval(start=rounded, end=end)


def find_group_slot(
    participants: Sequence[Participant],
    target_date: date,
    search: SlotSearch,
) -> Interval | None:
    """Discretized threshold search; ``None`` only without participants or grid."""
    if not participants:
        return None

    step = search.granularity_minutes
    day_start, offsets, scores, total_minutes = coverage_grid(participants, target_date, step)
    if offsets.size == 0:
        return None

    # score descending, then earliest time
    ranked = np.lexsort((offsets, -scores))
    prefix = np.concatenate(([0], np.cumsum(scores)))
    required = search.threshold * len(participants)
    indices = np.arange(offsets.size)

    for duration in range(search.min_duration_minutes, search.max_duration_minutes + 1, step):
        samples = -(-duration // step)
        fits = offsets + duration <= total_minutes
        sums = np.zeros(offsets.size, dtype=np.int64)
        sums[fits] = prefix[indices[fits] + samples] - prefix[indices[fits]]
        accepted = fits & (sums / samples >= required)
        hits = ranked[accepted[ranked]]
        if hits.size:
            start = day_start + timedelta(minutes=int(offsets[hits[0]]))
            logger.info(
                "Group slot at %s for %d minutes clears threshold %.2f",
                start,
                duration,
                search.threshold,
            )
            return _rounded_slot(start, duration, search)

    best = day_start + timedelta(minutes=int(offsets[ranked[0]]))
    logger.info(
        "No slot clears threshold %.2f for %d participants, falling back to %s",
        search.threshold,
        len(participants),
        best,
    )
    return _rounded_slot(best, search.min_duration_minutes, search)


def _shared_with(
    others: Sequence[Participant],
    day: date,
    span: tuple[datetime, datetime],
    minimum: timedelta,
) -> tuple[datetime, datetime] | None:
    """Narrow ``span`` by each participant in turn, backtracking over their windows."""
    if not others:
        return span
    participant, rest = others[0], others[1:]
    for window in participant.windows_on(day):
        shared = overlap(span[0], span[1], window.start, window.end)
        if shared is None or shared[1] - shared[0] < minimum:
            continue
        narrowed = _shared_with(rest, day, shared, minimum)
        if narrowed is not None:
            return narrowed
    return None


def find_common_slot(
    participants: Sequence[Participant],
    min_duration_minutes: int,
    target_date: date | None = None,
) -> Interval | None:
    """
    First intersection of the initiator's windows (``participants[0]``) with
    every other participant, or ``None``.

    The returned interval's start is the meeting time; its end is where the
    common free time runs out.
    """
    if not participants:
        return None

    minimum = timedelta(minutes=min_duration_minutes)
    initiator, others = participants[0], list(participants[1:])
    for window in initiator.windows:
        if target_date is not None and window.date != target_date:
            continue
        if window.duration < minimum:
            continue
        span = _shared_with(others, window.date, (window.start, window.end), minimum)
        if span is not None:
            return Interval(start=span[0], end=span[1])

    logger.info("No common slot of %d minutes for %d participants", min_duration_minutes, len(participants))
    return None


def find_slot(
    participants: Sequence[Participant],
    target_date: date,
    search: SlotSearch,
) -> Interval | None:
    if search.policy is SlotPolicy.exact_intersection:
        return find_common_slot(participants, search.min_duration_minutes, target_date)
    return find_group_slot(participants, target_date, search)

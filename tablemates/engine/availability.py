from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Protocol

from .config import DEFAULT_ENGINE_CONFIG
from .intervals import overlaps, sunday_weekday, wrap_overnight
from .models import AvailabilityWindow, DailyAvailabilityConfig, Interval

logger = logging.getLogger(__name__)


class BusyIntervalProvider(Protocol):
    """Calendar collaborator returning busy time between two instants."""

    def __call__(self, range_start: datetime, range_end: datetime) -> list[Interval]: ...


def day_range(day: date, config: DailyAvailabilityConfig) -> tuple[datetime, datetime]:
    """The ``[start, end)`` a person is willing to go out on ``day``."""
    day_start = datetime.combine(day, config.daily_start)
    day_end = wrap_overnight(day_start, datetime.combine(day, config.daily_end))
    return day_start, day_end


def free_windows_for_day(
    day: date,
    busy: list[Interval],
    config: DailyAvailabilityConfig,
) -> list[AvailabilityWindow]:
    """Sweep ``busy`` (sorted by start) over one day's range and emit the gaps."""
    weekday = sunday_weekday(day)
    day_start, day_end = day_range(day, config)

    windows: list[AvailabilityWindow] = []
    cursor = day_start
    for interval in busy:
        if not overlaps(interval.start, interval.end, day_start, day_end):
            continue
        if interval.start > cursor:
            windows.append(
                AvailabilityWindow(date=day, weekday=weekday, start=cursor, end=interval.start)
            )
        cursor = max(cursor, interval.end)

    if cursor < day_end:
        windows.append(AvailabilityWindow(date=day, weekday=weekday, start=cursor, end=day_end))
    return windows


def generate_availability(
    busy: Iterable[Interval],
    config: DailyAvailabilityConfig,
    today: date,
    days: int = DEFAULT_ENGINE_CONFIG.horizon_days,
) -> list[AvailabilityWindow]:
    """
    Free windows for each preferred weekday in the ``days`` days starting at ``today``.

    Busy intervals may arrive in any order; the result only depends on their
    content.
    """
    ordered = sorted(busy, key=lambda b: (b.start, b.end))

    windows: list[AvailabilityWindow] = []
    for offset in range(days):
        day = today + timedelta(days=offset)
        if sunday_weekday(day) not in config.preferred_weekdays:
            continue
        windows.extend(free_windows_for_day(day, ordered, config))

    logger.debug(
        "Generated %d availability windows from %d busy intervals", len(windows), len(ordered)
    )
    return windows


def collect_availability(
    provider: BusyIntervalProvider,
    config: DailyAvailabilityConfig,
    today: date,
    days: int = DEFAULT_ENGINE_CONFIG.horizon_days,
) -> list[AvailabilityWindow]:
    """Ask ``provider`` for busy time over the horizon, then generate windows."""
    range_start = datetime.combine(today, datetime.min.time())
    # one extra day so overnight ranges on the last day see their busy time
    range_end = range_start + timedelta(days=days + 1)
    return generate_availability(provider(range_start, range_end), config, today, days)

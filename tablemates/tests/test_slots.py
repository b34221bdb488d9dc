from datetime import date, datetime, time, timedelta

import pytest
from pydantic import ValidationError

from tablemates.engine.intervals import RoundingMode, sunday_weekday
from tablemates.engine.models import AvailabilityWindow, Participant
from tablemates.engine.slots import (
    SlotPolicy,
    SlotSearch,
    coverage_grid,
    find_common_slot,
    find_group_slot,
    find_slot,
)

DAY = date(2026, 10, 23)


def _at(clock: str, day: date = DAY) -> datetime:
    return datetime.combine(day, time.fromisoformat(clock))


def _participant(pid: str, *spans: tuple[str, str], day: date = DAY) -> Participant:
    windows = []
    for start, end in spans:
        start_at, end_at = _at(start, day), _at(end, day)
        if end_at <= start_at:
            end_at += timedelta(days=1)
        windows.append(
            AvailabilityWindow(date=day, weekday=sunday_weekday(day), start=start_at, end=end_at)
        )
    return Participant(id=pid, windows=tuple(windows))


def _search(**overrides) -> SlotSearch:
    params = {"min_duration_minutes": 60, "max_duration_minutes": 120, "threshold": 0.75}
    params.update(overrides)
    return SlotSearch(**params)


class TestGroupSlot:
    def test_pairwise_overlap(self):
        people = [_participant("a", ("18:00", "20:00")), _participant("b", ("19:00", "21:00"))]

        slot = find_group_slot(people, DAY, _search())

        assert (slot.start, slot.end) == (_at("19:00"), _at("20:00"))

    def test_disjoint_windows_fall_back_to_best_point(self):
        people = [_participant("a", ("10:00", "11:00")), _participant("b", ("14:00", "15:00"))]

        slot = find_group_slot(people, DAY, _search())

        assert (slot.start, slot.end) == (_at("10:00"), _at("11:00"))

    def test_threshold_changes_the_answer(self):
        people = [
            _participant("a", ("18:00", "20:00")),
            _participant("b", ("18:00", "20:00")),
            _participant("c", ("19:30", "19:40")),
        ]

        broad = find_group_slot(people, DAY, _search(threshold=0.5))
        strict = find_group_slot(people, DAY, _search(threshold=1.0))

        # 18:00-19:00 keeps two of three people free the whole hour
        assert (broad.start, broad.end) == (_at("18:00"), _at("19:00"))
        # nothing reaches full attendance, so the best-covered point wins
        assert (strict.start, strict.end) == (_at("19:30"), _at("20:30"))

    def test_start_is_rounded_to_half_hour(self):
        people = [_participant("a", ("19:20", "22:00")), _participant("b", ("19:20", "22:00"))]

        slot = find_group_slot(people, DAY, _search())

        assert slot.start == _at("19:30")
        assert slot.end == _at("20:20")

    def test_legacy_five_minute_rounding(self):
        people = [_participant("a", ("19:20", "22:00")), _participant("b", ("19:20", "22:00"))]

        slot = find_group_slot(people, DAY, _search(rounding=RoundingMode.five_minute_floor))

        assert slot.start == _at("19:20")

    def test_overnight_windows_extend_the_grid(self):
        people = [_participant("a", ("22:00", "02:00")), _participant("b", ("23:00", "02:00"))]

        slot = find_group_slot(people, DAY, _search())

        assert (slot.start, slot.end) == (_at("23:00"), _at("00:00", DAY + timedelta(days=1)))

    def test_no_windows_still_returns_a_slot(self):
        people = [_participant("a"), _participant("b")]

        slot = find_group_slot(people, DAY, _search())

        assert (slot.start, slot.end) == (_at("00:00"), _at("01:00"))

    def test_short_slot_never_ends_before_rounded_start(self):
        people = [_participant("a", ("18:45", "19:00")), _participant("b", ("18:45", "19:00"))]

        slot = find_group_slot(
            people, DAY, _search(min_duration_minutes=10, max_duration_minutes=10)
        )

        # 18:45 rounds up to 19:00; the end is kept one grid step later
        assert (slot.start, slot.end) == (_at("19:00"), _at("19:05"))

    def test_no_participants_means_no_slot(self):
        assert find_group_slot([], DAY, _search()) is None

    def test_deterministic(self):
        people = [
            _participant("a", ("12:00", "14:00"), ("18:00", "21:00")),
            _participant("b", ("13:00", "19:30")),
            _participant("c", ("18:30", "23:00")),
        ]
        assert find_group_slot(people, DAY, _search()) == find_group_slot(people, DAY, _search())

    def test_coverage_grid_counts_participants(self):
        people = [_participant("a", ("18:00", "20:00")), _participant("b", ("19:00", "21:00"))]

        day_start, offsets, scores, total = coverage_grid(people, DAY, 5)

        assert day_start == _at("00:00")
        assert total == 1440
        assert offsets.size == 288
        assert scores[offsets.tolist().index(18 * 60)] == 1
        assert scores[offsets.tolist().index(19 * 60)] == 2
        assert scores[offsets.tolist().index(20 * 60)] == 1
        assert scores[offsets.tolist().index(21 * 60)] == 0


class TestCommonSlot:
    def test_pairwise_intersection(self):
        people = [_participant("a", ("18:00", "20:00")), _participant("b", ("19:00", "21:00"))]

        slot = find_common_slot(people, 60)

        assert slot.start == _at("19:00")

    def test_disjoint_windows_have_no_slot(self):
        people = [_participant("a", ("10:00", "11:00")), _participant("b", ("14:00", "15:00"))]
        assert find_common_slot(people, 60) is None

    def test_intersection_must_last_minimum_duration(self):
        people = [_participant("a", ("18:00", "20:00")), _participant("b", ("19:30", "21:00"))]

        assert find_common_slot(people, 60) is None
        assert find_common_slot(people, 30).start == _at("19:30")

    def test_later_window_of_other_participant_is_considered(self):
        people = [
            _participant("a", ("17:00", "23:00")),
            _participant("b", ("12:00", "13:00"), ("18:30", "22:00")),
        ]
        assert find_common_slot(people, 60).start == _at("18:30")

    def test_intersection_narrows_across_participants(self):
        people = [
            _participant("a", ("17:00", "23:00")),
            _participant("b", ("18:00", "22:00")),
            _participant("c", ("20:00", "23:30")),
        ]

        slot = find_common_slot(people, 60)

        assert (slot.start, slot.end) == (_at("20:00"), _at("22:00"))

    def test_backtracks_over_earlier_qualifying_windows(self):
        people = [
            _participant("a", ("17:00", "23:00")),
            _participant("b", ("18:00", "19:00"), ("20:00", "22:00")),
            _participant("c", ("20:30", "22:00")),
        ]

        slot = find_common_slot(people, 60)

        assert (slot.start, slot.end) == (_at("20:30"), _at("22:00"))

    def test_target_date_filters_initiator_windows(self):
        people = [_participant("a", ("18:00", "20:00")), _participant("b", ("18:00", "20:00"))]
        assert find_common_slot(people, 60, target_date=DAY + timedelta(days=1)) is None

    def test_no_participants(self):
        assert find_common_slot([], 60) is None


class TestPolicies:
    def test_policies_diverge_on_disjoint_windows(self):
        people = [_participant("a", ("10:00", "11:00")), _participant("b", ("14:00", "15:00"))]

        discretized = find_slot(people, DAY, _search())
        exact = find_slot(people, DAY, _search(policy=SlotPolicy.exact_intersection))

        assert discretized is not None
        assert exact is None

    def test_exact_policy_dispatch(self):
        people = [_participant("a", ("18:00", "20:00")), _participant("b", ("19:00", "21:00"))]

        slot = find_slot(people, DAY, _search(policy=SlotPolicy.exact_intersection))

        assert slot.start == _at("19:00")

    def test_search_rejects_inverted_durations(self):
        with pytest.raises(ValidationError):
            SlotSearch(min_duration_minutes=90, max_duration_minutes=60)

    def test_search_rejects_threshold_above_one(self):
        with pytest.raises(ValidationError):
            SlotSearch(threshold=1.5)

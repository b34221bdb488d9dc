from datetime import date, datetime

import pytest

from tablemates.catalog.models import Venue
from tablemates.engine.config import DEFAULT_ENGINE_CONFIG
from tablemates.engine.models import AvailabilityWindow, Interval, Participant
from tablemates.engine.planner import plan_group_outing
from tablemates.engine.scoring import (
    availability_score,
    preference_score,
    price_score,
    rank_group_candidates,
    score_group_candidate,
)
from tablemates.engine.slots import SlotSearch

DAY = date(2026, 10, 23)
SLOT = Interval(start=datetime(2026, 10, 23, 19), end=datetime(2026, 10, 23, 20))


def _venue(vid: str, categories=("Italian",), rating: float = 4.0, price: str | None = "$$") -> Venue:
    return Venue.model_validate(
        {
            "id": vid,
            "name": vid.title(),
            "rating": rating,
            "price": price,
            "categories": [{"title": c} for c in categories],
        }
    )


def _participant(pid: str, start: int, end: int, loved=(), want=()) -> Participant:
    window = AvailabilityWindow(
        date=DAY,
        weekday=5,
        start=datetime(2026, 10, 23, start),
        end=datetime(2026, 10, 23, end),
    )
    return Participant(
        id=pid,
        windows=(window,),
        loved_cuisines=frozenset(loved),
        want_to_try_cuisines=frozenset(want),
    )


GROUP = [
    _participant("ana", 18, 20, loved=["Italian", "Sushi"]),
    _participant("ben", 19, 21, want=["Pizza"]),
    _participant("cy", 20, 23, loved=["italian"]),
]


def test_composite_score_weights():
    venue = _venue("trattoria", categories=("Italian", "Pizza"), rating=4.0, price="$$")

    score = score_group_candidate(venue, GROUP, SLOT)

    # availability 2/3, preference 2/3, rating 0.8, price 0.75
    expected = 0.35 * (2 / 3) + 0.30 * (2 / 3) + 0.20 * 0.8 + 0.15 * 0.75
    assert score == pytest.approx(expected)


def test_availability_requires_full_containment():
    assert availability_score(GROUP, SLOT) == pytest.approx(2 / 3)
    assert availability_score([], SLOT) == 0.0


def test_preference_score_with_empty_union():
    assert preference_score(_venue("x"), frozenset()) == 0.0


@pytest.mark.parametrize(
    "price,expected",
    [("$", 1.0), ("$$", 0.75), ("$$$", 0.5), ("$$$$", 0.25), (None, 0.5), ("€€", 0.5)],
)
def test_price_scores(price, expected):
    assert price_score(_venue("x", price=price)) == expected


def test_higher_rating_never_lowers_score():
    scores = [
        score_group_candidate(_venue("x", rating=r / 2), GROUP, SLOT) for r in range(0, 11)
    ]
    assert scores == sorted(scores)


def test_ranking_is_descending_and_limited():
    venues = [_venue(f"v{i}", rating=(i % 10) / 2) for i in range(25)]

    candidates = rank_group_candidates(venues, GROUP, SLOT)

    assert len(candidates) == 20
    scores = [c.group_score for c in candidates]
    assert scores == sorted(scores, reverse=True)
    assert all(c.best_time_slot == SLOT for c in candidates)
    assert candidates[0].participants == ("ana", "ben", "cy")


def test_ranking_ties_keep_input_order():
    venues = [_venue("first"), _venue("second"), _venue("third")]

    candidates = rank_group_candidates(venues, GROUP, SLOT)

    assert [c.venue.id for c in candidates] == ["first", "second", "third"]


def test_ranking_matches_single_scores():
    venues = [_venue("a", rating=3.5, price="$"), _venue("b", categories=("Thai",), price=None)]

    candidates = rank_group_candidates(venues, GROUP, SLOT)

    for candidate in candidates:
        assert candidate.group_score == pytest.approx(
            score_group_candidate(candidate.venue, GROUP, SLOT)
        )


def test_ranking_empty_catalog():
    assert rank_group_candidates([], GROUP, SLOT) == []


def test_plan_group_outing_uses_best_slot():
    people = [_participant("ana", 18, 20, loved=["Italian"]), _participant("ben", 19, 21)]
    venues = [_venue("cheap", price="$"), _venue("fancy", rating=5.0, price="$$$$")]

    plan = plan_group_outing(people, venues, DAY, SlotSearch(threshold=0.75))

    assert (plan.slot.start, plan.slot.end) == (datetime(2026, 10, 23, 19), datetime(2026, 10, 23, 20))
    assert [c.venue.id for c in plan.candidates] == ["cheap", "fancy"]


def test_plan_without_participants_has_no_slot():
    plan = plan_group_outing([], [_venue("x")], DAY, SlotSearch())
    assert plan.slot is None
    assert plan.candidates == ()


def test_default_weights_are_read_only():
    with pytest.raises(TypeError):
        DEFAULT_ENGINE_CONFIG.weights["rating"] = 1.0

    assert DEFAULT_ENGINE_CONFIG.weights["rating"] == 0.20


def test_custom_weights_are_used():
    venue = _venue("x", rating=5.0, price="$$$$")
    rating_only = {"availability": 0.0, "preference": 0.0, "rating": 1.0, "price": 0.0}

    assert score_group_candidate(venue, GROUP, SLOT, weights=rating_only) == pytest.approx(1.0)
